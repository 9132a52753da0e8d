"""Marked with the same marker object as `inner`."""
from marklookup.tests.fixtures.given.markers import Audience

SHARED = Audience(anchor=__name__)
__markers__ = [SHARED]
