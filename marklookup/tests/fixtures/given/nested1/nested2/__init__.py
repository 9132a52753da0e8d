"""Marked: the closest marked parent of nested3 and nested4."""
from marklookup.tests.fixtures.given.markers import Audience, Stability

__markers__ = [Stability("beta"), Audience(anchor=__name__)]
