"""Resolved by its own `helpers` submodule before `__markers__` is assigned."""
from . import helpers
from marklookup.tests.fixtures.given.markers import Audience

__markers__ = [Audience(anchor=__name__)]
