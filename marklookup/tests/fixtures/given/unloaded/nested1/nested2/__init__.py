from marklookup.tests.fixtures.given.markers import Audience

__markers__ = [Audience(anchor=__name__)]
