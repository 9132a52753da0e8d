from marklookup.tests.fixtures import shared

OWN = shared.RESOLVER.resolve(__package__) if shared.RESOLVER is not None else None
