from .. import SHARED

__markers__ = [SHARED]
