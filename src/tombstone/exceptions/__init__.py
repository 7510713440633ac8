from .common import NotFoundError, TombstoneError

__all__ = [
    'NotFoundError',
    'TombstoneError',
]
