"""Infrastructure cache module."""
from .match_cache import SqliteMatchCache

__all__ = [
    'SqliteMatchCache',
]
