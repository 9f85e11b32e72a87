"""Domain interfaces."""
from .repository import IMatchCache, IMatchFetcher, ISummonerRepository

__all__ = [
    'IMatchCache',
    'IMatchFetcher',
    'ISummonerRepository',
]
