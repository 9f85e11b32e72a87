"""Infrastructure layer - API client, repositories and the match cache."""
from .api import RiotAPIClient, RateLimiter, EndpointRateLimiter
from .cache import SqliteMatchCache
from .repositories import MatchRepository, SummonerRepository

__all__ = [
    'RiotAPIClient',
    'RateLimiter',
    'EndpointRateLimiter',
    'SqliteMatchCache',
    'MatchRepository',
    'SummonerRepository',
]
