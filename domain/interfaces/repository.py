"""Repository interfaces for data access."""
from abc import ABC, abstractmethod
from typing import Optional, List
from ..entities import Match, MatchReference, Summoner
from ..enums import QueueType


class IMatchCache(ABC):
    """Durable store of match records keyed by game id."""

    @abstractmethod
    async def get(self, game_id: int) -> Optional[Match]:
        """Return the cached match, or None on a miss."""
        pass

    @abstractmethod
    async def put(self, game_id: int, match: Match) -> bool:
        """Store a match. Returns False if the id was already present."""
        pass


class IMatchFetcher(ABC):
    """Remote source of match records."""

    @abstractmethod
    async def fetch(self, game_id: int) -> Match:
        """Fetch a single match.

        Raises:
            RemoteUnavailable: transient service failure.
            NotFound: the match does not exist upstream.
        """
        pass

    @abstractmethod
    async def get_match_list(
        self,
        account_id: str,
        queue: Optional[QueueType] = None,
        season: Optional[int] = None,
        limit: int = 100,
    ) -> List[MatchReference]:
        """Get a player's match list, most recent first."""
        pass


class ISummonerRepository(ABC):
    """Interface for player profile resolution."""

    @abstractmethod
    async def resolve(self, summoner_name: str) -> Summoner:
        """Resolve a display name to a summoner.

        Raises:
            NotFound: no summoner with that name.
        """
        pass
