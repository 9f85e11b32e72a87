"""Summoner entity representing a player account."""
from dataclasses import dataclass


@dataclass(frozen=True)
class Summoner:
    """Represents a resolved League of Legends summoner.

    ``summoner_id`` is the identifier match records map participants to;
    ``account_id`` is what the match list endpoint is keyed by.
    """

    summoner_id: str
    account_id: str
    name: str
    puuid: str = ""
    summoner_level: int = 0

    def to_dict(self) -> dict:
        """Convert summoner to dictionary."""
        return {
            'summoner_id': self.summoner_id,
            'account_id': self.account_id,
            'name': self.name,
            'puuid': self.puuid,
            'summoner_level': self.summoner_level,
        }
