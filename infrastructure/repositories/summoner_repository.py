"""Summoner repository implementation."""
import logging
from typing import Any, Dict

from domain.entities import Summoner
from domain.enums import Region
from domain.errors import NotFound
from domain.interfaces import ISummonerRepository
from infrastructure.api import RiotAPIClient

logger = logging.getLogger(__name__)


class SummonerRepository(ISummonerRepository):
    """Resolves summoner names on one region through the Riot API."""

    def __init__(self, api_client: RiotAPIClient, region: Region):
        """
        Initialize summoner repository.

        Args:
            api_client: Riot API client instance
            region: Platform the summoners play on
        """
        self.api_client = api_client
        self.region = region

    async def resolve(self, summoner_name: str) -> Summoner:
        """
        Resolve a display name to a summoner.

        Args:
            summoner_name: Name as shown in game

        Returns:
            Summoner entity

        Raises:
            NotFound: no such summoner on this region
            RemoteUnavailable: transient service failure
        """
        summoner_data = await self.api_client.get_summoner_by_name(self.region, summoner_name)
        if not summoner_data:
            raise NotFound(f"summoner {summoner_name!r}")

        summoner = self._parse_summoner_data(summoner_data)
        logger.info(f"Resolved {summoner.name}")
        return summoner

    @staticmethod
    def _parse_summoner_data(data: Dict[str, Any]) -> Summoner:
        return Summoner(
            summoner_id=data['id'],
            account_id=data['accountId'],
            name=data.get('name', ''),
            puuid=data.get('puuid', ''),
            summoner_level=data.get('summonerLevel', 0),
        )
