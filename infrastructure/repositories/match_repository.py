"""Match repository implementation."""
import logging
from typing import Any, Dict, Optional, List

from domain.entities import Match, MatchReference, Participant, ParticipantIdentity
from domain.enums import Lane, QueueType, Region, Role, TimeBucket
from domain.errors import MalformedMatch, NotFound
from domain.interfaces import IMatchFetcher
from infrastructure.api import RiotAPIClient

logger = logging.getLogger(__name__)


class MatchRepository(IMatchFetcher):
    """Fetches matches and match lists for one region from the Riot API."""

    def __init__(self, api_client: RiotAPIClient, region: Region):
        """
        Initialize match repository.

        Args:
            api_client: Riot API client instance (already entered)
            region: Platform the matches are played on
        """
        self.api_client = api_client
        self.region = region

    async def get_match_list(
        self,
        account_id: str,
        queue: Optional[QueueType] = None,
        season: Optional[int] = None,
        limit: int = 100,
    ) -> List[MatchReference]:
        """Get a player's match list, most recent first."""
        try:
            data = await self.api_client.get_match_list(
                self.region,
                account_id,
                queue=queue,
                season=season,
                begin_index=0,
                end_index=min(limit, 100),
            )
        except NotFound:
            # the service answers 404 for a player with no games in the queue
            logger.info(f"No matches listed for account {account_id}")
            return []
        entries = data.get('matches', []) if isinstance(data, dict) else []
        logger.info(f"Retrieved match list with {len(entries)} entries (total {data.get('totalGames', '?')})")
        return [self._parse_reference(e) for e in entries if 'gameId' in e]

    async def fetch(self, game_id: int) -> Match:
        """
        Fetch a single match by ID.

        Args:
            game_id: Match identifier

        Returns:
            Match entity

        Raises:
            RemoteUnavailable: transient service failure
            NotFound: match does not exist
            MalformedMatch: payload could not be parsed
        """
        match_data = await self.api_client.get_match(self.region, game_id)
        try:
            return self.parse_match_data(match_data)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.error(f"Error parsing match {game_id}: {e}")
            raise MalformedMatch(game_id, f"unparseable payload ({e})") from e

    @staticmethod
    def _parse_reference(entry: Dict[str, Any]) -> MatchReference:
        return MatchReference(
            game_id=int(entry['gameId']),
            queue=entry.get('queue', 0),
            season=entry.get('season', 0),
            timestamp=entry.get('timestamp', 0),
            champion=entry.get('champion', 0),
            role=Role.from_string(entry.get('role', 'NONE')),
            lane=Lane.from_string(entry.get('lane', 'NONE')),
            platform_id=entry.get('platformId', ''),
        )

    @classmethod
    def parse_match_data(cls, data: Dict[str, Any]) -> Match:
        """Parse a raw match-v4 payload into a Match entity."""
        identities = []
        for pi in data.get('participantIdentities', []):
            player = pi.get('player') or {}
            identities.append(ParticipantIdentity(
                participant_id=int(pi['participantId']),
                summoner_id=player.get('summonerId', ''),
                account_id=player.get('currentAccountId', player.get('accountId', '')),
                summoner_name=player.get('summonerName', ''),
            ))

        return Match(
            game_id=int(data['gameId']),
            game_duration=int(data['gameDuration']),
            participants=tuple(cls._parse_participant_data(p) for p in data['participants']),
            participant_identities=tuple(identities),
            platform_id=data.get('platformId', ''),
            queue_id=data.get('queueId', 0),
            season_id=data.get('seasonId', 0),
            game_creation=data.get('gameCreation', 0),
        )

    @staticmethod
    def _parse_participant_data(p_data: Dict[str, Any]) -> Participant:
        """Parse raw participant data into Participant entity."""
        stats = p_data.get('stats') or {}
        timeline = p_data.get('timeline') or {}

        deltas = {}
        for key, value in (timeline.get('goldPerMinDeltas') or {}).items():
            bucket = TimeBucket.from_key(key)
            if bucket is not None and value is not None:
                deltas[bucket] = float(value)

        return Participant(
            participant_id=int(p_data['participantId']),
            team_id=int(p_data['teamId']),
            champion_id=p_data.get('championId', 0),
            role=Role.from_string(timeline.get('role', 'NONE')),
            lane=Lane.from_string(timeline.get('lane', 'NONE')),
            win=bool(stats.get('win', False)),
            total_damage_dealt_to_champions=stats.get('totalDamageDealtToChampions', 0),
            gold_earned=stats.get('goldEarned', 0),
            gold_per_min_deltas=deltas,
        )
