"""Match entities: a completed game and a match list entry."""
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple
from .participant import Participant, ParticipantIdentity
from ..enums import Lane, Role


@dataclass(frozen=True)
class MatchReference:
    """One entry of a player's match list."""

    game_id: int
    queue: int = 0
    season: int = 0
    timestamp: int = 0  # Unix timestamp milliseconds
    champion: int = 0
    role: Role = Role.NONE
    lane: Lane = Lane.NONE
    platform_id: str = ""


@dataclass(frozen=True)
class Match:
    """Represents a completed League of Legends match."""

    # Match identity
    game_id: int

    # Seconds
    game_duration: int

    # Participants (10 players) and who played them
    participants: Tuple[Participant, ...] = field(default_factory=tuple)
    participant_identities: Tuple[ParticipantIdentity, ...] = field(default_factory=tuple)

    # Match metadata
    platform_id: str = ""
    queue_id: int = 0
    season_id: int = 0
    game_creation: int = 0  # Unix timestamp milliseconds

    def has_player(self, summoner_id: str) -> bool:
        """Whether ``summoner_id`` is mapped to any participant of this match."""
        return any(pi.summoner_id == summoner_id for pi in self.participant_identities)

    def participant_for(self, summoner_id: str) -> Optional[Participant]:
        """Participant played by ``summoner_id``, or None."""
        identity = next(
            (pi for pi in self.participant_identities if pi.summoner_id == summoner_id),
            None,
        )
        if identity is None:
            return None
        return next(
            (p for p in self.participants if p.participant_id == identity.participant_id),
            None,
        )

    def to_dict(self) -> dict:
        """Convert match to dictionary."""
        return {
            'game_id': self.game_id,
            'game_duration': self.game_duration,
            'platform_id': self.platform_id,
            'queue_id': self.queue_id,
            'season_id': self.season_id,
            'game_creation': self.game_creation,
            'participants': [p.to_dict() for p in self.participants],
            'participant_identities': [pi.to_dict() for pi in self.participant_identities],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Match':
        """Rebuild a match from :meth:`to_dict` output."""
        return cls(
            game_id=int(data['game_id']),
            game_duration=int(data['game_duration']),
            participants=tuple(Participant.from_dict(p) for p in data.get('participants', [])),
            participant_identities=tuple(
                ParticipantIdentity.from_dict(pi) for pi in data.get('participant_identities', [])
            ),
            platform_id=data.get('platform_id', ''),
            queue_id=int(data.get('queue_id', 0)),
            season_id=int(data.get('season_id', 0)),
            game_creation=int(data.get('game_creation', 0)),
        )
