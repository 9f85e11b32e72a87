"""Participant entities representing a player in a match."""
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional
from ..enums import Lane, Role, TimeBucket


@dataclass(frozen=True)
class ParticipantIdentity:
    """Maps a participant slot of a match to the player who filled it."""

    participant_id: int
    summoner_id: str
    account_id: str = ""
    summoner_name: str = ""

    def to_dict(self) -> dict:
        return {
            'participant_id': self.participant_id,
            'summoner_id': self.summoner_id,
            'account_id': self.account_id,
            'summoner_name': self.summoner_name,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'ParticipantIdentity':
        return cls(
            participant_id=int(data['participant_id']),
            summoner_id=data['summoner_id'],
            account_id=data.get('account_id', ''),
            summoner_name=data.get('summoner_name', ''),
        )


@dataclass(frozen=True)
class Participant:
    """Represents a player participant in a match."""

    # Match context
    participant_id: int
    team_id: int  # 100 or 200
    champion_id: int

    # Position, as tagged by the match timeline
    role: Role
    lane: Lane

    # Match outcome
    win: bool = False
    total_damage_dealt_to_champions: int = 0
    gold_earned: int = 0

    # Not every bucket is present (short games stop at 10-20 or earlier)
    gold_per_min_deltas: Dict[TimeBucket, float] = field(default_factory=dict)

    def gold_delta(self, bucket: TimeBucket) -> Optional[float]:
        """Gold-per-minute delta for ``bucket``, or None when not reported."""
        return self.gold_per_min_deltas.get(bucket)

    def to_dict(self) -> dict:
        """Convert participant to dictionary."""
        return {
            'participant_id': self.participant_id,
            'team_id': self.team_id,
            'champion_id': self.champion_id,
            'role': self.role.value,
            'lane': self.lane.value,
            'win': self.win,
            'total_damage_dealt_to_champions': self.total_damage_dealt_to_champions,
            'gold_earned': self.gold_earned,
            'gold_per_min_deltas': {b.key: v for b, v in self.gold_per_min_deltas.items()},
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Participant':
        deltas: Dict[TimeBucket, float] = {}
        for key, value in (data.get('gold_per_min_deltas') or {}).items():
            bucket = TimeBucket.from_key(key)
            if bucket is not None:
                deltas[bucket] = float(value)
        return cls(
            participant_id=int(data['participant_id']),
            team_id=int(data['team_id']),
            champion_id=int(data.get('champion_id', 0)),
            role=Role.from_string(data.get('role', 'NONE')),
            lane=Lane.from_string(data.get('lane', 'NONE')),
            win=bool(data.get('win', False)),
            total_damage_dealt_to_champions=int(data.get('total_damage_dealt_to_champions', 0)),
            gold_earned=int(data.get('gold_earned', 0)),
            gold_per_min_deltas=deltas,
        )
