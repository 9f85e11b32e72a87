"""Domain layer - Business entities, enums, errors and interfaces."""
from .entities import (
    Match, MatchReference, Participant, ParticipantIdentity, Summoner,
    FilterSet, LaneMatchup, MatchStats, SummaryCounts,
)
from .enums import Region, QueueType, Role, Lane, TimeBucket
from .interfaces import IMatchCache, IMatchFetcher, ISummonerRepository

__all__ = [
    # Entities
    'Match',
    'MatchReference',
    'Participant',
    'ParticipantIdentity',
    'Summoner',
    'FilterSet',
    'LaneMatchup',
    'MatchStats',
    'SummaryCounts',
    # Enums
    'Region',
    'QueueType',
    'Role',
    'Lane',
    'TimeBucket',
    # Interfaces
    'IMatchCache',
    'IMatchFetcher',
    'ISummonerRepository',
]
