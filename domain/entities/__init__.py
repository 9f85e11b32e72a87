"""Domain entities."""
from .participant import Participant, ParticipantIdentity
from .match import Match, MatchReference
from .summoner import Summoner
from .analysis import Diagnostic, FetchError, FilterSet, LaneMatchup, SkippedMatch
from .match_stats import MatchStats, SummaryCounts

__all__ = [
    'Participant',
    'ParticipantIdentity',
    'Match',
    'MatchReference',
    'Summoner',
    'Diagnostic',
    'FetchError',
    'FilterSet',
    'LaneMatchup',
    'SkippedMatch',
    'MatchStats',
    'SummaryCounts',
]
