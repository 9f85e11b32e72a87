"""Domain enumerations."""
from .region import Region
from .queue_type import QueueType
from .role import Role
from .lane import Lane
from .time_bucket import TimeBucket
from .diagnostic import DiagnosticKind, SkipReason

__all__ = [
    'Region',
    'QueueType',
    'Role',
    'Lane',
    'TimeBucket',
    'DiagnosticKind',
    'SkipReason',
]
