"""Time bucket enumeration for per-minute timeline deltas."""
from enum import Enum


class TimeBucket(Enum):
    """Game-time interval a gold-per-minute delta is reported over."""

    ZERO_TO_TEN = "0-10"
    TEN_TO_TWENTY = "10-20"
    TWENTY_TO_THIRTY = "20-30"
    THIRTY_TO_END = "30-end"

    @property
    def key(self) -> str:
        """Key used in the service's ``*PerMinDeltas`` objects."""
        return self.value

    @classmethod
    def from_key(cls, key: str) -> 'TimeBucket | None':
        try:
            return cls(key)
        except ValueError:
            return None
