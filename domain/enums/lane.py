"""Lane enumeration."""
from enum import Enum


class Lane(Enum):
    """Lane tag reported in a participant's match timeline."""

    TOP = "TOP"
    JUNGLE = "JUNGLE"
    MIDDLE = "MIDDLE"
    BOTTOM = "BOTTOM"
    NONE = "NONE"

    @classmethod
    def from_string(cls, lane_str: str) -> 'Lane':
        """Create Lane from string; unknown values map to ``NONE``."""
        name = (lane_str or "").strip().upper()
        try:
            return cls[name]
        except KeyError:
            # The service reports both MID/MIDDLE and BOT/BOTTOM
            mappings = {
                "MID": cls.MIDDLE,
                "BOT": cls.BOTTOM,
                "JG": cls.JUNGLE,
                "JGL": cls.JUNGLE,
            }
            return mappings.get(name, cls.NONE)

    @classmethod
    def parse(cls, lane_str: str) -> 'Lane':
        """Strict :meth:`from_string` for user input; unknown values raise ``ValueError``."""
        name = (lane_str or "").strip().upper()
        lane = cls.from_string(name)
        if lane is cls.NONE and name != cls.NONE.value:
            raise ValueError(f"Unknown lane: {lane_str!r}")
        return lane
