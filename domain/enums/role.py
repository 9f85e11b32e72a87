"""Role enumeration."""
from enum import Enum


class Role(Enum):
    """Role tag reported in a participant's match timeline.

    ``NONE`` and ``DUO`` are sentinels: the service could not decide the
    player's role, or knows only that two players shared a lane.
    """

    SOLO = "SOLO"
    DUO = "DUO"
    DUO_CARRY = "DUO_CARRY"
    DUO_SUPPORT = "DUO_SUPPORT"
    NONE = "NONE"

    @property
    def is_ambiguous(self) -> bool:
        """Whether this tag is one of the unknown/unspecified sentinels."""
        return self in (Role.NONE, Role.DUO)

    @classmethod
    def from_string(cls, role_str: str) -> 'Role':
        """Create Role from string; unknown values map to ``NONE``."""
        try:
            return cls[(role_str or "").strip().upper()]
        except KeyError:
            mappings = {
                "CARRY": cls.DUO_CARRY,
                "ADC": cls.DUO_CARRY,
                "SUPPORT": cls.DUO_SUPPORT,
                "SUP": cls.DUO_SUPPORT,
            }
            return mappings.get((role_str or "").strip().upper(), cls.NONE)

    @classmethod
    def parse(cls, role_str: str) -> 'Role':
        """Strict :meth:`from_string` for user input; unknown values raise ``ValueError``."""
        name = (role_str or "").strip().upper()
        role = cls.from_string(name)
        if role is cls.NONE and name != cls.NONE.value:
            raise ValueError(f"Unknown role: {role_str!r}")
        return role
