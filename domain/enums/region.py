"""Region enumeration for League of Legends servers."""
from enum import Enum


class Region(Enum):
    """League of Legends platform servers.

    Summoner and match-v4 endpoints are served from the platform host
    (e.g. ``na1.api.riotgames.com``).
    """

    # Americas
    NA1 = "na1"    # North America
    BR1 = "br1"    # Brazil
    LA1 = "la1"    # Latin America North
    LA2 = "la2"    # Latin America South

    # Europe
    EUW1 = "euw1"  # Europe West
    EUN1 = "eun1"  # Europe Nordic & East
    TR1 = "tr1"    # Turkey
    RU = "ru"      # Russia

    # Asia & Oceania
    KR = "kr"      # Korea
    JP1 = "jp1"    # Japan
    OC1 = "oc1"    # Oceania

    @property
    def platform_route(self) -> str:
        """Get platform routing value for API calls."""
        return self.value

    @property
    def friendly(self) -> str:
        """Get a human-friendly short label for console output."""
        mapping = {
            "eun1": "eune",
            "euw1": "euw",
            "la1": "lan",
            "la2": "las",
            "oc1": "oce",
        }
        if self.value in mapping:
            return mapping[self.value]
        code = self.value
        if code and code[-1].isdigit():
            return code[:-1]
        return code

    @classmethod
    def from_string(cls, value: str) -> 'Region':
        """Accept either a platform route (``na1``) or a friendly label (``na``)."""
        code = (value or "").strip().lower()
        for region in cls:
            if code in (region.value, region.friendly):
                return region
        raise ValueError(f"Unknown region: {value!r}")
