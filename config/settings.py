"""Application settings and configuration."""
import os
from pathlib import Path
from typing import FrozenSet, List, Optional
from dotenv import load_dotenv

from domain.entities import FilterSet
from domain.enums import Lane, QueueType, Region, Role
from domain.errors import ConfigurationError

ENV_PATH = Path(__file__).resolve().parent / '.env'
load_dotenv(dotenv_path=ENV_PATH)


def _csv(name: str) -> List[str]:
    return [v.strip() for v in os.getenv(name, '').split(',') if v.strip()]


def _optional_int(name: str) -> Optional[int]:
    raw = os.getenv(name, '').strip()
    return int(raw) if raw else None


class Settings:
    """
    Runtime configuration, read once from the environment (and config/.env).

    Riot development keys are limited to 20 requests/s and 100 requests/2 min.
    The defaults stay slightly below both windows so a full match history
    (up to 100 uncached games) drains without a single 429.
    """

    RIOT_API_KEY: str = os.getenv('RIOT_API_KEY', '')

    # ── Rate limits (per 1 second / per 2 minutes) ─────────────────────────
    RATE_LIMIT_PER_1_SEC:           int = 18
    RATE_LIMIT_PER_2_MIN:           int = 90

    MATCH_RATE_LIMIT_PER_1_SEC:     int = int(os.getenv('MATCH_RATE_LIMIT_PER_1_SEC', '18'))
    MATCH_RATE_LIMIT_PER_2_MIN:     int = int(os.getenv('MATCH_RATE_LIMIT_PER_2_MIN', '90'))

    SUMMONER_RATE_LIMIT_PER_1_SEC:  int = 18
    SUMMONER_RATE_LIMIT_PER_2_MIN:  int = 85

    # ── Analysis target ────────────────────────────────────────────────────
    REGION:           str       = os.getenv('REGION', 'na1')
    TARGET_SUMMONER:  str       = os.getenv('TARGET_SUMMONER', '')
    REQUIRED_ALLIES:  List[str] = _csv('REQUIRED_ALLIES')
    EXCLUDED_ALLIES:  List[str] = _csv('EXCLUDED_ALLIES')

    # e.g. ROLE_FILTER=DUO_CARRY  LANE_FILTER=BOTTOM
    ROLE_FILTER:      List[str] = _csv('ROLE_FILTER')
    LANE_FILTER:      List[str] = _csv('LANE_FILTER')
    ALLY_LANE_FILTER: List[str] = _csv('ALLY_LANE_FILTER')

    # ── Match list ─────────────────────────────────────────────────────────
    QUEUE:            int           = int(os.getenv('QUEUE', str(QueueType.RANKED_SOLO_5x5.queue_id)))
    SEASON:           Optional[int] = _optional_int('SEASON')
    MATCH_LIST_LIMIT: int           = int(os.getenv('MATCH_LIST_LIMIT', '100'))

    # Games shorter than this are remakes.
    REMAKE_THRESHOLD_SECONDS: int = 5 * 60

    # ── Paths ──────────────────────────────────────────────────────────────
    BASE_DIR: Path = Path(__file__).resolve().parent.parent
    DATA_DIR: Path = BASE_DIR / 'data'
    DB_DIR:   Path = DATA_DIR / 'db'
    LOG_DIR:  Path = DATA_DIR / 'logs'
    CACHE_DB_PATH: Path = Path(os.getenv('CACHE_DB_PATH', str(DB_DIR / 'cache.sqlite')))

    # ── HTTP ───────────────────────────────────────────────────────────────
    REQUEST_TIMEOUT:  int   = 30
    MAX_RETRIES:      int   = int(os.getenv('MAX_RETRIES', '3'))
    RETRY_BACKOFF_MS: int   = int(os.getenv('RETRY_BACKOFF_MS', '500'))
    RETRY_FACTOR:     float = float(os.getenv('RETRY_FACTOR', '2.0'))

    # ── Concurrency ────────────────────────────────────────────────────────
    MAX_CONCURRENT_REQUESTS: int = int(os.getenv('MAX_CONCURRENT_REQUESTS', '8'))

    LOG_LEVEL: str = os.getenv('LOG_LEVEL', 'INFO')

    @classmethod
    def validate(cls) -> None:
        if not cls.RIOT_API_KEY:
            raise ConfigurationError("RIOT_API_KEY must be set in config/.env")
        if cls.MAX_CONCURRENT_REQUESTS < 1:
            raise ConfigurationError("MAX_CONCURRENT_REQUESTS must be at least 1")

    @classmethod
    def create_directories(cls) -> None:
        cls.DB_DIR.mkdir(parents=True, exist_ok=True)
        cls.LOG_DIR.mkdir(parents=True, exist_ok=True)
        cls.CACHE_DB_PATH.parent.mkdir(parents=True, exist_ok=True)

    @classmethod
    def region(cls) -> Region:
        return Region.from_string(cls.REGION)

    @classmethod
    def queue(cls) -> QueueType:
        return QueueType(cls.QUEUE)

    @classmethod
    def role_filter(cls) -> Optional[FrozenSet[Role]]:
        return frozenset(Role.parse(r) for r in cls.ROLE_FILTER) or None

    @classmethod
    def lane_filter(cls) -> Optional[FrozenSet[Lane]]:
        return frozenset(Lane.parse(l) for l in cls.LANE_FILTER) or None

    @classmethod
    def ally_lane_filter(cls) -> Optional[FrozenSet[Lane]]:
        return frozenset(Lane.parse(l) for l in cls.ALLY_LANE_FILTER) or None

    @classmethod
    def filter_set(cls) -> FilterSet:
        """Role and lane filters; ally filters are added once names are resolved."""
        return FilterSet(
            roles=cls.role_filter(),
            lanes=cls.lane_filter(),
            ally_lanes=cls.ally_lane_filter(),
        )


settings = Settings()
