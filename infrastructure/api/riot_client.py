"""Riot Games API client."""
import asyncio
import logging
import time
from typing import Optional, Dict, Any
import httpx

from config import settings
from domain.enums import Region, QueueType
from domain.errors import MatchHistoryError, NotFound, RemoteUnavailable
from .rate_limiter import EndpointRateLimiter

logger = logging.getLogger(__name__)


class RiotAPIClient:
    """Asynchronous Riot API client with per-endpoint rate limiting.

    Every call makes exactly one HTTP request. Failures are raised as
    :class:`RemoteUnavailable` (timeouts, network errors, 429, 5xx) or
    :class:`NotFound` (404); retrying is the caller's decision.
    """

    def __init__(self, api_key: str, *, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_key  = api_key
        self.session: Optional[httpx.AsyncClient] = None
        self.timeout  = settings.REQUEST_TIMEOUT
        self._transport = transport
        self._endpoint_cooldown: dict[str, float] = {}

        self.rate_limiter = EndpointRateLimiter()
        self.rate_limiter.set_default_limiter(
            requests_per_1_sec=settings.RATE_LIMIT_PER_1_SEC,
            requests_per_2_min=settings.RATE_LIMIT_PER_2_MIN,
        )
        self._setup_endpoint_limiters()

    def _setup_endpoint_limiters(self) -> None:
        self.rate_limiter.add_endpoint_limiter(
            "match",
            requests_per_1_sec=settings.MATCH_RATE_LIMIT_PER_1_SEC,
            requests_per_2_min=settings.MATCH_RATE_LIMIT_PER_2_MIN,
        )
        self.rate_limiter.add_endpoint_limiter(
            "summoner",
            requests_per_1_sec=settings.SUMMONER_RATE_LIMIT_PER_1_SEC,
            requests_per_2_min=settings.SUMMONER_RATE_LIMIT_PER_2_MIN,
        )

    async def __aenter__(self):
        self.session = httpx.AsyncClient(
            timeout=self.timeout,
            headers={"X-Riot-Token": self.api_key},
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *_):
        if self.session:
            await self.session.aclose()
            self.session = None

    def _get_platform_url(self, region: Region) -> str:
        return f"https://{region.platform_route}.api.riotgames.com"

    @staticmethod
    def _retry_after(response: httpx.Response) -> float:
        try:
            return float(response.headers.get("Retry-After", "5"))
        except ValueError:
            return 5.0

    async def _make_request(
        self,
        url: str,
        endpoint_type: str = "default",
        params: Optional[Dict[str, Any]] = None,
        resource: str = "resource",
    ) -> Any:
        if self.session is None:
            raise RuntimeError("RiotAPIClient must be used as an async context manager")

        # honour per-endpoint cooldown after 429
        cd = self._endpoint_cooldown.get(endpoint_type, 0.0)
        now = time.monotonic()
        if cd > now:
            await asyncio.sleep(cd - now)

        await self.rate_limiter.acquire(endpoint_type)

        try:
            response = await self.session.get(url, params=params)
        except httpx.TimeoutException as exc:
            raise RemoteUnavailable(f"timeout requesting {resource}") from exc
        except httpx.HTTPError as exc:
            logger.error(f"Network error: {exc}")
            raise RemoteUnavailable(f"network error requesting {resource}: {exc}") from exc

        status = response.status_code

        if status == 200:
            try:
                return response.json()
            except ValueError as exc:
                raise RemoteUnavailable(f"invalid JSON body for {resource}", status_code=status) from exc

        if status == 404:
            raise NotFound(resource)

        if status in (401, 403):
            logger.error(f"{status} from match-data service: check RIOT_API_KEY")
            raise RemoteUnavailable(f"unauthorized requesting {resource}", status_code=status)

        if status == 429:
            retry_after = self._retry_after(response)
            logger.warning(f"429 rate-limited: cooling down {endpoint_type} for {retry_after}s")
            self._endpoint_cooldown[endpoint_type] = time.monotonic() + retry_after
            await self.rate_limiter.reset_endpoint(endpoint_type)
            raise RemoteUnavailable(
                f"rate limited requesting {resource}", status_code=status, retry_after=retry_after
            )

        if status >= 500:
            raise RemoteUnavailable(f"HTTP {status} requesting {resource}", status_code=status)

        logger.warning(f"HTTP {status} for {url}")
        raise MatchHistoryError(f"HTTP {status} requesting {resource}")

    # ── Match API ──────────────────────────────────────────────────────

    async def get_match_list(
        self,
        region: Region,
        account_id: str,
        queue: Optional[QueueType] = None,
        season: Optional[int] = None,
        begin_index: int = 0,
        end_index: int = 100,
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {"beginIndex": begin_index, "endIndex": end_index}
        if queue is not None:
            params["queue"] = queue.queue_id
        if season is not None:
            params["season"] = season
        url = f"{self._get_platform_url(region)}/lol/match/v4/matchlists/by-account/{account_id}"
        return await self._make_request(url, "match", params=params, resource=f"match list for {account_id}")

    async def get_match(self, region: Region, game_id: int) -> Dict[str, Any]:
        url = f"{self._get_platform_url(region)}/lol/match/v4/matches/{game_id}"
        return await self._make_request(url, "match", resource=f"match {game_id}")

    # ── Summoner API ───────────────────────────────────────────────────

    async def get_summoner_by_name(self, region: Region, name: str) -> Dict[str, Any]:
        url = f"{self._get_platform_url(region)}/lol/summoner/v4/summoners/by-name/{name}"
        return await self._make_request(url, "summoner", resource=f"summoner {name!r}")

