"""Use case for analysing one player's recent match history."""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Sequence

from application.services.analysis import MatchFilterPipeline, aggregate_all, summarize
from application.services.match_retrieval_service import MatchRetrievalService
from application.services.retry_policy import RetryPolicy
from config import settings
from core.logging.context import context
from core.logging.logger import get_logger
from domain.entities import (
    Diagnostic,
    FetchError,
    FilterSet,
    Match,
    MatchStats,
    SkippedMatch,
    Summoner,
    SummaryCounts,
)
from domain.enums import DiagnosticKind, QueueType, Region
from domain.errors import MalformedMatch, NotFound
from domain.interfaces import IMatchCache
from infrastructure import MatchRepository, RiotAPIClient, SqliteMatchCache, SummonerRepository

logger = get_logger(__name__, service="analysis")


@dataclass
class AnalysisReport:
    """Everything one analysis run produced."""

    target: Summoner
    summary: SummaryCounts
    stats: List[MatchStats] = field(default_factory=list)
    fetch_errors: List[FetchError] = field(default_factory=list)
    skipped: List[SkippedMatch] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    requested: int = 0

    @property
    def retrieved(self) -> int:
        return self.requested - len(self.fetch_errors)


class AnalyzeMatchHistoryUseCase:
    """
    Resolve players, list the target's games, retrieve them through the cache,
    then filter, aggregate and summarise.

    Player resolution is all-or-nothing: a name that cannot be resolved
    aborts the run before any match is retrieved. Past that point failures
    are per match and end up in the report.
    """

    def __init__(
        self,
        api_client: RiotAPIClient,
        cache: IMatchCache,
        *,
        queue: Optional[QueueType] = None,
        season: Optional[int] = None,
        match_limit: Optional[int] = None,
        max_concurrency: Optional[int] = None,
        retry_policy: Optional[RetryPolicy] = None,
        remake_threshold_seconds: Optional[int] = None,
    ):
        self.api_client = api_client
        self.cache = cache
        self.queue = queue
        self.season = season
        self.match_limit = match_limit or settings.MATCH_LIST_LIMIT
        self.max_concurrency = max_concurrency
        self.retry_policy = retry_policy or RetryPolicy.from_settings()
        self.remake_threshold_seconds = remake_threshold_seconds

        # One orchestrator per region so concurrent runs share in-flight loads
        self._retrieval: Dict[Region, MatchRetrievalService] = {}

    def retrieval_for(self, region: Region) -> MatchRetrievalService:
        if region not in self._retrieval:
            self._retrieval[region] = MatchRetrievalService(
                self.cache,
                MatchRepository(self.api_client, region),
                max_concurrency=self.max_concurrency,
                retry_policy=self.retry_policy,
            )
        return self._retrieval[region]

    async def execute(
        self,
        region: Region,
        target_name: str,
        required_ally_names: Sequence[str] = (),
        excluded_ally_names: Sequence[str] = (),
        filters: Optional[FilterSet] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> AnalysisReport:
        target, required, excluded = await self._resolve_players(
            region, target_name, required_ally_names, excluded_ally_names
        )
        filters = replace(
            filters or FilterSet(),
            required_allies=frozenset(s.summoner_id for s in required if s.summoner_id != target.summoner_id),
            excluded_allies=frozenset(s.summoner_id for s in excluded),
        )

        match_repo = MatchRepository(self.api_client, region)
        references = await self.retry_policy.run(
            lambda: match_repo.get_match_list(
                target.account_id, queue=self.queue, season=self.season, limit=self.match_limit
            ),
            logger=logger,
            context={"account_id": target.account_id},
        )
        logger.info(lambda: f"{len(references)} games listed for {target.name} on {region.friendly}")

        results = await self.retrieval_for(region).retrieve_all(references, cancel_event=cancel_event)
        matches: List[Match] = [r for r in results if isinstance(r, Match)]
        fetch_errors: List[FetchError] = [r for r in results if isinstance(r, FetchError)]

        pipeline = MatchFilterPipeline(filters, remake_threshold_seconds=self.remake_threshold_seconds)
        filtered = pipeline.analyze(matches, target)
        stats = list(aggregate_all(filtered.matchups))

        diagnostics = [
            Diagnostic(e.game_id, DiagnosticKind.MALFORMED_MATCH, e.message)
            for e in fetch_errors
            if isinstance(e.error, MalformedMatch)
        ]
        diagnostics.extend(d for s in stats for d in s.diagnostics)
        for d in diagnostics:
            with context(game_id=d.game_id):
                logger.warning(lambda: f"Game {d.game_id} {d.kind.value}: {d.message}")

        summary = summarize(stats)
        logger.success(
            lambda: f"Analysed {summary.total} of {len(references)} games for {target.name}",
            extra={
                "fetch_errors": len(fetch_errors),
                "skipped": len(filtered.skipped),
                "diagnostics": len(diagnostics),
            },
        )
        return AnalysisReport(
            target=target,
            summary=summary,
            stats=stats,
            fetch_errors=fetch_errors,
            skipped=filtered.skipped,
            diagnostics=diagnostics,
            requested=len(references),
        )

    async def _resolve_players(
        self,
        region: Region,
        target_name: str,
        required_ally_names: Sequence[str],
        excluded_ally_names: Sequence[str],
    ):
        summoner_repo = SummonerRepository(self.api_client, region)
        names = [target_name, *required_ally_names, *excluded_ally_names]
        try:
            resolved = await asyncio.gather(*(summoner_repo.resolve(n) for n in names))
        except NotFound as exc:
            logger.error(lambda: f"Could not resolve player: {exc}")
            raise
        n_required = len(required_ally_names)
        return resolved[0], resolved[1:1 + n_required], resolved[1 + n_required:]


async def run_analysis(
    target_name: Optional[str] = None,
    required_ally_names: Optional[Sequence[str]] = None,
    excluded_ally_names: Optional[Sequence[str]] = None,
    filters: Optional[FilterSet] = None,
    region: Optional[Region] = None,
    cancel_event: Optional[asyncio.Event] = None,
) -> AnalysisReport:
    """Run one analysis with the client and cache configured in settings.

    Arguments left as None fall back to their settings values.
    """
    settings.validate()
    settings.create_directories()

    region = region or settings.region()
    target_name = target_name or settings.TARGET_SUMMONER
    if not target_name:
        raise ValueError("no target summoner given")

    async with RiotAPIClient(settings.RIOT_API_KEY) as client:
        with SqliteMatchCache(settings.CACHE_DB_PATH) as cache:
            use_case = AnalyzeMatchHistoryUseCase(
                client,
                cache,
                queue=settings.queue(),
                season=settings.SEASON,
            )
            return await use_case.execute(
                region,
                target_name,
                settings.REQUIRED_ALLIES if required_ally_names is None else required_ally_names,
                settings.EXCLUDED_ALLIES if excluded_ally_names is None else excluded_ally_names,
                filters if filters is not None else settings.filter_set(),
                cancel_event=cancel_event,
            )
