from __future__ import annotations

import asyncio
from typing import List, Optional, Sequence

from application.use_cases import AnalysisReport, run_analysis
from config import settings
from core.logging.logger import get_logger
from domain.entities import FilterSet, MatchStats, SummaryCounts
from domain.enums import Lane, Region, Role
from domain.errors import MatchHistoryError, NotFound, RetrievalCancelled


def _fmt(value: Optional[float]) -> str:
    return "n/a" if value is None else f"{value:0.2f}"


class AnalyzeCommand:
    """Analyse one player's ranked history and print per-game and summary lines."""

    def __init__(
        self,
        target_name: Optional[str] = None,
        region: Optional[str] = None,
        required_allies: Optional[Sequence[str]] = None,
        excluded_allies: Optional[Sequence[str]] = None,
        roles: Optional[Sequence[str]] = None,
        lanes: Optional[Sequence[str]] = None,
        ally_lanes: Optional[Sequence[str]] = None,
    ) -> None:
        self.target_name = target_name or settings.TARGET_SUMMONER
        self.region = Region.from_string(region) if region else settings.region()
        self.required_allies = required_allies
        self.excluded_allies = excluded_allies
        self.filters = self._build_filters(roles, lanes, ally_lanes)
        self._log = get_logger(__name__, service="analyze-cli")

    @staticmethod
    def _build_filters(
        roles: Optional[Sequence[str]],
        lanes: Optional[Sequence[str]],
        ally_lanes: Optional[Sequence[str]],
    ) -> FilterSet:
        base = settings.filter_set()
        return FilterSet(
            roles=frozenset(Role.parse(r) for r in roles) if roles else base.roles,
            lanes=frozenset(Lane.parse(l) for l in lanes) if lanes else base.lanes,
            ally_lanes=frozenset(Lane.parse(l) for l in ally_lanes) if ally_lanes else base.ally_lanes,
        )

    def _print_header(self) -> None:
        print("\n" + "=" * 57)
        print(f"MATCH HISTORY - {self.target_name} ({self.region.friendly})")
        print("=" * 57)
        f = self.filters
        if f.roles:
            print(f"Roles: {', '.join(sorted(r.value for r in f.roles))}")
        if f.lanes:
            print(f"Lanes: {', '.join(sorted(l.value for l in f.lanes))}")
        if f.ally_lanes:
            print(f"Ally lanes: {', '.join(sorted(l.value for l in f.ally_lanes))}")

    @staticmethod
    def format_game(stats: MatchStats) -> str:
        return (
            f"Game {stats.game_id} LaneDR {_fmt(stats.lane_damage_ratio)} "
            f"AllyDR {_fmt(stats.ally_damage_ratio)} G10 {_fmt(stats.gold_at_ten_diff)} "
            f"AllyG10 {_fmt(stats.ally_gold_at_ten_diff)}"
        )

    @staticmethod
    def format_summary(summary: SummaryCounts) -> List[str]:
        """Summary block; a single notice line when no game was analysed."""
        if summary.total == 0:
            return ["No games matched the filters."]

        n = summary.total

        def line(count: int, text: str) -> str:
            return f"{count} of {n} ({summary.percentage(count):0.2f}%) {text}"

        return [
            line(summary.lane_ratio_above_allies, "had higher damage ratio than allies"),
            line(summary.gold_at_ten_ahead, "had gold lead at 10 minutes"),
            line(summary.early_mid_game_ahead, "had higher GPM 10-20"),
            line(summary.total_gold_ahead, "had higher total gold"),
            line(summary.ally_gold_at_ten_ahead, "allies had gold lead at 10 minutes"),
            f"{summary.wins}W {summary.losses}L ({summary.win_rate:0.2f}%) won",
            f"Player is boosted: {summary.losses != 0}",
        ]

    def render(self, report: AnalysisReport) -> None:
        print("")
        for stats in report.stats:
            print(self.format_game(stats))
        print("")
        for text in self.format_summary(report.summary):
            print(text)
        print("-" * 57)
        print(
            f"Listed {report.requested}, retrieved {report.retrieved}, "
            f"skipped {len(report.skipped)}, diagnostics {len(report.diagnostics)}"
        )
        for err in report.fetch_errors:
            print(f"  fetch failed for game {err.game_id}: {err.message}")

    async def run(self, cancel_event: Optional[asyncio.Event] = None) -> int:
        self._print_header()
        self._log.info(lambda: f"start target={self.target_name} region={self.region.value}")
        try:
            report = await run_analysis(
                target_name=self.target_name,
                required_ally_names=self.required_allies,
                excluded_ally_names=self.excluded_allies,
                filters=self.filters,
                region=self.region,
                cancel_event=cancel_event,
            )
        except NotFound as exc:
            print(f"Could not resolve player: {exc}")
            return 2
        except RetrievalCancelled:
            print("Cancelled.")
            return 130
        except MatchHistoryError as exc:
            self._log.error(lambda: f"analysis failed: {exc}", exc_info=True)
            print(f"Analysis failed: {exc}")
            return 1

        self.render(report)
        self._log.success(lambda: f"done analysed={report.summary.total}")
        return 0
