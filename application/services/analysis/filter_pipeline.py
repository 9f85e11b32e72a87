"""Opponent resolution and match filtering."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from config import settings
from core.logging.context import context
from core.logging.logger import get_logger
from domain.entities import (
    Diagnostic,
    FetchError,
    FilterSet,
    LaneMatchup,
    Match,
    Participant,
    SkippedMatch,
    Summoner,
)
from domain.enums import DiagnosticKind, SkipReason

logger = get_logger(__name__, service="analysis")


@dataclass
class FilterResult:
    """Matches that survived the pipeline, in input order, plus the ones that did not."""

    matchups: List[LaneMatchup] = field(default_factory=list)
    skipped: List[SkippedMatch] = field(default_factory=list)

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return [d for m in self.matchups for d in m.diagnostics]


class _Skip(Exception):
    def __init__(self, reason: SkipReason, detail: str = ""):
        super().__init__(detail)
        self.reason = reason
        self.detail = detail


class MatchFilterPipeline:
    """
    Turns retrieved matches into lane matchups for one target player.

    Checks run in a fixed order and the first failing check decides the skip
    reason: target lookup, required allies, excluded allies, remake, role
    filter, lane filter, opposing laner. An ambiguous target role is noted as
    a diagnostic but never skips the match.
    """

    def __init__(self, filters: Optional[FilterSet] = None, remake_threshold_seconds: Optional[int] = None):
        self.filters = filters or FilterSet()
        self.remake_threshold_seconds = (
            settings.REMAKE_THRESHOLD_SECONDS if remake_threshold_seconds is None else remake_threshold_seconds
        )

    def analyze(
        self,
        matches: Iterable[Union[Match, FetchError]],
        target: Union[Summoner, str],
    ) -> FilterResult:
        target_id = target.summoner_id if isinstance(target, Summoner) else target
        result = FilterResult()

        for match in matches:
            if isinstance(match, FetchError):
                continue
            with context(game_id=match.game_id):
                try:
                    result.matchups.append(self.resolve(match, target_id))
                except _Skip as skip:
                    logger.info(lambda: f"Skipping game {match.game_id}: {skip.reason.value} {skip.detail}".rstrip())
                    result.skipped.append(SkippedMatch(match.game_id, skip.reason, skip.detail))

        logger.info(
            lambda: f"{len(result.matchups)} matches kept, {len(result.skipped)} skipped",
            extra={"kept": len(result.matchups), "skipped": len(result.skipped)},
        )
        return result

    def resolve(self, match: Match, target_id: str) -> LaneMatchup:
        """Build the matchup for ``match`` or raise ``_Skip``."""
        f = self.filters
        diagnostics: List[Diagnostic] = []

        target = match.participant_for(target_id)
        if target is None:
            logger.warning(lambda: f"Game {match.game_id} has no participant for target {target_id}")
            raise _Skip(SkipReason.MALFORMED, "target not found among participants")

        missing = sorted(a for a in f.required_allies if not match.has_player(a))
        if missing:
            raise _Skip(SkipReason.MISSING_REQUIRED_ALLY, ", ".join(missing))

        present = sorted(a for a in f.excluded_allies if match.has_player(a))
        if present:
            raise _Skip(SkipReason.EXCLUDED_ALLY_PRESENT, ", ".join(present))

        if match.game_duration < self.remake_threshold_seconds:
            raise _Skip(SkipReason.REMAKE, f"{match.game_duration}s")

        if target.role.is_ambiguous:
            message = f"target role {target.role.value} in lane {target.lane.value}"
            logger.warning(lambda: f"Game {match.game_id} has ambiguous {message}")
            diagnostics.append(Diagnostic(match.game_id, DiagnosticKind.AMBIGUOUS_ROLE, message))

        if f.roles is not None and target.role not in f.roles:
            raise _Skip(SkipReason.ROLE_FILTERED, target.role.value)

        if f.lanes is not None and target.lane not in f.lanes:
            raise _Skip(SkipReason.LANE_FILTERED, target.lane.value)

        opponent = self._opposing_laner(match, target)
        teammates, opponents = self._split_teams(match, target, opponent)

        return LaneMatchup(
            match=match,
            target=target,
            opponent=opponent,
            teammates=teammates,
            opponents=opponents,
            diagnostics=tuple(diagnostics),
        )

    @staticmethod
    def _opposing_laner(match: Match, target: Participant) -> Participant:
        candidates = [
            p for p in match.participants
            if p.team_id != target.team_id and p.role == target.role and p.lane == target.lane
        ]
        if not candidates:
            raise _Skip(SkipReason.NO_OPPOSING_LANER, f"{target.role.value}/{target.lane.value}")
        if len(candidates) > 1:
            raise _Skip(
                SkipReason.AMBIGUOUS_OPPOSING_LANER,
                f"{len(candidates)} candidates for {target.role.value}/{target.lane.value}",
            )
        return candidates[0]

    def _split_teams(
        self, match: Match, target: Participant, opponent: Participant
    ) -> Tuple[Tuple[Participant, ...], Tuple[Participant, ...]]:
        ally_lanes = self.filters.ally_lanes
        rest: Sequence[Participant] = [
            p for p in match.participants
            if p.participant_id not in (target.participant_id, opponent.participant_id)
            and (ally_lanes is None or p.lane in ally_lanes)
        ]
        teammates = tuple(p for p in rest if p.team_id == target.team_id)
        opponents = tuple(p for p in rest if p.team_id != target.team_id)
        return teammates, opponents
