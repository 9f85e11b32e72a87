"""Per-match and run-level statistics."""
from dataclasses import dataclass, replace
from typing import Optional, Tuple
from .analysis import Diagnostic
from ..errors import EmptySummaryError


@dataclass(frozen=True)
class MatchStats:
    """Derived statistics for one analysed match.

    Ratios are None when their denominator was zero, and
    ``ally_gold_at_ten_diff`` is None when the compared sides were
    unbalanced; ``diagnostics`` says which.
    """

    game_id: int
    is_scrub: bool
    lane_damage_ratio: Optional[float]
    ally_damage_ratio: Optional[float]
    gold_at_ten_diff: float
    gold_early_mid_game_diff: float
    total_gold_diff: float
    ally_gold_at_ten_diff: Optional[float] = None
    diagnostics: Tuple[Diagnostic, ...] = ()

    @property
    def won(self) -> bool:
        return not self.is_scrub

    @property
    def lane_ratio_above_allies(self) -> bool:
        """Whether the target out-damaged their laner by more than the rest of the team did."""
        if self.lane_damage_ratio is None or self.ally_damage_ratio is None:
            return False
        return self.lane_damage_ratio > self.ally_damage_ratio


@dataclass(frozen=True)
class SummaryCounts:
    """Run-level tallies folded over a sequence of :class:`MatchStats`."""

    total: int = 0
    lane_ratio_above_allies: int = 0
    gold_at_ten_behind: int = 0
    early_mid_game_behind: int = 0
    total_gold_behind: int = 0
    ally_gold_at_ten_ahead: int = 0
    ally_gold_at_ten_measured: int = 0
    wins: int = 0
    losses: int = 0

    def add(self, stats: MatchStats) -> 'SummaryCounts':
        """Return a new accumulator with ``stats`` counted in."""
        ally_measured = stats.ally_gold_at_ten_diff is not None
        return replace(
            self,
            total=self.total + 1,
            lane_ratio_above_allies=self.lane_ratio_above_allies + stats.lane_ratio_above_allies,
            gold_at_ten_behind=self.gold_at_ten_behind + (stats.gold_at_ten_diff <= 0),
            early_mid_game_behind=self.early_mid_game_behind + (stats.gold_early_mid_game_diff <= 0),
            total_gold_behind=self.total_gold_behind + (stats.total_gold_diff <= 0),
            ally_gold_at_ten_ahead=self.ally_gold_at_ten_ahead
            + (ally_measured and stats.ally_gold_at_ten_diff > 0),
            ally_gold_at_ten_measured=self.ally_gold_at_ten_measured + ally_measured,
            wins=self.wins + stats.won,
            losses=self.losses + stats.is_scrub,
        )

    @property
    def gold_at_ten_ahead(self) -> int:
        return self.total - self.gold_at_ten_behind

    @property
    def early_mid_game_ahead(self) -> int:
        return self.total - self.early_mid_game_behind

    @property
    def total_gold_ahead(self) -> int:
        return self.total - self.total_gold_behind

    def percentage(self, count: int) -> float:
        """``count`` as a percentage of all matches.

        Raises:
            EmptySummaryError: when the summary covers no matches.
        """
        if self.total == 0:
            raise EmptySummaryError("no matches were analysed")
        return 100.0 * count / self.total

    @property
    def win_rate(self) -> float:
        return self.percentage(self.wins)
