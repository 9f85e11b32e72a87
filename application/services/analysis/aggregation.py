"""Per-match statistics for a resolved lane matchup."""
from typing import Iterable, List, Optional, Tuple

from domain.entities import Diagnostic, LaneMatchup, MatchStats, Participant
from domain.enums import DiagnosticKind, TimeBucket


def _ratio(numerator: float, denominator: float) -> Optional[float]:
    if denominator == 0:
        return None
    return numerator / denominator


def _delta_diff(
    game_id: int,
    bucket: TimeBucket,
    target: Participant,
    opponent: Participant,
    diagnostics: List[Diagnostic],
) -> float:
    mine = target.gold_delta(bucket)
    theirs = opponent.gold_delta(bucket)
    if mine is None or theirs is None:
        diagnostics.append(Diagnostic(
            game_id,
            DiagnosticKind.MISSING_TIME_BUCKET,
            f"gold per minute {bucket.key} missing for "
            f"{'target' if mine is None else 'opponent'}, counted as 0",
        ))
        return 0.0
    return mine - theirs


def _sum_damage(participants: Iterable[Participant]) -> int:
    return sum(p.total_damage_dealt_to_champions for p in participants)


def _sum_gold_at_ten(participants: Iterable[Participant]) -> float:
    return sum(p.gold_delta(TimeBucket.ZERO_TO_TEN) for p in participants)


def aggregate(matchup: LaneMatchup) -> MatchStats:
    """
    Compute :class:`MatchStats` for one matchup.

    Pure: the same matchup always yields the same stats. Anything unusual
    (zero denominators, absent timeline buckets, uneven team sides) is
    returned as a diagnostic on the result rather than raised. Diagnostics
    already attached to the matchup are carried over first.
    """
    game_id = matchup.game_id
    target, opponent = matchup.target, matchup.opponent
    diagnostics: List[Diagnostic] = list(matchup.diagnostics)

    lane_damage_ratio = _ratio(target.total_damage_dealt_to_champions, opponent.total_damage_dealt_to_champions)
    if lane_damage_ratio is None:
        diagnostics.append(Diagnostic(
            game_id, DiagnosticKind.DEGENERATE_RATIO, "opposing laner dealt no damage to champions",
        ))

    ally_damage_ratio = _ratio(_sum_damage(matchup.teammates), _sum_damage(matchup.opponents))
    if ally_damage_ratio is None:
        diagnostics.append(Diagnostic(
            game_id, DiagnosticKind.DEGENERATE_RATIO, "compared enemies dealt no damage to champions",
        ))

    gold_at_ten_diff = _delta_diff(game_id, TimeBucket.ZERO_TO_TEN, target, opponent, diagnostics)
    gold_early_mid_game_diff = _delta_diff(game_id, TimeBucket.TEN_TO_TWENTY, target, opponent, diagnostics)

    ally_gold_at_ten_diff: Optional[float] = None
    unreported = [
        p for p in (*matchup.teammates, *matchup.opponents)
        if p.gold_delta(TimeBucket.ZERO_TO_TEN) is None
    ]
    for p in unreported:
        diagnostics.append(Diagnostic(
            game_id,
            DiagnosticKind.MISSING_TIME_BUCKET,
            f"gold per minute {TimeBucket.ZERO_TO_TEN.key} missing for participant {p.participant_id}, "
            f"team gold at 10 left unset",
        ))
    if len(matchup.teammates) != len(matchup.opponents):
        diagnostics.append(Diagnostic(
            game_id,
            DiagnosticKind.UNBALANCED_TEAMS,
            f"{len(matchup.teammates)} allies against {len(matchup.opponents)} enemies",
        ))
    elif not unreported:
        ally_gold_at_ten_diff = _sum_gold_at_ten(matchup.teammates) - _sum_gold_at_ten(matchup.opponents)

    return MatchStats(
        game_id=game_id,
        is_scrub=not target.win,
        lane_damage_ratio=lane_damage_ratio,
        ally_damage_ratio=ally_damage_ratio,
        gold_at_ten_diff=gold_at_ten_diff,
        gold_early_mid_game_diff=gold_early_mid_game_diff,
        total_gold_diff=float(target.gold_earned - opponent.gold_earned),
        ally_gold_at_ten_diff=ally_gold_at_ten_diff,
        diagnostics=tuple(diagnostics),
    )


def aggregate_all(matchups: Iterable[LaneMatchup]) -> Tuple[MatchStats, ...]:
    return tuple(aggregate(m) for m in matchups)
