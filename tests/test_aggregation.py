import pytest

from application.services.analysis import MatchFilterPipeline, aggregate
from domain.entities import Diagnostic, FilterSet, LaneMatchup
from domain.enums import DiagnosticKind, Lane
from factories import make_match, make_participant


def _matchup(target, opponent, teammates=(), opponents=()):
    match = make_match(participants=[target, opponent, *teammates, *opponents])
    return LaneMatchup(match, target, opponent, tuple(teammates), tuple(opponents))


def _kinds(stats):
    return [d.kind for d in stats.diagnostics]


def test_lane_and_team_values():
    target = make_participant(1, 100, win=True, damage=20000, gold=12000, g10=350.0, g20=420.0)
    opponent = make_participant(6, 200, damage=10000, gold=11000, g10=300.0, g20=450.0)
    teammates = [make_participant(2, 100, damage=15000, g10=250.0), make_participant(3, 100, damage=15000, g10=250.0)]
    opponents = [make_participant(7, 200, damage=10000, g10=200.0), make_participant(8, 200, damage=10000, g10=200.0)]

    stats = aggregate(_matchup(target, opponent, teammates, opponents))

    assert stats.lane_damage_ratio == pytest.approx(2.0)
    assert stats.ally_damage_ratio == pytest.approx(1.5)
    assert stats.gold_at_ten_diff == pytest.approx(50.0)
    assert stats.gold_early_mid_game_diff == pytest.approx(-30.0)
    assert stats.total_gold_diff == pytest.approx(1000.0)
    assert stats.ally_gold_at_ten_diff == pytest.approx(100.0)
    assert stats.is_scrub is False
    assert stats.lane_ratio_above_allies is True
    assert stats.diagnostics == ()


def test_loss_sets_scrub_flag():
    stats = aggregate(_matchup(
        make_participant(1, 100, win=False),
        make_participant(6, 200, win=True),
        [make_participant(2, 100)],
        [make_participant(7, 200)],
    ))

    assert stats.is_scrub is True
    assert stats.won is False


def test_missing_ten_to_twenty_counts_as_zero_and_keeps_the_match():
    target = make_participant(1, 100, g10=320.0, g20=None)
    opponent = make_participant(6, 200, g10=300.0, g20=410.0)

    stats = aggregate(_matchup(target, opponent, [make_participant(2, 100)], [make_participant(7, 200)]))

    assert stats.gold_early_mid_game_diff == 0.0
    assert stats.gold_at_ten_diff == pytest.approx(20.0)
    assert _kinds(stats) == [DiagnosticKind.MISSING_TIME_BUCKET]


def test_missing_zero_to_ten_counts_as_zero():
    stats = aggregate(_matchup(
        make_participant(1, 100),
        make_participant(6, 200, g10=None),
        [make_participant(2, 100)],
        [make_participant(7, 200)],
    ))

    assert stats.gold_at_ten_diff == 0.0
    assert DiagnosticKind.MISSING_TIME_BUCKET in _kinds(stats)


def test_zero_opponent_damage_gives_no_lane_ratio():
    target = make_participant(1, 100, damage=5000)
    opponent = make_participant(6, 200, damage=0)

    stats = aggregate(_matchup(target, opponent, [make_participant(2, 100)], [make_participant(7, 200)]))

    assert stats.lane_damage_ratio is None
    assert stats.ally_damage_ratio == pytest.approx(1.0)
    assert stats.lane_ratio_above_allies is False
    assert _kinds(stats) == [DiagnosticKind.DEGENERATE_RATIO]


def test_no_compared_enemies_gives_no_ally_ratio_and_unbalanced_teams():
    stats = aggregate(_matchup(make_participant(1, 100), make_participant(6, 200), [make_participant(2, 100)], []))

    assert stats.ally_damage_ratio is None
    assert stats.ally_gold_at_ten_diff is None
    assert _kinds(stats) == [DiagnosticKind.DEGENERATE_RATIO, DiagnosticKind.UNBALANCED_TEAMS]


def test_matchup_diagnostics_are_carried_over():
    match = make_match()
    note = Diagnostic(match.game_id, DiagnosticKind.AMBIGUOUS_ROLE, "target role DUO")
    matchup = LaneMatchup(
        match, match.participants[3], match.participants[8], match.participants[:3], match.participants[5:8], (note,)
    )

    stats = aggregate(matchup)

    assert stats.diagnostics == (note,)


@pytest.mark.parametrize(
    "ally_lanes, expected_set",
    [
        (frozenset({Lane.TOP}), True),
        (None, True),
    ],
)
def test_ally_gold_set_when_sides_balance(ally_lanes, expected_set):
    result = MatchFilterPipeline(FilterSet(ally_lanes=ally_lanes)).analyze([make_match()], "s4")

    stats = aggregate(result.matchups[0])

    assert (stats.ally_gold_at_ten_diff is not None) is expected_set


def test_ally_gold_unset_when_filtered_sides_differ():
    # the target's jungler also tagged TOP, so TOP is 2 allies against 1 enemy
    match = make_match(overrides={2: {"lane": Lane.TOP}})
    result = MatchFilterPipeline(FilterSet(ally_lanes=frozenset({Lane.TOP}))).analyze([match], "s4")

    stats = aggregate(result.matchups[0])

    assert stats.ally_gold_at_ten_diff is None
    assert DiagnosticKind.UNBALANCED_TEAMS in _kinds(stats)


def test_aggregate_is_deterministic():
    matchup = MatchFilterPipeline().analyze([make_match()], "s4").matchups[0]

    assert aggregate(matchup) == aggregate(matchup)


def test_teammate_without_ten_minute_gold_leaves_team_gold_unset():
    match = make_match(overrides={2: {"g10": None}})
    matchup = MatchFilterPipeline().analyze([match], "s4").matchups[0]

    stats = aggregate(matchup)

    assert stats.ally_gold_at_ten_diff is None
    missing = [d for d in stats.diagnostics if d.kind is DiagnosticKind.MISSING_TIME_BUCKET]
    assert len(missing) == 1
    assert "participant 2" in missing[0].message
    assert stats.gold_at_ten_diff == 0.0
