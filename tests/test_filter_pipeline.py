import pytest

from application.services.analysis import MatchFilterPipeline
from domain.entities import FetchError, FilterSet, Summoner
from domain.enums import DiagnosticKind, Lane, Role, SkipReason
from domain.errors import NotFound
from factories import make_match

TARGET = Summoner(summoner_id="s4", account_id="a4", name="Player4")


def _only(result):
    assert len(result.matchups) == 1, result.skipped
    return result.matchups[0]


def _skip_reason(result):
    assert not result.matchups
    assert len(result.skipped) == 1
    return result.skipped[0].reason


def test_resolves_target_and_unique_opposing_laner():
    matchup = _only(MatchFilterPipeline().analyze([make_match()], TARGET))

    assert matchup.target.participant_id == 4
    assert matchup.opponent.participant_id == 9
    assert {p.participant_id for p in matchup.teammates} == {1, 2, 3, 5}
    assert {p.participant_id for p in matchup.opponents} == {6, 7, 8, 10}
    assert matchup.diagnostics == ()


def test_every_matchup_belongs_to_the_target():
    matches = [make_match(game_id=i) for i in range(1, 6)]

    result = MatchFilterPipeline().analyze(matches, "s4")

    assert [m.game_id for m in result.matchups] == [1, 2, 3, 4, 5]
    for m in result.matchups:
        identity = next(pi for pi in m.match.participant_identities if pi.participant_id == m.target.participant_id)
        assert identity.summoner_id == "s4"


def test_missing_target_is_skipped_as_malformed():
    result = MatchFilterPipeline().analyze([make_match()], "s99")

    assert _skip_reason(result) is SkipReason.MALFORMED


def test_remake_is_excluded():
    result = MatchFilterPipeline().analyze([make_match(duration=250)], TARGET)

    assert _skip_reason(result) is SkipReason.REMAKE


def test_game_at_threshold_is_kept():
    _only(MatchFilterPipeline().analyze([make_match(duration=300)], TARGET))


def test_required_ally_must_be_present():
    kept = MatchFilterPipeline(FilterSet(required_allies=frozenset({"s5"}))).analyze([make_match()], TARGET)
    skipped = MatchFilterPipeline(FilterSet(required_allies=frozenset({"s5", "s77"}))).analyze(
        [make_match()], TARGET
    )

    _only(kept)
    assert _skip_reason(skipped) is SkipReason.MISSING_REQUIRED_ALLY
    assert skipped.skipped[0].detail == "s77"


def test_excluded_player_anywhere_in_game_skips_it():
    result = MatchFilterPipeline(FilterSet(excluded_allies=frozenset({"s6"}))).analyze([make_match()], TARGET)

    assert _skip_reason(result) is SkipReason.EXCLUDED_ALLY_PRESENT


def test_ally_checks_run_before_remake_check():
    pipeline = MatchFilterPipeline(FilterSet(required_allies=frozenset({"s77"})))

    result = pipeline.analyze([make_match(duration=100)], TARGET)

    assert _skip_reason(result) is SkipReason.MISSING_REQUIRED_ALLY


def test_duo_role_is_flagged_and_filters_still_apply():
    match = make_match(overrides={4: {"role": Role.DUO}, 9: {"role": Role.DUO}})

    unfiltered = MatchFilterPipeline().analyze([match], TARGET)
    filtered = MatchFilterPipeline(FilterSet(roles=frozenset({Role.DUO_CARRY}))).analyze([match], TARGET)

    matchup = _only(unfiltered)
    assert [d.kind for d in matchup.diagnostics] == [DiagnosticKind.AMBIGUOUS_ROLE]
    assert unfiltered.diagnostics == list(matchup.diagnostics)
    assert _skip_reason(filtered) is SkipReason.ROLE_FILTERED


def test_lane_filter():
    kept = MatchFilterPipeline(FilterSet(lanes=frozenset({Lane.BOTTOM}))).analyze([make_match()], TARGET)
    skipped = MatchFilterPipeline(FilterSet(lanes=frozenset({Lane.TOP}))).analyze([make_match()], TARGET)

    _only(kept)
    assert _skip_reason(skipped) is SkipReason.LANE_FILTERED


def test_no_opposing_laner_is_skipped():
    match = make_match(overrides={9: {"lane": Lane.MIDDLE}})

    result = MatchFilterPipeline().analyze([match], TARGET)

    assert _skip_reason(result) is SkipReason.NO_OPPOSING_LANER


def test_several_opposing_laners_are_skipped_not_guessed():
    match = make_match(overrides={10: {"role": Role.DUO_CARRY}})

    result = MatchFilterPipeline().analyze([match], TARGET)

    assert _skip_reason(result) is SkipReason.AMBIGUOUS_OPPOSING_LANER


def test_ally_lane_filter_narrows_both_sides():
    pipeline = MatchFilterPipeline(FilterSet(ally_lanes=frozenset({Lane.TOP, Lane.MIDDLE})))

    matchup = _only(pipeline.analyze([make_match()], TARGET))

    assert {p.participant_id for p in matchup.teammates} == {1, 3}
    assert {p.participant_id for p in matchup.opponents} == {6, 8}


def test_fetch_errors_are_ignored_and_order_is_kept():
    matches = [
        make_match(game_id=1),
        FetchError(2, NotFound("match 2")),
        make_match(game_id=3, duration=200),
        make_match(game_id=4),
    ]

    result = MatchFilterPipeline().analyze(matches, TARGET)

    assert [m.game_id for m in result.matchups] == [1, 4]
    assert [s.game_id for s in result.skipped] == [3]


@pytest.mark.parametrize("threshold, kept", [(0, 1), (1800, 1), (1801, 0)])
def test_remake_threshold_is_configurable(threshold, kept):
    pipeline = MatchFilterPipeline(remake_threshold_seconds=threshold)

    result = pipeline.analyze([make_match(duration=1800)], TARGET)

    assert len(result.matchups) == kept
