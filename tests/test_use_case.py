import asyncio

import httpx
import pytest

from application.services import RetryPolicy
from application.use_cases import AnalyzeMatchHistoryUseCase
from domain.entities import FilterSet
from domain.enums import DiagnosticKind, Region, SkipReason
from domain.errors import NotFound
from infrastructure import RiotAPIClient
from factories import make_match, to_wire

SUMMONERS = {
    f"Player{i}": {"id": f"s{i}", "accountId": f"a{i}", "name": f"Player{i}"} for i in range(1, 11)
}


class FakeRiot:
    """Routes match-v4 and summoner-v4 requests to in-memory data."""

    def __init__(self, matches, missing=()):
        self.matches = {m.game_id: m for m in matches}
        self.missing = set(missing)
        self.match_requests = 0

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path.startswith("/lol/summoner/v4/summoners/by-name/"):
            name = path.rsplit("/", 1)[-1]
            if name not in SUMMONERS:
                return httpx.Response(404)
            return httpx.Response(200, json=SUMMONERS[name])
        if path.startswith("/lol/match/v4/matchlists/by-account/"):
            ids = sorted([*self.matches, *self.missing], reverse=True)
            return httpx.Response(200, json={"matches": [{"gameId": i} for i in ids], "totalGames": len(ids)})
        if path.startswith("/lol/match/v4/matches/"):
            self.match_requests += 1
            game_id = int(path.rsplit("/", 1)[-1])
            if game_id not in self.matches:
                return httpx.Response(404)
            return httpx.Response(200, json=to_wire(self.matches[game_id]))
        return httpx.Response(400)


def _games():
    return [
        make_match(game_id=1),
        make_match(game_id=2, overrides={4: {"win": False}}),
        make_match(game_id=3, duration=200),
        make_match(game_id=4, overrides={9: {"damage": 0}}),
    ]


def _use_case(client, cache):
    return AnalyzeMatchHistoryUseCase(client, cache, retry_policy=RetryPolicy(backoff_base_ms=0))


@pytest.mark.asyncio
async def test_end_to_end_report(cache):
    riot = FakeRiot(_games(), missing=[5])

    async with RiotAPIClient("k", transport=httpx.MockTransport(riot)) as client:
        report = await _use_case(client, cache).execute(Region.NA1, "Player4")

    assert report.target.summoner_id == "s4"
    assert report.requested == 5
    assert [e.game_id for e in report.fetch_errors] == [5]
    assert [(s.game_id, s.reason) for s in report.skipped] == [(3, SkipReason.REMAKE)]
    assert [s.game_id for s in report.stats] == [4, 2, 1]
    assert report.summary.total == 3
    assert (report.summary.wins, report.summary.losses) == (2, 1)
    assert DiagnosticKind.DEGENERATE_RATIO in {d.kind for d in report.diagnostics}
    assert cache.count() == 4


@pytest.mark.asyncio
async def test_second_run_is_served_from_cache(cache):
    riot = FakeRiot(_games())

    async with RiotAPIClient("k", transport=httpx.MockTransport(riot)) as client:
        use_case = _use_case(client, cache)
        first = await use_case.execute(Region.NA1, "Player4")
        requests_after_first = riot.match_requests
        second = await use_case.execute(Region.NA1, "Player4")

    assert requests_after_first == 4
    assert riot.match_requests == 4
    assert second.summary == first.summary


@pytest.mark.asyncio
async def test_concurrent_runs_share_fetches(cache):
    riot = FakeRiot(_games())

    async with RiotAPIClient("k", transport=httpx.MockTransport(riot)) as client:
        use_case = _use_case(client, cache)
        reports = await asyncio.gather(*(use_case.execute(Region.NA1, "Player4") for _ in range(3)))

    assert riot.match_requests == 4
    assert len({r.summary for r in reports}) == 1


@pytest.mark.asyncio
async def test_ally_names_become_filters(cache):
    games = [make_match(game_id=1), make_match(game_id=2)]
    riot = FakeRiot(games)

    async with RiotAPIClient("k", transport=httpx.MockTransport(riot)) as client:
        report = await _use_case(client, cache).execute(
            Region.NA1, "Player4", required_ally_names=["Player4", "Player5"], excluded_ally_names=["Player6"]
        )

    assert report.summary.total == 0
    assert {s.reason for s in report.skipped} == {SkipReason.EXCLUDED_ALLY_PRESENT}


@pytest.mark.asyncio
async def test_unknown_player_aborts_before_retrieval(cache):
    riot = FakeRiot(_games())

    async with RiotAPIClient("k", transport=httpx.MockTransport(riot)) as client:
        with pytest.raises(NotFound):
            await _use_case(client, cache).execute(
                Region.NA1, "Player4", required_ally_names=["Nobody"], filters=FilterSet()
            )

    assert riot.match_requests == 0
    assert cache.count() == 0
