import asyncio

import pytest

from application.services import MatchRetrievalService, RetryPolicy
from domain.entities import FetchError, Match
from domain.errors import NotFound, RemoteUnavailable, RetrievalCancelled
from factories import FakeFetcher, make_match

NO_WAIT = RetryPolicy(max_attempts=3, backoff_base_ms=0)


def _service(cache, fetcher, **kwargs):
    kwargs.setdefault("retry_policy", NO_WAIT)
    kwargs.setdefault("max_concurrency", 4)
    return MatchRetrievalService(cache, fetcher, **kwargs)


@pytest.mark.asyncio
async def test_cached_ids_skip_the_fetcher_and_order_is_kept(cache):
    matches = [make_match(game_id=i) for i in (1, 2, 3)]
    await cache.put(1, matches[0])
    await cache.put(3, matches[2])
    fetcher = FakeFetcher(matches)

    results = await _service(cache, fetcher).retrieve_all([3, 2, 1])

    assert [r.game_id for r in results] == [3, 2, 1]
    assert fetcher.calls == {2: 1}
    assert cache.count() == 3


@pytest.mark.asyncio
async def test_concurrent_batches_fetch_an_id_once(cache):
    fetcher = FakeFetcher([make_match(game_id=7)])
    fetcher.gate = asyncio.Event()
    service = _service(cache, fetcher)

    batches = [asyncio.ensure_future(service.retrieve_all([7])) for _ in range(5)]
    await asyncio.sleep(0.05)
    assert service.in_flight == 1
    fetcher.gate.set()
    results = await asyncio.gather(*batches)

    assert fetcher.total_calls == 1
    assert cache.count() == 1
    assert all(isinstance(r[0], Match) and r[0].game_id == 7 for r in results)
    assert service.in_flight == 0


@pytest.mark.asyncio
async def test_duplicate_ids_in_one_batch_share_a_fetch(cache):
    fetcher = FakeFetcher([make_match(game_id=5)])

    results = await _service(cache, fetcher).retrieve_all([5, 5, 5])

    assert fetcher.total_calls == 1
    assert [r.game_id for r in results] == [5, 5, 5]


@pytest.mark.asyncio
async def test_not_found_is_reported_in_place_and_not_retried(cache):
    fetcher = FakeFetcher(
        [make_match(game_id=1), make_match(game_id=3)],
        failures={2: [NotFound("match 2")]},
    )

    results = await _service(cache, fetcher).retrieve_all([1, 2, 3])

    assert isinstance(results[0], Match)
    assert isinstance(results[1], FetchError)
    assert results[1].game_id == 2 and results[1].not_found
    assert isinstance(results[2], Match)
    assert fetcher.calls[2] == 1
    assert not cache.contains(2)


@pytest.mark.asyncio
async def test_transient_failures_are_retried(cache):
    fetcher = FakeFetcher(
        [make_match(game_id=9)],
        failures={9: [RemoteUnavailable("boom"), RemoteUnavailable("boom", status_code=503)]},
    )

    results = await _service(cache, fetcher).retrieve_all([9])

    assert isinstance(results[0], Match)
    assert fetcher.calls[9] == 3
    assert cache.contains(9)


@pytest.mark.asyncio
async def test_retry_exhaustion_becomes_fetch_error(cache):
    fetcher = FakeFetcher(
        [make_match(game_id=9)],
        failures={9: [RemoteUnavailable("down")] * 5},
    )

    results = await _service(cache, fetcher).retrieve_all([9])

    assert isinstance(results[0], FetchError)
    assert results[0].transient
    assert fetcher.calls[9] == 3
    assert cache.count() == 0


@pytest.mark.asyncio
async def test_unexpected_error_does_not_abort_batch(cache):
    # id 8 is unknown to the fake fetcher and raises KeyError
    fetcher = FakeFetcher([make_match(game_id=1)])

    results = await _service(cache, fetcher).retrieve_all([8, 1])

    assert isinstance(results[0], FetchError)
    assert isinstance(results[1], Match)


@pytest.mark.asyncio
async def test_cancel_event_aborts_pending_fetches(cache):
    fetcher = FakeFetcher([make_match(game_id=i) for i in (1, 2)])
    fetcher.gate = asyncio.Event()
    cancel = asyncio.Event()
    service = _service(cache, fetcher)

    async def cancel_soon():
        await asyncio.sleep(0.05)
        cancel.set()

    asyncio.ensure_future(cancel_soon())
    with pytest.raises(RetrievalCancelled):
        await service.retrieve_all([1, 2], cancel_event=cancel)

    await asyncio.sleep(0.05)
    assert fetcher.cancelled == 2
    assert service.in_flight == 0
    assert cache.count() == 0


@pytest.mark.asyncio
async def test_shared_fetch_survives_one_waiter_cancelling(cache):
    fetcher = FakeFetcher([make_match(game_id=4)])
    fetcher.gate = asyncio.Event()
    cancel = asyncio.Event()
    service = _service(cache, fetcher)

    cancelled_batch = asyncio.ensure_future(service.retrieve_all([4], cancel_event=cancel))
    other_batch = asyncio.ensure_future(service.retrieve_all([4]))
    await asyncio.sleep(0.05)

    cancel.set()
    with pytest.raises(RetrievalCancelled):
        await cancelled_batch
    fetcher.gate.set()
    results = await other_batch

    assert isinstance(results[0], Match)
    assert fetcher.cancelled == 0
    assert fetcher.total_calls == 1


@pytest.mark.asyncio
async def test_concurrency_is_bounded(cache):
    active = 0
    peak = 0

    class SlowFetcher(FakeFetcher):
        async def fetch(self, game_id):
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.005)
            active -= 1
            return self.matches[game_id]

    fetcher = SlowFetcher([make_match(game_id=i) for i in range(10)])

    results = await _service(cache, fetcher, max_concurrency=2).retrieve_all(list(range(10)))

    assert len(results) == 10
    assert peak <= 2


@pytest.mark.asyncio
@pytest.mark.parametrize("yields", range(6))
async def test_batch_joining_an_abandoned_load_still_completes(cache, yields):
    fetcher = FakeFetcher([make_match(game_id=4)])
    fetcher.gate = asyncio.Event()
    cancel = asyncio.Event()
    service = _service(cache, fetcher)

    cancelled_batch = asyncio.ensure_future(service.retrieve_all([4], cancel_event=cancel))
    await asyncio.sleep(0.05)
    cancel.set()
    for _ in range(yields):
        await asyncio.sleep(0)
    other_batch = asyncio.ensure_future(service.retrieve_all([4]))

    with pytest.raises(RetrievalCancelled):
        await cancelled_batch
    fetcher.gate.set()
    results = await other_batch

    assert isinstance(results[0], Match)
    assert cache.contains(4)
    assert service.in_flight == 0
