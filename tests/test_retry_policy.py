import pytest

from application.services import RetryPolicy
from core.logging import get_logger
from domain.errors import NotFound, RemoteUnavailable

log = get_logger(__name__)


def test_backoff_grows_exponentially():
    policy = RetryPolicy(backoff_base_ms=500, backoff_factor=2.0)

    assert [policy.backoff_seconds(n) for n in (1, 2, 3)] == [0.5, 1.0, 2.0]


def test_backoff_honours_longer_retry_after():
    policy = RetryPolicy(backoff_base_ms=500)

    assert policy.backoff_seconds(1, RemoteUnavailable("429", retry_after=3)) == 3.0
    assert policy.backoff_seconds(3, RemoteUnavailable("429", retry_after=1)) == 2.0


@pytest.mark.asyncio
async def test_permanent_error_is_not_retried():
    calls = 0

    async def supplier():
        nonlocal calls
        calls += 1
        raise NotFound("match 1")

    with pytest.raises(NotFound):
        await RetryPolicy(backoff_base_ms=0).run(supplier, logger=log)

    assert calls == 1


@pytest.mark.asyncio
async def test_returns_first_success():
    outcomes = [RemoteUnavailable("a"), "ok"]

    async def supplier():
        outcome = outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    assert await RetryPolicy(backoff_base_ms=0).run(supplier, logger=log) == "ok"
