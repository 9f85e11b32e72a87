"""Match retrieval - cache first, deduplicated and bounded remote fetches."""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Union

from config import settings
from core.logging.context import context
from core.logging.logger import get_logger
from domain.entities import FetchError, Match, MatchReference
from domain.errors import MatchHistoryError, RetrievalCancelled
from domain.interfaces import IMatchCache, IMatchFetcher
from .retry_policy import RetryPolicy

MatchOrError = Union[Match, FetchError]


@dataclass
class _InFlight:
    task: asyncio.Task
    waiters: int = 0


class MatchRetrievalService:
    """
    Resolves match ids to match records.

    Design:
    - Every id is looked up in the cache first; misses are fetched remotely
      and written back before being returned.
    - At most one load per id is ever running: callers asking for an id that
      is already being loaded (same batch or a concurrent batch) await the
      same task.
    - Distinct ids run concurrently, bounded by ``max_concurrency``.
    - Failures are captured per id; the batch never aborts for one match.
    """

    def __init__(
        self,
        cache: IMatchCache,
        fetcher: IMatchFetcher,
        *,
        max_concurrency: Optional[int] = None,
        retry_policy: Optional[RetryPolicy] = None,
    ):
        self.cache = cache
        self.fetcher = fetcher
        self.retry_policy = retry_policy or RetryPolicy.from_settings()
        self._sem = asyncio.Semaphore(max_concurrency or settings.MAX_CONCURRENT_REQUESTS)
        self._in_flight: Dict[int, _InFlight] = {}
        self._log = get_logger(__name__, service="retrieval")

    # ------------------------------------------------------------------ #
    # Public entry point
    # ------------------------------------------------------------------ #

    async def retrieve_all(
        self,
        match_ids: Sequence[Union[int, MatchReference]],
        cancel_event: Optional[asyncio.Event] = None,
    ) -> List[MatchOrError]:
        """Return one ``Match`` or ``FetchError`` per input id, in input order.

        Setting ``cancel_event`` (or cancelling the calling task) cancels every
        load this batch is the last waiter on and raises
        :class:`RetrievalCancelled`. Matches already written to the cache stay.
        """
        ids = [m.game_id if isinstance(m, MatchReference) else int(m) for m in match_ids]
        batch = asyncio.ensure_future(asyncio.gather(*(self._retrieve_one(i) for i in ids)))

        if cancel_event is None:
            results = await batch
        else:
            waiter = asyncio.ensure_future(cancel_event.wait())
            try:
                done, _ = await asyncio.wait({batch, waiter}, return_when=asyncio.FIRST_COMPLETED)
            except asyncio.CancelledError:
                batch.cancel()
                raise
            finally:
                waiter.cancel()
            if batch not in done:
                batch.cancel()
                await asyncio.gather(batch, return_exceptions=True)
                self._log.warning(lambda: f"retrieval cancelled with {len(ids)} ids requested")
                raise RetrievalCancelled(f"retrieval of {len(ids)} matches was cancelled")
            results = batch.result()

        failures = sum(1 for r in results if isinstance(r, FetchError))
        self._log.info(
            lambda: f"retrieved {len(results) - failures}/{len(results)} matches",
            extra={"failed": failures},
        )
        return list(results)

    # ------------------------------------------------------------------ #
    # Per-id worker
    # ------------------------------------------------------------------ #

    async def _retrieve_one(self, game_id: int) -> MatchOrError:
        try:
            return await self._join(game_id)
        except MatchHistoryError as exc:
            self._log.warning(lambda: f"Failed to retrieve game {game_id}: {exc}")
            return FetchError(game_id, exc)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            self._log.error(lambda: f"Unexpected error retrieving game {game_id}: {exc}", exc_info=True)
            return FetchError(game_id, exc)

    async def _join(self, game_id: int) -> Match:
        """Await the single in-flight load for ``game_id``, starting it if needed.

        Only the caller's own cancellation propagates. A load abandoned by its
        last other waiter is started again instead.
        """
        while True:
            entry = self._in_flight.get(game_id)
            if entry is None:
                entry = _InFlight(task=asyncio.ensure_future(self._load(game_id)))
                self._in_flight[game_id] = entry
                entry.task.add_done_callback(lambda _t, e=entry: self._forget(game_id, e))
            else:
                self._log.debug(lambda: f"Joining in-flight load of game {game_id}")

            entry.waiters += 1
            try:
                # wait() leaves the task alone when this caller is cancelled
                await asyncio.wait({entry.task})
            except asyncio.CancelledError:
                if entry.waiters == 1 and not entry.task.done():
                    self._forget(game_id, entry)
                    entry.task.cancel()
                raise
            finally:
                entry.waiters -= 1

            if not entry.task.cancelled():
                return entry.task.result()
            self._log.debug(lambda: f"Load of game {game_id} was abandoned, restarting")

    def _forget(self, game_id: int, entry: _InFlight) -> None:
        if self._in_flight.get(game_id) is entry:
            del self._in_flight[game_id]

    async def _load(self, game_id: int) -> Match:
        async with self._sem:
            with context(game_id=game_id):
                cached = await self.cache.get(game_id)
                if cached is not None:
                    self._log.debug(lambda: f"Loaded game {game_id} from cache")
                    return cached

                match = await self.retry_policy.run(
                    lambda: self.fetcher.fetch(game_id),
                    logger=self._log,
                    context={"game_id": game_id},
                )
                await self.cache.put(game_id, match)
                self._log.info(lambda: f"Cached game {game_id}")
                return match

    @property
    def in_flight(self) -> int:
        """Number of distinct ids currently being loaded."""
        return len(self._in_flight)
