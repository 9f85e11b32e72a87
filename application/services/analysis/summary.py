"""Run-level summary of per-match statistics."""
from functools import reduce
from typing import Iterable

from domain.entities import MatchStats, SummaryCounts


def summarize(stats: Iterable[MatchStats]) -> SummaryCounts:
    """Fold ``stats`` into a :class:`SummaryCounts`. An empty input gives an empty summary."""
    return reduce(SummaryCounts.add, stats, SummaryCounts())
