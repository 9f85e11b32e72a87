"""Filtering, aggregation and summary of retrieved matches."""
from .filter_pipeline import FilterResult, MatchFilterPipeline
from .aggregation import aggregate, aggregate_all
from .summary import summarize

__all__ = [
    "FilterResult",
    "MatchFilterPipeline",
    "aggregate",
    "aggregate_all",
    "summarize",
]
