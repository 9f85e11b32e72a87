"""Application services root exports."""
from .retry_policy import RetryPolicy
from .match_retrieval_service import MatchRetrievalService
from .analysis import FilterResult, MatchFilterPipeline, aggregate, aggregate_all, summarize

__all__ = [
    "RetryPolicy",
    "MatchRetrievalService",
    "FilterResult",
    "MatchFilterPipeline",
    "aggregate",
    "aggregate_all",
    "summarize",
]
