"""Application layer - Services and use cases."""
from .services import MatchFilterPipeline, MatchRetrievalService
from .use_cases import AnalyzeMatchHistoryUseCase

__all__ = [
    'MatchFilterPipeline',
    'MatchRetrievalService',
    'AnalyzeMatchHistoryUseCase',
]
