"""Application use cases."""
from .analyze_match_history import AnalysisReport, AnalyzeMatchHistoryUseCase, run_analysis

__all__ = [
    'AnalysisReport',
    'AnalyzeMatchHistoryUseCase',
    'run_analysis',
]
