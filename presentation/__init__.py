"""Presentation layer - User interfaces."""
from .cli import AnalyzeCommand

__all__ = [
    "AnalyzeCommand",
]
