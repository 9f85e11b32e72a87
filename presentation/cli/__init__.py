"""Presentation CLI exports."""
from .analyze_command import AnalyzeCommand

__all__ = [
    "AnalyzeCommand",
]
