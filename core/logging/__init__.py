"""Structured logging: custom levels, bound context, console/JSON formatters."""
from .config import bootstrap_logging, shutdown_logging
from .context import bind, context, unbind
from .logger import StructuredLogger, get_logger

__all__ = [
    "bootstrap_logging",
    "shutdown_logging",
    "bind",
    "context",
    "unbind",
    "StructuredLogger",
    "get_logger",
]
