"""Domain error taxonomy."""
from typing import Optional


class MatchHistoryError(Exception):
    """Base class for every error raised by the match history analyzer."""


class RemoteUnavailable(MatchHistoryError):
    """Transient failure talking to the match-data service (timeout, 5xx, 429)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        retry_after: Optional[float] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.retry_after = retry_after


class NotFound(MatchHistoryError):
    """The requested match or player does not exist upstream."""

    def __init__(self, resource: str) -> None:
        super().__init__(f"{resource} not found")
        self.resource = resource


class MalformedMatch(MatchHistoryError):
    """A match record is missing data it must contain."""

    def __init__(self, game_id: Optional[int], reason: str) -> None:
        super().__init__(f"match {game_id} is malformed: {reason}")
        self.game_id = game_id
        self.reason = reason


class RetrievalCancelled(MatchHistoryError):
    """A retrieval batch was aborted by its caller."""


class EmptySummaryError(ValueError):
    """A percentage was requested from a summary over zero matches."""


class ConfigurationError(ValueError):
    """Invalid or missing configuration."""
