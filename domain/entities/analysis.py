"""Value objects produced while retrieving and filtering matches."""
from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Tuple
from .match import Match
from .participant import Participant
from ..enums import DiagnosticKind, Lane, Role, SkipReason
from ..errors import NotFound, RemoteUnavailable


@dataclass(frozen=True)
class FilterSet:
    """Analysis filters. Every axis is optional; active axes are conjunctive.

    ``required_allies`` / ``excluded_allies`` hold summoner ids. ``None`` for
    ``roles``, ``lanes`` or ``ally_lanes`` means no restriction.
    """

    required_allies: FrozenSet[str] = field(default_factory=frozenset)
    excluded_allies: FrozenSet[str] = field(default_factory=frozenset)
    roles: Optional[FrozenSet[Role]] = None
    lanes: Optional[FrozenSet[Lane]] = None
    ally_lanes: Optional[FrozenSet[Lane]] = None


@dataclass(frozen=True)
class Diagnostic:
    """A non-fatal condition noticed while analysing one match."""

    game_id: int
    kind: DiagnosticKind
    message: str


@dataclass(frozen=True)
class SkippedMatch:
    """A match the filter pipeline dropped, and why."""

    game_id: int
    reason: SkipReason
    detail: str = ""


@dataclass(frozen=True)
class FetchError:
    """Retrieval failure for one match id, reported in place of the match."""

    game_id: int
    error: Exception

    @property
    def transient(self) -> bool:
        return isinstance(self.error, RemoteUnavailable)

    @property
    def not_found(self) -> bool:
        return isinstance(self.error, NotFound)

    @property
    def message(self) -> str:
        return str(self.error) or type(self.error).__name__


@dataclass(frozen=True)
class LaneMatchup:
    """A match resolved for aggregation.

    ``teammates`` and ``opponents`` exclude the target and the opposing laner
    and are already narrowed by the ally-lane filter.
    """

    match: Match
    target: Participant
    opponent: Participant
    teammates: Tuple[Participant, ...] = ()
    opponents: Tuple[Participant, ...] = ()
    diagnostics: Tuple[Diagnostic, ...] = ()

    @property
    def game_id(self) -> int:
        return self.match.game_id
