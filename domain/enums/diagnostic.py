"""Non-fatal diagnostics and skip reasons reported during analysis."""
from enum import Enum


class DiagnosticKind(Enum):
    """Conditions that are reported but never abort a match or the run."""

    DEGENERATE_RATIO = "degenerate-ratio"
    MISSING_TIME_BUCKET = "missing-time-bucket"
    UNBALANCED_TEAMS = "unbalanced-teams"
    AMBIGUOUS_ROLE = "ambiguous-role"
    MALFORMED_MATCH = "malformed-match"


class SkipReason(Enum):
    """Why the filter pipeline dropped a match."""

    MALFORMED = "malformed"
    MISSING_REQUIRED_ALLY = "missing-required-ally"
    EXCLUDED_ALLY_PRESENT = "excluded-ally-present"
    REMAKE = "remake"
    ROLE_FILTERED = "role-filtered"
    LANE_FILTERED = "lane-filtered"
    NO_OPPOSING_LANER = "no-opposing-laner"
    AMBIGUOUS_OPPOSING_LANER = "ambiguous-opposing-laner"
