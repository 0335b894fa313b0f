"""Enumerations for finding severity and drift status."""

from enum import Enum


class Severity(str, Enum):
    """Severity levels for verification findings."""

    ERROR = "error"
    CRITICAL = "critical"


class DriftStatus(str, Enum):
    """Outcome of a post-apply plan."""

    NONE = "none"
    DETECTED = "detected"
    UNCLEAR = "unclear"
