from __future__ import annotations

from enum import Enum


class DayStatus(str, Enum):
    """Today's attendance state as shown to the user (derived, never stored)."""

    NOT_PUNCHED_IN = "not_punched_in"
    PUNCHED_IN = "punched_in"
    COMPLETED = "completed"
    UNKNOWN = "unknown"


class RecordStatus(str, Enum):
    """Label attached to a history entry."""

    NO_PUNCH_IN = "No Punch In"
    MISSING_PUNCH_OUT = "Missing Punch Out"
    SHORT_DAY = "Short Day"
    FULL_DAY = "Full Day"
    PARTIAL_DAY = "Partial Day"


class ErrorCode(str, Enum):
    """Failure kinds reported by mutating operations."""

    INVALID_USER = "INVALID_USER"
    ALREADY_PUNCHED_IN = "ALREADY_PUNCHED_IN"
    ALREADY_PUNCHED_OUT = "ALREADY_PUNCHED_OUT"
    NO_PUNCH_IN_FOUND = "NO_PUNCH_IN_FOUND"
    PUNCH_IN_MISSING = "PUNCH_IN_MISSING"
    PERSISTENCE_FAILURE = "PERSISTENCE_FAILURE"
