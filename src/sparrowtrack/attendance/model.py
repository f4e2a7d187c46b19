from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any, Mapping, Optional, Union

from ..common.datetime_utils import parse_clock, to_date
from ..core.enums import DayStatus, RecordStatus
from ..core.exceptions import ValidationError


def _as_hours(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    try:
        hours = float(value or 0)
    except (TypeError, ValueError):
        return 0.0
    # json.load accepts NaN and Infinity
    return max(hours, 0.0) if math.isfinite(hours) else 0.0


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one user's attendance on one calendar date.

    Stored as a JSON-like mapping with camelCase keys (see `to_dict`).
    """

    work_date: date
    punch_in: Optional[str] = None
    punch_in_timestamp: Optional[str] = None
    punch_out: Optional[str] = None
    punch_out_timestamp: Optional[str] = None
    working_hours: float = 0.0
    notes: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], *, key: Optional[str] = None) -> "AttendanceRecord":
        return cls(
            work_date=to_date(key or data.get("date")),
            punch_in=data.get("punchIn") or None,
            punch_in_timestamp=data.get("punchInTimestamp") or None,
            punch_out=data.get("punchOut") or None,
            punch_out_timestamp=data.get("punchOutTimestamp") or None,
            working_hours=_as_hours(data.get("workingHours")),
            notes=str(data.get("notes") or ""),
        )

    def to_dict(self) -> dict:
        return {
            "date": self.work_date.isoformat(),
            "punchIn": self.punch_in,
            "punchInTimestamp": self.punch_in_timestamp,
            "punchOut": self.punch_out,
            "punchOutTimestamp": self.punch_out_timestamp,
            "workingHours": self.working_hours,
            "notes": self.notes,
        }

    @property
    def date_key(self) -> str:
        return self.work_date.isoformat()

    def closed(self, *, punch_out: str, punch_out_timestamp: str, working_hours: float, notes: str) -> "AttendanceRecord":
        return replace(
            self,
            punch_out=punch_out,
            punch_out_timestamp=punch_out_timestamp,
            working_hours=working_hours,
            notes=notes,
        )

    def record_status(self, *, full_day_hours: float, short_day_hours: float) -> RecordStatus:
        if not self.punch_in:
            return RecordStatus.NO_PUNCH_IN
        if not self.punch_out:
            return RecordStatus.MISSING_PUNCH_OUT
        if self.working_hours < short_day_hours:
            return RecordStatus.SHORT_DAY
        if self.working_hours >= full_day_hours:
            return RecordStatus.FULL_DAY
        return RecordStatus.PARTIAL_DAY


# Day state: what today's record (if any) allows next.


@dataclass(frozen=True)
class Absent:
    """No record for the date."""


@dataclass(frozen=True)
class Open:
    record: AttendanceRecord

    @property
    def punch_in(self) -> str:
        return str(self.record.punch_in)


@dataclass(frozen=True)
class Closed:
    record: AttendanceRecord


@dataclass(frozen=True)
class Corrupt:
    """A stored record with no usable punch-in.

    Either the punch-in is missing, or the day is still open and its punch-in
    is not a clock time.

    Not reachable through punch operations; only appears when the store
    holds damaged or hand-edited data.
    """

    record: AttendanceRecord


DayState = Union[Absent, Open, Closed, Corrupt]


def day_state(record: Optional[AttendanceRecord]) -> DayState:
    if record is None:
        return Absent()
    if not record.punch_in:
        return Corrupt(record)
    if record.punch_out:
        return Closed(record)
    if not _is_clock(record.punch_in):
        return Corrupt(record)
    return Open(record)


def _is_clock(value: Any) -> bool:
    try:
        parse_clock(value)
    except ValidationError:
        return False
    return True


@dataclass(frozen=True)
class PunchInResult:
    punch_in_time: str
    date: str


@dataclass(frozen=True)
class PunchOutResult:
    punch_out_time: str
    working_hours: float
    formatted_hours: str
    date: str


@dataclass(frozen=True)
class StatusView:
    status: DayStatus
    message: str
    can_punch_in: bool
    can_punch_out: bool
    punch_in_time: Optional[str] = None
    punch_out_time: Optional[str] = None
    working_hours: Optional[float] = None


@dataclass(frozen=True)
class HistoryEntry:
    """Read-model for history screens and exports."""

    date: str
    formatted_date: str
    punch_in: Optional[str]
    punch_out: Optional[str]
    working_hours: float
    formatted_hours: str
    notes: str
    status: RecordStatus


@dataclass(frozen=True)
class WeeklySummary:
    week_start: str
    week_end: str
    total_hours: float
    formatted_total_hours: str
    average_hours: float
    formatted_average_hours: str
    days_worked: int
    days_present: int
    records: list[HistoryEntry] = field(default_factory=list)


@dataclass(frozen=True)
class MonthlySummary:
    year: int
    month: int
    month_name: str
    total_hours: float
    formatted_total_hours: str
    average_hours: float
    formatted_average_hours: str
    days_worked: int
    days_present: int
    full_days: int
    working_days_in_month: int
    records: list[HistoryEntry] = field(default_factory=list)
