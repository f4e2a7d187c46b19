from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Optional

from ..common.datetime_utils import clock_string, format_hours, hours_between, now_local, utc_timestamp
from ..common.validators import clean_notes, normalize_email
from ..core.enums import DayStatus, ErrorCode
from ..core.result import Result
from ..users.identity import IdentityService
from .model import (
    Absent,
    AttendanceRecord,
    Closed,
    Corrupt,
    Open,
    PunchInResult,
    PunchOutResult,
    StatusView,
    day_state,
)
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Punch-in / punch-out state machine for one record per user per day.

    Absent -> Open (punch in) -> Closed (punch out). A closed day accepts
    nothing further. Failures come back as `Result.fail`, never as exceptions.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        identity: Optional[IdentityService] = None,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._identity = identity
        self._clock = clock

    def _resolve_user(self, user_email: Optional[str]) -> Optional[str]:
        email = normalize_email(user_email)
        if email is None and self._identity is not None:
            email = normalize_email(self._identity.current_user_email())
        return email

    def get_record(self, user_email: Optional[str] = None, work_date: Optional[date] = None) -> Optional[AttendanceRecord]:
        email = self._resolve_user(user_email)
        if not email:
            return None
        return self._attendance.get_for_user_and_date(email, work_date or self._clock().date())

    def punch_in(self, user_email: Optional[str] = None, *, now: Optional[datetime] = None) -> Result[PunchInResult]:
        email = self._resolve_user(user_email)
        if not email:
            return Result.fail(ErrorCode.INVALID_USER, "User email is required")

        now = now or self._clock()
        today = now.date()

        state = day_state(self._attendance.get_for_user_and_date(email, today))
        if isinstance(state, (Open, Closed)):
            logger.info("Rejected punch-in for %s on %s: already punched in", email, today)
            return Result.fail(ErrorCode.ALREADY_PUNCHED_IN, "You have already punched in today")

        if isinstance(state, Corrupt):
            logger.warning("Replacing attendance record without punch-in for %s on %s", email, today)

        record = AttendanceRecord(
            work_date=today,
            punch_in=clock_string(now),
            punch_in_timestamp=utc_timestamp(now),
        )
        if not self._attendance.save(email, record):
            return Result.fail(ErrorCode.PERSISTENCE_FAILURE, "Failed to record punch in. Please try again.")

        logger.info("Punch-in recorded for %s at %s %s", email, record.date_key, record.punch_in)
        return Result.ok(
            "Punched in successfully",
            PunchInResult(punch_in_time=str(record.punch_in), date=record.date_key),
        )

    def punch_out(
        self,
        user_email: Optional[str] = None,
        notes: Optional[str] = "",
        *,
        now: Optional[datetime] = None,
    ) -> Result[PunchOutResult]:
        email = self._resolve_user(user_email)
        if not email:
            return Result.fail(ErrorCode.INVALID_USER, "User email is required")

        now = now or self._clock()
        today = now.date()

        state = day_state(self._attendance.get_for_user_and_date(email, today))
        if isinstance(state, Absent):
            return Result.fail(ErrorCode.NO_PUNCH_IN_FOUND, "No punch in record found for today")
        if isinstance(state, Closed) or state.record.punch_out:
            logger.info("Rejected punch-out for %s on %s: already punched out", email, today)
            return Result.fail(ErrorCode.ALREADY_PUNCHED_OUT, "You have already punched out today")
        if isinstance(state, Corrupt):
            logger.warning("Attendance record for %s on %s has no punch-in", email, today)
            return Result.fail(ErrorCode.PUNCH_IN_MISSING, "Please punch in first")

        punch_out = clock_string(now)
        working_hours = hours_between(state.punch_in, punch_out)
        record = state.record.closed(
            punch_out=punch_out,
            punch_out_timestamp=utc_timestamp(now),
            working_hours=working_hours,
            notes=clean_notes(notes),
        )
        if not self._attendance.save(email, record):
            return Result.fail(ErrorCode.PERSISTENCE_FAILURE, "Failed to record punch out. Please try again.")

        logger.info("Punch-out recorded for %s on %s (%.2f h)", email, record.date_key, working_hours)
        return Result.ok(
            "Punched out successfully",
            PunchOutResult(
                punch_out_time=punch_out,
                working_hours=working_hours,
                formatted_hours=format_hours(working_hours),
                date=record.date_key,
            ),
        )

    def get_status(self, user_email: Optional[str] = None, *, now: Optional[datetime] = None) -> StatusView:
        now = now or self._clock()
        email = self._resolve_user(user_email)
        record = self._attendance.get_for_user_and_date(email, now.date()) if email else None
        state = day_state(record)

        if isinstance(state, Absent):
            return StatusView(
                status=DayStatus.NOT_PUNCHED_IN,
                message="Not Punched In",
                can_punch_in=True,
                can_punch_out=False,
            )

        if isinstance(state, Open):
            return StatusView(
                status=DayStatus.PUNCHED_IN,
                message="Currently Working",
                can_punch_in=False,
                can_punch_out=True,
                punch_in_time=state.punch_in,
                working_hours=hours_between(state.punch_in, clock_string(now)),
            )

        if isinstance(state, Closed):
            return StatusView(
                status=DayStatus.COMPLETED,
                message="Work Completed",
                can_punch_in=False,
                can_punch_out=False,
                punch_in_time=state.record.punch_in,
                punch_out_time=state.record.punch_out,
                working_hours=state.record.working_hours,
            )

        return StatusView(
            status=DayStatus.UNKNOWN,
            message="Unknown Status",
            can_punch_in=True,
            can_punch_out=False,
        )
