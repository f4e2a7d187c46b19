from __future__ import annotations

import csv
import io
from datetime import date, timedelta
from typing import Iterable

from ..attendance.model import AttendanceRecord, HistoryEntry, MonthlySummary, WeeklySummary
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import (
    DateValue,
    format_hours,
    format_long_date,
    month_bounds,
    month_name,
    short_weekday,
    to_date,
    working_days_in_month,
)
from ..core.constants import CSV_HEADER, DAYS_PER_WEEK, FULL_DAY_HOURS, SHORT_DAY_HOURS


class AttendanceReportService:
    """History, weekly/monthly summaries and CSV export over a user's records.

    Read-only: nothing here writes to the store.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        full_day_hours: float = FULL_DAY_HOURS,
        short_day_hours: float = SHORT_DAY_HOURS,
    ):
        self._attendance = attendance
        self._full_day_hours = full_day_hours
        self._short_day_hours = short_day_hours

    def get_history(self, user_email: str, start_date: DateValue, end_date: DateValue) -> list[HistoryEntry]:
        """Records in [start_date, end_date], newest first."""
        start, end = to_date(start_date), to_date(end_date)
        if not user_email or start > end:
            return []

        records = self._attendance.get_range_for_user(user_email, start, end)
        entries = [self._to_entry(r) for r in records]
        entries.sort(key=lambda e: e.date, reverse=True)
        return entries

    def get_weekly_summary(self, user_email: str, week_start: DateValue) -> WeeklySummary:
        start = to_date(week_start)
        end = start + timedelta(days=DAYS_PER_WEEK - 1)
        history = self.get_history(user_email, start, end)
        totals = _Totals.of(history, full_day_hours=self._full_day_hours)

        return WeeklySummary(
            week_start=start.isoformat(),
            week_end=end.isoformat(),
            total_hours=totals.total_hours,
            formatted_total_hours=format_hours(totals.total_hours),
            average_hours=totals.average_hours,
            formatted_average_hours=totals.formatted_average,
            days_worked=totals.days_worked,
            days_present=totals.days_present,
            records=history,
        )

    def get_monthly_summary(self, user_email: str, year: int, month: int) -> MonthlySummary:
        start, end = month_bounds(year, month)
        history = self.get_history(user_email, start, end)
        totals = _Totals.of(history, full_day_hours=self._full_day_hours)

        return MonthlySummary(
            year=int(year),
            month=int(month),
            month_name=month_name(month),
            total_hours=totals.total_hours,
            formatted_total_hours=format_hours(totals.total_hours),
            average_hours=totals.average_hours,
            formatted_average_hours=totals.formatted_average,
            days_worked=totals.days_worked,
            days_present=totals.days_present,
            full_days=totals.full_days,
            working_days_in_month=working_days_in_month(year, month),
            records=history,
        )

    def export_csv(self, user_email: str, start_date: DateValue, end_date: DateValue) -> str:
        """Header row is bare; every data field is double-quoted."""
        out = io.StringIO()
        out.write(",".join(CSV_HEADER) + "\n")
        writer = csv.writer(out, quoting=csv.QUOTE_ALL, lineterminator="\n")
        for e in self.get_history(user_email, start_date, end_date):
            writer.writerow(
                [
                    e.date,
                    short_weekday(e.date),
                    e.punch_in or "",
                    e.punch_out or "",
                    e.formatted_hours,
                    e.status.value,
                    e.notes,
                ]
            )
        return out.getvalue()

    def _to_entry(self, r: AttendanceRecord) -> HistoryEntry:
        return HistoryEntry(
            date=r.date_key,
            formatted_date=format_long_date(r.work_date),
            punch_in=r.punch_in,
            punch_out=r.punch_out,
            working_hours=r.working_hours,
            formatted_hours=format_hours(r.working_hours),
            notes=r.notes,
            status=r.record_status(full_day_hours=self._full_day_hours, short_day_hours=self._short_day_hours),
        )


class _Totals:
    def __init__(self) -> None:
        self.total_hours = 0.0
        self.days_worked = 0
        self.days_present = 0
        self.full_days = 0

    @classmethod
    def of(cls, entries: Iterable[HistoryEntry], *, full_day_hours: float) -> "_Totals":
        t = cls()
        for e in entries:
            if not e.punch_in:
                continue
            t.days_present += 1
            if e.working_hours > 0:
                t.days_worked += 1
                t.total_hours += e.working_hours
                if e.working_hours >= full_day_hours:
                    t.full_days += 1
        return t

    @property
    def average_hours(self) -> float:
        return self.total_hours / self.days_worked if self.days_worked else 0.0

    @property
    def formatted_average(self) -> str:
        return format_hours(self.average_hours) if self.days_worked else "0 hours"


def default_week_start(today: date) -> date:
    """Monday of the week containing `today`."""
    return today - timedelta(days=today.weekday())


def default_range(today: date, days: int) -> tuple[date, date]:
    return today - timedelta(days=max(int(days), 1) - 1), today
