from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from sparrowtrack.attendance.memory_record_store import InMemoryRecordStore
from sparrowtrack.attendance.repository import AttendanceRepository
from sparrowtrack.attendance.service import AttendanceService
from sparrowtrack.core.enums import DayStatus, ErrorCode
from sparrowtrack.core.exceptions import RecordStoreError
from sparrowtrack.users.identity import StaticIdentity

USER = "ana@example.com"


class UnreadableStore:
    """Read always fails; writes are kept so we can inspect them."""

    def __init__(self):
        self.written = None

    def read(self):
        raise RecordStoreError("disk on fire")

    def write(self, records):
        self.written = records
        return True


class FlakyStore(InMemoryRecordStore):
    """Reads raise while `broken` is set."""

    broken = False

    def read(self):
        if self.broken:
            raise RecordStoreError("temporarily unreadable")
        return super().read()


@pytest.fixture
def store():
    return InMemoryRecordStore()


@pytest.fixture
def svc(store):
    return AttendanceService(AttendanceRepository(store))


def _at(base: datetime, hour: int, minute: int = 0) -> datetime:
    return base.replace(hour=hour, minute=minute, second=0)


def test_punch_in_creates_open_record(svc, store, fixed_now):
    result = svc.punch_in(USER, now=fixed_now)

    assert result.success
    assert result.message == "Punched in successfully"
    assert result.payload.punch_in_time == "09:00:00"
    assert result.payload.date == "2024-01-15"

    raw = store.read()[USER]["2024-01-15"]
    assert raw["punchIn"] == "09:00:00"
    assert raw["punchOut"] is None
    assert raw["punchOutTimestamp"] is None
    assert raw["workingHours"] == 0
    assert raw["notes"] == ""
    assert raw["punchInTimestamp"].endswith("Z")


def test_full_day_scenario(svc, store, fixed_now):
    svc.punch_in(USER, now=fixed_now)
    result = svc.punch_out(USER, "  shipped the release  ", now=_at(fixed_now, 17, 30))

    assert result.success
    assert result.payload.working_hours == 8.5
    assert result.payload.formatted_hours == "8h 30m"
    assert result.payload.punch_out_time == "17:30:00"

    raw = store.read()[USER]["2024-01-15"]
    assert raw["punchOut"] == "17:30:00"
    assert raw["workingHours"] == 8.5
    assert raw["notes"] == "shipped the release"


def test_closed_day_rejects_further_punches(svc, fixed_now):
    svc.punch_in(USER, now=fixed_now)
    svc.punch_out(USER, now=_at(fixed_now, 17))

    for minutes in (1, 30, 120):
        later = _at(fixed_now, 17) + timedelta(minutes=minutes)
        assert svc.punch_in(USER, now=later).error == ErrorCode.ALREADY_PUNCHED_IN
        assert svc.punch_out(USER, now=later).error == ErrorCode.ALREADY_PUNCHED_OUT


def test_second_punch_in_while_open_is_rejected(svc, fixed_now):
    assert svc.punch_in(USER, now=fixed_now)
    result = svc.punch_in(USER, now=_at(fixed_now, 10))

    assert not result.success
    assert result.error == ErrorCode.ALREADY_PUNCHED_IN
    assert result.payload is None


def test_punch_out_without_punch_in(svc, fixed_now):
    result = svc.punch_out(USER, now=fixed_now)

    assert result.error == ErrorCode.NO_PUNCH_IN_FOUND


@pytest.mark.parametrize("user", [None, "", "   "])
def test_missing_user_never_touches_store(store, svc, fixed_now, user):
    assert svc.punch_in(user, now=fixed_now).error == ErrorCode.INVALID_USER
    assert svc.punch_out(user, now=fixed_now).error == ErrorCode.INVALID_USER
    assert store.write_count == 0


def test_identity_supplies_default_user(store, fixed_now):
    svc = AttendanceService(AttendanceRepository(store), StaticIdentity("bo@example.com"))

    assert svc.punch_in(now=fixed_now).success
    assert "bo@example.com" in store.read()
    assert svc.get_status(now=_at(fixed_now, 10)).status == DayStatus.PUNCHED_IN


def test_failed_punch_in_write_leaves_no_record(store, svc, fixed_now):
    store.fail_writes = True

    result = svc.punch_in(USER, now=fixed_now)

    assert result.error == ErrorCode.PERSISTENCE_FAILURE
    assert store.read() == {}
    assert svc.get_status(USER, now=fixed_now).status == DayStatus.NOT_PUNCHED_IN


def test_failed_punch_out_write_keeps_day_open(store, svc, fixed_now):
    svc.punch_in(USER, now=fixed_now)
    store.fail_writes = True

    result = svc.punch_out(USER, now=_at(fixed_now, 17))

    assert result.error == ErrorCode.PERSISTENCE_FAILURE
    assert store.read()[USER]["2024-01-15"]["punchOut"] is None
    assert svc.get_status(USER, now=_at(fixed_now, 17)).status == DayStatus.PUNCHED_IN


def test_record_without_punch_in_is_guarded(fixed_now):
    store = InMemoryRecordStore({USER: {"2024-01-15": {"date": "2024-01-15", "punchIn": None, "punchOut": None}}})
    svc = AttendanceService(AttendanceRepository(store))

    assert svc.get_status(USER, now=fixed_now).status == DayStatus.UNKNOWN
    assert svc.punch_out(USER, now=fixed_now).error == ErrorCode.PUNCH_IN_MISSING
    # punching in repairs the day
    assert svc.punch_in(USER, now=fixed_now).success
    assert store.read()[USER]["2024-01-15"]["punchIn"] == "09:00:00"


def test_record_with_only_punch_out_reports_already_punched_out(fixed_now):
    store = InMemoryRecordStore({USER: {"2024-01-15": {"date": "2024-01-15", "punchOut": "17:00:00"}}})
    svc = AttendanceService(AttendanceRepository(store))

    assert svc.punch_out(USER, now=fixed_now).error == ErrorCode.ALREADY_PUNCHED_OUT


def test_punch_out_before_punch_in_time_counts_zero_hours(fixed_now):
    store = InMemoryRecordStore({USER: {"2024-01-15": {"date": "2024-01-15", "punchIn": "18:00:00"}}})
    svc = AttendanceService(AttendanceRepository(store))

    result = svc.punch_out(USER, now=fixed_now)

    assert result.success
    assert result.payload.working_hours == 0
    assert result.payload.formatted_hours == "0 minutes"


def test_status_while_working_reports_live_hours(svc, fixed_now):
    svc.punch_in(USER, now=fixed_now)

    first = svc.get_status(USER, now=_at(fixed_now, 10, 30))
    second = svc.get_status(USER, now=_at(fixed_now, 11))

    assert first.status == DayStatus.PUNCHED_IN
    assert first.can_punch_out and not first.can_punch_in
    assert first.punch_in_time == "09:00:00"
    assert first.working_hours == 1.5
    assert second.working_hours >= first.working_hours > 0


def test_status_completed_and_not_punched_in(svc, fixed_now):
    assert svc.get_status(USER, now=fixed_now).status == DayStatus.NOT_PUNCHED_IN

    svc.punch_in(USER, now=fixed_now)
    svc.punch_out(USER, now=_at(fixed_now, 13))
    view = svc.get_status(USER, now=_at(fixed_now, 18))

    assert view.status == DayStatus.COMPLETED
    assert view.message == "Work Completed"
    assert view.punch_out_time == "13:00:00"
    assert view.working_hours == 4.0
    assert not view.can_punch_in and not view.can_punch_out


def test_next_day_starts_fresh(svc, fixed_now):
    svc.punch_in(USER, now=fixed_now)
    svc.punch_out(USER, now=_at(fixed_now, 17))

    tomorrow = fixed_now + timedelta(days=1)
    assert svc.get_status(USER, now=tomorrow).status == DayStatus.NOT_PUNCHED_IN
    assert svc.punch_in(USER, now=tomorrow).success


def test_unreadable_store_degrades_queries_but_refuses_writes(fixed_now):
    store = UnreadableStore()
    svc = AttendanceService(AttendanceRepository(store))

    assert svc.get_status(USER, now=fixed_now).status == DayStatus.NOT_PUNCHED_IN
    result = svc.punch_in(USER, now=fixed_now)

    assert result.error == ErrorCode.PERSISTENCE_FAILURE
    assert store.written is None


def test_read_failure_during_save_keeps_other_users_history(fixed_now):
    store = FlakyStore({"bob@example.com": {"2024-01-12": {"date": "2024-01-12", "punchIn": "08:00:00"}}})
    svc = AttendanceService(AttendanceRepository(store))
    store.broken = True

    result = svc.punch_in(USER, now=fixed_now)

    assert result.error == ErrorCode.PERSISTENCE_FAILURE
    store.broken = False
    assert list(store.read()) == ["bob@example.com"]
    assert store.write_count == 0


def test_get_record(svc, fixed_now):
    assert svc.get_record(USER, fixed_now.date()) is None

    svc.punch_in(USER, now=fixed_now)
    rec = svc.get_record(USER, fixed_now.date())

    assert rec is not None
    assert rec.punch_in == "09:00:00"
    assert svc.get_record("", fixed_now.date()) is None


@pytest.mark.parametrize("punch_in", ["9:00 AM", "noon", "25:00:00"])
def test_unparseable_punch_in_is_treated_as_corrupt(fixed_now, punch_in):
    store = InMemoryRecordStore({USER: {"2024-01-15": {"date": "2024-01-15", "punchIn": punch_in}}})
    svc = AttendanceService(AttendanceRepository(store))

    assert svc.get_status(USER, now=fixed_now).status == DayStatus.UNKNOWN
    assert svc.punch_out(USER, now=fixed_now).error == ErrorCode.PUNCH_IN_MISSING
    assert store.write_count == 0
