from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .attendance.json_record_store import JsonFileRecordStore
from .attendance.memory_record_store import InMemoryRecordStore
from .attendance.repository import AttendanceRepository, RecordStore
from .attendance.service import AttendanceService
from .reports.service import AttendanceReportService
from .users.identity import IdentityService, SessionIdentity


@dataclass(frozen=True)
class Container:
    store: RecordStore
    identity: IdentityService

    attendance_repo: AttendanceRepository

    attendance_service: AttendanceService
    report_service: AttendanceReportService


def build_store(kind: str, records_path: Union[str, Path, None] = None) -> RecordStore:
    kind = (kind or "memory").lower()
    if kind == "json":
        if not records_path:
            raise ValueError("RECORDS_PATH is required for the json record store")
        return JsonFileRecordStore(records_path)
    if kind == "memory":
        return InMemoryRecordStore()
    raise ValueError(f"Unknown RECORD_STORE: {kind!r}")


def build_container(
    *,
    store: Optional[RecordStore] = None,
    identity: Optional[IdentityService] = None,
    store_kind: str = "memory",
    records_path: Union[str, Path, None] = None,
) -> Container:
    store = store or build_store(store_kind, records_path)
    identity = identity or SessionIdentity()

    attendance_repo = AttendanceRepository(store)

    attendance_service = AttendanceService(attendance_repo, identity)
    report_service = AttendanceReportService(attendance_repo)

    return Container(
        store=store,
        identity=identity,
        attendance_repo=attendance_repo,
        attendance_service=attendance_service,
        report_service=report_service,
    )
