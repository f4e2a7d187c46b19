from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.exceptions import RecordStoreError, ValidationError
from .model import AttendanceRecord

logger = logging.getLogger(__name__)

RecordMap = dict[str, dict[str, dict]]


class RecordStore(Protocol):
    """Persistence contract: the whole `email -> ISO date -> record` mapping.

    `read` may raise `RecordStoreError`; `write` reports failure by returning False.
    """

    def read(self) -> RecordMap:
        raise NotImplementedError

    def write(self, records: RecordMap) -> bool:
        raise NotImplementedError


class AttendanceRepository:
    """Typed access to a `RecordStore`.

    Reads never fail: a store that cannot be read is treated as empty.
    """

    def __init__(self, store: RecordStore):
        self._store = store

    def load(self) -> RecordMap:
        try:
            records = self._store.read()
        except RecordStoreError:
            logger.exception("Attendance records could not be read, continuing with an empty set")
            return {}
        if not isinstance(records, dict):
            logger.warning("Record store returned %s instead of a mapping, ignoring it", type(records).__name__)
            return {}
        return records

    def user_records(self, user_email: str) -> list[AttendanceRecord]:
        raw = self.load().get(user_email)
        if not isinstance(raw, dict):
            return []

        out: list[AttendanceRecord] = []
        for key, value in raw.items():
            if not isinstance(value, dict):
                logger.warning("Skipping malformed attendance entry %s for %s", key, user_email)
                continue
            try:
                out.append(AttendanceRecord.from_dict(value, key=key))
            except ValidationError:
                logger.warning("Skipping attendance entry %s for %s: bad date", key, user_email)
        return out

    def get_for_user_and_date(self, user_email: str, work_date: date) -> Optional[AttendanceRecord]:
        raw = self.load().get(user_email)
        if not isinstance(raw, dict):
            return None
        value = raw.get(work_date.isoformat())
        if not isinstance(value, dict):
            return None
        return AttendanceRecord.from_dict(value, key=work_date.isoformat())

    def get_range_for_user(self, user_email: str, start: date, end: date) -> Sequence[AttendanceRecord]:
        return [r for r in self.user_records(user_email) if start <= r.work_date <= end]

    def save(self, user_email: str, record: AttendanceRecord) -> bool:
        """Replace one user's entry for `record.work_date` and write the full mapping back.

        Unlike `load`, an unreadable store is not treated as empty here: writing
        would overwrite every other user's history, so the save is refused.
        """
        try:
            records = self._store.read()
        except RecordStoreError:
            logger.exception("Not saving attendance for %s on %s: records could not be read", user_email, record.date_key)
            return False
        if not isinstance(records, dict):
            logger.error("Not saving attendance for %s on %s: store did not return a mapping", user_email, record.date_key)
            return False

        user_map = records.get(user_email)
        if not isinstance(user_map, dict):
            user_map = {}
            records[user_email] = user_map
        user_map[record.date_key] = record.to_dict()

        if not self._store.write(records):
            logger.error("Failed to persist attendance for %s on %s", user_email, record.date_key)
            return False
        return True
