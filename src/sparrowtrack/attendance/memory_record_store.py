from __future__ import annotations

import copy
from typing import Optional

from .repository import RecordMap


class InMemoryRecordStore:
    """Process-local store. Copies on every read and write so no caller shares nested dicts with it."""

    def __init__(self, records: Optional[RecordMap] = None, *, fail_writes: bool = False):
        self._records: RecordMap = copy.deepcopy(records) if records else {}
        self.fail_writes = fail_writes
        self.write_count = 0

    def read(self) -> RecordMap:
        return copy.deepcopy(self._records)

    def write(self, records: RecordMap) -> bool:
        if self.fail_writes:
            return False
        self._records = copy.deepcopy(records)
        self.write_count += 1
        return True
