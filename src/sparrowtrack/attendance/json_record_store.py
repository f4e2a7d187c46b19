from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Union

from ..core.exceptions import RecordStoreError
from .repository import RecordMap

logger = logging.getLogger(__name__)


class JsonFileRecordStore:
    """Keeps the whole attendance mapping in one UTF-8 JSON file.

    Note: Writes go to a temp file next to the target and are renamed over it,
    so a failed write leaves the previous file intact.
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> RecordMap:
        if not self._path.exists():
            return {}
        try:
            with self._path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise RecordStoreError(f"Cannot read {self._path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise RecordStoreError(f"{self._path} does not contain a JSON object")
        return data

    def write(self, records: RecordMap) -> bool:
        tmp_name = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self._path.name}.", dir=str(self._path.parent))
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(records, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self._path)
            tmp_name = None
            return True
        except (OSError, TypeError, ValueError):
            logger.exception("Failed to write attendance records to %s", self._path)
            return False
        finally:
            if tmp_name and os.path.exists(tmp_name):
                os.remove(tmp_name)
