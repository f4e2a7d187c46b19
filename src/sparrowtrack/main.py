from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .attendance.controller import register as register_attendance
from .attendance.repository import RecordStore
from .config import get_settings_module
from .container import build_container

logger = logging.getLogger(__name__)


def create_app(settings_module: Optional[str] = None, *, store: Optional[RecordStore] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    store_kind = getattr(settings, "RECORD_STORE", "memory")
    records_path = getattr(settings, "RECORDS_PATH", None)
    container = build_container(store=store, store_kind=store_kind, records_path=records_path)
    app.extensions["sparrowtrack"] = container

    logger.debug("settings=%s store=%s path=%s", settings_module, store_kind, records_path or "-")

    register_attendance(app, container)

    return app
