"""Example: drive the service layer directly (no Flask).

Controllers are a thin layer; the attendance rules live in the services.
"""

import importlib
from datetime import timedelta

from dotenv import load_dotenv

from sparrowtrack.common.datetime_utils import now_local
from sparrowtrack.config import get_settings_module
from sparrowtrack.container import build_container
from sparrowtrack.reports.service import default_week_start
from sparrowtrack.users.identity import StaticIdentity


def main():
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        identity=StaticIdentity("demo@example.com"),
        store_kind=settings.RECORD_STORE,
        records_path=settings.RECORDS_PATH,
    )
    attendance = container.attendance_service

    start = now_local().replace(hour=9, minute=0, second=0, microsecond=0)
    end = start + timedelta(hours=8, minutes=30)
    print(attendance.punch_in(now=start))
    print(attendance.punch_out(notes="example run", now=end))
    print(attendance.get_status(now=end))

    weekly = container.report_service.get_weekly_summary("demo@example.com", default_week_start(start.date()))
    print(weekly.formatted_total_hours, weekly.days_worked)


if __name__ == "__main__":
    main()
