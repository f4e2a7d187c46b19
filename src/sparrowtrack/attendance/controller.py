from __future__ import annotations

import logging
from dataclasses import asdict
from functools import wraps

from flask import Flask, g, jsonify, request

from ..common.datetime_utils import now_local, to_date
from ..common.validators import normalize_email
from ..container import Container
from ..core.constants import DEFAULT_HISTORY_DAYS
from ..core.enums import ErrorCode
from ..core.exceptions import ValidationError
from ..core.result import Result
from ..reports.service import default_range, default_week_start

logger = logging.getLogger(__name__)

_ERROR_STATUS = {
    ErrorCode.INVALID_USER: 401,
    ErrorCode.PERSISTENCE_FAILURE: 503,
}


def register(app: Flask, container: Container) -> None:
    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            email = normalize_email(container.identity.current_user_email())
            if not email:
                return jsonify({"success": False, "error": ErrorCode.INVALID_USER.value, "message": "Please sign in first"}), 401
            g.user_email = email
            return view(*args, **kwargs)

        return wrapper

    def _result_response(result: Result):
        body = {"success": result.success, "message": result.message}
        if result.success:
            body["data"] = asdict(result.payload) if result.payload is not None else None
            return jsonify(body), 200

        body["error"] = result.error.value if result.error else None
        return jsonify(body), _ERROR_STATUS.get(result.error, 409)

    def _date_range():
        start_default, end_default = default_range(now_local().date(), DEFAULT_HISTORY_DAYS)
        start = to_date(request.args.get("start") or start_default)
        end = to_date(request.args.get("end") or end_default)
        return start, end

    @app.errorhandler(ValidationError)
    def handle_validation_error(e: ValidationError):
        return jsonify({"success": False, "message": str(e)}), 400

    @app.route("/api/attendance/punch-in", methods=["POST"], endpoint="punch_in")
    @login_required
    def punch_in():
        return _result_response(container.attendance_service.punch_in(g.user_email))

    @app.route("/api/attendance/punch-out", methods=["POST"], endpoint="punch_out")
    @login_required
    def punch_out():
        payload = request.get_json(silent=True)
        if payload is None:
            payload = {}
        if not isinstance(payload, dict):
            raise ValidationError("Request body must be a JSON object")
        notes = payload.get("notes", request.form.get("notes", ""))
        if notes is not None and not isinstance(notes, str):
            raise ValidationError("notes must be a string")
        return _result_response(container.attendance_service.punch_out(g.user_email, notes))

    @app.route("/api/attendance/status", methods=["GET"], endpoint="attendance_status")
    @login_required
    def attendance_status():
        view = container.attendance_service.get_status(g.user_email)
        return jsonify(asdict(view))

    @app.route("/api/attendance/history", methods=["GET"], endpoint="attendance_history")
    @login_required
    def attendance_history():
        start, end = _date_range()
        rows = container.report_service.get_history(g.user_email, start, end)
        return jsonify({"start": start.isoformat(), "end": end.isoformat(), "records": [asdict(r) for r in rows]})

    @app.route("/api/attendance/weekly", methods=["GET"], endpoint="attendance_weekly")
    @login_required
    def attendance_weekly():
        week_start = request.args.get("week_start") or default_week_start(now_local().date())
        summary = container.report_service.get_weekly_summary(g.user_email, week_start)
        return jsonify(asdict(summary))

    @app.route("/api/attendance/monthly", methods=["GET"], endpoint="attendance_monthly")
    @login_required
    def attendance_monthly():
        today = now_local().date()
        try:
            year = int(request.args.get("year") or today.year)
            month = int(request.args.get("month") or today.month)
        except ValueError:
            raise ValidationError("year and month must be integers")
        summary = container.report_service.get_monthly_summary(g.user_email, year, month)
        return jsonify(asdict(summary))

    @app.route("/api/attendance/export.csv", methods=["GET"], endpoint="attendance_export_csv")
    @login_required
    def attendance_export_csv():
        start, end = _date_range()
        text = container.report_service.export_csv(g.user_email, start, end)
        logger.info("CSV export for %s (%s..%s)", g.user_email, start, end)

        filename = f"attendance_{start.strftime('%Y%m%d')}_{end.strftime('%Y%m%d')}.csv"
        return app.response_class(
            text.encode("utf-8"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )
