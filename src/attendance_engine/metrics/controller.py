from __future__ import annotations

import logging
from datetime import timedelta

from flask import Flask, jsonify, request

from ..common.datetime_utils import local_date, parse_iso_instant, to_utc
from ..common.validators import require_date, require_positive_id, require_year_month
from ..container import Container
from ..core.exceptions import ScheduleConflict, StoreUnavailable, ValidationError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.errorhandler(StoreUnavailable)
    def store_unavailable(exc: StoreUnavailable):
        logger.error("Store unavailable: %s", exc)
        return jsonify({"error": "data_unavailable", "detail": "Data temporarily unavailable"}), 503

    @app.errorhandler(ScheduleConflict)
    def schedule_conflict(exc: ScheduleConflict):
        logger.error("Schedule conflict: %s (entries=%s)", exc, list(exc.entry_ids))
        return (
            jsonify(
                {
                    "error": "data_unavailable",
                    "detail": "Schedule data is inconsistent",
                    "employee_id": exc.employee_id,
                    "entry_ids": list(exc.entry_ids),
                }
            ),
            503,
        )

    @app.errorhandler(ValidationError)
    def validation_error(exc: ValidationError):
        return jsonify({"error": "invalid_request", "detail": str(exc)}), 400

    @app.route("/api/dashboard/metrics", methods=["GET"], endpoint="dashboard_metrics")
    def dashboard_metrics():
        snapshot = container.metrics_publisher.dashboard_snapshot()
        return jsonify(snapshot.to_dict())

    @app.route("/api/employees/<employee_id>/attendance", methods=["GET"], endpoint="employee_attendance")
    def employee_attendance(employee_id: str):
        emp_id = require_positive_id(employee_id, "employee_id")
        work_date = require_date(request.args.get("date"), "date")
        day = container.attendance_service.daily_attendance(emp_id, work_date)
        return jsonify(day.to_dict())

    @app.route("/api/employees/<employee_id>/balance", methods=["GET"], endpoint="employee_balance")
    def employee_balance(employee_id: str):
        emp_id = require_positive_id(employee_id, "employee_id")
        year_month = require_year_month(request.args.get("month"), "month")
        balance = container.balance_service.monthly_balance(emp_id, year_month)
        return jsonify(balance.to_dict())

    @app.route("/api/punches/arrived", methods=["POST"], endpoint="punch_arrived")
    def punch_arrived():
        """Cache invalidation hook: the punch itself is stored elsewhere."""

        payload = request.get_json(silent=True) or {}
        emp_id = require_positive_id(payload.get("employee_id"), "employee_id")
        raw = payload.get("punched_at")
        if not raw:
            raise ValidationError("punched_at is required")
        try:
            punched_at = to_utc(parse_iso_instant(str(raw)), container.policy.tz)
        except ValueError:
            raise ValidationError("punched_at must be an ISO-8601 timestamp") from None

        day = local_date(punched_at, container.policy.tz)
        dropped = container.cache.invalidate(emp_id, day)
        # A punch after midnight may close an interval that started the day before.
        dropped += container.cache.invalidate(emp_id, day - timedelta(days=1))
        return jsonify({"employee_id": emp_id, "date": day.isoformat(), "invalidated": dropped}), 202
