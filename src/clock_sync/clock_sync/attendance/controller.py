from __future__ import annotations

import io
import logging
from datetime import date

from flask import Flask, request, send_file

from ..clock.location import ReportedLocationProvider
from ..common.datetime_utils import now_utc, parse_iso_date
from ..common.responses import json_response
from ..container import Container
from ..core.exceptions import RemoteServiceError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def _requested_day() -> date:
        value = request.args.get("date")
        return parse_iso_date(value) if value else now_utc().date()

    @app.route("/api/employees/active", methods=["GET"], endpoint="api_active_employees")
    def api_active_employees():
        try:
            employees = container.attendance_service.list_active_employees()
        except RemoteServiceError as e:
            return json_response({"success": False, "message": str(e)}, 502)
        return json_response({"success": True, "employees": [e.to_dict() for e in employees]})

    @app.route("/api/attendance", methods=["GET"], endpoint="api_attendance")
    def api_attendance():
        try:
            day = _requested_day()
        except ValueError:
            return json_response({"success": False, "message": "Invalid date, expected YYYY-MM-DD"}, 400)

        try:
            records = container.attendance_service.list_attendance(day, request.args.get("employeeId") or None)
        except RemoteServiceError as e:
            return json_response({"success": False, "message": str(e)}, 502)
        return json_response({"success": True, "records": [r.to_dict() for r in records]})

    @app.route("/api/attendance/stats", methods=["GET"], endpoint="api_attendance_stats")
    def api_attendance_stats():
        try:
            day = _requested_day()
        except ValueError:
            return json_response({"success": False, "message": "Invalid date, expected YYYY-MM-DD"}, 400)

        try:
            records = container.attendance_service.list_attendance(day)
            employees = container.attendance_service.list_active_employees()
        except RemoteServiceError as e:
            return json_response({"success": False, "message": str(e)}, 502)

        summary = container.stats_service.summarize(records, employees)
        return json_response({"success": True, "date": day.strftime("%Y-%m-%d"), "stats": summary.to_dict()})

    @app.route("/api/attendance/qr.png", methods=["GET"], endpoint="api_attendance_qr")
    def api_attendance_qr():
        """Generate and return the company check-in QR code image"""
        try:
            use_location = request.args.get("useLocation") in {"1", "true", "yes"}
            provider = None
            if "lat" in request.args and "lng" in request.args:
                provider = ReportedLocationProvider({"lat": request.args["lat"], "lng": request.args["lng"]})

            payload = container.qr_service.build_payload(use_location=use_location, provider=provider)
            png = container.qr_service.render_png(payload)
            return send_file(io.BytesIO(png), mimetype="image/png")
        except Exception:
            logger.exception("QR generation failed")
            return json_response({"success": False, "message": "Failed to generate QR code"}, 500)
