from __future__ import annotations

import logging

from flask import Flask, request

from ..common.responses import json_response
from ..container import Container
from ..core.enums import ClockState
from .location import ReportedLocationProvider
from .model import DrainReport

logger = logging.getLogger(__name__)

_STATUS_CODES = {
    ClockState.SUCCEEDED: 200,
    ClockState.QUEUED_OFFLINE: 202,
    ClockState.REJECTED: 400,
}


def _drain_dict(report: DrainReport | None) -> dict | None:
    if report is None:
        return None
    return {
        "skipped": report.skipped,
        "recovered": [i.to_dict() for i in report.recovered],
        "failed": [i.to_dict() for i in report.failed],
        "deadLettered": [i.to_dict() for i in report.dead_lettered],
    }


def register(app: Flask, container: Container) -> None:
    controller = container.clock_controller

    @app.route("/api/attendance/clock", methods=["POST"], endpoint="api_clock")
    def api_clock():
        """Clock an employee in or out; queues the event if the service is down."""
        try:
            data = request.get_json(silent=True) or {}
            use_location = bool(data.get("useLocation", False))
            provider = ReportedLocationProvider(data.get("location")) if "location" in data else None

            outcome = controller.handle_clock_action(
                data.get("employeeId"),
                data.get("action", "clockIn"),
                use_location=use_location,
                provider=provider,
            )
            return json_response(
                {
                    "success": outcome.state is not ClockState.REJECTED,
                    "state": outcome.state.value,
                    "message": outcome.message,
                    "event": outcome.event.to_payload() if outcome.event else None,
                    "queued": len(controller.queue),
                    "sync": _drain_dict(outcome.drain),
                },
                _STATUS_CODES[outcome.state],
            )
        except Exception:
            logger.exception("Clock action failed")
            return json_response({"success": False, "message": "System error while recording attendance"}, 500)

    @app.route("/api/attendance/sync", methods=["POST"], endpoint="api_clock_sync")
    def api_clock_sync():
        report = controller.sync()
        return json_response(
            {
                "success": not report.skipped,
                "message": "Sync already in progress" if report.skipped else f"Attempted {report.attempted} event(s)",
                "queued": len(controller.queue),
                "sync": _drain_dict(report),
            }
        )

    @app.route("/api/attendance/queue", methods=["GET"], endpoint="api_clock_queue")
    def api_clock_queue():
        return json_response(
            {
                "success": True,
                "syncing": controller.queue.is_syncing,
                "queued": [i.to_dict() for i in controller.queue.snapshot()],
                "deadLetters": [i.to_dict() for i in controller.queue.dead_letters],
            }
        )
