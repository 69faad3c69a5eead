from __future__ import annotations

from flask import Flask, request

from ..common.responses import json_response
from ..container import Container
from ..core.exceptions import RemoteServiceError, ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/otp", methods=["POST"], endpoint="api_request_otp")
    def api_request_otp():
        data = request.get_json(silent=True) or {}
        employee_id = data.get("employeeId")
        try:
            otp = container.otp_service.request_otp(str(employee_id) if employee_id is not None else None)
        except ValidationError as e:
            return json_response({"success": False, "message": str(e)}, 400)
        except RemoteServiceError as e:
            return json_response({"success": False, "message": str(e)}, e.status_code or 502)
        return json_response(
            {"success": True, "otp": otp, "message": f"OTP for employee {employee_id} has been generated."}
        )

    @app.route("/api/attendance/verify-otp", methods=["POST"], endpoint="api_verify_otp")
    def api_verify_otp():
        data = request.get_json(silent=True) or {}
        try:
            result = container.otp_service.verify_otp(data.get("code"), data.get("action", "clockIn"))
        except ValidationError as e:
            return json_response({"success": False, "message": str(e)}, 400)
        except RemoteServiceError as e:
            return json_response({"success": False, "message": str(e)}, e.status_code or 502)

        verb = "in" if data.get("action", "clockIn") == "clockIn" else "out"
        return json_response(
            {
                "success": True,
                "message": f"Employee has been clocked {verb} successfully.",
                "result": result,
            }
        )
