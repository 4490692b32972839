from __future__ import annotations

import hmac

from flask import Flask, request

from ..common.web import current_caller, json_body, json_ok
from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from ..container import Container
from ..tracks.service import to_view


def register(app: Flask, container: Container) -> None:
    def _require_tap_source() -> None:
        # Readers authenticate with the shared device token; staff may tap from a session.
        expected = app.config.get("DEVICE_TOKEN") or ""
        provided = request.headers.get("X-Device-Token") or ""
        if expected and provided and hmac.compare_digest(expected, provided):
            return
        if current_caller().role not in {Role.ADMIN, Role.TEACHER}:
            raise AuthorizationError("Taps must come from a reader or a staff session")

    @app.route("/api/taps", methods=["POST"], endpoint="api_taps")
    def tap():
        _require_tap_source()
        data = json_body()
        result = container.attendance_service.tap(
            user_id=str(data.get("userId") or ""),
            rfid_tag=str(data.get("rfidTag") or ""),
            location=str(data.get("location") or ""),
        )
        status = 201 if result.action == "TAP_IN" else 200
        return json_ok(status, action=result.action, log=to_view(result.track))
