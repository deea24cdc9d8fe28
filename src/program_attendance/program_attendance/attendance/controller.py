from __future__ import annotations

from dataclasses import asdict
from datetime import datetime

from flask import Flask, jsonify, request

from ..common.http import current_role, current_user_id, domain_errors, login_required, organizer_required
from ..common.validators import require_non_empty
from ..container import Container
from ..core.enums import AttendanceOutcome
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    def _check_in(token: str):
        token = require_non_empty(token, "QR 코드")
        result = container.attendance_service.check_in_with_token(user_id=current_user_id(), token=token)
        return jsonify(result.to_dict()), (201 if result.success else 200)

    @app.route("/api/attendance/check", methods=["POST"], endpoint="api_attendance_check")
    @login_required
    @domain_errors
    def api_attendance_check():
        data = request.get_json(silent=True) or {}
        return _check_in(data.get("token", ""))

    # Target of the URL encoded in the QR code
    @app.route("/attendance/check", methods=["GET"], endpoint="attendance_check")
    @login_required
    @domain_errors
    def attendance_check():
        return _check_in(request.args.get("token", ""))

    @app.route(
        "/api/sessions/<session_id>/attendance/<participant_id>",
        methods=["PUT"],
        endpoint="mark_attendance",
    )
    @organizer_required
    @domain_errors
    def mark_attendance(session_id: str, participant_id: str):
        data = request.get_json(silent=True) or {}
        try:
            outcome = AttendanceOutcome(data["status"]) if data.get("status") else None
            checked_at = datetime.fromisoformat(data["checkedAt"]) if data.get("checkedAt") else None
        except ValueError:
            raise ValidationError("출석 상태 또는 시각 형식이 올바르지 않습니다")

        record = container.attendance_service.mark_manually(
            current_role=current_role(),
            session_id=session_id,
            participant_id=participant_id,
            outcome=outcome,
            checked_at=checked_at,
            note=data.get("note"),
        )
        return jsonify({"success": True, "status": record.outcome.value})

    @app.route("/api/sessions/<session_id>/attendance", methods=["GET"], endpoint="session_attendance")
    @organizer_required
    @domain_errors
    def session_attendance(session_id: str):
        return jsonify(container.attendance_service.session_attendances(current_role=current_role(), session_id=session_id))

    @app.route("/api/programs/<program_id>/attendance/me", methods=["GET"], endpoint="my_attendance")
    @login_required
    @domain_errors
    def my_attendance(program_id: str):
        rows = container.attendance_service.my_attendances(program_id=program_id, user_id=current_user_id())
        return jsonify([asdict(r) for r in rows])
