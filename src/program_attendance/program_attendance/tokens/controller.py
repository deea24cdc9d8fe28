from __future__ import annotations

import io

import qrcode
from flask import Flask, jsonify, send_file

from ..common.http import current_role, current_user_id, domain_errors, fail, organizer_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/sessions/<session_id>/checkin-token", methods=["POST"], endpoint="issue_checkin_token")
    @organizer_required
    @domain_errors
    def issue_checkin_token(session_id: str):
        issued = container.token_service.issue(
            current_role=current_role(),
            session_id=session_id,
            issued_by=current_user_id(),
        )
        return jsonify(issued.to_dict()), 201

    @app.route("/api/sessions/<session_id>/checkin-token", methods=["GET"], endpoint="checkin_token_status")
    @organizer_required
    @domain_errors
    def checkin_token_status(session_id: str):
        status = container.token_service.status(session_id, current_role=current_role())
        return jsonify(status.to_dict())

    # PNG for the projector / kiosk screen
    @app.route("/api/sessions/<session_id>/checkin-token.png", methods=["GET"], endpoint="checkin_token_png")
    @organizer_required
    @domain_errors
    def checkin_token_png(session_id: str):
        status = container.token_service.status(session_id, current_role=current_role())
        if not status.token:
            return fail("유효한 QR 코드가 없습니다. 새로 발급해 주세요", 404)

        img = qrcode.make(container.token_service.check_in_url(status.token))
        buf = io.BytesIO()
        img.save(buf, format="PNG")
        buf.seek(0)
        return send_file(buf, mimetype="image/png")
