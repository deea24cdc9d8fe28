from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import current_role, current_user_id, domain_errors, login_required, organizer_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/programs/<program_id>/refund/me", methods=["GET"], endpoint="my_refund")
    @login_required
    @domain_errors
    def my_refund(program_id: str):
        settlement = container.settlement_service.settlement(program_id=program_id, user_id=current_user_id())
        return jsonify(settlement.to_dict())

    @app.route("/api/programs/<program_id>/refund/me/policy", methods=["GET"], endpoint="my_policy_refund")
    @login_required
    @domain_errors
    def my_policy_refund(program_id: str):
        refund = container.settlement_service.policy_refund(program_id=program_id, user_id=current_user_id())
        return jsonify(refund.to_dict())

    @app.route("/api/programs/<program_id>/refunds", methods=["GET"], endpoint="program_refunds")
    @organizer_required
    @domain_errors
    def program_refunds(program_id: str):
        return jsonify(
            container.settlement_service.all_participants(current_role=current_role(), program_id=program_id)
        )

    @app.route("/api/programs/<program_id>/refunds/stats", methods=["GET"], endpoint="program_refund_stats")
    @organizer_required
    @domain_errors
    def program_refund_stats(program_id: str):
        stats = container.settlement_service.stats(current_role=current_role(), program_id=program_id)
        return jsonify(stats.to_dict())

    # Settlement under the program's deposit setting (tiered / per-session policy)
    @app.route("/api/programs/<program_id>/refunds/policy", methods=["GET"], endpoint="program_policy_refunds")
    @organizer_required
    @domain_errors
    def program_policy_refunds(program_id: str):
        return jsonify(
            container.settlement_service.policy_refunds(current_role=current_role(), program_id=program_id)
        )
