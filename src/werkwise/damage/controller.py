from __future__ import annotations

from flask import Flask, request

from ..common.web import current_role, current_user_id, json_body, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.damage_report_service

    @app.route("/api/damage-reports", endpoint="list_damage_reports")
    @login_required
    def list_damage_reports():
        reports = service.list_reports(
            current_user_id=current_user_id(),
            current_role=current_role(),
            archived=request.args.get("archive") in ("1", "true"),
        )
        return ok({"reports": [r.to_dict() for r in reports]})

    @app.route("/api/damage-reports", methods=["POST"], endpoint="create_damage_report")
    @login_required
    def create_damage_report():
        report_id = service.create_report(
            current_user_id=current_user_id(), current_role=current_role(), data=json_body()
        )
        return ok({"id": report_id, "message": "Schademelding opgeslagen"}, 201)

    @app.route("/api/damage-reports/<int:report_id>", methods=["PUT"], endpoint="update_damage_report")
    @login_required
    def update_damage_report(report_id: int):
        service.update_report(report_id, current_role=current_role(), data=json_body())
        return ok({"message": "Schademelding opgeslagen"})

    @app.route("/api/damage-reports/<int:report_id>/status", methods=["PUT"], endpoint="set_damage_report_status")
    @login_required
    def set_damage_report_status(report_id: int):
        service.set_status(report_id, current_role=current_role(), status=json_body().get("status"))
        return ok()

    @app.route("/api/damage-reports/<int:report_id>", methods=["DELETE"], endpoint="delete_damage_report")
    @login_required
    def delete_damage_report(report_id: int):
        service.delete_report(report_id, current_role=current_role())
        return ok()
