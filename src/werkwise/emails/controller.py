from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local
from ..common.web import current_role, current_user_id, functions_token_required, json_body, login_required, ok
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    admin = container.email_admin_service

    @app.route("/api/email/templates", endpoint="list_email_templates")
    @login_required
    def list_email_templates():
        return ok({"templates": [t.to_dict() for t in admin.list_templates(current_role=current_role())]})

    @app.route("/api/email/templates", methods=["POST"], endpoint="create_email_template")
    @login_required
    def create_email_template():
        template_id = admin.create_template(current_role=current_role(), data=json_body())
        return ok({"id": template_id}, 201)

    @app.route("/api/email/templates/<int:template_id>", methods=["PUT"], endpoint="update_email_template")
    @login_required
    def update_email_template(template_id: int):
        admin.update_template(template_id, current_role=current_role(), data=json_body())
        return ok()

    @app.route("/api/email/templates/<int:template_id>", methods=["DELETE"], endpoint="delete_email_template")
    @login_required
    def delete_email_template(template_id: int):
        admin.delete_template(template_id, current_role=current_role())
        return ok()

    @app.route("/api/email/schedules", endpoint="list_email_schedules")
    @login_required
    def list_email_schedules():
        return ok({"schedules": [s.to_dict() for s in admin.list_schedules(current_role=current_role())]})

    @app.route("/api/email/schedules", methods=["POST"], endpoint="create_email_schedule")
    @login_required
    def create_email_schedule():
        schedule_id = admin.create_schedule(current_role=current_role(), data=json_body())
        return ok({"id": schedule_id}, 201)

    @app.route("/api/email/schedules/<int:schedule_id>", methods=["PUT"], endpoint="update_email_schedule")
    @login_required
    def update_email_schedule(schedule_id: int):
        admin.update_schedule(schedule_id, current_role=current_role(), data=json_body())
        return ok()

    @app.route("/api/email/schedules/<int:schedule_id>", methods=["DELETE"], endpoint="delete_email_schedule")
    @login_required
    def delete_email_schedule(schedule_id: int):
        admin.delete_schedule(schedule_id, current_role=current_role())
        return ok()

    @app.route("/api/email/schedules/<int:schedule_id>/test", methods=["POST"], endpoint="test_email_schedule")
    @login_required
    def test_email_schedule(schedule_id: int):
        admin.get_schedule(schedule_id, current_role=current_role())
        recipient = json_body().get("test_recipient") or container.user_service.get_user(current_user_id()).email
        summary = container.scheduled_email_dispatcher.run(
            test_mode=True, schedule_id=schedule_id, test_recipient=recipient, now=now_local()
        )
        return ok({"result": summary})

    @app.route("/api/email/logs", endpoint="list_email_logs")
    @login_required
    def list_email_logs():
        own_email = container.user_service.get_user(current_user_id()).email
        logs = admin.list_logs(
            current_role=current_role(), own_email=own_email, limit=request.args.get("limit", 200, type=int)
        )
        return ok({"logs": [log.to_dict() for log in logs]})

    @app.route("/functions/send-scheduled-emails", methods=["POST"], endpoint="send_scheduled_emails")
    @functions_token_required
    def send_scheduled_emails():
        body = json_body()
        now = now_local()
        try:
            summary = container.scheduled_email_dispatcher.run(
                test_mode=bool(body.get("test_mode", False)),
                schedule_id=body.get("schedule_id"),
                test_recipient=body.get("test_recipient"),
                now=now,
            )
        except Exception as e:
            logger.exception("Error in send-scheduled-emails")
            return jsonify({"error": "Internal server error", "details": str(e), "timestamp": now.isoformat()}), 500
        return jsonify(summary), 200
