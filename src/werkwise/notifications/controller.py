from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local
from ..common.web import current_user_id, functions_token_required, login_required, ok
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/notifications", endpoint="list_notifications")
    @login_required
    def list_notifications():
        items = container.notification_service.list_for_user(current_user_id(), status=request.args.get("status"))
        return ok({"notifications": [n.to_dict() for n in items]})

    @app.route("/api/notifications/unread-count", endpoint="unread_notifications")
    @login_required
    def unread_notifications():
        return ok({"unread": container.notification_service.unread_count(current_user_id())})

    @app.route("/api/notifications/<int:notification_id>/read", methods=["POST"], endpoint="read_notification")
    @login_required
    def read_notification(notification_id: int):
        container.notification_service.mark_read(user_id=current_user_id(), notification_id=notification_id)
        return ok()

    @app.route("/api/notifications/read-all", methods=["POST"], endpoint="read_all_notifications")
    @login_required
    def read_all_notifications():
        updated = container.notification_service.mark_all_read(user_id=current_user_id())
        return ok({"updated": updated})

    @app.route(
        "/api/notifications/<int:notification_id>/archive", methods=["POST"], endpoint="archive_notification"
    )
    @login_required
    def archive_notification(notification_id: int):
        container.notification_service.archive(user_id=current_user_id(), notification_id=notification_id)
        return ok()

    @app.route("/functions/check-user-activity", methods=["POST"], endpoint="check_user_activity")
    @functions_token_required
    def check_user_activity():
        now = now_local()
        try:
            summary = container.activity_checker.run(now)
        except Exception as e:
            logger.exception("Error in user activity check")
            return jsonify({"error": "Internal server error", "details": str(e), "timestamp": now.isoformat()}), 500
        return jsonify(summary.to_dict()), 200
