from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import now_local
from ..common.web import current_role, current_user_id, json_body, login_required, ok
from ..container import Container
from .service import requested_hours


def register(app: Flask, container: Container) -> None:
    @app.route("/api/vacation", endpoint="my_vacation_requests")
    @login_required
    def my_vacation_requests():
        items = container.vacation_service.list_for_user(current_user_id())
        return ok({"requests": [r.to_dict() for r in items]})

    @app.route("/api/vacation", methods=["POST"], endpoint="create_vacation_request")
    @login_required
    def create_vacation_request():
        data = json_body()
        request_id = container.vacation_service.create(
            user_id=current_user_id(),
            type=data.get("type", "vakantie"),
            start_date=data.get("start_date"),
            end_date=data.get("end_date"),
            reason=data.get("reason"),
        )
        hours = requested_hours(data.get("start_date"), data.get("end_date"))
        return ok({"id": request_id, "requested_hours": hours, "message": "Afwezigheidsaanvraag ingediend"}, 201)

    @app.route("/api/vacation/<int:request_id>", methods=["DELETE"], endpoint="delete_vacation_request")
    @login_required
    def delete_vacation_request(request_id: int):
        container.vacation_service.delete(user_id=current_user_id(), request_id=request_id)
        return ok({"message": "Aanvraag verwijderd"})

    @app.route("/api/vacation/all", endpoint="all_vacation_requests")
    @login_required
    def all_vacation_requests():
        items = container.vacation_service.list_all(current_role=current_role(), status=request.args.get("status"))
        return ok({"requests": [r.to_dict() for r in items]})

    @app.route("/api/vacation/<int:request_id>/review", methods=["POST"], endpoint="review_vacation_request")
    @login_required
    def review_vacation_request(request_id: int):
        data = json_body()
        reviewed = container.vacation_service.review(
            current_role=current_role(),
            reviewer_id=current_user_id(),
            request_id=request_id,
            status=data.get("status", ""),
            note=data.get("note"),
            now=now_local(),
        )
        return ok({"request": reviewed.to_dict()})
