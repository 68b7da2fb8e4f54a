from __future__ import annotations

from flask import Flask

from ..common.datetime_utils import now_local
from ..common.web import arg_date, arg_int, current_role, current_user_id, json_body, login_required, ok
from ..container import Container
from .service import hours_per_user


def register(app: Flask, container: Container) -> None:
    @app.route("/api/registrations", methods=["POST"], endpoint="submit_registration")
    @login_required
    def submit_registration():
        data = json_body()
        ids = container.registration_service.submit(
            user_id=current_user_id(),
            datum=data.get("datum"),
            project_id=data.get("project_id"),
            work_lines=data.get("work_lines") or [],
            kilometers=data.get("kilometers"),
            progress=data.get("voortgang"),
            now=now_local(),
        )
        return ok({"ids": ids, "message": "Urenregistratie succesvol opgeslagen!"}, 201)

    @app.route("/api/registrations/mine", endpoint="my_registrations")
    @login_required
    def my_registrations():
        regs = container.registration_service.list_for_user(
            current_user_id(), date_from=arg_date("from"), date_to=arg_date("to")
        )
        return ok({"registrations": [r.to_dict() for r in regs]})

    @app.route("/api/registrations", endpoint="list_registrations")
    @login_required
    def list_registrations():
        regs = container.registration_service.list_all(
            current_role=current_role(),
            user_id=arg_int("user_id"),
            project_id=arg_int("project_id"),
            date_from=arg_date("from"),
            date_to=arg_date("to"),
        )
        return ok({"registrations": [r.to_dict() for r in regs]})

    @app.route("/api/registrations/hours-per-user", endpoint="registration_hours_per_user")
    @login_required
    def registration_hours_per_user():
        regs = container.registration_service.list_all(
            current_role=current_role(),
            project_id=arg_int("project_id"),
            date_from=arg_date("from"),
            date_to=arg_date("to"),
        )
        return ok({"users": [u.to_dict() for u in hours_per_user(regs)]})

    @app.route("/api/registrations/<int:registration_id>", methods=["PUT"], endpoint="update_registration")
    @login_required
    def update_registration(registration_id: int):
        container.registration_service.update(
            current_user_id=current_user_id(),
            current_role=current_role(),
            registration_id=registration_id,
            data=json_body(),
        )
        return ok({"message": "Registratie succesvol bijgewerkt!"})

    @app.route("/api/registrations/<int:registration_id>", methods=["DELETE"], endpoint="delete_registration")
    @login_required
    def delete_registration(registration_id: int):
        container.registration_service.delete(
            current_user_id=current_user_id(),
            current_role=current_role(),
            registration_id=registration_id,
        )
        return ok({"message": "Registratie verwijderd"})
