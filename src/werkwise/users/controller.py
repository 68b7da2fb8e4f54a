from __future__ import annotations

from datetime import timedelta

from flask import Flask, session

from ..common.web import current_role, current_user_id, json_body, login_required, ok
from ..container import Container
from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from .permissions import is_office_or_superuser


def register(app: Flask, container: Container) -> None:
    @app.route("/api/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        s_user = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))

        session.permanent = bool(data.get("remember_me"))
        app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)

        session["user_id"] = s_user.user_id
        session["name"] = s_user.naam
        session["role"] = s_user.role.value
        return ok({"user": {"id": s_user.user_id, "naam": s_user.naam, "email": s_user.email, "role": s_user.role.value}})

    @app.route("/api/logout", methods=["POST"], endpoint="logout")
    def logout():
        for key in ("user_id", "name", "role"):
            session.pop(key, None)
        return ok({"message": "Uitgelogd"})

    @app.route("/api/me", endpoint="me")
    @login_required
    def me():
        profile = container.user_service.get_user(current_user_id())
        return ok({"user": profile.to_public_dict()})

    @app.route("/api/me/vacation-balance", endpoint="my_vacation_balance")
    @login_required
    def my_vacation_balance():
        return ok({"balance": container.user_service.vacation_balance(current_user_id()).to_dict()})

    @app.route("/api/users", endpoint="list_users")
    @login_required
    def list_users():
        users = container.user_service.list_users(current_role=current_role())
        return ok({"users": [u.to_public_dict() for u in users]})

    @app.route("/api/users", methods=["POST"], endpoint="create_user")
    @login_required
    def create_user():
        data = json_body()
        try:
            role = Role(data.get("role") or Role.MEDEWERKER.value)
        except ValueError:
            raise ValidationError("Ongeldige rol")

        user_id = container.user_service.create_user(
            current_role=current_role(),
            naam=data.get("naam", ""),
            email=data.get("email", ""),
            password=data.get("password", ""),
            role=role,
            hourly_rate_sale=data.get("hourly_rate_sale"),
            hourly_rate_purchase=data.get("hourly_rate_purchase"),
        )
        return ok({"id": user_id, "message": "Gebruiker aangemaakt"}, 201)

    @app.route("/api/users/<int:user_id>/hourly-rate", methods=["PUT"], endpoint="update_hourly_rate")
    @login_required
    def update_hourly_rate(user_id: int):
        container.user_service.update_hourly_rates(current_role=current_role(), user_id=user_id, data=json_body())
        return ok({"message": "Uurtarief bijgewerkt"})

    @app.route("/api/users/<int:user_id>/vacation-hours", methods=["PUT"], endpoint="update_vacation_hours")
    @login_required
    def update_vacation_hours(user_id: int):
        data = json_body()
        container.user_service.update_vacation_hours(
            current_role=current_role(),
            user_id=user_id,
            total=data.get("vacation_hours_total"),
            used=data.get("vacation_hours_used"),
        )
        return ok({"message": "Vakantie-uren bijgewerkt"})

    @app.route("/api/users/<int:user_id>", methods=["DELETE"], endpoint="delete_user")
    @login_required
    def delete_user(user_id: int):
        container.user_service.delete_user(
            current_role=current_role(),
            current_user_id=current_user_id(),
            user_id=user_id,
        )
        return ok({"message": "Gebruiker verwijderd"})

    @app.route("/api/users/<int:user_id>/vacation-balance", endpoint="user_vacation_balance")
    @login_required
    def user_vacation_balance(user_id: int):
        if user_id != current_user_id() and not is_office_or_superuser(current_role()):
            raise AuthorizationError("Geen toegang")
        return ok({"balance": container.user_service.vacation_balance(user_id).to_dict()})
