"""Shared helpers for the JSON controllers."""
from __future__ import annotations

import logging
from datetime import date
from functools import wraps
from typing import Any, Optional

from flask import Flask, current_app, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import OFFICE_ROLES, AgentRole, Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)


def ok(payload: Optional[dict] = None, status: int = 200):
    body = {"success": True}
    body.update(payload or {})
    return jsonify(body), status


def fail(message: str, status: int = 400):
    return jsonify({"success": False, "message": message}), status


def current_role() -> Role:
    return Role(session.get("role"))


def current_user_id() -> int:
    return int(session["user_id"])


def current_agent_id() -> int:
    return int(session["agent_id"])


def is_agent_admin() -> bool:
    return session.get("agent_role") == AgentRole.ADMIN.value


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return fail("Niet ingelogd", 401)
        return view(*args, **kwargs)

    return wrapper


def office_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return fail("Niet ingelogd", 401)
        role = session.get("role")
        if role not in {r.value for r in OFFICE_ROLES} and role != Role.SUPERUSER.value:
            return fail("Geen toegang", 403)
        return view(*args, **kwargs)

    return wrapper


def agent_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "agent_id" not in session:
            return fail("Niet ingelogd", 401)
        return view(*args, **kwargs)

    return wrapper


def agent_admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "agent_id" not in session:
            return fail("Niet ingelogd", 401)
        if not is_agent_admin():
            return fail("Geen toegang", 403)
        return view(*args, **kwargs)

    return wrapper


def functions_token_required(view):
    """Guard for the /functions/* endpoints (cron and webhooks).

    When FUNCTIONS_TOKEN is configured the caller must send it as a bearer token.
    """

    @wraps(view)
    def wrapper(*args, **kwargs):
        expected = current_app.config.get("FUNCTIONS_TOKEN") or ""
        if expected:
            header = request.headers.get("Authorization", "")
            if header != f"Bearer {expected}":
                return jsonify({"error": "Unauthorized"}), 401
        return view(*args, **kwargs)

    return wrapper


def json_body() -> dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def arg_date(name: str, default: Optional[date] = None) -> Optional[date]:
    value = request.args.get(name)
    if not value:
        return default
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"Ongeldige datum voor '{name}' (YYYY-MM-DD)")


def arg_int(name: str) -> Optional[int]:
    value = request.args.get(name)
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        raise ValidationError(f"Ongeldige waarde voor '{name}'")


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(AuthenticationError)
    def _authentication(e):
        return fail(str(e), 401)

    @app.errorhandler(AuthorizationError)
    def _authorization(e):
        return fail(str(e), 403)

    @app.errorhandler(NotFoundError)
    def _not_found(e):
        return fail(str(e), 404)

    @app.errorhandler(ValidationError)
    def _validation(e):
        return fail(str(e), 400)

    @app.errorhandler(DomainError)
    def _domain(e):
        return fail(str(e), 400)

    @app.errorhandler(Exception)
    def _unexpected(e):
        if isinstance(e, HTTPException):
            return e
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return fail("Interne serverfout", 500)
