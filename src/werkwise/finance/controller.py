from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import now_local
from ..common.web import arg_int, current_role, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.financial_dashboard_service

    @app.route("/api/finance/dashboard", endpoint="financial_dashboard")
    @login_required
    def financial_dashboard():
        overview = service.overview(
            current_role=current_role(),
            time_range=request.args.get("range") or "1month",
            view_mode=request.args.get("view") or "total",
            project_id=arg_int("project_id"),
            user_id=arg_int("user_id"),
            now=now_local(),
        )
        return ok(overview)
