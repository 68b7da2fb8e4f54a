from __future__ import annotations

from flask import Flask

from ..common.web import current_role, current_user_id, json_body, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/settings/system", endpoint="get_system_settings")
    @login_required
    def get_system_settings():
        return ok({"settings": container.settings_service.system_settings().to_dict()})

    @app.route("/api/settings/system", methods=["PUT"], endpoint="update_system_settings")
    @login_required
    def update_system_settings():
        updated = container.settings_service.update_system_settings(
            current_role=current_role(), user_id=current_user_id(), data=json_body()
        )
        return ok({"settings": updated.to_dict()})

    @app.route("/api/settings/invoice", endpoint="get_invoice_settings")
    @login_required
    def get_invoice_settings():
        settings = container.settings_service.invoice_settings()
        return ok({"settings": settings.to_dict() if settings else None})

    @app.route("/api/settings/invoice", methods=["PUT"], endpoint="update_invoice_settings")
    @login_required
    def update_invoice_settings():
        updated = container.settings_service.update_invoice_settings(current_role=current_role(), data=json_body())
        return ok({"settings": updated.to_dict(), "message": "Instellingen succesvol opgeslagen!"})
