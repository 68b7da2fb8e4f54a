from __future__ import annotations

import io

from flask import Flask, Response, send_file

from ..common.datetime_utils import now_local
from ..common.web import arg_date, arg_int, current_role, current_user_id, login_required
from ..container import Container
from ..users.permissions import has_permission
from . import csv_export
from .xlsx_export import XLSX_MIMETYPE, registrations_to_xlsx


def _csv_response(content: str, filename: str) -> Response:
    return Response(
        content.encode("utf-8"),
        mimetype="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


def register(app: Flask, container: Container) -> None:
    settings = container.settings_service

    def _registrations():
        role = current_role()
        date_from, date_to = arg_date("from"), arg_date("to")
        if has_permission(role, "view_reports"):
            return container.registration_service.list_all(
                current_role=role,
                user_id=arg_int("user_id"),
                project_id=arg_int("project_id"),
                date_from=date_from,
                date_to=date_to,
            )
        return container.registration_service.list_for_user(current_user_id(), date_from=date_from, date_to=date_to)

    @app.route("/api/exports/registrations.csv", endpoint="export_registrations_csv")
    @login_required
    def export_registrations_csv():
        content = csv_export.export_time_registrations(_registrations(), settings.csv_separator())
        return _csv_response(content, csv_export.export_filename("urenregistraties", now_local().date()))

    @app.route("/api/exports/registrations.xlsx", endpoint="export_registrations_xlsx")
    @login_required
    def export_registrations_xlsx():
        data = registrations_to_xlsx(_registrations())
        return send_file(
            io.BytesIO(data),
            mimetype=XLSX_MIMETYPE,
            as_attachment=True,
            download_name=f"urenregistraties_{now_local().date().isoformat()}.xlsx",
        )

    @app.route("/api/exports/inventory.csv", endpoint="export_inventory_csv")
    @login_required
    def export_inventory_csv():
        content = csv_export.export_inventory_items(
            container.inventory_service.inventory_items(), settings.csv_separator()
        )
        return _csv_response(content, csv_export.export_filename("voorraad", now_local().date()))

    @app.route("/api/exports/bookings.csv", endpoint="export_bookings_csv")
    @login_required
    def export_bookings_csv():
        bookings = container.inventory_service.list_bookings(project_id=arg_int("project_id"))
        content = csv_export.export_bookings(bookings, settings.csv_separator())
        return _csv_response(content, csv_export.export_filename("afboekingen", now_local().date()))

    @app.route("/api/exports/bookings-template.csv", endpoint="export_bookings_template")
    @login_required
    def export_bookings_template():
        content = csv_export.bookings_import_template(settings.csv_separator())
        return _csv_response(content, "afboekingen_import_template.csv")

    @app.route("/api/exports/projects/<int:project_id>.csv", endpoint="export_project_csv")
    @login_required
    def export_project_csv(project_id: int):
        details = container.project_service.project_details(
            project_id, current_role=current_role(), current_user_id=current_user_id()
        )
        content = csv_export.export_project(
            details.project,
            details.registrations,
            details.materials,
            details.total_hours,
            settings.csv_separator(),
        )
        base = f"{details.project.naam}_volledig_export"
        return _csv_response(content, csv_export.export_filename(base, now_local().date()))

    @app.route("/api/exports/locations/<int:location_id>/stock.csv", endpoint="export_location_stock_csv")
    @login_required
    def export_location_stock_csv(location_id: int):
        location, items = container.inventory_service.location_stock(
            current_role=current_role(), location_id=location_id
        )
        content = csv_export.export_location_stock(items, settings.csv_separator())
        return _csv_response(content, csv_export.location_stock_filename(location, now_local().date()))
