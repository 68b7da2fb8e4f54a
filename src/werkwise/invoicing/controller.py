from __future__ import annotations

import io

from flask import Flask, send_file

from ..common.datetime_utils import now_local
from ..common.web import current_role, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.invoice_service

    @app.route("/api/projects/<int:project_id>/invoice", endpoint="preview_invoice")
    @login_required
    def preview_invoice(project_id: int):
        invoice = service.build(project_id, current_role=current_role(), now=now_local())
        return ok({"invoice": invoice.to_dict()})

    @app.route("/api/projects/<int:project_id>/invoice.pdf", endpoint="download_invoice")
    @login_required
    def download_invoice(project_id: int):
        invoice, pdf = service.generate_pdf(project_id, current_role=current_role(), now=now_local())
        return send_file(
            io.BytesIO(pdf),
            mimetype="application/pdf",
            as_attachment=True,
            download_name=invoice.filename,
        )
