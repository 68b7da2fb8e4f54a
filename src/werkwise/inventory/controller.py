from __future__ import annotations

from flask import Flask, request

from ..common.web import arg_int, current_role, current_user_id, json_body, login_required, ok
from ..container import Container
from ..core.exceptions import ValidationError


def _uploaded_csv() -> str:
    upload = request.files.get("file")
    if upload is not None:
        text = upload.read().decode("utf-8-sig")
    else:
        text = json_body().get("csv") or ""
    if not text.strip():
        raise ValidationError("Bestand is leeg of heeft geen data")
    return text


def register(app: Flask, container: Container) -> None:
    service = container.inventory_service

    @app.route("/api/inventory/products", endpoint="list_products")
    @login_required
    def list_products():
        return ok({"products": [p.to_dict() for p in service.list_products()]})

    @app.route("/api/inventory/products", methods=["POST"], endpoint="create_product")
    @login_required
    def create_product():
        product_id = service.create_product(current_role=current_role(), data=json_body())
        return ok({"id": product_id}, 201)

    @app.route("/api/inventory/products/<int:product_id>", methods=["PUT"], endpoint="update_product")
    @login_required
    def update_product(product_id: int):
        service.update_product(current_role=current_role(), product_id=product_id, data=json_body())
        return ok()

    @app.route("/api/inventory/products/<int:product_id>", methods=["DELETE"], endpoint="delete_product")
    @login_required
    def delete_product(product_id: int):
        service.delete_product(current_role=current_role(), product_id=product_id)
        return ok()

    @app.route("/api/inventory/locations", endpoint="list_locations")
    @login_required
    def list_locations():
        return ok({"locations": [loc.to_dict() for loc in service.list_locations()]})

    @app.route("/api/inventory/locations", methods=["POST"], endpoint="create_location")
    @login_required
    def create_location():
        location_id = service.create_location(current_role=current_role(), data=json_body())
        return ok({"id": location_id}, 201)

    @app.route("/api/inventory/stock", endpoint="list_stock")
    @login_required
    def list_stock():
        items = service.stock_overview(location_id=arg_int("location_id"))
        return ok({"stock": [i.to_dict() for i in items]})

    @app.route("/api/inventory/stock", methods=["PUT"], endpoint="set_stock")
    @login_required
    def set_stock():
        data = json_body()
        service.set_stock(
            current_role=current_role(),
            product_id=data.get("product_id"),
            location_id=data.get("location_id"),
            quantity=data.get("quantity"),
        )
        return ok()

    @app.route("/api/inventory/low-stock", endpoint="low_stock")
    @login_required
    def low_stock():
        return ok({"products": service.low_stock()})

    @app.route("/api/inventory/book-out", methods=["POST"], endpoint="book_out")
    @login_required
    def book_out():
        data = json_body()
        ids = service.book_out(user_id=current_user_id(), project_id=data.get("project_id"), lines=data.get("lines") or [])
        return ok({"ids": ids, "message": "Producten succesvol afgeboekt!"}, 201)

    @app.route("/api/inventory/receive", methods=["POST"], endpoint="receive_stock")
    @login_required
    def receive_stock():
        data = json_body()
        tx_id = service.receive(
            current_role=current_role(),
            user_id=current_user_id(),
            product_id=data.get("product_id"),
            location_id=data.get("location_id"),
            quantity=data.get("quantity"),
            notes=data.get("notes"),
        )
        return ok({"id": tx_id}, 201)

    @app.route("/api/inventory/move", methods=["POST"], endpoint="move_stock")
    @login_required
    def move_stock():
        data = json_body()
        service.move_stock(
            current_role=current_role(),
            user_id=current_user_id(),
            product_id=data.get("product_id"),
            from_location_id=data.get("from_location_id"),
            to_location_id=data.get("to_location_id"),
            quantity=data.get("quantity"),
        )
        return ok({"message": "Voorraad verplaatst"})

    @app.route("/api/inventory/bookings", endpoint="list_bookings")
    @login_required
    def list_bookings():
        items = service.list_bookings(project_id=arg_int("project_id"))
        return ok({"bookings": [t.to_dict() for t in items]})

    @app.route("/api/inventory/bookings/import", methods=["POST"], endpoint="import_bookings")
    @login_required
    def import_bookings():
        text = _uploaded_csv()

        result = service.import_bookings_csv(
            text=text,
            separator=container.settings_service.csv_separator(),
            user_id=current_user_id(),
        )
        return ok(
            {**result.to_dict(), "message": f"{result.imported} afboekingen succesvol geïmporteerd!"},
            201,
        )

    @app.route("/api/inventory/locations/<int:location_id>/import", methods=["POST"], endpoint="import_location_stock")
    @login_required
    def import_location_stock(location_id: int):
        result = service.import_location_stock_csv(
            current_role=current_role(),
            location_id=location_id,
            text=_uploaded_csv(),
            separator=container.settings_service.csv_separator(),
        )
        return ok(
            {
                **result.to_dict(),
                "message": f"Import voltooid! Succesvol: {result.imported}, Fouten: {len(result.skipped)}",
            }
        )
