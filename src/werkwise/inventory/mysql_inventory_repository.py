from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import TransactionType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall, fetchone, optional_float
from .model import InventoryTransaction, Location, NewTransaction, Product, StockItem
from .repository import InventoryRepository

_PRODUCT_COLUMNS = "id, name, sku, ean, category, unit, minimum_stock, price, purchase_price, sale_price, supplier"
_PRODUCT_UPDATABLE = {
    "name",
    "sku",
    "ean",
    "category",
    "unit",
    "minimum_stock",
    "price",
    "purchase_price",
    "sale_price",
    "supplier",
}


def _to_product(row: dict, prefix: str = "") -> Product:
    return Product(
        id=int(row[f"{prefix}id"]),
        name=row[f"{prefix}name"],
        sku=row.get(f"{prefix}sku"),
        ean=row.get(f"{prefix}ean"),
        category=row.get(f"{prefix}category") or "",
        unit=row.get(f"{prefix}unit") or "",
        minimum_stock=int(row.get(f"{prefix}minimum_stock") or 0),
        price=optional_float(row.get(f"{prefix}price")),
        purchase_price=optional_float(row.get(f"{prefix}purchase_price")),
        sale_price=optional_float(row.get(f"{prefix}sale_price")),
        supplier=row.get(f"{prefix}supplier"),
    )


def _to_location(row: dict, prefix: str = "") -> Location:
    return Location(
        id=int(row[f"{prefix}id"]),
        name=row[f"{prefix}name"],
        type=row.get(f"{prefix}type") or "magazijn",
        license_plate=row.get(f"{prefix}license_plate"),
        description=row.get(f"{prefix}description"),
    )


def _to_transaction(row: dict) -> InventoryTransaction:
    return InventoryTransaction(
        id=int(row["id"]),
        product_id=int(row["product_id"]),
        location_id=int(row["location_id"]),
        transaction_type=TransactionType(row["transaction_type"]),
        quantity=as_float(row["quantity"]),
        project_id=row.get("project_id"),
        user_id=row.get("user_id"),
        notes=row.get("notes"),
        created_at=row.get("created_at"),
        product_name=row.get("product_name"),
        product_sku=row.get("product_sku"),
        product_category=row.get("product_category"),
        product_unit=row.get("product_unit"),
        location_name=row.get("location_name"),
        user_naam=row.get("user_naam"),
        project_naam=row.get("project_naam"),
        project_nummer=row.get("project_nummer"),
    )


class MySQLInventoryRepository(InventoryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    # Products

    def list_products(self) -> Sequence[Product]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_PRODUCT_COLUMNS} FROM inventory_products ORDER BY name")
            return [_to_product(r) for r in fetchall(cur)]

    def get_product(self, product_id: int) -> Optional[Product]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_PRODUCT_COLUMNS} FROM inventory_products WHERE id=%s", (product_id,))
            row = fetchone(cur)
            return _to_product(row) if row else None

    def get_product_by_sku(self, sku: str) -> Optional[Product]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_PRODUCT_COLUMNS} FROM inventory_products WHERE sku=%s", (sku,))
            row = fetchone(cur)
            return _to_product(row) if row else None

    def create_product(
        self,
        *,
        name: str,
        sku: Optional[str],
        ean: Optional[str],
        category: str,
        unit: str,
        minimum_stock: int,
        price: Optional[float],
        supplier: Optional[str],
        purchase_price: Optional[float] = None,
        sale_price: Optional[float] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO inventory_products(
                    name, sku, ean, category, unit, minimum_stock, price, purchase_price, sale_price, supplier
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (name, sku, ean, category, unit, minimum_stock, price, purchase_price, sale_price, supplier),
            )
            return int(cur.lastrowid)

    def update_product(self, product_id: int, *, changes: dict) -> bool:
        fields = {k: v for k, v in changes.items() if k in _PRODUCT_UPDATABLE}
        if not fields:
            return False
        assignments = ", ".join(f"{k}=%s" for k in fields)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE inventory_products SET {assignments} WHERE id=%s",
                (*fields.values(), product_id),
            )
            return cur.rowcount > 0

    def delete_product(self, product_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM inventory_products WHERE id=%s", (product_id,))
            return cur.rowcount > 0

    # Locations

    def list_locations(self) -> Sequence[Location]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name, type, license_plate, description FROM inventory_locations ORDER BY name")
            return [_to_location(r) for r in fetchall(cur)]

    def get_location(self, location_id: int) -> Optional[Location]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, name, type, license_plate, description FROM inventory_locations WHERE id=%s",
                (location_id,),
            )
            row = fetchone(cur)
            return _to_location(row) if row else None

    def find_location_by_name(self, fragment: str) -> Optional[Location]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, name, type, license_plate, description
                FROM inventory_locations
                WHERE name LIKE %s
                ORDER BY id
                LIMIT 1
                """,
                (f"%{fragment}%",),
            )
            row = fetchone(cur)
            return _to_location(row) if row else None

    def create_location(
        self, *, name: str, type: str, license_plate: Optional[str], description: Optional[str]
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO inventory_locations(name, type, license_plate, description) VALUES(%s,%s,%s,%s)",
                (name, type, license_plate, description),
            )
            return int(cur.lastrowid)

    # Stock

    def get_stock(self, product_id: int, location_id: int) -> float:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT quantity FROM inventory_stock WHERE product_id=%s AND location_id=%s",
                (product_id, location_id),
            )
            row = fetchone(cur)
            return as_float(row["quantity"]) if row else 0.0

    def list_stock(self, *, location_id: Optional[int] = None) -> Sequence[StockItem]:
        sql = """
            SELECT s.quantity,
                   p.id AS p_id, p.name AS p_name, p.sku AS p_sku, p.ean AS p_ean, p.category AS p_category,
                   p.unit AS p_unit, p.minimum_stock AS p_minimum_stock, p.price AS p_price,
                   p.purchase_price AS p_purchase_price, p.sale_price AS p_sale_price, p.supplier AS p_supplier,
                   l.id AS l_id, l.name AS l_name, l.type AS l_type, l.license_plate AS l_license_plate,
                   l.description AS l_description
            FROM inventory_stock s
            JOIN inventory_products p ON p.id = s.product_id
            JOIN inventory_locations l ON l.id = s.location_id
        """
        params: tuple = ()
        if location_id is not None:
            sql += " WHERE s.location_id=%s"
            params = (location_id,)
        sql += " ORDER BY p.name, l.name"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return [
                StockItem(
                    product=_to_product(r, "p_"),
                    location=_to_location(r, "l_"),
                    quantity=as_float(r["quantity"]),
                )
                for r in fetchall(cur)
            ]

    def set_stock(self, product_id: int, location_id: int, *, quantity: float) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO inventory_stock(product_id, location_id, quantity) VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE quantity=VALUES(quantity)
                """,
                (product_id, location_id, quantity),
            )

    def add_stock(self, product_id: int, location_id: int, *, quantity: float) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO inventory_stock(product_id, location_id, quantity) VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE quantity = quantity + VALUES(quantity)
                """,
                (product_id, location_id, quantity),
            )

    # Ledger

    def record_transactions(self, transactions: Sequence[NewTransaction]) -> list[int]:
        ids: list[int] = []
        with db_cursor(self._conn_factory) as (_, cur):
            for tx in transactions:
                cur.execute(
                    """
                    INSERT INTO inventory_transactions(
                        product_id, location_id, project_id, user_id, transaction_type, quantity, notes
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        tx.product_id,
                        tx.location_id,
                        tx.project_id,
                        tx.user_id,
                        tx.transaction_type.value,
                        tx.quantity,
                        tx.notes,
                    ),
                )
                ids.append(int(cur.lastrowid))
                cur.execute(
                    """
                    INSERT INTO inventory_stock(product_id, location_id, quantity) VALUES(%s,%s,%s)
                    ON DUPLICATE KEY UPDATE quantity = quantity + VALUES(quantity)
                    """,
                    (tx.product_id, tx.location_id, tx.quantity),
                )
        return ids

    def list_transactions(
        self,
        *,
        project_id: Optional[int] = None,
        transaction_type: Optional[TransactionType] = None,
        since: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> Sequence[InventoryTransaction]:
        sql = """
            SELECT t.id, t.product_id, t.location_id, t.project_id, t.user_id, t.transaction_type,
                   t.quantity, t.notes, t.created_at,
                   p.name AS product_name, p.sku AS product_sku, p.category AS product_category,
                   p.unit AS product_unit,
                   l.name AS location_name, u.naam AS user_naam,
                   pr.naam AS project_naam, pr.project_nummer AS project_nummer
            FROM inventory_transactions t
            LEFT JOIN inventory_products p ON p.id = t.product_id
            LEFT JOIN inventory_locations l ON l.id = t.location_id
            LEFT JOIN profiles u ON u.id = t.user_id
            LEFT JOIN projects pr ON pr.id = t.project_id
        """
        where: list[str] = []
        params: list = []
        if project_id is not None:
            where.append("t.project_id=%s")
            params.append(int(project_id))
        if transaction_type is not None:
            where.append("t.transaction_type=%s")
            params.append(transaction_type.value)
        if since is not None:
            where.append("t.created_at>=%s")
            params.append(since)
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += " ORDER BY t.created_at DESC, t.id DESC"
        if limit:
            sql += " LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_transaction(r) for r in fetchall(cur)]
