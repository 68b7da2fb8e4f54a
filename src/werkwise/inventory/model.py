from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from ..core.enums import TransactionType


@dataclass(frozen=True)
class Product:
    id: int
    name: str
    category: str
    unit: str
    minimum_stock: int = 0
    sku: Optional[str] = None
    ean: Optional[str] = None
    price: Optional[float] = None
    supplier: Optional[str] = None
    purchase_price: Optional[float] = None
    sale_price: Optional[float] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "sku": self.sku,
            "ean": self.ean,
            "category": self.category,
            "unit": self.unit,
            "minimum_stock": self.minimum_stock,
            "price": self.price,
            "supplier": self.supplier,
            "purchase_price": self.purchase_price,
            "sale_price": self.sale_price,
        }


@dataclass(frozen=True)
class Location:
    id: int
    name: str
    type: str = "magazijn"
    license_plate: Optional[str] = None
    description: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "license_plate": self.license_plate,
            "description": self.description,
        }


@dataclass(frozen=True)
class StockItem:
    product: Product
    location: Location
    quantity: float

    def to_dict(self) -> dict[str, Any]:
        return {"product": self.product.to_dict(), "location": self.location.to_dict(), "quantity": self.quantity}


@dataclass(frozen=True)
class InventoryTransaction:
    id: int
    product_id: int
    location_id: int
    transaction_type: TransactionType
    quantity: float
    project_id: Optional[int] = None
    user_id: Optional[int] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    # Joined display columns.
    product_name: Optional[str] = None
    product_sku: Optional[str] = None
    product_category: Optional[str] = None
    product_unit: Optional[str] = None
    location_name: Optional[str] = None
    user_naam: Optional[str] = None
    project_naam: Optional[str] = None
    project_nummer: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "product_id": self.product_id,
            "location_id": self.location_id,
            "project_id": self.project_id,
            "user_id": self.user_id,
            "transaction_type": self.transaction_type.value,
            "quantity": self.quantity,
            "notes": self.notes,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "product_name": self.product_name,
            "product_sku": self.product_sku,
            "product_unit": self.product_unit,
            "location_name": self.location_name,
            "user_naam": self.user_naam,
            "project_naam": self.project_naam,
        }


@dataclass(frozen=True)
class NewTransaction:
    product_id: int
    location_id: int
    transaction_type: TransactionType
    quantity: float
    project_id: Optional[int]
    user_id: Optional[int]
    notes: Optional[str]


@dataclass(frozen=True)
class BookingLine:
    product_id: int
    location_id: int
    quantity: float


@dataclass(frozen=True)
class ImportResult:
    imported: int
    skipped: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {"imported": self.imported, "skipped": list(self.skipped)}
