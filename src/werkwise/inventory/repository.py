from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import TransactionType
from .model import InventoryTransaction, Location, NewTransaction, Product, StockItem


class InventoryRepository(Protocol):
    """Products, locations, stock levels and the transaction ledger."""

    def list_products(self) -> Sequence[Product]:
        raise NotImplementedError

    def get_product(self, product_id: int) -> Optional[Product]:
        raise NotImplementedError

    def get_product_by_sku(self, sku: str) -> Optional[Product]:
        raise NotImplementedError

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
        raise NotImplementedError

    def update_product(self, product_id: int, *, changes: dict) -> bool:
        raise NotImplementedError

    def delete_product(self, product_id: int) -> bool:
        raise NotImplementedError

    def list_locations(self) -> Sequence[Location]:
        raise NotImplementedError

    def get_location(self, location_id: int) -> Optional[Location]:
        raise NotImplementedError

    def find_location_by_name(self, fragment: str) -> Optional[Location]:
        raise NotImplementedError

    def create_location(
        self, *, name: str, type: str, license_plate: Optional[str], description: Optional[str]
    ) -> int:
        raise NotImplementedError

    def get_stock(self, product_id: int, location_id: int) -> float:
        raise NotImplementedError

    def list_stock(self, *, location_id: Optional[int] = None) -> Sequence[StockItem]:
        raise NotImplementedError

    def set_stock(self, product_id: int, location_id: int, *, quantity: float) -> None:
        raise NotImplementedError

    def add_stock(self, product_id: int, location_id: int, *, quantity: float) -> None:
        """Add to the stored level, creating the row when the product is not yet on the location."""
        raise NotImplementedError

    def record_transactions(self, transactions: Sequence[NewTransaction]) -> list[int]:
        """Insert ledger rows and apply their signed quantities to stock, atomically."""
        raise NotImplementedError

    def list_transactions(
        self,
        *,
        project_id: Optional[int] = None,
        transaction_type: Optional[TransactionType] = None,
        since: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> Sequence[InventoryTransaction]:
        raise NotImplementedError
