# stockwatch/models/baseline.py

"""Baseline and change records exchanged between diff and the stores."""

from dataclasses import dataclass
from typing import Any

from stockwatch.models.product import Product


@dataclass
class BaselineRecord:
    """Last known state of a tracked product, as held by a store.

    ``name`` is the join key.  Stores may hold duplicate names; the diff
    engine takes the first one in store order and ignores the rest.
    """

    id: str
    name: str
    price: str = ""
    stock: str = ""


@dataclass
class ChangeRecord:
    """A scraped product paired with the id of the baseline it changed."""

    product: Product
    record_id: str

    def update_payload(self) -> dict[str, Any]:
        """Build the store update for this change (price and stock only)."""
        return {
            "id": self.record_id,
            "fields": {
                "Price": self.product.price,
                "Stock": self.product.stock_status.value,
            },
        }
