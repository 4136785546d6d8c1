# stockwatch/models/product.py

"""Product data model for inter-module data flow."""

from dataclasses import dataclass
from enum import Enum

# Placeholders used when a field is missing from the rendered markup
NAME_NOT_FOUND = "Name not found"
PRODUCT_TYPE_NOT_FOUND = "Product Type not found"
PRICE_NOT_FOUND = "Price not found"
IMAGE_NOT_FOUND = "Image not found"


class StockStatus(str, Enum):
    """Stock availability as stored in the baseline's stock column."""

    IN_STOCK = "In Stock"
    OUT_OF_STOCK = "Out of Stock"
    UNKNOWN = "Status Unknown"


@dataclass
class Product:
    """A single catalog entry normalized from one product container."""

    name: str
    product_type: str
    price: str
    image_url: str
    stock_status: StockStatus

    def to_dict(self) -> dict[str, str]:
        """Serialise to the JSON shape used by forward and collect output."""
        return {
            "name": self.name,
            "product": self.product_type,
            "price": self.price,
            "imageUrl": self.image_url,
            "stockStatus": self.stock_status.value,
        }
