# stockwatch/filters/normalizer.py

"""Raw record normalization into canonical Product objects."""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from stockwatch.models.product import (
    IMAGE_NOT_FOUND,
    NAME_NOT_FOUND,
    PRICE_NOT_FOUND,
    PRODUCT_TYPE_NOT_FOUND,
    Product,
    StockStatus,
)

logger = logging.getLogger("stockwatch.filters")


def _clean(value: Any, placeholder: str) -> str:
    """Strip *value*, falling back to *placeholder* when absent or blank."""
    if value is None:
        return placeholder
    text = str(value).strip()
    return text or placeholder


class ProductNormalizer:
    """Map raw extracted records to Products.

    Normalization never fails: a record missing any field still yields
    a Product, with the documented placeholder in that field.
    """

    def __init__(
        self,
        out_of_stock_class: str = "outofstock",
        in_stock_class: str = "instock",
    ) -> None:
        self.out_of_stock_class = out_of_stock_class
        self.in_stock_class = in_stock_class

    @classmethod
    def from_selectors(
        cls, selectors: Mapping[str, str],
    ) -> "ProductNormalizer":
        """Build a normalizer using the stock class names from selectors."""
        return cls(
            out_of_stock_class=selectors.get(
                "out_of_stock_class", "outofstock"
            ),
            in_stock_class=selectors.get("in_stock_class", "instock"),
        )

    def classify_stock(self, classes: Any) -> StockStatus:
        """Classify stock from container tags; out of stock wins ties.

        A class string is split on whitespace. Anything that is neither a
        string nor an iterable carries no tags, and non-string items are
        ignored.
        """
        if isinstance(classes, str):
            tags = set(classes.split())
        elif isinstance(classes, Iterable):
            tags = {tag for tag in classes if isinstance(tag, str)}
        else:
            tags = set()
        if self.out_of_stock_class in tags:
            return StockStatus.OUT_OF_STOCK
        if self.in_stock_class in tags:
            return StockStatus.IN_STOCK
        return StockStatus.UNKNOWN

    def normalize(self, raw: Mapping[str, Any]) -> Product:
        """Build a Product from one raw record."""
        return Product(
            name=_clean(raw.get("name"), NAME_NOT_FOUND),
            product_type=_clean(
                raw.get("product_type"), PRODUCT_TYPE_NOT_FOUND
            ),
            price=_clean(raw.get("price"), PRICE_NOT_FOUND),
            image_url=_clean(raw.get("image_url"), IMAGE_NOT_FOUND),
            stock_status=self.classify_stock(raw.get("classes")),
        )

    def normalize_all(
        self, raws: Iterable[Mapping[str, Any]],
    ) -> list[Product]:
        """Normalize every record, preserving input order."""
        products = [self.normalize(raw) for raw in raws]
        unknown = sum(
            1 for p in products if p.stock_status is StockStatus.UNKNOWN
        )
        if unknown:
            logger.info(
                "%d of %d products have no stock tag",
                unknown,
                len(products),
            )
        return products
