# tests/test_normalizer.py

"""Tests for ProductNormalizer."""

import unittest
from typing import Any

from stockwatch.filters.normalizer import ProductNormalizer
from stockwatch.models.product import (
    IMAGE_NOT_FOUND,
    NAME_NOT_FOUND,
    PRICE_NOT_FOUND,
    PRODUCT_TYPE_NOT_FOUND,
    StockStatus,
)


def _raw(**overrides: Any) -> dict[str, Any]:
    """Create a complete raw record."""
    raw: dict[str, Any] = {
        "name": "Matcha A",
        "product_type": "Ceremonial",
        "price": "$10.00",
        "image_url": "https://shop.example/a.jpg",
        "classes": ["product", "instock"],
    }
    raw.update(overrides)
    return raw


class TestNormalize(unittest.TestCase):
    """ProductNormalizer.normalize unit tests."""

    def setUp(self) -> None:
        self.normalizer = ProductNormalizer()

    def test_complete_record(self) -> None:
        """All fields are copied across and stripped."""
        product = self.normalizer.normalize(
            _raw(name="  Matcha A \n", price=" $10.00 ")
        )
        self.assertEqual(product.name, "Matcha A")
        self.assertEqual(product.product_type, "Ceremonial")
        self.assertEqual(product.price, "$10.00")
        self.assertEqual(product.image_url, "https://shop.example/a.jpg")
        self.assertIs(product.stock_status, StockStatus.IN_STOCK)

    def test_missing_image_uses_placeholder(self) -> None:
        """A record without an image still normalizes."""
        product = self.normalizer.normalize(_raw(image_url=None))
        self.assertEqual(product.image_url, IMAGE_NOT_FOUND)
        self.assertEqual(product.name, "Matcha A")

    def test_empty_record_is_total(self) -> None:
        """An empty bag yields every placeholder, never an error."""
        product = self.normalizer.normalize({})
        self.assertEqual(product.name, NAME_NOT_FOUND)
        self.assertEqual(product.product_type, PRODUCT_TYPE_NOT_FOUND)
        self.assertEqual(product.price, PRICE_NOT_FOUND)
        self.assertEqual(product.image_url, IMAGE_NOT_FOUND)
        self.assertIs(product.stock_status, StockStatus.UNKNOWN)

    def test_blank_text_uses_placeholder(self) -> None:
        """Whitespace-only text counts as missing."""
        product = self.normalizer.normalize(_raw(price="   "))
        self.assertEqual(product.price, PRICE_NOT_FOUND)

    def test_placeholder_strings(self) -> None:
        """Placeholders are the documented literals."""
        self.assertEqual(NAME_NOT_FOUND, "Name not found")
        self.assertEqual(PRODUCT_TYPE_NOT_FOUND, "Product Type not found")
        self.assertEqual(PRICE_NOT_FOUND, "Price not found")
        self.assertEqual(IMAGE_NOT_FOUND, "Image not found")


class TestClassifyStock(unittest.TestCase):
    """Tag-based stock classification."""

    def setUp(self) -> None:
        self.normalizer = ProductNormalizer()

    def test_out_of_stock_tag(self) -> None:
        """'outofstock' maps to OUT_OF_STOCK."""
        self.assertIs(
            self.normalizer.classify_stock(["product", "outofstock"]),
            StockStatus.OUT_OF_STOCK,
        )

    def test_in_stock_tag(self) -> None:
        """'instock' maps to IN_STOCK."""
        self.assertIs(
            self.normalizer.classify_stock(["instock"]),
            StockStatus.IN_STOCK,
        )

    def test_no_tag_is_unknown(self) -> None:
        """No stock tag maps to UNKNOWN."""
        self.assertIs(
            self.normalizer.classify_stock(["product", "sale"]),
            StockStatus.UNKNOWN,
        )

    def test_both_tags_out_of_stock_wins(self) -> None:
        """Out of stock is checked first."""
        self.assertIs(
            self.normalizer.classify_stock(["instock", "outofstock"]),
            StockStatus.OUT_OF_STOCK,
        )

    def test_price_does_not_affect_stock(self) -> None:
        """A missing price with an in-stock tag is still in stock."""
        product = self.normalizer.normalize(_raw(price=None))
        self.assertIs(product.stock_status, StockStatus.IN_STOCK)

    def test_class_string_is_split(self) -> None:
        """A space-separated class string is tokenised, not iterated."""
        self.assertIs(
            self.normalizer.classify_stock("product outofstock"),
            StockStatus.OUT_OF_STOCK,
        )

    def test_opaque_classes_value_is_unknown(self) -> None:
        """Non-iterable or odd class values classify as unknown."""
        for classes in (7, 3.5, True, object(), [["instock"], None]):
            with self.subTest(classes=classes):
                self.assertIs(
                    self.normalizer.classify_stock(classes),
                    StockStatus.UNKNOWN,
                )

    def test_normalize_with_integer_classes(self) -> None:
        """normalize() stays total when classes is not a tag list."""
        product = self.normalizer.normalize(_raw(classes=42))
        self.assertIs(product.stock_status, StockStatus.UNKNOWN)

    def test_tag_match_is_exact(self) -> None:
        """Substring matches such as 'notinstock' do not count."""
        self.assertIs(
            self.normalizer.classify_stock(["notinstock"]),
            StockStatus.UNKNOWN,
        )

    def test_custom_class_names_from_selectors(self) -> None:
        """Class names can be configured through selectors."""
        normalizer = ProductNormalizer.from_selectors(
            {"out_of_stock_class": "sold-out", "in_stock_class": "available"}
        )
        self.assertIs(
            normalizer.classify_stock(["sold-out"]),
            StockStatus.OUT_OF_STOCK,
        )
        self.assertIs(
            normalizer.classify_stock(["available"]),
            StockStatus.IN_STOCK,
        )


class TestNormalizeAll(unittest.TestCase):
    """Batch normalization."""

    def test_preserves_order_and_count(self) -> None:
        """Every record yields one product, in input order."""
        raws = [_raw(name="B"), {}, _raw(name="A")]
        products = ProductNormalizer().normalize_all(raws)
        self.assertEqual(
            [p.name for p in products], ["B", NAME_NOT_FOUND, "A"]
        )


if __name__ == "__main__":
    unittest.main()
