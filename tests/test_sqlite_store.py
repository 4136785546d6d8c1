# tests/test_sqlite_store.py

"""Tests for the SQLite baseline store."""

import tempfile
import unittest
from pathlib import Path

from stockwatch.exceptions import StoreError
from stockwatch.models.product import Product, StockStatus
from stockwatch.storage.sqlite_store import SqliteBaselineStore


def _p(name: str, status: StockStatus = StockStatus.IN_STOCK) -> Product:
    return Product(
        name=name,
        product_type="Tea",
        price="$10",
        image_url="Image not found",
        stock_status=status,
    )


class TestSqliteBaselineStore(unittest.IsolatedAsyncioTestCase):
    """Tests for SqliteBaselineStore."""

    def setUp(self) -> None:
        """Create a fresh temp DB for each test."""
        self.tmp_dir = tempfile.mkdtemp()
        self.store = SqliteBaselineStore(
            db_path=Path(self.tmp_dir) / "baseline.db"
        )

    def tearDown(self) -> None:
        """Close the database."""
        self.store.close()

    async def test_empty_store(self) -> None:
        """A new store has no records."""
        self.assertEqual(await self.store.read_all(), [])

    async def test_add_products_seeds_rows(self) -> None:
        """Seeding inserts one row per product with its stock status."""
        added = await self.store.add_products(
            [_p("A"), _p("B", StockStatus.OUT_OF_STOCK)]
        )
        self.assertEqual(added, 2)
        records = await self.store.read_all()
        self.assertEqual([r.name for r in records], ["A", "B"])
        self.assertEqual(records[1].stock, "Out of Stock")

    async def test_add_products_skips_known_names(self) -> None:
        """Names already tracked are not inserted twice."""
        await self.store.add_products([_p("A")])
        added = await self.store.add_products([_p("A"), _p("C")])
        self.assertEqual(added, 1)
        self.assertEqual(len(await self.store.read_all()), 2)

    async def test_update_changes_price_and_stock_only(self) -> None:
        """update() overwrites price and stock, keeping id and name."""
        await self.store.add_products([_p("A")])
        record = (await self.store.read_all())[0]
        await self.store.update([
            {
                "id": record.id,
                "fields": {"Price": "$12", "Stock": "Out of Stock"},
            }
        ])
        updated = (await self.store.read_all())[0]
        self.assertEqual(updated.id, record.id)
        self.assertEqual(updated.name, "A")
        self.assertEqual(updated.price, "$12")
        self.assertEqual(updated.stock, "Out of Stock")

    async def test_unknown_id_rolls_back_batch(self) -> None:
        """An unknown id fails the whole batch."""
        await self.store.add_products([_p("A")])
        record = (await self.store.read_all())[0]
        with self.assertRaises(StoreError):
            await self.store.update([
                {"id": record.id, "fields": {"Stock": "Out of Stock"}},
                {"id": "missing", "fields": {"Stock": "In Stock"}},
            ])
        self.assertEqual(
            (await self.store.read_all())[0].stock, "In Stock"
        )

    async def test_oversized_batch_rejected(self) -> None:
        """Batches above the cap are refused."""
        with self.assertRaises(ValueError):
            await self.store.update(
                [{"id": str(i), "fields": {}} for i in range(11)]
            )


if __name__ == "__main__":
    unittest.main()
