# stockwatch/storage/sqlite_store.py

"""SQLite-backed baseline store for running without Airtable."""

import asyncio
import logging
import sqlite3
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any

from stockwatch.config.settings import Settings
from stockwatch.exceptions import StoreError
from stockwatch.models.baseline import BaselineRecord
from stockwatch.models.product import Product
from stockwatch.storage.base_store import check_batch_size

logger = logging.getLogger("stockwatch.sqlite_store")

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS baseline (
    id         TEXT PRIMARY KEY,
    name       TEXT NOT NULL,
    price      TEXT NOT NULL DEFAULT '',
    stock      TEXT NOT NULL DEFAULT '',
    updated_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_baseline_name ON baseline(name);
"""


class SqliteBaselineStore:
    """Local baseline table; rows keep their insertion order."""

    max_batch_size: int = 10

    def __init__(self, db_path: Path | None = None) -> None:
        path = db_path or Settings.BASELINE_DB_PATH
        path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(
            str(path), check_same_thread=False,
        )
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)
        logger.debug("SqliteBaselineStore opened at %s", path)

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    # ── Sync internals (run via asyncio.to_thread) ───────

    def _read_all(self) -> list[BaselineRecord]:
        rows = self._conn.execute(
            "SELECT id, name, price, stock FROM baseline ORDER BY rowid",
        ).fetchall()
        return [
            BaselineRecord(id=r[0], name=r[1], price=r[2], stock=r[3])
            for r in rows
        ]

    def _update(self, batch: list[dict[str, Any]]) -> None:
        ts = datetime.now().isoformat()
        try:
            with self._conn:
                for item in batch:
                    fields: dict[str, Any] = item["fields"]
                    cur = self._conn.execute(
                        "UPDATE baseline "
                        "SET price = COALESCE(?, price), "
                        "    stock = COALESCE(?, stock), "
                        "    updated_at = ? "
                        "WHERE id = ?",
                        (
                            fields.get("Price"),
                            fields.get("Stock"),
                            ts,
                            item["id"],
                        ),
                    )
                    if cur.rowcount == 0:
                        raise StoreError(
                            f"Unknown baseline id: {item['id']}"
                        )
        except sqlite3.Error as exc:
            raise StoreError(f"SQLite update failed: {exc}") from exc

    def _add_products(self, products: list[Product]) -> int:
        ts = datetime.now().isoformat()
        existing = {
            r[0]
            for r in self._conn.execute("SELECT name FROM baseline")
        }
        count = 0
        with self._conn:
            for p in products:
                if p.name in existing:
                    continue
                self._conn.execute(
                    "INSERT INTO baseline (id, name, price, stock, updated_at) "
                    "VALUES (?, ?, ?, ?, ?)",
                    (
                        uuid.uuid4().hex,
                        p.name,
                        p.price,
                        p.stock_status.value,
                        ts,
                    ),
                )
                existing.add(p.name)
                count += 1
        return count

    # ── Public async API ─────────────────────────────────

    async def read_all(self) -> list[BaselineRecord]:
        """Return every baseline row in insertion order."""
        records = await asyncio.to_thread(self._read_all)
        logger.info("Read %d baseline records from SQLite", len(records))
        return records

    async def update(self, batch: list[dict[str, Any]]) -> None:
        """Overwrite price and stock for each id in *batch*.

        The batch is applied in one transaction: an unknown id rolls the
        whole batch back and raises ``StoreError``.
        """
        check_batch_size(batch, self.max_batch_size)
        await asyncio.to_thread(self._update, batch)

    async def add_products(self, products: list[Product]) -> int:
        """Track *products* by inserting a row for each unseen name.

        Returns the number of rows inserted.
        """
        count = await asyncio.to_thread(self._add_products, products)
        logger.info(
            "Seeded %d new baseline rows (%d scraped)",
            count,
            len(products),
        )
        return count
