# stockwatch/storage/airtable_store.py

"""Airtable-backed baseline store (REST API v0)."""

import logging
from typing import Any
from urllib.parse import quote

from curl_cffi.requests import AsyncSession

from stockwatch.config.settings import Settings
from stockwatch.exceptions import StoreError
from stockwatch.models.baseline import BaselineRecord
from stockwatch.storage.base_store import check_batch_size

logger = logging.getLogger("stockwatch.airtable")


def _as_text(value: Any) -> str:
    """Airtable omits empty cells; treat them as empty strings."""
    return "" if value is None else str(value)


class AirtableBaselineStore:
    """Reads and updates tracked products in one Airtable table.

    The table holds one row per product with the product name, the last
    seen price, and the last seen stock status.  Column names default to
    ``Item``, ``Price`` and ``Stock``.
    """

    # Airtable accepts at most 10 records per create/update request
    max_batch_size: int = 10

    def __init__(
        self,
        api_key: str | None = None,
        base_id: str | None = None,
        table_name: str | None = None,
        session: AsyncSession | None = None,
        name_field: str | None = None,
        price_field: str | None = None,
        stock_field: str | None = None,
    ) -> None:
        self.settings = Settings()
        self.api_key = api_key or self.settings.AIRTABLE_API_KEY
        self.base_id = base_id or self.settings.AIRTABLE_BASE_ID
        self.table_name = table_name or self.settings.AIRTABLE_TABLE_NAME
        self.session = session
        self.name_field = name_field or self.settings.AIRTABLE_NAME_FIELD
        self.price_field = (
            price_field or self.settings.AIRTABLE_PRICE_FIELD
        )
        self.stock_field = (
            stock_field or self.settings.AIRTABLE_STOCK_FIELD
        )

    @property
    def table_url(self) -> str:
        """REST endpoint for the configured table."""
        return (
            f"{self.settings.AIRTABLE_API_URL}/{self.base_id}/"
            f"{quote(self.table_name, safe='')}"
        )

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def _request(
        self, method: str, **kwargs: Any,
    ) -> dict[str, Any]:
        """Send one request to the table endpoint and decode the body.

        Raises:
            StoreError: transport failure or non-2xx response.
        """
        try:
            if self.session is not None:
                resp = await self.session.request(
                    method,
                    self.table_url,
                    headers=self._headers(),
                    timeout=self.settings.HTTP_TIMEOUT,
                    **kwargs,
                )
            else:
                async with AsyncSession(
                    impersonate=self.settings.IMPERSONATE_BROWSER
                ) as session:
                    resp = await session.request(
                        method,
                        self.table_url,
                        headers=self._headers(),
                        timeout=self.settings.HTTP_TIMEOUT,
                        **kwargs,
                    )
        except Exception as exc:
            raise StoreError(f"Airtable {method} failed: {exc}") from exc

        if not 200 <= resp.status_code < 300:
            raise StoreError(
                f"Airtable {method} returned HTTP {resp.status_code}: "
                f"{resp.text[:200]}"
            )
        body: dict[str, Any] = resp.json()
        return body

    def _to_record(self, raw: dict[str, Any]) -> BaselineRecord:
        fields: dict[str, Any] = raw.get("fields", {})
        return BaselineRecord(
            id=str(raw["id"]),
            name=_as_text(fields.get(self.name_field)),
            price=_as_text(fields.get(self.price_field)),
            stock=_as_text(fields.get(self.stock_field)),
        )

    async def read_all(self) -> list[BaselineRecord]:
        """Fetch every row, following Airtable's pagination offsets."""
        records: list[BaselineRecord] = []
        offset: str | None = None
        pages = 0
        while True:
            params = {"offset": offset} if offset else None
            body = await self._request("GET", params=params)
            pages += 1
            records.extend(
                self._to_record(raw) for raw in body.get("records", [])
            )
            offset = body.get("offset")
            if not offset:
                break

        logger.info(
            "Read %d baseline records from Airtable (%d pages)",
            len(records),
            pages,
        )
        return records

    async def update(self, batch: list[dict[str, Any]]) -> None:
        """PATCH price and stock on up to ten rows."""
        check_batch_size(batch, self.max_batch_size)
        column = {
            "Price": self.price_field,
            "Stock": self.stock_field,
        }
        records = [
            {
                "id": item["id"],
                "fields": {
                    column.get(key, key): value
                    for key, value in item["fields"].items()
                },
            }
            for item in batch
        ]
        await self._request("PATCH", json={"records": records})
        logger.debug("Patched %d Airtable records", len(records))
