# stockwatch/storage/base_store.py

"""Interface every baseline store implements."""

from typing import Any, Protocol

from stockwatch.models.baseline import BaselineRecord


class BaselineStore(Protocol):
    """Holds the last known record per tracked product.

    ``update`` takes ``{"id": ..., "fields": {"Price": ..., "Stock": ...}}``
    items and must reject batches larger than ``max_batch_size``.
    """

    max_batch_size: int

    async def read_all(self) -> list[BaselineRecord]:
        """Return every baseline record in store order."""
        ...

    async def update(self, batch: list[dict[str, Any]]) -> None:
        """Overwrite price and stock on the given record ids."""
        ...


def check_batch_size(batch: list[dict[str, Any]], limit: int) -> None:
    """Raise ``ValueError`` when *batch* exceeds the store's cap."""
    if len(batch) > limit:
        raise ValueError(
            f"batch of {len(batch)} exceeds store limit of {limit}"
        )
