# stockwatch/services/persister.py

"""Chunked, best-effort application of baseline updates."""

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any, TypeVar

from stockwatch.config.settings import Settings
from stockwatch.storage.base_store import BaselineStore

logger = logging.getLogger("stockwatch.persister")

T = TypeVar("T")


def chunked(items: Sequence[T], size: int) -> Iterator[list[T]]:
    """Yield consecutive slices of *items* no longer than *size*."""
    if size < 1:
        raise ValueError(f"chunk size must be >= 1, got {size}")
    for start in range(0, len(items), size):
        yield list(items[start:start + size])


@dataclass
class PersistReport:
    """Outcome of one persist pass."""

    applied: int = 0
    chunks: int = 0
    failed_chunks: int = 0
    errors: list[str] = field(
        default_factory=lambda: list[str]()
    )


class Persister:
    """Applies updates to a baseline store in bounded chunks.

    Chunks run one after another in input order.  A failed chunk is
    logged and counted; the remaining chunks still run and nothing is
    rolled back or retried.
    """

    def __init__(
        self,
        store: BaselineStore,
        chunk_size: int | None = None,
    ) -> None:
        self.store = store
        size = (
            chunk_size
            if chunk_size is not None
            else Settings.STORE_CHUNK_SIZE
        )
        if size < 1:
            raise ValueError(f"chunk size must be >= 1, got {size}")
        self.chunk_size = min(size, store.max_batch_size)

    async def persist(
        self, updates: list[dict[str, Any]],
    ) -> PersistReport:
        """Apply *updates* and report how many landed."""
        report = PersistReport()
        if not updates:
            return report

        for index, chunk in enumerate(
            chunked(updates, self.chunk_size), 1
        ):
            report.chunks += 1
            try:
                await self.store.update(chunk)
            except Exception as exc:
                report.failed_chunks += 1
                report.errors.append(f"chunk {index}: {exc}")
                logger.error(
                    "Error updating baseline chunk %d (%d records): %s",
                    index,
                    len(chunk),
                    exc,
                    exc_info=True,
                )
                continue
            report.applied += len(chunk)
            logger.debug(
                "Applied baseline chunk %d (%d records)",
                index,
                len(chunk),
            )

        if report.failed_chunks:
            logger.warning(
                "Baseline partially updated: %d of %d records, "
                "%d failed chunks",
                report.applied,
                len(updates),
                report.failed_chunks,
            )
        else:
            logger.info(
                "Baseline records updated successfully (%d)",
                report.applied,
            )
        return report
