# stockwatch/services/sinks.py

"""Sink strategies: what a pipeline run does with its products.

- ``TrackingSink``: diff against the baseline, notify, persist.
- ``ForwardSink``: POST the whole catalog to a push URL, no diffing.
- ``CollectSink``: hand the catalog back to the caller.
"""

import logging
from dataclasses import dataclass, field
from typing import Protocol

from curl_cffi.requests import AsyncSession

from stockwatch.config.settings import Settings
from stockwatch.models.product import Product
from stockwatch.services.diff_engine import diff_products
from stockwatch.services.notifier import TelegramNotifier
from stockwatch.services.persister import Persister
from stockwatch.storage.base_store import BaselineStore

logger = logging.getLogger("stockwatch.sinks")


@dataclass
class SinkReport:
    """What a sink did with one run's products."""

    changed_count: int = 0
    unchanged_count: int = 0
    unmatched_count: int = 0
    notified: bool = False
    updated_count: int = 0
    failed_chunks: int = 0
    forwarded: bool = False
    errors: list[str] = field(
        default_factory=lambda: list[str]()
    )


class Sink(Protocol):
    """Consumes the normalized products of one run."""

    mode: str

    async def consume(self, products: list[Product]) -> SinkReport:
        """Process *products* and report downstream outcomes."""
        ...


class TrackingSink:
    """Diff against the stored baseline, then notify and persist.

    The baseline is read once per run.  A failed read propagates since
    no diff is possible without it.  Notification and persistence are
    independent: either may fail without affecting the other.
    """

    mode = "track"

    def __init__(
        self,
        store: BaselineStore,
        notifier: TelegramNotifier,
        persister: Persister | None = None,
    ) -> None:
        self.store = store
        self.notifier = notifier
        self.persister = persister or Persister(store)

    async def consume(self, products: list[Product]) -> SinkReport:
        baseline = await self.store.read_all()
        diff = diff_products(products, baseline)

        report = SinkReport(
            changed_count=len(diff.changes),
            unchanged_count=diff.unchanged_count,
            unmatched_count=len(diff.unmatched),
        )
        if not diff.changes:
            return report

        report.notified = await self.notifier.notify(diff.notifications)
        if not report.notified:
            report.errors.append("notification not delivered")

        persisted = await self.persister.persist(diff.updates)
        report.updated_count = persisted.applied
        report.failed_chunks = persisted.failed_chunks
        report.errors.extend(persisted.errors)
        return report


class ForwardSink:
    """Forward the whole catalog as one JSON payload to a push URL."""

    mode = "forward"

    def __init__(
        self,
        push_url: str | None = None,
        session: AsyncSession | None = None,
    ) -> None:
        self.settings = Settings()
        self.push_url = push_url or self.settings.PUSH_URL
        self.session = session

    async def _post(self, payload: dict[str, object]) -> int:
        if self.session is not None:
            resp = await self.session.post(
                self.push_url,
                json=payload,
                timeout=self.settings.HTTP_TIMEOUT,
            )
            return int(resp.status_code)
        async with AsyncSession(
            impersonate=self.settings.IMPERSONATE_BROWSER
        ) as session:
            resp = await session.post(
                self.push_url,
                json=payload,
                timeout=self.settings.HTTP_TIMEOUT,
            )
            return int(resp.status_code)

    async def consume(self, products: list[Product]) -> SinkReport:
        report = SinkReport()
        payload: dict[str, object] = {
            "products": [p.to_dict() for p in products],
            "count": len(products),
        }
        try:
            status = await self._post(payload)
        except Exception as exc:
            logger.error(
                "Error forwarding %d products to %s: %s",
                len(products),
                self.push_url,
                exc,
                exc_info=True,
            )
            report.errors.append(f"forward failed: {exc}")
            return report

        if not 200 <= status < 300:
            logger.error(
                "Push target %s returned HTTP %d", self.push_url, status
            )
            report.errors.append(f"forward failed: HTTP {status}")
            return report

        report.forwarded = True
        logger.info(
            "Forwarded %d products to %s", len(products), self.push_url
        )
        return report


class CollectSink:
    """Return the catalog untouched; the caller decides what to do."""

    mode = "collect"

    async def consume(self, products: list[Product]) -> SinkReport:
        logger.debug("Collected %d products", len(products))
        return SinkReport()
