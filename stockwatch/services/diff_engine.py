# stockwatch/services/diff_engine.py

"""Stock-status diff between a scrape and the stored baseline."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from stockwatch.models.baseline import BaselineRecord, ChangeRecord
from stockwatch.models.product import Product

logger = logging.getLogger("stockwatch.diff")


class DiffOutcome(Enum):
    """Classification of one scraped product against the baseline."""

    UNCHANGED = "unchanged"
    CHANGED = "changed"
    UNMATCHED = "unmatched"


@dataclass
class DiffResult:
    """Work lists derived from one diff pass, in scrape order."""

    changes: list[ChangeRecord] = field(
        default_factory=lambda: list[ChangeRecord]()
    )
    unchanged_count: int = 0
    unmatched: list[str] = field(
        default_factory=lambda: list[str]()
    )

    @property
    def notifications(self) -> list[Product]:
        """Products to include in the notification digest."""
        return [c.product for c in self.changes]

    @property
    def updates(self) -> list[dict[str, Any]]:
        """Store updates for every changed product."""
        return [c.update_payload() for c in self.changes]


def find_baseline(
    name: str, baseline: list[BaselineRecord],
) -> BaselineRecord | None:
    """Return the first record whose name equals *name* exactly.

    Duplicate names in the baseline are not resolved: whichever comes
    first in store order is used.
    """
    for record in baseline:
        if record.name == name:
            return record
    return None


def classify(
    product: Product, record: BaselineRecord | None,
) -> DiffOutcome:
    """Compare one product with its matched record on stock status only."""
    if record is None:
        return DiffOutcome.UNMATCHED
    if product.stock_status.value != record.stock:
        return DiffOutcome.CHANGED
    return DiffOutcome.UNCHANGED


def diff_products(
    products: list[Product], baseline: list[BaselineRecord],
) -> DiffResult:
    """Match every product against the baseline by name.

    A price change with the same stock status is not a change.
    """
    result = DiffResult()
    for product in products:
        record = find_baseline(product.name, baseline)
        outcome = classify(product, record)

        if record is None:
            logger.info("Product not in baseline: %s", product.name)
            result.unmatched.append(product.name)
        elif outcome is DiffOutcome.UNCHANGED:
            logger.debug("Stock status unchanged for %s", product.name)
            result.unchanged_count += 1
        else:
            logger.info(
                "Stock changed for %s (id=%s): %r -> %r",
                product.name,
                record.id,
                record.stock,
                product.stock_status.value,
            )
            result.changes.append(
                ChangeRecord(product=product, record_id=record.id)
            )

    logger.info(
        "Diff complete: %d changed, %d unchanged, %d unmatched",
        len(result.changes),
        result.unchanged_count,
        len(result.unmatched),
    )
    return result
