# stockwatch/services/pipeline.py

"""Orchestrates one scrape cycle: render, normalize, hand off to a sink."""

import logging
from dataclasses import dataclass, field

from stockwatch.filters.normalizer import ProductNormalizer
from stockwatch.models.product import Product
from stockwatch.scrapers.catalog_scraper import CatalogScraper
from stockwatch.services.sinks import Sink

logger = logging.getLogger("stockwatch.pipeline")


@dataclass
class PipelineResult:
    """Container for a completed scrape cycle."""

    url: str
    mode: str
    products: list[Product] = field(
        default_factory=lambda: list[Product]()
    )
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

    @property
    def scraped_count(self) -> int:
        """Number of products scraped this cycle."""
        return len(self.products)


class Pipeline:
    """Runs the scrape → normalize → sink cycle.

    Each stage is awaited before the next begins.  Only extraction
    failures reach the caller; anything the sink reports as a partial
    failure ends up in the result's counters and ``errors``.
    """

    def __init__(
        self,
        sink: Sink,
        scraper: CatalogScraper | None = None,
        normalizer: ProductNormalizer | None = None,
    ) -> None:
        self.sink = sink
        self.scraper = scraper or CatalogScraper()
        self.normalizer = (
            normalizer
            or ProductNormalizer.from_selectors(self.scraper.selectors)
        )

    async def run(self, url: str) -> PipelineResult:
        """Run one cycle against *url*.

        Raises:
            ScrapeError: the page could not be rendered or extracted.
        """
        logger.info("Starting %s cycle for %s", self.sink.mode, url)
        try:
            raw_products = await self.scraper.scrape(url)
        except Exception:
            logger.error("Scrape failed for %s", url, exc_info=True)
            raise

        products = self.normalizer.normalize_all(raw_products)
        report = await self.sink.consume(products)

        result = PipelineResult(
            url=url,
            mode=self.sink.mode,
            products=products,
            changed_count=report.changed_count,
            unchanged_count=report.unchanged_count,
            unmatched_count=report.unmatched_count,
            notified=report.notified,
            updated_count=report.updated_count,
            failed_chunks=report.failed_chunks,
            forwarded=report.forwarded,
            errors=list(report.errors),
        )
        logger.info(
            "Cycle finished: %d scraped, %d changed, %d unmatched, "
            "%d errors",
            result.scraped_count,
            result.changed_count,
            result.unmatched_count,
            len(result.errors),
        )
        return result
