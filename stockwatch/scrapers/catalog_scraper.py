# stockwatch/scrapers/catalog_scraper.py

"""Scraper for a rendered product catalog page."""

import json
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from bs4.element import Tag

from stockwatch.config.settings import Settings
from stockwatch.exceptions import ScrapeError
from stockwatch.scrapers.renderer import PageRenderer

RawProduct = dict[str, Any]


def load_selectors(path: Path | None = None) -> dict[str, str]:
    """Load the catalog CSS selectors and stock class names."""
    with open(path or Settings.SELECTORS_PATH) as f:
        selectors: dict[str, str] = json.load(f)
    return selectors


def _text(element: Tag | None) -> str | None:
    """Visible text of *element* with whitespace runs collapsed."""
    if element is None:
        return None
    return " ".join(element.get_text().split())


class CatalogScraper:
    """Renders a catalog page and extracts one raw record per product.

    Raw records are plain dicts with ``name``, ``product_type``,
    ``price``, ``image_url`` and ``classes``.  Any field whose element is
    missing is ``None``; turning those into placeholders is the
    normalizer's job.
    """

    def __init__(
        self,
        selectors: dict[str, str] | None = None,
        renderer_factory: Callable[[], PageRenderer] = PageRenderer,
    ) -> None:
        self.logger = logging.getLogger("stockwatch.scraper")
        self.selectors = selectors or load_selectors()
        self.renderer_factory = renderer_factory

    def extract(self, html: str, base_url: str = "") -> list[RawProduct]:
        """Extract raw product records from rendered HTML, in page order."""
        soup = BeautifulSoup(html, "lxml")
        containers = soup.select(self.selectors["container"])
        products = [
            self._parse_container(el, base_url) for el in containers
        ]
        self.logger.debug(
            "Extracted %d product containers", len(products)
        )
        return products

    def _parse_container(self, el: Tag, base_url: str) -> RawProduct:
        """Parse a single product container into a raw record."""
        image = el.select_one(self.selectors["image"])
        src = image.get("src") if image is not None else None
        image_url = (
            urljoin(base_url, str(src)) if src else None
        )
        classes = el.get("class") or []
        return {
            "name": _text(el.select_one(self.selectors["name"])),
            "product_type": _text(
                el.select_one(self.selectors["product_type"])
            ),
            "price": _text(el.select_one(self.selectors["price"])),
            "image_url": image_url,
            "classes": list(classes),
        }

    async def scrape(self, url: str) -> list[RawProduct]:
        """Render *url* and return its raw product records.

        The renderer is released before extraction starts, whether or
        not rendering succeeded.

        Raises:
            ScrapeError: the page could not be rendered or parsed.
        """
        async with self.renderer_factory() as renderer:
            html = await renderer.render(url)
        try:
            products = self.extract(html, base_url=url)
        except Exception as exc:
            raise ScrapeError(f"Extraction from {url} failed: {exc}") from exc
        self.logger.info("Scraped %d products from %s", len(products), url)
        return products
