# stockwatch/storage/file_manager.py

"""Handles saving scraped catalogs to disk."""

import json
import logging
from datetime import datetime
from pathlib import Path

from stockwatch.config.settings import Settings
from stockwatch.models.product import Product

logger = logging.getLogger("stockwatch.storage")


class FileManager:
    """Handles saving scraped catalogs to disk."""

    def __init__(self, results_dir: Path | None = None) -> None:
        self.results_dir: Path = results_dir or Settings.RESULTS_DIR
        self.results_dir.mkdir(parents=True, exist_ok=True)
        logger.debug("FileManager initialised, results_dir=%s", self.results_dir)

    def save_products(
        self, products: list[Product], label: str = "catalog",
    ) -> Path:
        """Save a product list to a timestamped JSON file."""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = f"{label.replace(' ', '_')}_{timestamp}.json"
        filepath = self.results_dir / filename

        data = [p.to_dict() for p in products]
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)

        logger.info("Saved %d products to %s", len(products), filepath)
        return filepath
