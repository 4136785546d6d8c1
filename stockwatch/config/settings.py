# stockwatch/config/settings.py

"""Central configuration for the stockwatch monitor."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    """Read a boolean flag such as ``HEADLESS=false`` from the environment."""
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: list[str]) -> list[str]:
    """Read a comma-separated list from the environment."""
    value = os.getenv(name)
    if not value:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings:
    """Central configuration for the stockwatch monitor."""

    # --- Scraping ---
    SCRAPING_URL: str = os.getenv("SCRAPING_URL", "")
    NAVIGATION_TIMEOUT_MS: int = int(
        os.getenv("NAVIGATION_TIMEOUT_MS", str(2 * 60 * 1000))
    )
    HEADLESS: bool = _env_bool("HEADLESS", True)
    # Leave unset for local runs; containers point this at system Chrome
    CHROME_EXECUTABLE_PATH: str | None = (
        os.getenv("CHROME_EXECUTABLE_PATH") or None
    )
    BROWSER_ARGS: list[str] = _env_list("BROWSER_ARGS", ["--no-sandbox"])

    # --- Baseline store ---
    STORE_CHUNK_SIZE: int = int(os.getenv("STORE_CHUNK_SIZE", "10"))
    AIRTABLE_API_URL: str = "https://api.airtable.com/v0"
    AIRTABLE_API_KEY: str = os.getenv("AIRTABLE_API_KEY", "")
    AIRTABLE_BASE_ID: str = os.getenv("AIRTABLE_BASE_ID", "")
    AIRTABLE_TABLE_NAME: str = os.getenv("AIRTABLE_TABLE_NAME", "")
    AIRTABLE_NAME_FIELD: str = os.getenv("AIRTABLE_NAME_FIELD", "Item")
    AIRTABLE_PRICE_FIELD: str = os.getenv("AIRTABLE_PRICE_FIELD", "Price")
    AIRTABLE_STOCK_FIELD: str = os.getenv("AIRTABLE_STOCK_FIELD", "Stock")

    # --- Notifications ---
    TELEGRAM_API_URL: str = "https://api.telegram.org"
    TELEGRAM_BOT_TOKEN: str = os.getenv("TELEGRAM_BOT_TOKEN", "")
    TELEGRAM_CHAT_ID: str = os.getenv("TELEGRAM_CHAT_ID", "")

    # --- Forwarding ---
    PUSH_URL: str = os.getenv("PUSH_URL", "")

    # --- HTTP client ---
    HTTP_TIMEOUT: int = 30              # Seconds per outbound API call
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"

    # --- Logging ---
    # Console threshold; the run log file always records DEBUG
    LOG_CONSOLE_LEVEL: str = os.getenv("LOG_CONSOLE_LEVEL", "WARNING").upper()
    LOG_FILE_PREFIX: str = "stockwatch"

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    SELECTORS_PATH: Path = BASE_DIR / "stockwatch" / "config" / "selectors.json"
    RESULTS_DIR: Path = BASE_DIR / "results"
    LOGS_DIR: Path = BASE_DIR / "logs"
    BASELINE_DB_PATH: Path = Path(
        os.getenv("BASELINE_DB_PATH", str(BASE_DIR / "data" / "baseline.db"))
    )
