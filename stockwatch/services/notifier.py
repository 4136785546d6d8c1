# stockwatch/services/notifier.py

"""Telegram digest notifier for stock changes.

All changes from one scrape cycle go out as a single HTML message, one
line per product, separated by blank lines.
"""

import logging

from curl_cffi.requests import AsyncSession

from stockwatch.config.settings import Settings
from stockwatch.models.product import Product

logger = logging.getLogger("stockwatch.notifier")

# & must come first so later entities are not double-escaped
_HTML_ENTITIES: list[tuple[str, str]] = [
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#039;"),
]

LINE_SEPARATOR = "\n\n"


def escape_html(text: str) -> str:
    """Replace the five markup-significant characters with entities."""
    for char, entity in _HTML_ENTITIES:
        text = text.replace(char, entity)
    return text


def format_line(product: Product) -> str:
    """Render one changed product as an HTML message line."""
    return (
        f"<b>Item:</b> {escape_html(product.name)} "
        f"<i>Price:</i> {escape_html(product.price)} "
        f"<b>{escape_html(product.stock_status.value)}</b>"
    )


def format_digest(products: list[Product]) -> str:
    """Join every product line into one message body."""
    return LINE_SEPARATOR.join(format_line(p) for p in products)


class TelegramNotifier:
    """Sends stock change digests through the Telegram Bot API."""

    def __init__(
        self,
        bot_token: str | None = None,
        chat_id: str | None = None,
        session: AsyncSession | None = None,
    ) -> None:
        self.settings = Settings()
        self.bot_token = bot_token or self.settings.TELEGRAM_BOT_TOKEN
        self.chat_id = chat_id or self.settings.TELEGRAM_CHAT_ID
        self.session = session

    @property
    def endpoint(self) -> str:
        """The sendMessage URL for the configured bot."""
        return (
            f"{self.settings.TELEGRAM_API_URL}"
            f"/bot{self.bot_token}/sendMessage"
        )

    async def _post(self, payload: dict[str, str]) -> int:
        """POST *payload* and return the HTTP status code."""
        if self.session is not None:
            resp = await self.session.post(
                self.endpoint,
                json=payload,
                timeout=self.settings.HTTP_TIMEOUT,
            )
            return int(resp.status_code)
        async with AsyncSession(
            impersonate=self.settings.IMPERSONATE_BROWSER
        ) as session:
            resp = await session.post(
                self.endpoint,
                json=payload,
                timeout=self.settings.HTTP_TIMEOUT,
            )
            return int(resp.status_code)

    async def notify(self, products: list[Product]) -> bool:
        """Send one digest for *products*.

        Returns True when the message was accepted.  An empty list sends
        nothing.  Send failures are logged and reported as False, never
        raised, so persistence still runs.
        """
        if not products:
            logger.debug("No changes to notify")
            return False

        payload = {
            "chat_id": self.chat_id,
            "text": format_digest(products),
            "parse_mode": "HTML",
        }
        try:
            status = await self._post(payload)
        except Exception as exc:
            logger.error(
                "Error sending batched Telegram message: %s",
                exc,
                exc_info=True,
            )
            return False

        if not 200 <= status < 300:
            logger.error(
                "Telegram rejected batched message: HTTP %d", status
            )
            return False

        logger.info(
            "Batched Telegram message sent (%d changes)", len(products)
        )
        return True
