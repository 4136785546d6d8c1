# stockwatch/scrapers/renderer.py

"""Headless Chromium renderer, acquired per scrape and always torn down."""

import logging
from types import TracebackType

from playwright.async_api import Browser, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from stockwatch.config.settings import Settings
from stockwatch.exceptions import ScrapeError

logger = logging.getLogger("stockwatch.renderer")


class PageRenderer:
    """Async context manager owning one Playwright browser.

    The browser lives only inside the ``async with`` block; leaving the
    block by any path closes it and stops the Playwright driver.
    """

    def __init__(
        self,
        timeout_ms: int | None = None,
        headless: bool | None = None,
        executable_path: str | None = None,
        browser_args: list[str] | None = None,
    ) -> None:
        settings = Settings()
        self.timeout_ms: int = (
            timeout_ms
            if timeout_ms is not None
            else settings.NAVIGATION_TIMEOUT_MS
        )
        self.headless: bool = (
            headless if headless is not None else settings.HEADLESS
        )
        self.executable_path = (
            executable_path or settings.CHROME_EXECUTABLE_PATH
        )
        self.browser_args: list[str] = (
            browser_args
            if browser_args is not None
            else list(settings.BROWSER_ARGS)
        )
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None

    async def __aenter__(self) -> "PageRenderer":
        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(
                headless=self.headless,
                executable_path=self.executable_path,
                args=self.browser_args,
            )
        except PlaywrightError as exc:
            await self.close()
            raise ScrapeError(f"Browser launch failed: {exc}") from exc
        logger.debug(
            "Browser launched (headless=%s, executable=%s)",
            self.headless,
            self.executable_path or "bundled",
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the browser and stop the driver; safe to call twice.

        Teardown errors are logged, never raised, so they cannot replace
        the error that ended the scrape.
        """
        browser, self._browser = self._browser, None
        playwright, self._playwright = self._playwright, None
        if browser is not None:
            try:
                await browser.close()
                logger.debug("Browser closed")
            except PlaywrightError:
                logger.warning("Browser close failed", exc_info=True)
        if playwright is not None:
            try:
                await playwright.stop()
            except PlaywrightError:
                logger.warning("Playwright stop failed", exc_info=True)

    async def render(self, url: str) -> str:
        """Navigate to *url* and return the rendered HTML.

        Raises:
            ScrapeError: navigation timed out or the browser failed.
        """
        if self._browser is None:
            raise RuntimeError("PageRenderer used outside 'async with'")

        try:
            page = await self._browser.new_page()
        except PlaywrightError as exc:
            raise ScrapeError(f"Could not open a page: {exc}") from exc
        page.set_default_timeout(self.timeout_ms)
        try:
            logger.info("Rendering %s", url)
            await page.goto(url)
            html: str = await page.content()
            logger.debug("Rendered %d bytes from %s", len(html), url)
            return html
        except PlaywrightTimeoutError as exc:
            raise ScrapeError(
                f"Navigation to {url} timed out after {self.timeout_ms} ms"
            ) from exc
        except PlaywrightError as exc:
            raise ScrapeError(f"Rendering {url} failed: {exc}") from exc
        finally:
            try:
                await page.close()
            except PlaywrightError:
                logger.warning("Page close failed for %s", url, exc_info=True)
