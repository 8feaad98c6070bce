"""Persistent Playwright browser session (keeps site logins between runs)."""
from __future__ import annotations

from pathlib import Path

from playwright.sync_api import BrowserContext, Page, Playwright, sync_playwright
from playwright.sync_api import Error as PlaywrightError

from applier.log import get_logger

log = get_logger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)
LAUNCH_ARGS = [
    "--disable-blink-features=AutomationControlled",
    "--no-sandbox",
    "--start-maximized",
]


class BrowserSession:
    def __init__(self, profile_dir: Path, *, headless: bool = False, slow_mo: int = 300) -> None:
        self.profile_dir = profile_dir
        self.headless = headless
        self.slow_mo = slow_mo
        self._playwright: Playwright | None = None
        self.context: BrowserContext | None = None
        self.page: Page | None = None

    def start(self) -> Page:
        log.info("Launching browser with saved profile (%s)...", self.profile_dir)
        self.profile_dir.mkdir(parents=True, exist_ok=True)
        self._playwright = sync_playwright().start()
        self.context = self._playwright.chromium.launch_persistent_context(
            user_data_dir=str(self.profile_dir),
            headless=self.headless,
            slow_mo=self.slow_mo,
            args=LAUNCH_ARGS,
            user_agent=USER_AGENT,
            no_viewport=True,
        )
        self.page = self.context.pages[0] if self.context.pages else self.context.new_page()
        log.info("Browser ready")
        return self.page

    def wait_until_closed(self) -> None:
        """Keep the window open for the operator until Ctrl+C or the window closes."""
        if self.page is None:
            return
        log.info("Browser staying open — press Ctrl+C to exit.")
        try:
            while not self.page.is_closed():
                self.page.wait_for_timeout(1000)
        except KeyboardInterrupt:
            log.info("Interrupted, closing browser")
        except PlaywrightError:
            log.info("Browser window closed")

    def close(self) -> None:
        if self.context is not None:
            try:
                self.context.close()
            except Exception as exc:
                log.debug("Context close failed: %s", exc)
            self.context = None
        if self._playwright is not None:
            self._playwright.stop()
            self._playwright = None

    def __enter__(self) -> Page:
        try:
            return self.start()
        except BaseException:
            self.close()
            raise

    def __exit__(self, *exc_info) -> None:
        self.close()
