"""
Browser management using Playwright
"""
import logging

from playwright.sync_api import sync_playwright

logger = logging.getLogger(__name__)


class BrowserManager:
    def __init__(self, headless=False, viewport=None, timeout_ms=30000):
        self.headless = headless
        self.viewport = viewport or {'width': 1280, 'height': 800}
        self.timeout_ms = timeout_ms
        self.playwright = None
        self.browser = None
        self.context = None

    def _cleanup(self):
        """Best-effort cleanup that also resets references."""
        for resource in (self.context, self.browser):
            if resource:
                try:
                    resource.close()
                except Exception as e:
                    logger.debug(f"Close failed: {e}")
        if self.playwright:
            try:
                self.playwright.stop()
            except Exception as e:
                logger.debug(f"Playwright stop failed: {e}")
        self.context = None
        self.browser = None
        self.playwright = None

    def _ensure_session(self):
        """Create a fresh Playwright session when none is active."""
        if self.playwright and self.browser and self.context:
            return
        self._cleanup()
        self.playwright = sync_playwright().start()
        self.browser = self.playwright.chromium.launch(headless=self.headless)
        self.context = self.browser.new_context(viewport=self.viewport)
        self.context.set_default_timeout(self.timeout_ms)

    def open_page(self, url):
        """Open a new page and navigate to URL, retrying once on a fresh session"""
        last_error = None
        for _ in range(2):
            try:
                self._ensure_session()
                page = self.context.new_page()
                page.goto(url, wait_until='domcontentloaded', timeout=self.timeout_ms)
                return page
            except Exception as e:
                last_error = e
                logger.warning(f"Opening {url} failed: {e}")
                self._cleanup()
        raise last_error

    def close(self):
        """Close browser and cleanup"""
        self._cleanup()
