"""
Reusable wait helpers for Playwright pages and locators.
"""
from playwright.sync_api import Locator, Page

from ..logging_config import get_logger

logger = get_logger("reelcheck.browser.waits")

DEFAULT_TIMEOUT_MS = 15000


def wait_for_page_load(page: Page, timeout_ms: int = DEFAULT_TIMEOUT_MS):
    """Wait for the "load" event; fine for server-rendered pages."""
    page.wait_for_load_state("load", timeout=timeout_ms)


def wait_for_network_idle(page: Page, timeout_ms: int = DEFAULT_TIMEOUT_MS):
    """
    Wait until the page has had no network connections for 500 ms.

    Single-page apps fetch their data after "load", so prefer this there.
    """
    page.wait_for_load_state("networkidle", timeout=timeout_ms)
    logger.debug("Network idle reached")


def wait_for_visible(locator: Locator, timeout_ms: int = DEFAULT_TIMEOUT_MS):
    """Wait up to ``timeout_ms`` for ``locator`` to become visible."""
    locator.wait_for(state="visible", timeout=timeout_ms)
    logger.debug(f"Locator visible: {locator}")
