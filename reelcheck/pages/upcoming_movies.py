"""
Page model for the TMDB "Upcoming Movies" listing.
"""
from typing import Dict, Optional

from playwright.sync_api import Locator, Page

from ..browser.waits import wait_for_visible
from ..logging_config import get_logger
from .movie_details import MovieDetailsPage

logger = get_logger("reelcheck.pages.upcoming_movies")

MOVIES_MENU_LABEL = "Movies"
UPCOMING_LINK_XPATH = "//a[@aria-label='Upcoming']"
MOVIE_ID_XPATH = "//*[@id='media_results']//div[@data-id]"
TITLE_XPATH = "//*[@id='media_results']//h2"
DATE_XPATH = "//*[@id='media_results']//p"
MOVIE_LINK_TEMPLATE = "//*[@id='media_results']//h2/a[normalize-space()={label}]"

LISTING_TIMEOUT_MS = 10000


def xpath_literal(value: str) -> str:
    """Quote ``value`` as an XPath string literal, even if it holds both quote kinds."""
    if "'" not in value:
        return f"'{value}'"
    if '"' not in value:
        return f'"{value}"'
    parts = value.split("'")
    return "concat(" + ", \"'\", ".join(f"'{part}'" for part in parts) + ")"


class UpcomingMoviesPage:
    """
    The upcoming movies list, reached from the home page through the Movies menu.

    The id/title/date locators are live queries: every read goes back to
    the DOM, so row counts are taken at call time.
    """

    def __init__(
        self,
        page: Page,
        navigate: bool = True,
        timeout_ms: int = LISTING_TIMEOUT_MS,
    ):
        self._page = page
        self._movie_ids: Optional[Locator] = None
        self._movie_titles: Optional[Locator] = None
        self._movie_dates: Optional[Locator] = None
        self._last_clicked_label = ""
        if navigate:
            self.navigate(timeout_ms=timeout_ms)

    @property
    def page(self) -> Page:
        return self._page

    def navigate(self, timeout_ms: int = LISTING_TIMEOUT_MS):
        """
        Open Movies -> Upcoming and wait for the first title to show.

        Raises:
            playwright.sync_api.TimeoutError: no title appeared within ``timeout_ms``
        """
        logger.info("Navigating to Upcoming Movies page")
        self._page.get_by_label(MOVIES_MENU_LABEL).click()
        self._page.locator(UPCOMING_LINK_XPATH).click()

        # Resolve after the clicks so the queries run against the listing DOM
        self._movie_ids = self._page.locator(MOVIE_ID_XPATH)
        self._movie_titles = self._page.locator(TITLE_XPATH)
        self._movie_dates = self._page.locator(DATE_XPATH)

        wait_for_visible(self._movie_titles.first, timeout_ms=timeout_ms)
        logger.info(f"Upcoming movies page loaded - {self._movie_titles.count()} titles visible")

    def _require_locators(self):
        if self._movie_titles is None:
            raise RuntimeError("UpcomingMoviesPage.navigate() has not been called")

    def get_listing(self) -> Dict[str, str]:
        """
        Map of "<id> - <title>" to the displayed release date, in page order.

        Two rows with the same id and title collapse into one entry (the
        later row wins).
        """
        self._require_locators()
        count = self._movie_titles.count()
        logger.info(f"Fetching {count} upcoming movies")

        listing: Dict[str, str] = {}
        for i in range(count):
            movie_id = self._movie_ids.nth(i).get_attribute("data-id")
            name = self._movie_titles.nth(i).inner_text()
            date = self._movie_dates.nth(i).inner_text()
            key = f"{movie_id} - {name}"
            if key in listing:
                logger.debug(f"Duplicate listing entry '{key}' overwritten")
            listing[key] = date

        logger.debug(f"Movie listing: {listing}")
        return listing

    def select_item(self, index: int) -> MovieDetailsPage:
        """
        Click the movie at ``index`` (0-based) and return its details page.

        Raises:
            IndexError: ``index`` is outside the current list
        """
        self._require_locators()
        count = self._movie_titles.count()
        if index < 0 or index >= count:
            raise IndexError(f"Movie index {index} out of range (list has {count} entries)")

        self._last_clicked_label = self._movie_titles.nth(index).inner_text().strip()
        logger.info(f"Clicking movie [{index}]: '{self._last_clicked_label}'")

        selector = MOVIE_LINK_TEMPLATE.format(label=xpath_literal(self._last_clicked_label))
        self._page.locator(selector).click()

        logger.info(f"Navigated to details page for '{self._last_clicked_label}'")
        return MovieDetailsPage(self._page)

    def get_last_clicked_label(self) -> str:
        """Title of the movie last opened with select_item(), or ""."""
        return self._last_clicked_label
