"""
Page model for a TMDB movie details page.

Only the title is cached: it does not change while the details page is in
view. Every other field is read from the live DOM on each call.
"""
from dataclasses import dataclass, field
from typing import List, Dict, Any

from playwright.sync_api import Page

from ..logging_config import get_logger

logger = get_logger("reelcheck.pages.movie_details")

MOVIE_TITLE_XPATH = "//div[@class='single_column']//h2/a"
LANGUAGE_CSS = "p:has(bdi:text('Original Language'))"
LANGUAGE_LABEL = "Original Language"
OVERVIEW_XPATH = "//*[@class='overview']/p"
RELEASE_DATE_XPATH = "//*[@class='release']"
GENRES_XPATH = "//span[@class='genres']/a"


@dataclass
class MovieDetails:
    """Snapshot of every field on a details page."""
    title: str
    original_language: str
    overview: str
    release_date: str
    genres: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "original_language": self.original_language,
            "overview": self.overview,
            "release_date": self.release_date,
            "genres": list(self.genres),
        }


class MovieDetailsPage:
    """Read-only accessors over the details page the browser is showing."""

    def __init__(self, page: Page):
        self._page = page
        self._title = ""
        logger.debug("MovieDetailsPage created")

    @property
    def page(self) -> Page:
        return self._page

    def get_title(self) -> str:
        """
        Title shown in the header, cached after the first read.

        Call invalidate() first if the page has navigated or re-rendered.
        """
        if not self._title:
            self._title = self._page.locator(MOVIE_TITLE_XPATH).inner_text().strip()
            logger.info(f"Movie title on details page: '{self._title}'")
        return self._title

    def get_original_language(self) -> str:
        # text_content() includes the label, strip it off
        raw = self._page.locator(LANGUAGE_CSS).text_content() or ""
        language = raw.replace(LANGUAGE_LABEL, "").strip()
        logger.debug(f"Original language: {language}")
        return language

    def get_overview(self) -> str:
        text = self._page.locator(OVERVIEW_XPATH).inner_text().strip()
        logger.debug(f"Overview (truncated): {text[:80] + '...' if len(text) > 80 else text}")
        return text

    def get_release_date(self) -> str:
        date = self._page.locator(RELEASE_DATE_XPATH).inner_text().strip()
        logger.debug(f"Release date: {date}")
        return date

    def get_genres(self) -> List[str]:
        """Genre names in page order; an empty list when none are shown."""
        genres = list(self._page.locator(GENRES_XPATH).all_inner_texts())
        logger.debug(f"Genres ({len(genres)}): {genres}")
        return genres

    def invalidate(self):
        """Drop the cached title."""
        self._title = ""

    def details(self) -> MovieDetails:
        return MovieDetails(
            title=self.get_title(),
            original_language=self.get_original_language(),
            overview=self.get_overview(),
            release_date=self.get_release_date(),
            genres=self.get_genres(),
        )

    def log_all_details(self) -> MovieDetails:
        details = self.details()
        logger.info("=== Movie Details ===")
        logger.info(f"Title    : {details.title}")
        logger.info(f"Language : {details.original_language}")
        logger.info(f"Released : {details.release_date}")
        logger.info(f"Genres   : {details.genres}")
        logger.info(f"Overview : {details.overview}")
        return details
