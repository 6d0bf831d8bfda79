import time

import pytest
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from reelcheck.pages import upcoming_movies
from reelcheck.pages.movie_details import MovieDetailsPage
from reelcheck.pages.upcoming_movies import UpcomingMoviesPage, xpath_literal

from tests.fakes import (
    SAMPLE_MOVIES,
    FakeElement,
    FakeMovie,
    show_listing,
    tmdb_site,
)


@pytest.fixture
def site():
    return tmdb_site(SAMPLE_MOVIES)


class TestXPathLiteral:
    def test_plain(self):
        assert xpath_literal("Avatar 3") == "'Avatar 3'"

    def test_apostrophe(self):
        assert xpath_literal("Ocean's Fourteen") == '"Ocean\'s Fourteen"'

    def test_both_quotes(self):
        assert xpath_literal("It's \"fine\"") == "concat('It', \"'\", 's \"fine\"')"


class TestNavigate:
    def test_click_sequence(self, site):
        UpcomingMoviesPage(site)
        assert site.clicks == [
            f"label={upcoming_movies.MOVIES_MENU_LABEL}",
            upcoming_movies.UPCOMING_LINK_XPATH,
        ]

    def test_waits_for_first_title_with_default_ceiling(self, site):
        UpcomingMoviesPage(site)
        assert site.waits == [(upcoming_movies.TITLE_XPATH, "visible", 10000)]

    def test_constructor_can_skip_navigation(self, site):
        page = UpcomingMoviesPage(site, navigate=False)
        assert site.clicks == []
        with pytest.raises(RuntimeError):
            page.get_listing()

    def test_waits_for_late_rows(self):
        site = tmdb_site(SAMPLE_MOVIES, populate=False)

        def populate_later(p):
            rows = {
                upcoming_movies.MOVIE_ID_XPATH: [FakeElement(attrs={"data-id": m.movie_id}) for m in SAMPLE_MOVIES],
                upcoming_movies.TITLE_XPATH: [FakeElement(m.title) for m in SAMPLE_MOVIES],
                upcoming_movies.DATE_XPATH: [FakeElement(m.date) for m in SAMPLE_MOVIES],
            }
            ready_at = time.monotonic() + 0.05
            for selector, elements in rows.items():
                p.pending[selector] = (ready_at, elements)

        site.click_handlers[upcoming_movies.UPCOMING_LINK_XPATH] = populate_later

        page = UpcomingMoviesPage(site, timeout_ms=2000)

        assert site.waits == [(upcoming_movies.TITLE_XPATH, "visible", 2000)]
        assert len(page.get_listing()) == 3

    def test_timeout_ceiling_respected(self):
        site = tmdb_site(SAMPLE_MOVIES, populate=False)
        ceiling_ms = 200

        started = time.monotonic()
        with pytest.raises(PlaywrightTimeoutError):
            UpcomingMoviesPage(site, timeout_ms=ceiling_ms)
        elapsed = time.monotonic() - started

        assert elapsed >= ceiling_ms / 1000
        assert elapsed < ceiling_ms / 1000 + 2

    def test_missing_menu_is_hard_failure(self, site):
        del site.dom[f"label={upcoming_movies.MOVIES_MENU_LABEL}"]
        with pytest.raises(PlaywrightTimeoutError):
            UpcomingMoviesPage(site)


class TestListing:
    def test_keys_and_dates_in_dom_order(self, site):
        listing = UpcomingMoviesPage(site).get_listing()
        assert list(listing.items()) == [
            ("101 - Dune Part Two", "2026-03-01"),
            ("205 - Avatar 3", "2026-12-18"),
            ("311 - The Batman Part II", "2026-10-02"),
        ]

    def test_stable_across_calls(self, site):
        page = UpcomingMoviesPage(site)
        assert list(page.get_listing().items()) == list(page.get_listing().items())

    def test_count_read_at_call_time(self, site):
        page = UpcomingMoviesPage(site)
        assert len(page.get_listing()) == 3

        show_listing(site, SAMPLE_MOVIES + [FakeMovie("404", "Shrek 5", "2026-06-30")])

        listing = page.get_listing()
        assert len(listing) == 4
        assert list(listing)[-1] == "404 - Shrek 5"

    def test_duplicate_keys_overwrite(self, site):
        page = UpcomingMoviesPage(site)
        show_listing(site, [
            FakeMovie("101", "Dune Part Two", "2026-03-01"),
            FakeMovie("101", "Dune Part Two", "2026-03-15"),
        ])
        assert page.get_listing() == {"101 - Dune Part Two": "2026-03-15"}


class TestSelectItem:
    def test_last_clicked_label_empty_before_selection(self, site):
        assert UpcomingMoviesPage(site).get_last_clicked_label() == ""

    def test_returns_details_page_on_same_page(self, site):
        upcoming = UpcomingMoviesPage(site)
        details = upcoming.select_item(1)
        assert isinstance(details, MovieDetailsPage)
        assert details.page is site

    def test_navigation_consistency(self, site):
        upcoming = UpcomingMoviesPage(site)
        details = upcoming.select_item(1)

        assert upcoming.get_last_clicked_label() == "Avatar 3"
        assert details.get_title() == upcoming.get_last_clicked_label()

    @pytest.mark.parametrize("index", range(len(SAMPLE_MOVIES)))
    def test_navigation_consistency_for_every_row(self, index):
        site = tmdb_site(SAMPLE_MOVIES)
        upcoming = UpcomingMoviesPage(site)
        details = upcoming.select_item(index)
        assert details.get_title() == upcoming.get_last_clicked_label() == SAMPLE_MOVIES[index].title

    def test_clicks_exact_title_link(self, site):
        UpcomingMoviesPage(site).select_item(0)
        assert site.clicks[-1] == "//*[@id='media_results']//h2/a[normalize-space()='Dune Part Two']"

    def test_label_is_trimmed(self):
        movies = [FakeMovie("7", "  Padded Title \n", "2026-01-01")]
        upcoming = UpcomingMoviesPage(tmdb_site(movies))
        details = upcoming.select_item(0)
        assert upcoming.get_last_clicked_label() == "Padded Title"
        assert details.get_title() == "Padded Title"

    def test_title_with_apostrophe(self):
        movies = [FakeMovie("9", "Ocean's Fourteen", "2026-05-05")]
        upcoming = UpcomingMoviesPage(tmdb_site(movies))
        details = upcoming.select_item(0)
        assert details.get_title() == "Ocean's Fourteen"

    @pytest.mark.parametrize("index", [-1, 3, 50])
    def test_index_out_of_range(self, site, index):
        upcoming = UpcomingMoviesPage(site)
        with pytest.raises(IndexError):
            upcoming.select_item(index)
        assert upcoming.get_last_clicked_label() == ""
