#!/usr/bin/env python3
"""
reelcheck - Browser end-to-end checks for the TMDB upcoming movies flow

Opens a Playwright session, walks the upcoming listing and prints what it sees.
"""
import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel

from reelcheck import __version__

console = Console()


def _open_session(browser, headed):
    from reelcheck.browser.factory import browser_factory
    from reelcheck.browser.waits import wait_for_page_load
    from reelcheck.config import config

    browser_name = browser or config.get("browser")
    headless = False if headed else config.get_bool("headless")
    base_url = config.get("baseUrl")

    page = browser_factory.init_session(browser_name, headless)
    page.goto(base_url)
    wait_for_page_load(page)
    return page


@click.group()
@click.version_option(version=__version__, prog_name="reelcheck")
@click.option("--log-level", default=None, help="Log level (default: REELCHECK_LOG_LEVEL or INFO)")
@click.option("--log-json", is_flag=True, default=None, help="Emit JSON log lines")
def cli(log_level, log_json):
    """reelcheck - Browser end-to-end checks for TMDB"""
    from reelcheck.logging_config import setup_logging
    setup_logging(level=log_level, json_format=log_json)


@cli.command()
def config():
    """Show the resolved configuration"""
    from reelcheck.config import config as reader

    values = reader.as_dict()
    if not values:
        console.print(f"[yellow]No configuration found[/yellow] (looked for {reader.path})")
        return

    table = Table(title=f"Configuration ({reader.path})")
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="white")

    for key, value in sorted(values.items()):
        if "token" in key.lower():
            value = value[:4] + "..." if value else ""
        table.add_row(key, value)

    console.print(table)


@cli.command()
@click.option("--browser", "-b", default=None, help="chromium, firefox or webkit")
@click.option("--headed", is_flag=True, help="Show the browser window")
@click.option("--trace", "trace_path", default=None, help="Write the Playwright trace zip here")
def upcoming(browser, headed, trace_path):
    """List the upcoming movies"""
    from reelcheck.browser.factory import browser_factory
    from reelcheck.pages.upcoming_movies import UpcomingMoviesPage

    try:
        page = _open_session(browser, headed)
        listing = UpcomingMoviesPage(page).get_listing()
    finally:
        browser_factory.tear_down(trace_path=trace_path)

    if not listing:
        console.print("[red]Upcoming movies list is empty[/red]")
        raise SystemExit(1)

    table = Table(title="Upcoming Movies")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Movie", style="cyan")
    table.add_column("Release", style="green")

    for i, (movie, date) in enumerate(listing.items()):
        table.add_row(str(i), movie, date)

    console.print(table)
    console.print(f"[dim]{len(listing)} movies[/dim]")


@cli.command()
@click.argument("index", type=int, default=0)
@click.option("--browser", "-b", default=None, help="chromium, firefox or webkit")
@click.option("--headed", is_flag=True, help="Show the browser window")
@click.option("--trace", "trace_path", default=None, help="Write the Playwright trace zip here")
def details(index, browser, headed, trace_path):
    """Open the movie at INDEX in the upcoming list and show its details"""
    from reelcheck.browser.factory import browser_factory
    from reelcheck.pages.upcoming_movies import UpcomingMoviesPage

    try:
        page = _open_session(browser, headed)
        upcoming_page = UpcomingMoviesPage(page)
        details_page = upcoming_page.select_item(index)
        expected = upcoming_page.get_last_clicked_label()
        movie = details_page.details()
    finally:
        browser_factory.tear_down(trace_path=trace_path)

    console.print(Panel.fit(
        f"[bold cyan]{movie.title}[/bold cyan]\n"
        f"[dim]Language:[/dim] {movie.original_language}\n"
        f"[dim]Released:[/dim] {movie.release_date}\n"
        f"[dim]Genres:[/dim] {', '.join(movie.genres) or '-'}\n\n"
        f"{movie.overview}",
        border_style="cyan"
    ))

    if movie.title == expected:
        console.print(f"[green]✓[/green] Details title matches clicked title '{expected}'")
    else:
        console.print(f"[red]✗[/red] Clicked '{expected}' but details page shows '{movie.title}'")
        raise SystemExit(1)


if __name__ == "__main__":
    cli()
