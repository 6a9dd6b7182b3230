"""Command-line interface for the nightlife event scraper.

Usage:
    nightlife-scraper run --dry-run
    nightlife-scraper run --venue "Pacha Ibiza" --strategy paced
    nightlife-scraper sources
    nightlife-scraper preview https://pacha.com/ibiza/events
"""

import asyncio
from typing import Optional

import typer
from bs4 import BeautifulSoup
from rich.console import Console
from rich.table import Table

from nightlife_scraper import __version__
from nightlife_scraper.config.settings import get_settings
from nightlife_scraper.config.sources import SourceRegistry
from nightlife_scraper.core.event_model import RunSummary
from nightlife_scraper.core.exceptions import ScraperError
from nightlife_scraper.core.page_fetcher import PageFetcher
from nightlife_scraper.core.pipeline import ScrapeStrategy, run_scrape_job
from nightlife_scraper.logging import setup_logging
from nightlife_scraper.utils.html_reducer import is_data_script, reduce_html

app = typer.Typer(
    name="nightlife-scraper",
    help="Ibiza club event scraper for the trip portal",
    add_completion=False,
)
console = Console()


def _setup() -> None:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format, settings.log_file)


@app.command()
def run(
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Scrape and deduplicate without inserting",
    ),
    venue: Optional[list[str]] = typer.Option(
        None,
        "--venue", "-v",
        help="Only scrape this venue (name or slug, repeatable)",
    ),
    strategy: Optional[ScrapeStrategy] = typer.Option(
        None,
        "--strategy", "-s",
        help="batched (concurrent groups) or paced (one at a time)",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the raw run summary as JSON",
    ),
):
    """Run the scrape job once.

    Examples:
        nightlife-scraper run --dry-run
        nightlife-scraper run --venue amnesia --venue dc-10
    """
    _setup()

    sources = None
    if venue:
        try:
            sources = [SourceRegistry.require(v) for v in venue]
        except ScraperError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1)

    try:
        summary = asyncio.run(
            run_scrape_job(sources=sources, dry_run=dry_run or None, strategy=strategy)
        )
    except ScraperError as e:
        console.print(f"[red]Fatal:[/red] {e}")
        raise typer.Exit(1)

    if as_json:
        console.print_json(summary.model_dump_json())
    else:
        print_summary(summary)


def print_summary(summary: RunSummary) -> None:
    """Print a per-venue table and totals."""
    console.print()
    title = "DRY RUN SUMMARY" if summary.dry_run else "RUN SUMMARY"
    console.print(f"[bold blue]{title}[/bold blue]")
    console.print()

    table = Table(show_header=True, header_style="bold")
    table.add_column("Venue")
    table.add_column("Events", justify="right")
    table.add_column("Source URL")
    table.add_column("Status")

    for outcome in summary.outcomes:
        status = "[green]OK[/green]" if outcome.error is None else f"[red]ERR[/red] {outcome.error[:60]}"
        table.add_row(
            outcome.venue,
            str(len(outcome.events)),
            (outcome.url or "")[:60],
            status,
        )

    console.print(table)
    console.print()

    verb = "Would insert" if summary.dry_run else "Inserted"
    duration = (summary.finished_at - summary.started_at).total_seconds()
    console.print(
        f"[bold]TOTALS:[/bold] Extracted: {summary.total_extracted}, "
        f"{verb}: {summary.new_event_count}, "
        f"Failed venues: {len(summary.failed_venues)}, "
        f"Duration: {duration:.1f}s"
    )


@app.command()
def sources(
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Show URLs and hints",
    ),
):
    """List configured venues."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("Slug")
    table.add_column("Name")
    table.add_column("URLs", justify="right")
    table.add_column("Active")
    if verbose:
        table.add_column("Fallback chain")

    for s in SourceRegistry.all():
        row = [s.slug, s.name, str(len(s.urls)), "yes" if s.is_active else "no"]
        if verbose:
            row.append("\n".join(s.urls))
        table.add_row(*row)

    console.print(table)
    console.print(f"[bold]Total:[/bold] {SourceRegistry.count()} venues")


@app.command()
def preview(
    url: str = typer.Argument(..., help="Listing page to fetch"),
    chars: int = typer.Option(500, "--chars", "-n", help="Characters of reduced HTML to show"),
):
    """Fetch one page and show what the extraction model would receive.

    Handy when writing hints for a new venue.
    """
    settings = get_settings()

    async def fetch() -> str:
        async with PageFetcher(
            timeout=settings.fetch_timeout,
            user_agent=settings.scraper_user_agent,
        ) as fetcher:
            return await fetcher.fetch(url)

    try:
        html = asyncio.run(fetch())
    except ScraperError as e:
        console.print(f"[red]Fetch failed:[/red] {e}")
        raise typer.Exit(1)

    soup = BeautifulSoup(html, "html.parser")
    page_title = soup.title.get_text(strip=True) if soup.title else "-"
    data_scripts = sum(1 for tag in soup.find_all("script") if is_data_script(str(tag)))
    reduced = reduce_html(html, settings.max_html_length)

    console.print(f"[bold]Title:[/bold] {page_title}")
    console.print(f"[bold]Raw length:[/bold] {len(html)}")
    console.print(f"[bold]Reduced length:[/bold] {len(reduced)} (max {settings.max_html_length})")
    console.print(f"[bold]Data-bearing scripts kept:[/bold] {data_scripts}")
    console.print()
    console.print(reduced[:chars], markup=False)


@app.command()
def version():
    """Show version information."""
    console.print("[bold]Nightlife Event Scraper[/bold]")
    console.print(f"Version: {__version__}")
    console.print(f"Venues: {SourceRegistry.count()}")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
