"""
Terminal UI Module using Rich Library

Command-line front end: scrape the quotes example, fetch a single page,
or check a URL against robots.txt.
"""

import argparse
import logging
import sys

import requests
from pydantic import ValidationError
from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .config import Settings, get_settings
from .exceptions import HTTPStatusError, NetworkError, RobotsDisallowedError, ScraperError
from .fetcher import Fetcher
from .parser import parse_page, text_of
from .pipeline import scrape
from .quotes import DEFAULT_START_URL, NEXT_SELECTOR, QUOTE_FIELDS, extract_quotes, format_quote
from .robots import RobotsHandler
from .storage import CSVWriter, output_path

console = Console()
logger = logging.getLogger(__name__)


def setup_logging(level='INFO'):
    """Set up logging with rich handler."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
        force=True
    )


def build_parser():
    parser = argparse.ArgumentParser(
        prog='soupscraper',
        description='Polite web scraping with requests and BeautifulSoup.'
    )
    parser.add_argument('--log-level', default=None, help='Logging level (default from settings)')
    parser.add_argument('--user-agent', default=None, help='User-Agent header and robots.txt agent')
    parser.add_argument('--delay', type=float, default=None, help='Seconds between requests')
    parser.add_argument('--no-robots', action='store_true', help='Do not consult robots.txt')

    subparsers = parser.add_subparsers(dest='command', required=True)

    quotes = subparsers.add_parser('quotes', help='Scrape the quotes example site to CSV')
    quotes.add_argument('start_url', nargs='?', default=DEFAULT_START_URL)
    quotes.add_argument('--max-pages', type=int, default=None)
    quotes.add_argument('--output', default=None, help='CSV path (default: <output_dir>/<domain>_<date>.csv)')
    quotes.add_argument('--print', dest='print_quotes', action='store_true', help='Print each quote')

    fetch = subparsers.add_parser('fetch', help='Fetch a page and show its title')
    fetch.add_argument('url')
    fetch.add_argument('--select', default=None, help='CSS selector whose matches are printed')
    fetch.add_argument('--timeout', type=float, default=None)

    robots = subparsers.add_parser('robots', help='Check a URL against robots.txt')
    robots.add_argument('url')

    return parser


def settings_from_args(args):
    """
    Apply command-line overrides to the configured settings.

    Args:
        args (argparse.Namespace): Parsed arguments

    Returns:
        Settings: Settings for this run
    """
    overrides = {}
    if args.user_agent:
        overrides['user_agent'] = args.user_agent
    if args.delay is not None:
        overrides['default_delay'] = args.delay
    if args.no_robots:
        overrides['respect_robots'] = False
    if args.log_level:
        overrides['log_level'] = args.log_level
    return Settings(**{**get_settings().model_dump(), **overrides})


def display_summary(summary, path):
    """
    Display scrape results in a panel.

    Args:
        summary (ScrapeSummary): Scrape summary
        path (str): CSV file rows were written to
    """
    summary_text = (
        f"[bold]Start URL:[/bold] {escape(summary.start_url)}\n"
        f"[bold green]Pages:[/bold green] {summary.pages}\n"
        f"[bold green]Rows:[/bold green] {summary.rows}\n"
        f"[bold]Stopped:[/bold] {escape(str(summary.stopped_reason))}\n"
        f"[bold]Output:[/bold] {escape(str(path))}"
    )
    if summary.errors:
        summary_text += "\n[bold red]Errors:[/bold red] " + escape("; ".join(summary.errors))

    console.print(Panel(summary_text, title="[bold cyan]Scrape Results[/bold cyan]", border_style="cyan"))


def run_quotes(args, settings):
    path = args.output or output_path(settings.output_dir, args.start_url, stem='quotes')
    sink = CSVWriter(path, QUOTE_FIELDS)

    def on_page(document, written):
        console.print(f"[green]✓[/green] {escape(document.url)} [dim]({written} quotes)[/dim]")
        if args.print_quotes:
            for row in extract_quotes(document):
                console.print(Text(f"  {format_quote(row)}"), highlight=False)

    with Fetcher(settings=settings) as fetcher:
        summary = scrape(
            args.start_url,
            extract_quotes,
            sink,
            fetcher,
            next_selector=NEXT_SELECTOR,
            max_pages=args.max_pages,
            on_error='stop',
            on_page=on_page
        )

    display_summary(summary, path)
    return 0 if summary.succeeded else 1


def run_fetch(args, settings):
    with Fetcher(settings=settings) as fetcher:
        page = fetcher.fetch(args.url, timeout=args.timeout)

    document = parse_page(page, parser=settings.parser)

    table = Table(box=box.SIMPLE, show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("URL", Text(page.url))
    table.add_row("Status", Text(str(page.status_code), style="green"))
    table.add_row("Content-Type", Text(page.content_type or "-"))
    table.add_row("Size", f"{len(page.content)} bytes")
    table.add_row("Title", Text(document.title or "-"))
    table.add_row("Links", str(len(document.links())))
    console.print(table)

    if args.select:
        matches = document.select(args.select)
        console.print(f"\n[bold cyan]{len(matches)} match(es) for {escape(args.select)}[/bold cyan]")
        for node in matches:
            console.print(Text.assemble("  ", ("→", "green"), " ", text_of(node)), highlight=False)

    return 0


def run_robots(args, settings):
    with requests.Session() as session:
        handler = RobotsHandler(
            user_agent=settings.user_agent,
            session=session,
            timeout=settings.request_timeout
        )
        allowed = handler.can_fetch(args.url)
        delay = handler.get_crawl_delay(args.url)

    status = Text("✓ Allowed", style="green") if allowed else Text("✗ Blocked", style="red")
    delay_text = f"{delay}s" if delay is not None else f"{settings.default_delay}s (default)"

    table = Table(box=box.ROUNDED)
    table.add_column("URL", style="cyan", no_wrap=False)
    table.add_column("Status", justify="center")
    table.add_column("Crawl Delay", justify="right")
    table.add_row(Text(args.url), status, delay_text)
    console.print(table)

    return 0 if allowed else 1


COMMANDS = {
    'quotes': run_quotes,
    'fetch': run_fetch,
    'robots': run_robots,
}


def main(argv=None):
    """Main terminal UI entry point."""
    args = build_parser().parse_args(argv)
    try:
        settings = settings_from_args(args)
    except ValidationError as e:
        console.print(f"[bold red]Invalid settings:[/bold red] {escape(str(e))}")
        return 1
    setup_logging(settings.log_level)

    try:
        return COMMANDS[args.command](args, settings)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user. Exiting...[/yellow]")
        return 130
    except HTTPStatusError as e:
        console.print(f"[bold red]HTTP error:[/bold red] {escape(e.url)} returned {e.status_code}")
        return 1
    except NetworkError as e:
        console.print(f"[bold red]Network error:[/bold red] could not reach {escape(e.url)} ({escape(str(e.cause))})")
        return 1
    except RobotsDisallowedError as e:
        console.print(f"[bold yellow]Blocked:[/bold yellow] robots.txt disallows {escape(e.url)}")
        return 1
    except ScraperError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        return 1
    except ValueError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
