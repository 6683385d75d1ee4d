"""
Pipeline Module

Ties fetching, parsing, cleaning and storage together: walk the pages
of a listing, extract rows from each, clean them and write them out.
"""

import logging
from datetime import datetime

from .cleaner import clean_row
from .exceptions import FetchError
from .models import ScrapeSummary
from .paginator import Paginator
from .parser import parse_page

logger = logging.getLogger(__name__)


def _write(document, extract, sink, transforms):
    rows = [clean_row(row, transforms) for row in extract(document)]
    return sink.write_rows(rows)


def scrape(start_url, extract, sink, fetcher, next_selector=None, max_pages=None,
           on_error='raise', transforms=None, on_page=None):
    """
    Scrape rows from one page or a paginated listing.

    Args:
        start_url (str): First page to fetch
        extract (callable): Takes a Document, returns an iterable of row dicts
        sink: CSVWriter or SQLWriter the rows are written to
        fetcher (Fetcher): Fetcher used for every request
        next_selector (str): CSS selector of the next link; only start_url
            is fetched when omitted
        max_pages (int): Page limit for paginated scrapes
        on_error (str): 'raise' or 'stop', see Paginator
        transforms (dict): Per-column callables passed to clean_row
        on_page (callable): Called with (document, rows_written) after each page

    Returns:
        ScrapeSummary: Pages fetched, rows written and why the run stopped
    """
    summary = ScrapeSummary(start_url=start_url)
    logger.info(f"Starting scrape from {start_url}")

    if next_selector is None:
        try:
            page = fetcher.fetch(start_url)
        except FetchError as e:
            summary.errors.append(str(e))
            summary.stopped_reason = 'error'
            summary.finished_at = datetime.now()
            if on_error == 'raise':
                raise
            logger.error(f"Scrape failed: {e}")
            return summary

        document = parse_page(page, parser=fetcher.settings.parser)
        written = _write(document, extract, sink, transforms)
        summary.pages = 1
        summary.rows = written
        summary.visited.append(start_url)
        summary.stopped_reason = 'exhausted'
        if on_page is not None:
            on_page(document, written)
    else:
        paginator = Paginator(
            fetcher,
            next_selector,
            max_pages=max_pages,
            on_error=on_error
        )
        try:
            for document in paginator.pages(start_url):
                written = _write(document, extract, sink, transforms)
                summary.pages += 1
                summary.rows += written
                if on_page is not None:
                    on_page(document, written)
        finally:
            summary.visited = list(paginator.visited)
            summary.errors = list(paginator.errors)
            summary.stopped_reason = paginator.stopped_reason

    summary.finished_at = datetime.now()
    logger.info(
        f"Scrape complete: {summary.rows} rows from {summary.pages} pages "
        f"(stopped: {summary.stopped_reason})"
    )
    return summary
