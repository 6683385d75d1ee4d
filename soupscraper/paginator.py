"""
Paginator Module

Follows "next page" links from a start URL, yielding each parsed page.
Iteration ends when a page has no next link, when the page limit is
reached, or when a next link leads back to a page already visited.
"""

import logging

from .exceptions import FetchError
from .parser import attr_of, parse_page
from .url_utils import normalize_url, resolve_link

logger = logging.getLogger(__name__)

ON_ERROR_CHOICES = ('raise', 'stop')


class Paginator:
    """Walks a paginated listing one page at a time."""

    def __init__(self, fetcher, next_selector, next_attr='href', max_pages=None, on_error='raise', parser=None):
        """
        Initialize the Paginator.

        Args:
            fetcher (Fetcher): Fetcher used for every page
            next_selector (str): CSS selector of the element holding the next link
            next_attr (str): Attribute of that element containing the URL
            max_pages (int): Maximum pages to fetch; the fetcher's configured
                max_pages when omitted
            on_error (str): 'raise' to propagate fetch errors, 'stop' to log
                them and end iteration
            parser (str): BeautifulSoup tree builder
        """
        if on_error not in ON_ERROR_CHOICES:
            raise ValueError(f"on_error must be one of {ON_ERROR_CHOICES}, got {on_error!r}")
        if max_pages is None:
            max_pages = fetcher.settings.max_pages
        if max_pages < 1:
            raise ValueError("max_pages must be at least 1")

        self.fetcher = fetcher
        self.next_selector = next_selector
        self.next_attr = next_attr
        self.max_pages = max_pages
        self.on_error = on_error
        self.parser = parser or fetcher.settings.parser

        self.visited = []
        self.errors = []
        self.stopped_reason = None

    def next_url(self, document):
        """
        Find the next page's URL in a document.

        Args:
            document (Document): Current page

        Returns:
            str or None: Absolute URL of the next page, or None on the last page
        """
        node = document.select_one(self.next_selector)
        return resolve_link(document.url, attr_of(node, self.next_attr))

    def pages(self, start_url):
        """
        Iterate over the pages of a listing.

        Args:
            start_url (str): URL of the first page

        Yields:
            Document: Each parsed page, in order

        Raises:
            FetchError: When a fetch fails and on_error is 'raise'
        """
        self.visited = []
        self.errors = []
        self.stopped_reason = None

        seen = set()
        url = start_url

        while url is not None:
            if len(self.visited) >= self.max_pages:
                logger.info(f"Reached page limit ({self.max_pages}), not fetching {url}")
                self.stopped_reason = 'max_pages'
                return

            key = normalize_url(url)
            if key in seen:
                logger.warning(f"Next link loops back to {url}, stopping")
                self.stopped_reason = 'cycle'
                return
            seen.add(key)

            try:
                page = self.fetcher.fetch(url)
            except FetchError as e:
                self.errors.append(str(e))
                self.stopped_reason = 'error'
                if self.on_error == 'raise':
                    raise
                logger.error(f"Stopping pagination after error: {e}")
                return

            self.visited.append(url)
            # Redirects count as visits too
            seen.add(normalize_url(page.url))

            document = parse_page(page, parser=self.parser)
            logger.info(f"[page {len(self.visited)}] {url}")
            yield document

            url = self.next_url(document)

        self.stopped_reason = 'exhausted'
