"""
Parser Module

Wraps BeautifulSoup so pages can be searched by tag and attributes or
by CSS selector, and so links resolve against the page they came from.
"""

import logging

from bs4 import BeautifulSoup, FeatureNotFound

from .config import PARSERS, get_settings
from .url_utils import resolve_link

logger = logging.getLogger(__name__)


class Document:
    """A parsed page."""

    def __init__(self, soup, url=None):
        """
        Args:
            soup (BeautifulSoup): Parsed tree
            url (str): URL the markup was fetched from, used to resolve links
        """
        self.soup = soup
        self.url = url

    def __repr__(self):
        return f"<Document url={self.url!r} title={self.title!r}>"

    @property
    def title(self):
        if self.soup.title is None or self.soup.title.string is None:
            return None
        return self.soup.title.string.strip()

    def find_first(self, name=None, attrs=None, **kwargs):
        """
        Find the first element matching a tag and attribute predicate.

        Args:
            name: Tag name, list of names, regex or callable
            attrs (dict): Attribute filters, e.g. {'class': 'quote'}
            **kwargs: Extra BeautifulSoup filters such as class_ or string

        Returns:
            Tag or None: First match in document order
        """
        return self.soup.find(name, attrs or {}, **kwargs)

    def find_all(self, name=None, attrs=None, limit=None, **kwargs):
        """
        Find every element matching a tag and attribute predicate.

        Args:
            name: Tag name, list of names, regex or callable
            attrs (dict): Attribute filters
            limit (int): Stop after this many matches
            **kwargs: Extra BeautifulSoup filters

        Returns:
            list: Matching tags in document order (possibly empty)
        """
        return list(self.soup.find_all(name, attrs or {}, limit=limit, **kwargs))

    def select(self, css):
        """Return every element matching a CSS selector."""
        return list(self.soup.select(css))

    def select_one(self, css):
        """Return the first element matching a CSS selector, or None."""
        return self.soup.select_one(css)

    def links(self):
        """
        Collect the page's links.

        Returns:
            list: Absolute URLs in document order, without duplicates
        """
        seen = set()
        links = []
        for anchor in self.soup.find_all('a', href=True):
            url = resolve_link(self.url, anchor['href'])
            if url and url not in seen:
                seen.add(url)
                links.append(url)
        logger.debug(f"Found {len(links)} unique links in {self.url}")
        return links


def parse(markup, url=None, parser=None, from_encoding=None):
    """
    Parse HTML markup into a Document.

    Args:
        markup (bytes or str): Raw page content
        url (str): URL the markup came from
        parser (str): BeautifulSoup tree builder; the configured one when omitted
        from_encoding (str): Encoding of byte markup; sniffed when omitted

    Returns:
        Document: The parsed document

    Raises:
        ValueError: If the parser is unknown or not installed
    """
    parser = parser or get_settings().parser
    if parser not in PARSERS:
        raise ValueError(f"Unknown parser {parser!r}, expected one of {', '.join(PARSERS)}")

    try:
        if isinstance(markup, bytes) and from_encoding:
            soup = BeautifulSoup(markup, parser, from_encoding=from_encoding)
        else:
            soup = BeautifulSoup(markup, parser)
    except FeatureNotFound as e:
        raise ValueError(f"Parser {parser!r} is not installed") from e

    return Document(soup, url=url)


def parse_page(page, parser=None):
    """
    Parse a fetched Page.

    Args:
        page (Page): Fetched page
        parser (str): BeautifulSoup tree builder

    Returns:
        Document: The parsed document
    """
    return parse(page.content, url=page.url, parser=parser, from_encoding=page.charset)


def text_of(node, default=''):
    """Stripped text of node with whitespace runs joined by single spaces."""
    if node is None:
        return default
    return ' '.join(node.get_text(' ', strip=True).split())


def attr_of(node, name, default=None):
    """Attribute value of node, or default when node or attribute is missing."""
    if node is None:
        return default
    value = node.get(name)
    if value is None:
        return default
    if isinstance(value, list):
        return ' '.join(value)
    return value
