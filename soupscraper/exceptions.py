"""
Exceptions Module

Error types raised by the fetch, parse and storage layers.
"""


class ScraperError(Exception):
    """Base class for every error raised by soupscraper."""


class FetchError(ScraperError):
    """A page could not be fetched."""

    def __init__(self, url, message=None):
        self.url = url
        super().__init__(message or f"Failed to fetch {url}")


class HTTPStatusError(FetchError):
    """The server answered with a 4xx or 5xx status code."""

    def __init__(self, url, status_code, reason=None):
        self.status_code = status_code
        self.reason = reason
        detail = f"{status_code} {reason}" if reason else str(status_code)
        super().__init__(url, f"HTTP error {detail} for {url}")


class NetworkError(FetchError):
    """Connection, DNS, timeout or other transport-level failure."""

    def __init__(self, url, cause=None):
        self.cause = cause
        message = f"Network error for {url}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(url, message)


class RobotsDisallowedError(FetchError):
    """robots.txt does not allow the configured user agent to fetch the URL."""

    def __init__(self, url):
        super().__init__(url, f"robots.txt disallows crawling {url}")


class StorageError(ScraperError):
    """Rows could not be written to a sink."""


class SchemaMismatchError(StorageError):
    """A row (or an existing file header) does not match the sink's columns."""

    def __init__(self, expected, got):
        self.expected = list(expected)
        self.got = list(got)
        super().__init__(f"Expected columns {self.expected}, got {self.got}")
