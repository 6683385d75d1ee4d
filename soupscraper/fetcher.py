"""
Fetcher Module

Issues single blocking GET requests through a shared requests session,
honouring robots.txt and a polite delay between requests.
"""

import logging
import time

import requests

from .config import get_settings
from .exceptions import HTTPStatusError, NetworkError, RobotsDisallowedError
from .models import Page
from .robots import RobotsHandler
from .url_utils import is_valid_url

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
    'Accept-Language': 'en-US,en;q=0.9',
    'Connection': 'keep-alive',
}


class Fetcher:
    """Fetches pages one at a time."""

    def __init__(self, settings=None, session=None, robots=None, sleep=time.sleep, clock=time.monotonic):
        """
        Initialize the Fetcher.

        Args:
            settings (Settings): Scraper settings; the shared instance when omitted
            session (requests.Session): Session to reuse; the fetcher creates
                (and later closes) its own when omitted. Headers are sent per
                request, so a borrowed session is left unchanged
            robots (RobotsHandler): robots.txt checker; built from the session
                when omitted and robots checks are enabled
            sleep (callable): Function used to wait between requests
            clock (callable): Monotonic clock used to measure the delay
        """
        self.settings = settings or get_settings()
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.headers = {**DEFAULT_HEADERS, 'User-Agent': self.settings.user_agent}

        if robots is None and self.settings.respect_robots:
            robots = RobotsHandler(
                user_agent=self.settings.user_agent,
                session=self.session,
                timeout=self.settings.request_timeout
            )
        self.robots = robots

        self._sleep = sleep
        self._clock = clock
        self._last_request = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def _get_delay(self, url):
        """
        Get the delay to keep between requests to url's site.

        Args:
            url (str): URL about to be fetched

        Returns:
            float: Delay in seconds
        """
        delay = None
        if self.robots is not None:
            delay = self.robots.get_crawl_delay(url)
        if delay is None:
            delay = self.settings.default_delay
        return delay

    def _wait(self, url):
        if self._last_request is None:
            return

        delay = self._get_delay(url)
        remaining = delay - (self._clock() - self._last_request)
        if remaining > 0:
            logger.debug(f"Waiting {remaining:.2f}s before fetching {url}")
            self._sleep(remaining)

    def fetch(self, url, timeout=None):
        """
        Fetch a single page.

        Args:
            url (str): Absolute http(s) URL
            timeout (float): Request timeout in seconds; the configured
                request_timeout when omitted

        Returns:
            Page: Status code, body bytes and headers of the response

        Raises:
            ValueError: If url is not an absolute http(s) URL
            RobotsDisallowedError: If robots.txt forbids the URL
            HTTPStatusError: If the server answers 4xx/5xx
            NetworkError: On connection, DNS, timeout or other request errors
        """
        if not is_valid_url(url):
            raise ValueError(f"Not an absolute http(s) URL: {url!r}")

        if self.robots is not None and not self.robots.can_fetch(url):
            logger.warning(f"robots.txt disallows crawling: {url}")
            raise RobotsDisallowedError(url)

        self._wait(url)

        if timeout is None:
            timeout = self.settings.request_timeout

        logger.info(f"Fetching: {url}")
        try:
            response = self.session.get(url, timeout=timeout, headers=self.headers)
            response.raise_for_status()
        except requests.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            reason = e.response.reason if e.response is not None else None
            logger.error(f"HTTP error fetching {url}: {status_code}")
            raise HTTPStatusError(url, status_code, reason) from e
        except requests.RequestException as e:
            logger.error(f"Error fetching {url}: {e}")
            raise NetworkError(url, e) from e
        finally:
            self._last_request = self._clock()

        logger.info(f"Successfully fetched {url} ({len(response.content)} bytes)")
        return Page(
            url=response.url or url,
            status_code=response.status_code,
            content=response.content,
            headers=dict(response.headers),
            encoding=response.encoding
        )

    def close(self):
        """Close the session if this fetcher created it."""
        if self._owns_session:
            self.session.close()


def fetch(url, timeout=None, settings=None):
    """
    Fetch one page with a throwaway Fetcher.

    Args:
        url (str): URL to fetch
        timeout (float): Request timeout in seconds
        settings (Settings): Optional settings override

    Returns:
        Page: The fetched page
    """
    with Fetcher(settings=settings) as fetcher:
        return fetcher.fetch(url, timeout=timeout)
