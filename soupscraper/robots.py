"""
Robots.txt Handler Module

Loads each site's robots.txt once and answers whether a URL may be
fetched and how long to wait between requests.
"""

import logging
import urllib.robotparser
from urllib.parse import urlparse

import requests

logger = logging.getLogger(__name__)


class RobotsHandler:
    """Handles robots.txt parsing and URL permission checking."""

    def __init__(self, user_agent='soupscraper/1.0', session=None, timeout=10):
        """
        Initialize the RobotsHandler.

        Args:
            user_agent (str): User agent string matched against robots.txt rules
            session (requests.Session): Session used to download robots.txt;
                a private one is created when omitted
            timeout (float): Timeout for the robots.txt request in seconds
        """
        self.user_agent = user_agent
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.timeout = timeout
        self.robot_parsers = {}  # Cache parsers by scheme + host

    @staticmethod
    def _get_domain(url):
        parsed = urlparse(url)
        return f"{parsed.scheme}://{parsed.netloc}"

    def _load(self, url):
        """
        Download and parse robots.txt for the site serving url.

        Args:
            url (str): Any URL on the site

        Returns:
            RobotFileParser: Parser with the site's rules
        """
        robots_url = f"{self._get_domain(url)}/robots.txt"
        parser = urllib.robotparser.RobotFileParser()
        parser.set_url(robots_url)

        try:
            response = self.session.get(
                robots_url,
                timeout=self.timeout,
                headers={'User-Agent': self.user_agent}
            )
        except requests.RequestException as e:
            # Unreachable robots.txt: fail open
            logger.warning(f"Could not read robots.txt from {robots_url}: {e}")
            parser.allow_all = True
            return parser

        if response.status_code in (401, 403):
            logger.info(f"robots.txt at {robots_url} is protected ({response.status_code}), disallowing site")
            parser.disallow_all = True
        elif 400 <= response.status_code < 500:
            logger.info(f"No robots.txt at {robots_url} ({response.status_code}), allowing site")
            parser.allow_all = True
        elif response.status_code >= 500:
            logger.warning(f"robots.txt at {robots_url} returned {response.status_code}, allowing site")
            parser.allow_all = True
        else:
            text = response.content.decode('utf-8', errors='replace')
            parser.parse(text.splitlines())
            logger.info(f"Successfully loaded robots.txt from {robots_url}")

        return parser

    def _parser_for(self, url):
        domain = self._get_domain(url)
        if domain not in self.robot_parsers:
            self.robot_parsers[domain] = self._load(url)
        return self.robot_parsers[domain]

    def can_fetch(self, url):
        """
        Check if the given URL can be fetched according to robots.txt.

        Args:
            url (str): The URL to check

        Returns:
            bool: True if fetching is allowed, False otherwise
        """
        allowed = self._parser_for(url).can_fetch(self.user_agent, url)
        logger.debug(f"robots.txt check for {url}: {allowed}")
        return allowed

    def get_crawl_delay(self, url):
        """
        Get the crawl delay specified in robots.txt.

        Args:
            url (str): The URL to check

        Returns:
            float or None: Crawl delay in seconds, or None if not specified
        """
        delay = self._parser_for(url).crawl_delay(self.user_agent)
        if delay is None:
            return None
        return float(delay)

    def clear(self):
        """Forget every cached robots.txt."""
        self.robot_parsers = {}

    def close(self):
        """Close the session if this handler created it."""
        if self._owns_session:
            self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
