"""
URL Utilities Module

Normalization used to detect pagination cycles, plus helpers for
validating URLs and resolving links found in a page.
"""

from urllib.parse import urldefrag, urljoin, urlparse, urlunparse, parse_qs, urlencode
import logging

logger = logging.getLogger(__name__)

SKIPPED_PREFIXES = ('mailto:', 'tel:', 'javascript:', 'data:')


def ensure_scheme(url):
    """
    Ensure URL has a scheme (add https:// if missing).

    Args:
        url (str): URL that may be missing a scheme

    Returns:
        str: URL with scheme

    Examples:
        >>> ensure_scheme('example.com')
        'https://example.com'
        >>> ensure_scheme('http://example.com')
        'http://example.com'
    """
    if not url:
        return url

    if '://' in url:
        return url

    return f'https://{url}'


def normalize_url(url):
    """
    Normalize a URL to a canonical form for comparison.

    Lowercases the host, drops a leading www., the fragment and trailing
    slashes, and sorts query parameters. The scheme is kept as-is so that
    http and https pages are still fetched from the address the site gave.

    Args:
        url (str): URL to normalize

    Returns:
        str: Normalized URL

    Examples:
        >>> normalize_url('http://www.Example.com/page/?b=2&a=1#top')
        'http://example.com/page?a=1&b=2'
    """
    if not url:
        return url

    parsed = urlparse(url)

    netloc = parsed.netloc.lower()
    if netloc.startswith('www.'):
        netloc = netloc[4:]

    path = parsed.path
    if path == '/':
        path = ''
    elif path.endswith('/'):
        path = path.rstrip('/')

    query = parsed.query
    if query:
        params = parse_qs(query, keep_blank_values=True)
        query = urlencode(sorted(params.items()), doseq=True)

    return urlunparse((parsed.scheme.lower(), netloc, path, parsed.params, query, ''))


def is_valid_url(url):
    """
    Check if a string is an absolute http(s) URL.

    Args:
        url (str): String to validate

    Returns:
        bool: True if valid URL

    Examples:
        >>> is_valid_url('https://example.com')
        True
        >>> is_valid_url('not a url')
        False
    """
    if not url or not isinstance(url, str):
        return False

    result = urlparse(url)
    return result.scheme in ('http', 'https') and bool(result.netloc)


def resolve_link(base_url, href):
    """
    Turn an href found on a page into an absolute URL.

    Args:
        base_url (str): URL of the page the link was found on
        href (str): Raw href attribute value

    Returns:
        str or None: Absolute URL without fragment, or None for links
            that do not point at another page
    """
    if href is None:
        return None

    href = href.strip()
    if not href or href.startswith('#'):
        return None

    if href.lower().startswith(SKIPPED_PREFIXES):
        return None

    absolute_url, _ = urldefrag(urljoin(base_url or '', href))
    if not is_valid_url(absolute_url):
        logger.debug(f"Skipping non-http link {href!r} on {base_url}")
        return None

    return absolute_url


def get_domain(url):
    """
    Extract the host from a URL, without a leading www.

    Args:
        url (str): URL to extract domain from

    Returns:
        str: Domain name

    Examples:
        >>> get_domain('https://www.example.com/page')
        'example.com'
    """
    return urlparse(normalize_url(ensure_scheme(url))).netloc
