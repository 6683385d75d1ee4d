"""
soupscraper

Polite, sequential web scraping with requests and BeautifulSoup: fetch a
page, parse it, follow pagination and write cleaned rows to CSV or SQL.
"""

from .cleaner import clean_row, clean_text, parse_number, strip_quotes
from .config import Settings, get_settings
from .exceptions import (
    FetchError,
    HTTPStatusError,
    NetworkError,
    RobotsDisallowedError,
    SchemaMismatchError,
    ScraperError,
    StorageError,
)
from .fetcher import Fetcher, fetch
from .models import Page, ScrapeSummary
from .paginator import Paginator
from .parser import Document, attr_of, parse, parse_page, text_of
from .pipeline import scrape
from .robots import RobotsHandler
from .storage import CSVWriter, SQLWriter, output_path

__version__ = '1.0.0'
__all__ = [
    'Settings',
    'get_settings',
    'ScraperError',
    'FetchError',
    'HTTPStatusError',
    'NetworkError',
    'RobotsDisallowedError',
    'StorageError',
    'SchemaMismatchError',
    'Page',
    'ScrapeSummary',
    'Fetcher',
    'fetch',
    'RobotsHandler',
    'Document',
    'parse',
    'parse_page',
    'text_of',
    'attr_of',
    'clean_text',
    'clean_row',
    'strip_quotes',
    'parse_number',
    'Paginator',
    'scrape',
    'CSVWriter',
    'SQLWriter',
    'output_path',
]
