"""Shared fixtures: an offline requests session and sample pages."""

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from soupscraper.config import Settings


def make_response(url, body=b'', status_code=200, headers=None, encoding='utf-8'):
    """Build a real requests.Response without touching the network."""
    if isinstance(body, str):
        body = body.encode('utf-8')

    response = requests.Response()
    response.url = url
    response.status_code = status_code
    response.reason = 'OK' if status_code < 400 else 'Error'
    response._content = body
    response.headers = CaseInsensitiveDict(headers or {'Content-Type': 'text/html; charset=utf-8'})
    response.encoding = encoding
    return response


class FakeSession(requests.Session):
    """Session answering from a URL -> body/response/exception table."""

    def __init__(self, routes=None):
        super().__init__()
        self.routes = dict(routes or {})
        self.calls = []

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if url not in self.routes:
            return make_response(url, b'Not Found', status_code=404)

        route = self.routes[url]
        if isinstance(route, Exception):
            raise route
        if isinstance(route, requests.Response):
            return route
        if isinstance(route, tuple):
            status_code, body = route
            return make_response(url, body, status_code=status_code)
        return make_response(url, route)

    def fetched(self):
        return [url for url, _ in self.calls]


def quotes_page(quotes, next_href=None):
    """Render a page in the quotes site layout."""
    blocks = []
    for text, author, tags in quotes:
        tag_links = ''.join(f'<a class="tag" href="/tag/{t}/">{t}</a>' for t in tags)
        blocks.append(
            '<div class="quote">'
            f'<span class="text">“{text}”</span>'
            f'<span>by <small class="author">{author}</small></span>'
            f'<div class="tags">Tags: {tag_links}</div>'
            '</div>'
        )
    pager = ''
    if next_href:
        pager = f'<nav><ul class="pager"><li class="next"><a href="{next_href}">Next</a></li></ul></nav>'
    return (
        '<html><head><title>Quotes to Scrape</title></head><body>'
        + ''.join(blocks) + pager + '</body></html>'
    )


@pytest.fixture
def settings():
    return Settings(respect_robots=False, default_delay=0, max_pages=10, user_agent='test-agent/1.0')


@pytest.fixture
def fake_session():
    return FakeSession()
