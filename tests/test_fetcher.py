from unittest.mock import Mock, patch

import pytest
import requests

from conftest import FakeSession, make_response
from soupscraper.exceptions import HTTPStatusError, NetworkError, RobotsDisallowedError
from soupscraper.fetcher import Fetcher
from soupscraper.models import Page


class FakeClock:
    def __init__(self):
        self.now = 100.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


def test_fetch_returns_page(settings):
    session = FakeSession({'https://example.com/': b'<html><title>Hi</title></html>'})
    fetcher = Fetcher(settings=settings, session=session)

    page = fetcher.fetch('https://example.com/')

    assert isinstance(page, Page)
    assert page.status_code == 200
    assert page.content == b'<html><title>Hi</title></html>'
    assert page.text == '<html><title>Hi</title></html>'
    assert page.content_type.startswith('text/html')


def test_fetch_uses_configured_timeout_and_user_agent(settings):
    session = FakeSession({'https://example.com/': b'ok'})
    fetcher = Fetcher(settings=settings, session=session)

    fetcher.fetch('https://example.com/')
    fetcher.fetch('https://example.com/', timeout=2.5)

    assert session.calls[0][1]['timeout'] == settings.request_timeout
    assert session.calls[1][1]['timeout'] == 2.5
    assert session.calls[0][1]['headers']['User-Agent'] == 'test-agent/1.0'


def test_borrowed_session_headers_left_unchanged(settings):
    session = FakeSession({'https://example.com/': b'ok'})
    session.headers['User-Agent'] = 'caller-agent/9'
    session.headers['Accept'] = 'application/json'

    Fetcher(settings=settings, session=session).fetch('https://example.com/')

    assert session.headers['User-Agent'] == 'caller-agent/9'
    assert session.headers['Accept'] == 'application/json'
    assert session.calls[0][1]['headers']['Accept'].startswith('text/html')


def test_http_error_status_is_distinct(settings):
    session = FakeSession({'https://example.com/missing': (404, b'gone')})
    fetcher = Fetcher(settings=settings, session=session)

    with pytest.raises(HTTPStatusError) as info:
        fetcher.fetch('https://example.com/missing')

    assert info.value.status_code == 404
    assert info.value.url == 'https://example.com/missing'
    assert isinstance(info.value.__cause__, requests.HTTPError)


def test_server_error_is_http_status_error(settings):
    session = FakeSession({'https://example.com/': (503, b'busy')})
    fetcher = Fetcher(settings=settings, session=session)

    with pytest.raises(HTTPStatusError) as info:
        fetcher.fetch('https://example.com/')
    assert info.value.status_code == 503


@pytest.mark.parametrize('error', [
    requests.ConnectionError('refused'),
    requests.Timeout('too slow'),
    requests.TooManyRedirects('loop'),
])
def test_transport_failures_are_network_errors(settings, error):
    session = FakeSession({'https://example.com/': error})
    fetcher = Fetcher(settings=settings, session=session)

    with pytest.raises(NetworkError) as info:
        fetcher.fetch('https://example.com/')

    assert info.value.cause is error
    assert not isinstance(info.value, HTTPStatusError)


@pytest.mark.parametrize('url', ['', 'example.com', 'ftp://example.com/file', '/relative'])
def test_invalid_url_rejected(settings, url):
    fetcher = Fetcher(settings=settings, session=FakeSession())
    with pytest.raises(ValueError):
        fetcher.fetch(url)


def test_redirect_target_becomes_page_url(settings):
    response = make_response('https://example.com/final', b'done')
    session = FakeSession({'https://example.com/start': response})
    fetcher = Fetcher(settings=settings, session=session)

    assert fetcher.fetch('https://example.com/start').url == 'https://example.com/final'


def test_no_delay_before_first_request_then_default_delay(settings):
    clock = FakeClock()
    polite = settings.model_copy(update={'default_delay': 1.5})
    session = FakeSession({'https://example.com/a': b'a', 'https://example.com/b': b'b'})
    fetcher = Fetcher(settings=polite, session=session, sleep=clock.sleep, clock=clock)

    fetcher.fetch('https://example.com/a')
    assert clock.sleeps == []

    fetcher.fetch('https://example.com/b')
    assert clock.sleeps == [1.5]


def test_delay_counts_time_already_elapsed(settings):
    clock = FakeClock()
    polite = settings.model_copy(update={'default_delay': 2.0})
    session = FakeSession({'https://example.com/a': b'a'})
    fetcher = Fetcher(settings=polite, session=session, sleep=clock.sleep, clock=clock)

    fetcher.fetch('https://example.com/a')
    clock.now += 5
    fetcher.fetch('https://example.com/a')

    assert clock.sleeps == []


def test_robots_disallow_blocks_fetch(settings):
    strict = settings.model_copy(update={'respect_robots': True})
    session = FakeSession({
        'https://example.com/robots.txt': b'User-agent: *\nDisallow: /private/\n',
        'https://example.com/private/page': b'secret',
    })
    fetcher = Fetcher(settings=strict, session=session)

    with pytest.raises(RobotsDisallowedError):
        fetcher.fetch('https://example.com/private/page')

    assert 'https://example.com/private/page' not in session.fetched()


def test_robots_crawl_delay_overrides_default(settings):
    clock = FakeClock()
    strict = settings.model_copy(update={'respect_robots': True, 'default_delay': 1.0})
    session = FakeSession({
        'https://example.com/robots.txt': b'User-agent: *\nCrawl-delay: 4\n',
        'https://example.com/a': b'a',
        'https://example.com/b': b'b',
    })
    fetcher = Fetcher(settings=strict, session=session, sleep=clock.sleep, clock=clock)

    fetcher.fetch('https://example.com/a')
    fetcher.fetch('https://example.com/b')

    assert clock.sleeps == [4.0]


def test_close_leaves_borrowed_session_open(settings):
    session = FakeSession()
    session.close = Mock()
    with Fetcher(settings=settings, session=session) as fetcher:
        assert fetcher.session is session
    session.close.assert_not_called()


def test_close_closes_own_session(settings):
    fetcher = Fetcher(settings=settings)
    with patch.object(fetcher.session, 'close') as close:
        fetcher.close()
    close.assert_called_once_with()


def test_fetcher_without_robots_has_no_handler(settings):
    assert Fetcher(settings=settings, session=FakeSession()).robots is None
