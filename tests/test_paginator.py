import pytest

from conftest import FakeSession, quotes_page
from soupscraper.exceptions import HTTPStatusError, NetworkError
from soupscraper.fetcher import Fetcher
from soupscraper.paginator import Paginator
from soupscraper.parser import text_of

import requests

BASE = 'https://quotes.example.com'
NEXT = 'li.next > a'


def site(pages):
    """Chain pages /page/1/ .. /page/N/ together."""
    routes = {}
    for number in range(1, pages + 1):
        next_href = f'/page/{number + 1}/' if number < pages else None
        routes[f'{BASE}/page/{number}/'] = quotes_page(
            [(f'Quote {number}', 'Author', ['tag'])], next_href=next_href
        ).encode('utf-8')
    return routes


def first_quotes(documents):
    return [text_of(d.select_one('span.text')) for d in documents]


def test_follows_next_links_until_absent(settings):
    session = FakeSession(site(3))
    paginator = Paginator(Fetcher(settings=settings, session=session), NEXT)

    documents = list(paginator.pages(f'{BASE}/page/1/'))

    assert first_quotes(documents) == ['“Quote 1”', '“Quote 2”', '“Quote 3”']
    assert paginator.stopped_reason == 'exhausted'
    assert paginator.visited == [f'{BASE}/page/{n}/' for n in (1, 2, 3)]
    assert paginator.errors == []


def test_single_page_without_next_link(settings):
    session = FakeSession(site(1))
    paginator = Paginator(Fetcher(settings=settings, session=session), NEXT)

    assert len(list(paginator.pages(f'{BASE}/page/1/'))) == 1
    assert paginator.stopped_reason == 'exhausted'


def test_max_pages_bound(settings):
    session = FakeSession(site(5))
    paginator = Paginator(Fetcher(settings=settings, session=session), NEXT, max_pages=2)

    assert len(list(paginator.pages(f'{BASE}/page/1/'))) == 2
    assert paginator.stopped_reason == 'max_pages'
    assert session.fetched() == [f'{BASE}/page/1/', f'{BASE}/page/2/']


def test_default_max_pages_from_settings(settings):
    bounded = settings.model_copy(update={'max_pages': 3})
    session = FakeSession(site(10))
    paginator = Paginator(Fetcher(settings=bounded, session=session), NEXT)

    assert len(list(paginator.pages(f'{BASE}/page/1/'))) == 3


def test_cycle_detected(settings):
    routes = {
        f'{BASE}/page/1/': quotes_page([('A', 'x', [])], next_href='/page/2/'),
        f'{BASE}/page/2/': quotes_page([('B', 'x', [])], next_href='/page/1/#top'),
    }
    session = FakeSession(routes)
    paginator = Paginator(Fetcher(settings=settings, session=session), NEXT)

    assert len(list(paginator.pages(f'{BASE}/page/1/'))) == 2
    assert paginator.stopped_reason == 'cycle'
    assert session.fetched() == [f'{BASE}/page/1/', f'{BASE}/page/2/']


def test_self_link_is_a_cycle(settings):
    routes = {f'{BASE}/page/1/': quotes_page([('A', 'x', [])], next_href='/page/1')}
    paginator = Paginator(Fetcher(settings=settings, session=FakeSession(routes)), NEXT)

    assert len(list(paginator.pages(f'{BASE}/page/1/'))) == 1
    assert paginator.stopped_reason == 'cycle'


def test_error_mid_loop_raises_by_default(settings):
    routes = site(2)
    routes[f'{BASE}/page/2/'] = (500, b'boom')
    paginator = Paginator(Fetcher(settings=settings, session=FakeSession(routes)), NEXT)

    pages = paginator.pages(f'{BASE}/page/1/')
    next(pages)
    with pytest.raises(HTTPStatusError):
        next(pages)
    assert paginator.stopped_reason == 'error'


def test_error_mid_loop_can_stop(settings):
    routes = site(3)
    routes[f'{BASE}/page/2/'] = requests.ConnectionError('reset')
    paginator = Paginator(Fetcher(settings=settings, session=FakeSession(routes)), NEXT, on_error='stop')

    documents = list(paginator.pages(f'{BASE}/page/1/'))

    assert len(documents) == 1
    assert paginator.stopped_reason == 'error'
    assert len(paginator.errors) == 1
    assert 'page/2' in paginator.errors[0]


def test_first_page_failure(settings):
    session = FakeSession({f'{BASE}/page/1/': requests.Timeout('slow')})
    paginator = Paginator(Fetcher(settings=settings, session=session), NEXT)

    with pytest.raises(NetworkError):
        list(paginator.pages(f'{BASE}/page/1/'))


def test_next_link_from_custom_attribute(settings):
    routes = {
        f'{BASE}/a': '<html><body><button class="more" data-url="/b">More</button></body></html>',
        f'{BASE}/b': '<html><body>end</body></html>',
    }
    paginator = Paginator(
        Fetcher(settings=settings, session=FakeSession(routes)),
        'button.more',
        next_attr='data-url'
    )

    assert len(list(paginator.pages(f'{BASE}/a'))) == 2


def test_invalid_arguments(settings):
    fetcher = Fetcher(settings=settings, session=FakeSession())
    with pytest.raises(ValueError):
        Paginator(fetcher, NEXT, on_error='retry')
    with pytest.raises(ValueError):
        Paginator(fetcher, NEXT, max_pages=0)
