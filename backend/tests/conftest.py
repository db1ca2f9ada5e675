"""
Pytest configuration and fixtures for FitMap crawler tests.

Playwright is replaced by small stub classes that serve HTML from an
in-memory site, so crawl behavior can be tested without a browser.
"""

import sys
import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeout

from runner.config import Settings


# ============================================================
# HTML BUILDERS
# ============================================================

def make_area_page(
    gym_paths,
    title='東京都のフィットネスジム一覧 | FitMap',
    keywords=True,
    padding=2500,
    error_marker=False,
    next_link=True,
):
    """Build an area listing page with the given gym links."""
    links = ''.join(f'<a href="{path}">Gym</a>' for path in gym_paths)
    words = 'フィットネス ジム トレーニング ' if keywords else 'lorem ipsum dolor '
    filler = (words * (padding // len(words) + 1))[:padding]
    error = '<div class="no-result">No results</div>' if error_marker else ''
    next_html = '<a class="page-next" href="?page=99">Next</a>' if next_link else ''
    return (
        f'<html><head><title>{title}</title></head><body>'
        f'<div class="gym-list">{links}</div>{error}<p>{filler}</p>{next_html}'
        f'</body></html>'
    )


def make_gym_page(
    name='ゴールドジム 渋谷店',
    address='東京都渋谷区道玄坂1-2-3 渋谷ビル5F',
    price='8,800円/月',
    features=('24時間', 'シャワー'),
    description='渋谷駅から徒歩3分の大型トレーニングジムです。初心者も安心。',
    area='東京都',
):
    """Build a gym detail page."""
    tags = ''.join(f'<span class="tag">{f}</span>' for f in features)
    return (
        f'<html><head><title>{name} | FitMap</title>'
        f'<meta property="og:title" content="{name}"></head><body>'
        f'<div class="breadcrumb"><a href="/">TOP</a><a href="/area/1/">{area}</a></div>'
        f'<p class="post_adress">{address}</p>'
        f'<div class="panel_ryokin">{price}</div>'
        f'<div class="gym-tags">{tags}</div>'
        f'<div class="description">{description}</div>'
        f'</body></html>'
    )


BLANK_PAGE = '<html><head><title>FitMap</title></head><body></body></html>'


# ============================================================
# PLAYWRIGHT STUBS
# ============================================================

class FakeWeb:
    """In-memory site shared by all stub pages."""

    def __init__(self):
        self.pages = {}             # url -> html
        self.failures = {}          # url -> remaining failures
        self.visits = []            # urls in navigation order
        self.new_page_failures = 0

    def add(self, url, html):
        self.pages[url] = html

    def fail(self, url, times=1):
        self.failures[url] = times

    def visits_to(self, url):
        return sum(1 for visited in self.visits if visited == url)


class StubRequest:
    def __init__(self, resource_type):
        self.resource_type = resource_type


class StubRoute:
    def __init__(self, resource_type):
        self.request = StubRequest(resource_type)
        self.aborted = False
        self.continued = False

    async def abort(self):
        self.aborted = True

    async def continue_(self):
        self.continued = True


class StubPage:
    def __init__(self, web):
        self.web = web
        self.url = 'about:blank'
        self.closed = False
        self.extra_headers = {}
        self.goto_kwargs = None

    async def set_extra_http_headers(self, headers):
        self.extra_headers.update(headers)

    async def goto(self, url, wait_until=None, timeout=None):
        if self.closed:
            raise RuntimeError("Target page, context or browser has been closed")
        self.web.visits.append(url)
        self.goto_kwargs = {'wait_until': wait_until, 'timeout': timeout}
        remaining = self.web.failures.get(url, 0)
        if remaining > 0:
            self.web.failures[url] = remaining - 1
            raise PlaywrightTimeout(f"Timeout {timeout}ms exceeded navigating to {url}")
        self.url = url
        return None

    async def content(self):
        if self.closed:
            raise RuntimeError("Target page, context or browser has been closed")
        return self.web.pages.get(self.url, BLANK_PAGE)

    async def close(self):
        self.closed = True


class StubContext:
    def __init__(self, web, kwargs):
        self.web = web
        self.kwargs = kwargs
        self.routes = []
        self._pages = []
        self.close_calls = 0

    @property
    def closed(self):
        return self.close_calls > 0

    async def route(self, pattern, handler):
        self.routes.append((pattern, handler))

    async def new_page(self):
        if self.closed:
            raise RuntimeError("Browser context has been closed")
        if self.web.new_page_failures > 0:
            self.web.new_page_failures -= 1
            raise RuntimeError("Target crashed")
        page = StubPage(self.web)
        self._pages.append(page)
        return page

    @property
    def pages(self):
        return [p for p in self._pages if not p.closed]

    async def close(self):
        self.close_calls += 1
        for page in self._pages:
            page.closed = True


class StubBrowser:
    def __init__(self, web):
        self.web = web
        self.created_contexts = []
        self.closed = False

    async def new_context(self, **kwargs):
        context = StubContext(self.web, kwargs)
        self.created_contexts.append(context)
        return context

    @property
    def contexts(self):
        return [c for c in self.created_contexts if not c.closed]

    async def close(self):
        self.closed = True


class StubChromium:
    def __init__(self, web):
        self.web = web
        self.executable_path = sys.executable
        self.launch_kwargs = None
        self.browsers = []

    async def launch(self, **kwargs):
        self.launch_kwargs = kwargs
        browser = StubBrowser(self.web)
        self.browsers.append(browser)
        return browser

    @property
    def contexts(self):
        return [c for b in self.browsers for c in b.created_contexts]


class StubPlaywright:
    def __init__(self, chromium):
        self.chromium = chromium
        self.stop_calls = 0

    async def stop(self):
        self.stop_calls += 1


class AsyncPlaywrightFactory:
    def __init__(self, pw):
        self._pw = pw
        self.start_calls = 0

    async def start(self):
        self.start_calls += 1
        return self._pw


class FakeBrowserEnv:
    """Handles on the stubbed Playwright installation."""

    def __init__(self):
        self.web = FakeWeb()
        self.chromium = StubChromium(self.web)
        self.playwright = StubPlaywright(self.chromium)
        self.factory = AsyncPlaywrightFactory(self.playwright)

    @property
    def contexts(self):
        return self.chromium.contexts


# ============================================================
# FIXTURES
# ============================================================

@pytest.fixture
def fake_browser(monkeypatch):
    """Replace async_playwright in the session pool with stubs."""
    env = FakeBrowserEnv()

    import fitmap.crawlers.browser as browser_mod
    monkeypatch.setattr(browser_mod, "async_playwright", lambda: env.factory)
    return env


@pytest.fixture
def fast_settings():
    """Settings with every delay removed and export disabled."""
    return Settings(
        page_settle_seconds=0,
        pagination_settle_min=0,
        pagination_settle_max=0,
        retry_backoff_seconds=0,
        detail_delay_min=0,
        detail_delay_max=0,
        region_delay_seconds=0,
        cleanup_timeout_seconds=1.0,
        export_enabled=False,
        sample_mode=False,
        debug=False,
    )


@pytest.fixture
def site():
    from fitmap.sites.fitmap import FitMapSite
    return FitMapSite()
