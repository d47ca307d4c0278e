"""Test configuration with in-memory stand-ins for Selenium"""
import threading

import pytest
from selenium.common.exceptions import (
    NoSuchElementException,
    StaleElementReferenceException,
    TimeoutException,
    WebDriverException,
)

from hashtag_scraper.config import ScraperConfig
from hashtag_scraper.extractor import (
    CONTENT_SELECTOR,
    POST_CONTAINER_SELECTOR,
    PROFILE_LINK_SELECTOR,
    STATUS_LINK_SELECTOR,
    TIMESTAMP_SELECTOR,
)


class FakeElement:
    """Just enough of a WebElement for the extractor"""

    def __init__(self, text="", attrs=None, children=None, stale=False):
        self._text = text
        self.attrs = attrs or {}
        self.children = children or {}
        self.stale = stale

    @property
    def text(self):
        if self.stale:
            raise StaleElementReferenceException("stale")
        return self._text

    def get_attribute(self, name):
        if self.stale:
            raise StaleElementReferenceException("stale")
        return self.attrs.get(name)

    def find_elements(self, by, selector):
        if self.stale:
            raise StaleElementReferenceException("stale")
        return list(self.children.get(selector, []))

    def find_element(self, by, selector):
        items = self.find_elements(by, selector)
        if not items:
            raise NoSuchElementException(selector)
        return items[0]


def make_post_element(content="hello", profile="/someone", status="/someone/status/1",
                      date="2025-01-01T12:00:00.000Z", stale=False):
    """Build an <article> the way the search timeline renders it; None drops a field"""
    children = {}
    if content is not None:
        children[CONTENT_SELECTOR] = [FakeElement(text=content)]
    if profile is not None:
        children[PROFILE_LINK_SELECTOR] = [FakeElement(attrs={"href": profile})]
    if status is not None:
        children[STATUS_LINK_SELECTOR] = [FakeElement(attrs={"href": status})]
    if date is not None:
        children[TIMESTAMP_SELECTOR] = [FakeElement(attrs={"datetime": date})]
    return FakeElement(children=children, stale=stale)


def tweet(n):
    return make_post_element(
        content=f"post number {n}",
        profile=f"/user{n}",
        status=f"/user{n}/status/{n}",
        date=f"2025-01-01T12:00:{n % 60:02d}.000Z",
    )


def tweet_url(n):
    return f"https://twitter.com/user{n}/status/{n}"


class FakeWebDriver:
    """Selenium WebDriver stand-in

    `pages` is the list of article batches visible after 0, 1, 2... scrolls;
    scrolling past the last batch keeps showing it. `on_search`, when given,
    replaces `pages` on every search navigation.
    """

    def __init__(self, pages=None, fail_navigation=False, landing_url=None,
                 fail_extraction=False, fail_scroll=False, ready=True, on_search=None):
        self.pages = pages if pages is not None else [[]]
        self.on_search = on_search
        self.fail_navigation = fail_navigation
        self.landing_url = landing_url
        self.fail_extraction = fail_extraction
        self.fail_scroll = fail_scroll
        self.ready = ready
        self.position = 0
        self.scrolls = 0
        self.visited = []
        self.cookies = []
        self.page_load_timeout = None
        self.current_url = "about:blank"
        self.quit_count = 0

    def set_page_load_timeout(self, seconds):
        self.page_load_timeout = seconds

    def get(self, url):
        self.visited.append(url)
        if "/search" in url:
            if self.fail_navigation:
                raise TimeoutException("page load timed out")
            self.current_url = self.landing_url or url
            self.position = 0
            if self.on_search is not None:
                self.pages = self.on_search()
        else:
            self.current_url = url

    def delete_all_cookies(self):
        self.cookies = []

    def add_cookie(self, cookie):
        self.cookies.append(cookie)

    def execute_script(self, script, *args):
        if "readyState" in script:
            return "complete" if self.ready else "loading"
        if "scrollTo" in script:
            if self.fail_scroll:
                raise WebDriverException("tab crashed")
            self.scrolls += 1
            self.position = min(self.position + 1, len(self.pages) - 1)
        return None

    def find_elements(self, by, selector):
        if self.fail_extraction:
            raise WebDriverException("tab crashed")
        if selector != POST_CONTAINER_SELECTOR:
            return []
        return list(self.pages[self.position])

    def quit(self):
        self.quit_count += 1


class DriverFactory:
    """Pool factory that hands out FakeWebDrivers from a builder callable

    The builder receives the 0-based launch number.
    """

    def __init__(self, builder=None):
        self.builder = builder or (lambda n: FakeWebDriver())
        self.created = []
        self._lock = threading.Lock()

    def __call__(self):
        with self._lock:
            driver = self.builder(len(self.created))
            self.created.append(driver)
            return driver


@pytest.fixture
def config():
    return ScraperConfig(
        parallelism=3,
        max_attempts=3,
        max_extended_attempts=6,
        scroll_delay_min_ms=0,
        scroll_delay_max_ms=0,
        navigation_timeout=0.2,
        pool_size=10,
        worker_concurrency=10,
    )


@pytest.fixture
def driver_factory():
    return DriverFactory()


class FreshPosts:
    """on_search callback: every search load shows a new block of posts"""

    def __init__(self, block_size=50):
        self.block_size = block_size
        self.loads = 0
        self._lock = threading.Lock()

    def __call__(self):
        with self._lock:
            start = self.loads * self.block_size
            self.loads += 1
        return [[tweet(n) for n in range(start, start + self.block_size)]]
