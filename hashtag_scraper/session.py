"""Browser sessions and the per-worker Session Driver

A BrowserSession is one live headless Chrome. The BrowserPool owns it while
idle and lends it to exactly one SessionDriver at a time.

Search flow for one worker:
1. Visit the site root so the auth cookie has a matching domain
2. Replace all cookies with the caller's auth_token
3. Load the live search page and wait for document.readyState == "complete"
4. Alternate capture_cycle() / scroll_and_wait() until the worker is satisfied
5. close() hands the session back to the pool
"""
import random
import time
from typing import Callable, List, Optional
from urllib.parse import quote, urlparse

from selenium import webdriver
from selenium.common.exceptions import TimeoutException, WebDriverException
from selenium.webdriver.chrome.options import Options
from selenium.webdriver.chrome.service import Service
from selenium.webdriver.support.ui import WebDriverWait

from .config import ScraperConfig
from .errors import NavigationError, SessionFaultError
from .extractor import extract_posts
from .models import PostRecord
from .scraper_logging import log

SCROLL_TO_BOTTOM_SCRIPT = "window.scrollTo(0, document.body.scrollHeight);"
READY_STATE_SCRIPT = "return document.readyState"
LOGIN_PATHS = ("/login", "/i/flow")


def launch_browser(config: ScraperConfig):
    """Start a headless Chrome configured for scraping

    Returns:
        selenium.webdriver.Chrome instance
    """
    chrome_options = Options()
    if config.headless:
        chrome_options.add_argument("--headless=new")
    chrome_options.add_argument("--no-sandbox")
    chrome_options.add_argument("--disable-dev-shm-usage")
    chrome_options.add_argument("--disable-gpu")
    chrome_options.add_argument(f"--window-size={config.window_size}")
    chrome_options.add_argument("--disable-extensions")
    chrome_options.add_argument("--disable-background-timer-throttling")
    chrome_options.add_argument("--disable-renderer-backgrounding")

    service = Service(config.chromedriver_path)
    driver = webdriver.Chrome(service=service, options=chrome_options)

    mode = "headless" if config.headless else "GUI"
    log.info("session", "browser_launched", f"Chrome started ({mode} mode)")
    return driver


def build_search_url(base_url: str, search_term: str) -> str:
    return f"{base_url.rstrip('/')}/search?q={quote(search_term, safe='')}&src=typed_query&f=live"


class RandomDelay:
    """Sleep for a uniformly random whole number of milliseconds in [min_ms, max_ms]"""

    def __init__(self, min_ms: int, max_ms: int, sleep: Callable[[float], None] = time.sleep, rng=None):
        self.min_ms = min_ms
        self.max_ms = max_ms
        self._sleep = sleep
        self._rng = rng or random.Random()

    def __call__(self) -> float:
        seconds = self._rng.randint(self.min_ms, self.max_ms) / 1000
        self._sleep(seconds)
        return seconds


class BrowserSession:
    """One live browser plus its page, as tracked by the pool"""

    def __init__(self, driver, session_id: int):
        self.driver = driver
        self.session_id = session_id
        self.faulted = False
        self.reused = False  # set by the pool when lent out from the idle list

    def mark_faulted(self, reason: str):
        if not self.faulted:
            log.warning("session", "session_faulted", "Session will be discarded on release",
                        session=self.session_id, reason=reason)
        self.faulted = True

    def quit(self):
        try:
            self.driver.quit()
        except WebDriverException as e:
            log.warning("session", "quit_failed", "Browser did not shut down cleanly",
                        session=self.session_id, error=str(e))


class SessionDriver:
    """Drives one pooled browser session through a search"""

    def __init__(self, session: BrowserSession, pool, config: ScraperConfig,
                 delay: Optional[Callable[[], float]] = None):
        self.session = session
        self.pool = pool
        self.config = config
        self.delay = delay or RandomDelay(config.scroll_delay_min_ms, config.scroll_delay_max_ms)
        self._closed = False

    @property
    def driver(self):
        return self.session.driver

    def open(self, auth_token: str, search_term: str):
        """Authenticate the session and load the live search page

        Raises:
            NavigationError: page never settled, driver failed, or the
                credential was bounced to the login flow
        """
        search_url = build_search_url(self.config.base_url, search_term)
        log.info("session", "navigate_start", "Navigating to search page",
                 session=self.session.session_id, url=search_url)

        try:
            self.driver.set_page_load_timeout(self.config.navigation_timeout)

            # Cookies need a matching domain before they can be set
            self.driver.get(self.config.base_url)
            self.driver.delete_all_cookies()
            self.driver.add_cookie({
                'name': self.config.cookie_name,
                'value': auth_token,
                'domain': self.config.cookie_domain,
                'path': '/',
                'secure': True,
            })

            self.driver.get(search_url)
            WebDriverWait(self.driver, self.config.navigation_timeout).until(
                lambda d: d.execute_script(READY_STATE_SCRIPT) == "complete"
            )
        except TimeoutException as e:
            self.session.mark_faulted("navigation timeout")
            log.error("session", "navigation_timeout", "Search page did not settle",
                      session=self.session.session_id, timeout=self.config.navigation_timeout)
            raise NavigationError(
                f"Search page did not settle within {self.config.navigation_timeout}s"
            ) from e
        except WebDriverException as e:
            self.session.mark_faulted("navigation error")
            log.error("session", "navigation_failed", "Navigation failed",
                      session=self.session.session_id, error=str(e))
            raise NavigationError(f"Navigation failed: {e}") from e

        current_url = self.driver.current_url or ""
        if urlparse(current_url).path.startswith(LOGIN_PATHS):
            log.error("session", "auth_rejected", "Redirected to login flow",
                      session=self.session.session_id, url=current_url)
            raise NavigationError(f"Auth token rejected, redirected to: {current_url}")

        log.info("session", "navigate_complete", "Search page ready", session=self.session.session_id)

    def capture_cycle(self) -> List[PostRecord]:
        try:
            return extract_posts(self.driver, self.config.base_url)
        except WebDriverException as e:
            self.session.mark_faulted("extraction error")
            raise SessionFaultError(f"Extraction failed: {e}") from e

    def scroll_and_wait(self) -> float:
        """Scroll to the bottom, then pause to let more posts load

        Returns:
            Seconds slept
        """
        try:
            self.driver.execute_script(SCROLL_TO_BOTTOM_SCRIPT)
        except WebDriverException as e:
            self.session.mark_faulted("scroll error")
            raise SessionFaultError(f"Scroll failed: {e}") from e
        return self.delay()

    def close(self):
        """Return the session to the pool (faulted sessions get destroyed there)"""
        if self._closed:
            return
        self._closed = True
        self.pool.release(self.session)
