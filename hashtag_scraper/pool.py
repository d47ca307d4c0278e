"""Bounded pool of reusable browser sessions

Launching Chrome is the slowest part of a scrape, so sessions outlive the
worker that used them. The pool caps how many exist at once; it does not cap
how many workers run (see limiter.ConcurrencyLimiter).
"""
import itertools
import threading
import time
from contextlib import contextmanager
from typing import Any, Callable, Dict, List, Optional

from .errors import BrowserLaunchError, PoolClosedError, PoolTimeoutError
from .scraper_logging import log
from .session import BrowserSession


class BrowserPool:
    """Blocking-acquire, non-destructive-release pool of BrowserSessions"""

    def __init__(self, factory: Callable[[], Any], ceiling: int = 10):
        if ceiling < 1:
            raise ValueError("ceiling must be at least 1")
        self._factory = factory
        self.ceiling = ceiling
        self._idle: List[BrowserSession] = []
        self._live = 0  # idle + in use + launching
        self._in_use = 0
        self._closed = False
        self._cond = threading.Condition()
        self._ids = itertools.count(1)

    def acquire(self, timeout: Optional[float] = None) -> BrowserSession:
        """Borrow a session, launching one if below the ceiling

        Blocks while every session is lent out and the ceiling is reached.

        Raises:
            PoolClosedError: pool was shut down
            PoolTimeoutError: timeout given and expired
            BrowserLaunchError: factory failed to start a browser
        """
        deadline = None if timeout is None else time.monotonic() + timeout

        with self._cond:
            while True:
                if self._closed:
                    raise PoolClosedError("Browser pool is shut down")

                if self._idle:
                    session = self._idle.pop()
                    session.reused = True
                    self._in_use += 1
                    log.debug("pool", "session_reused", "Reusing idle session",
                              session=session.session_id, in_use=self._in_use)
                    return session

                if self._live < self.ceiling:
                    # Reserve the slot now, launch outside the lock
                    self._live += 1
                    self._in_use += 1
                    live = self._live
                    break

                remaining = None if deadline is None else deadline - time.monotonic()
                if remaining is not None and remaining <= 0:
                    raise PoolTimeoutError(f"No browser session free within {timeout}s")
                self._cond.wait(remaining)

        try:
            driver = self._factory()
        except Exception as e:
            with self._cond:
                self._live -= 1
                self._in_use -= 1
                self._cond.notify()
            log.error("pool", "launch_failed", "Browser launch failed", error=str(e))
            raise BrowserLaunchError(f"Browser launch failed: {e}") from e

        session = BrowserSession(driver, next(self._ids))
        log.info("pool", "session_created", "Launched new browser session",
                 session=session.session_id, live=live, ceiling=self.ceiling)
        return session

    def release(self, session: BrowserSession):
        """Give a session back; faulted sessions (or any after shutdown) are quit"""
        with self._cond:
            self._in_use -= 1
            destroy = session.faulted or self._closed
            if destroy:
                self._live -= 1
            else:
                self._idle.append(session)
            self._cond.notify()

        if destroy:
            log.info("pool", "session_destroyed", "Closing browser session",
                     session=session.session_id, faulted=session.faulted)
            session.quit()

    @contextmanager
    def session(self, timeout: Optional[float] = None):
        borrowed = self.acquire(timeout)
        try:
            yield borrowed
        finally:
            self.release(borrowed)

    def shutdown(self):
        """Quit idle sessions now; in-use ones are quit when released"""
        with self._cond:
            self._closed = True
            idle, self._idle = self._idle, []
            self._live -= len(idle)
            self._cond.notify_all()

        for session in idle:
            session.quit()
        log.info("pool", "shutdown", "Browser pool shut down", closed_sessions=len(idle))

    def stats(self) -> Dict[str, Any]:
        with self._cond:
            return {
                "ceiling": self.ceiling,
                "live": self._live,
                "idle": len(self._idle),
                "in_use": self._in_use,
                "closed": self._closed,
            }
