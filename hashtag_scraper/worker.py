"""Per-instance scrape loop

State machine:

    init → navigating → capturing → filtering ─┬→ done        (quota met / attempts used up)
                │            ↑                 └→ scrolling ─┐
                │            └───────────────────────────────┘
                └→ aborted   (NavigationError while acquiring or opening)

An aborted worker contributes nothing; the orchestrator keeps going with the
others. Running out of attempts is not a failure, it just means fewer posts.
"""
from dataclasses import dataclass
from typing import Callable, Optional

from .collector import DedupCollector
from .config import ScraperConfig
from .errors import NavigationError, SessionFaultError
from .models import ScrapeRequest, WorkerResult, WorkerState
from .scraper_logging import log
from .session import SessionDriver


@dataclass
class AttemptPolicy:
    """How many scroll cycles a worker may spend before giving up

    With extend_while_progressing on, a worker that hits max_attempts keeps
    scrolling as long as its last cycle found new posts, up to
    max_extended_attempts.
    """
    max_attempts: int = 10
    extend_while_progressing: bool = False
    max_extended_attempts: int = 20

    @classmethod
    def from_config(cls, config: ScraperConfig) -> "AttemptPolicy":
        return cls(
            max_attempts=config.max_attempts,
            extend_while_progressing=config.extend_while_progressing,
            max_extended_attempts=config.max_extended_attempts,
        )

    def should_continue(self, attempts: int, last_novel: int) -> bool:
        if attempts < self.max_attempts:
            return True
        return (self.extend_while_progressing
                and last_novel > 0
                and attempts < self.max_extended_attempts)


class WorkerLoop:
    """Scrape loop for parallel instance `index`"""

    def __init__(self, index: int, quota: int, request: ScrapeRequest, pool,
                 collector: DedupCollector, config: ScraperConfig,
                 delay: Optional[Callable[[], float]] = None,
                 policy: Optional[AttemptPolicy] = None):
        self.index = index
        self.quota = quota
        self.request = request
        self.pool = pool
        self.collector = collector
        self.config = config
        self.delay = delay
        self.policy = policy or AttemptPolicy.from_config(config)
        self.state = WorkerState.INIT

    def _abort(self, error: Exception, attempts: int = 0) -> WorkerResult:
        self.state = WorkerState.ABORTED
        log.warning("worker", "aborted", "Worker aborted, continuing without it",
                    worker=self.index, error=str(error))
        return WorkerResult(self.index, self.state, [], attempts, error=str(error))

    def _open_session(self) -> SessionDriver:
        """Acquire a session and load the search page

        An idle browser can die while pooled. When a reused session faults on
        navigation it is discarded and the next one is tried. Each retry
        destroys one pooled session, so the loop ends at a freshly launched
        browser at the latest.
        """
        while True:
            session = self.pool.acquire()
            driver = SessionDriver(session, self.pool, self.config, self.delay)
            try:
                driver.open(self.request.auth_token, self.request.search_term)
                return driver
            except NavigationError as e:
                driver.close()
                if not (session.reused and session.faulted):
                    raise
                log.warning("worker", "stale_session", "Pooled session failed to navigate, retrying",
                            worker=self.index, session=session.session_id, error=str(e))
            except Exception:
                driver.close()
                raise

    def run(self) -> WorkerResult:
        posts = []
        attempts = 0
        last_novel = 0

        self.state = WorkerState.NAVIGATING
        try:
            driver = self._open_session()
        except NavigationError as e:
            return self._abort(e)

        try:
            while self.policy.should_continue(attempts, last_novel):
                self.state = WorkerState.CAPTURING
                candidates = driver.capture_cycle()

                self.state = WorkerState.FILTERING
                novel = self.collector.admit(candidates)
                posts.extend(novel)
                last_novel = len(novel)
                log.debug("worker", "cycle", "Capture cycle finished", worker=self.index,
                          attempt=attempts, candidates=len(candidates), novel=last_novel,
                          total=len(posts), quota=self.quota)

                if len(posts) >= self.quota:
                    log.info("worker", "quota_met", "Worker reached quota",
                             worker=self.index, total=len(posts))
                    break

                self.state = WorkerState.SCROLLING
                driver.scroll_and_wait()
                attempts += 1
            else:
                log.info("worker", "attempts_exhausted", "Stopping short of quota",
                         worker=self.index, attempts=attempts, total=len(posts), quota=self.quota)
        except SessionFaultError as e:
            log.warning("worker", "session_fault", "Session broke mid-scrape, keeping partial results",
                        worker=self.index, total=len(posts), error=str(e))
        finally:
            driver.close()

        self.state = WorkerState.DONE
        return WorkerResult(self.index, self.state, posts[:self.quota], attempts)
