"""Scrape Orchestrator - fans one request out to parallel worker loops

    run(request)
      ├─ validate
      ├─ quota = ceil(total_count / parallelism)
      ├─ N × WorkerLoop on a thread pool, each admitted by the worker limiter,
      │  all sharing one DedupCollector
      ├─ wait for every worker
      └─ concat by worker index, truncate to total_count

A run fails (OrchestrationError) only when every worker aborted. A short
result list is not an error.
"""
import math
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Callable, Iterable, List, Optional

from .collector import DedupCollector
from .config import ScraperConfig
from .errors import OrchestrationError, ValidationError
from .limiter import ConcurrencyLimiter
from .models import PostRecord, ScrapeRequest, WorkerResult
from .pool import BrowserPool
from .scraper_logging import log
from .session import RandomDelay, launch_browser
from .worker import AttemptPolicy, WorkerLoop


def validate_request(request: ScrapeRequest):
    """Raise ValidationError unless the request can be scraped"""
    if not isinstance(request.auth_token, str) or not request.auth_token.strip():
        raise ValidationError("authToken is required.")
    if not isinstance(request.search_term, str) or not request.search_term.strip():
        raise ValidationError("searchTerm is required.")
    total = request.total_count
    if isinstance(total, bool) or not isinstance(total, int) or total < 1:
        raise ValidationError("totalCount must be a positive integer.")


def per_instance_quota(total_count: int, parallelism: int) -> int:
    return math.ceil(total_count / parallelism)


def merge_results(results: Iterable[WorkerResult], total_count: int) -> List[PostRecord]:
    """Concatenate worker output by worker index, then truncate"""
    merged = []
    for result in sorted(results, key=lambda r: r.index):
        merged.extend(result.posts)
    return merged[:total_count]


class ScrapeOrchestrator:
    """Entry point for a parallel scrape"""

    def __init__(self, config: Optional[ScraperConfig] = None,
                 pool: Optional[BrowserPool] = None,
                 delay: Optional[Callable[[], float]] = None,
                 policy: Optional[AttemptPolicy] = None):
        self.config = config or ScraperConfig()
        self.pool = pool or BrowserPool(partial(launch_browser, self.config), ceiling=self.config.pool_size)
        self.delay = delay or RandomDelay(self.config.scroll_delay_min_ms, self.config.scroll_delay_max_ms)
        self.policy = policy or AttemptPolicy.from_config(self.config)
        self.worker_limiter = ConcurrencyLimiter(self.config.worker_concurrency)

    def run(self, request: ScrapeRequest) -> List[PostRecord]:
        """Scrape up to request.total_count unique posts

        Raises:
            ValidationError: request is malformed
            OrchestrationError: every worker aborted
        """
        validate_request(request)

        parallelism = self.config.parallelism
        quota = per_instance_quota(request.total_count, parallelism)
        collector = DedupCollector()

        log.info("orchestrator", "run_start", "Starting parallel scrape",
                 search_term=request.search_term, total_count=request.total_count,
                 parallelism=parallelism, quota=quota)

        with ThreadPoolExecutor(max_workers=parallelism, thread_name_prefix="scrape-worker") as executor:
            futures = [
                executor.submit(self._run_worker, index, quota, request, collector)
                for index in range(parallelism)
            ]
            results = [future.result() for future in futures]

        aborted = [r for r in results if r.aborted]
        if len(aborted) == len(results):
            log.error("orchestrator", "all_workers_aborted", "Every worker aborted",
                      errors=[r.error for r in aborted])
            raise OrchestrationError(f"All {len(results)} scrape workers failed to navigate")

        posts = merge_results(results, request.total_count)
        log.info("orchestrator", "run_complete", "Scraping completed",
                 posts=len(posts), unique_seen=len(collector), aborted_workers=len(aborted))
        return posts

    def _run_worker(self, index: int, quota: int, request: ScrapeRequest,
                    collector: DedupCollector) -> WorkerResult:
        with self.worker_limiter.slot():
            loop = WorkerLoop(index, quota, request, self.pool, collector,
                              self.config, delay=self.delay, policy=self.policy)
            return loop.run()

    def shutdown(self):
        self.pool.shutdown()
