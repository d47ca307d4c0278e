"""Hashtag Scraper - Parallel headless-browser collection of Twitter posts

Drives several Selenium Chrome sessions at once against a Twitter search,
deduplicates posts across sessions and returns a bounded, ordered list.

Architecture:
- extractor.py: Post record extraction from a rendered search page
- session.py: SessionDriver (navigate, scroll, capture) over one browser
- pool.py: BrowserPool that recycles idle browser sessions
- collector.py: DedupCollector shared by all workers of one run
- worker.py: WorkerLoop state machine (one per parallel instance)
- limiter.py: ConcurrencyLimiter (admission + optional rate pacing)
- orchestrator.py: ScrapeOrchestrator entry point
- app.py: FastAPI endpoints
- config.py: Configuration management
"""

__version__ = "1.0.0"
