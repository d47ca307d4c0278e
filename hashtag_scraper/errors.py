"""Exceptions raised by the scraper

Only ValidationError and OrchestrationError ever reach a caller of
ScrapeOrchestrator.run(); the rest are absorbed per worker or raised by the
pool API itself.
"""


class ScraperError(Exception):
    """Base class for every scraper failure"""
    pass


class ValidationError(ScraperError):
    """Raised when a scrape request is malformed or missing fields"""
    pass


class NavigationError(ScraperError):
    """Raised when a browser session cannot reach a stable search page"""
    pass


class BrowserLaunchError(NavigationError):
    """Raised when the pool fails to start a new browser session"""
    pass


class OrchestrationError(ScraperError):
    """Raised when every worker of a run aborted"""
    pass


class PoolClosedError(ScraperError):
    """Raised when acquiring from a pool that has been shut down"""
    pass


class PoolTimeoutError(ScraperError):
    """Raised when acquire(timeout=...) expires before a session frees up"""
    pass


class SessionFaultError(ScraperError):
    """Raised when a browser session breaks after navigation succeeded"""
    pass
