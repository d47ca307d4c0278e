"""Configuration for the scraper service"""
import os
from dataclasses import dataclass


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == 'true'


@dataclass
class ScraperConfig:
    """Scraper configuration loaded from environment variables"""
    
    # Target site
    base_url: str = os.getenv('SCRAPER_BASE_URL', 'https://twitter.com')
    cookie_name: str = os.getenv('SCRAPER_COOKIE_NAME', 'auth_token')
    cookie_domain: str = os.getenv('SCRAPER_COOKIE_DOMAIN', '.twitter.com')
    
    # Browser settings
    headless: bool = _env_bool('SCRAPER_HEADLESS', 'true')
    chromedriver_path: str = os.getenv('CHROMEDRIVER_PATH', '/usr/bin/chromedriver')
    window_size: str = os.getenv('SCRAPER_WINDOW_SIZE', '1920,1080')
    
    # Worker loop
    parallelism: int = int(os.getenv('SCRAPER_PARALLELISM', 5))
    max_attempts: int = int(os.getenv('SCRAPER_MAX_ATTEMPTS', 10))
    extend_while_progressing: bool = _env_bool('SCRAPER_EXTEND_WHILE_PROGRESSING', 'false')
    max_extended_attempts: int = int(os.getenv('SCRAPER_MAX_EXTENDED_ATTEMPTS', 20))
    scroll_delay_min_ms: int = int(os.getenv('SCRAPER_SCROLL_DELAY_MIN_MS', 2000))
    scroll_delay_max_ms: int = int(os.getenv('SCRAPER_SCROLL_DELAY_MAX_MS', 5000))
    navigation_timeout: float = float(os.getenv('SCRAPER_NAVIGATION_TIMEOUT', 30))  # seconds
    
    # Resource limits
    pool_size: int = int(os.getenv('SCRAPER_POOL_SIZE', 10))
    worker_concurrency: int = int(os.getenv('SCRAPER_WORKER_CONCURRENCY', 10))
    request_concurrency: int = int(os.getenv('SCRAPER_REQUEST_CONCURRENCY', 10))
    request_interval: float = float(os.getenv('SCRAPER_REQUEST_INTERVAL', 0))  # seconds, 0 = no pacing
    request_interval_cap: int = int(os.getenv('SCRAPER_REQUEST_INTERVAL_CAP', 1))
    
    # Service settings
    host: str = os.getenv('SCRAPER_SERVICE_HOST', '0.0.0.0')
    port: int = int(os.getenv('SCRAPER_SERVICE_PORT', 8888))
    
    def __post_init__(self):
        """Validate configuration"""
        for name in ('parallelism', 'max_attempts', 'pool_size',
                     'worker_concurrency', 'request_concurrency', 'request_interval_cap'):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be at least 1")
        if self.scroll_delay_min_ms < 0 or self.scroll_delay_max_ms < self.scroll_delay_min_ms:
            raise ValueError("scroll delay window must satisfy 0 <= min <= max")
        if self.max_extended_attempts < self.max_attempts:
            raise ValueError("max_extended_attempts must not be below max_attempts")
        if self.navigation_timeout <= 0:
            raise ValueError("navigation_timeout must be positive")
        if self.request_interval < 0:
            raise ValueError("request_interval must not be negative")
