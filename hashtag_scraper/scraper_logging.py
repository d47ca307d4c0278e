"""
Structured JSON Logging for the scraper service

Every component logs through one singleton so worker threads produce
consistent, queryable lines.

Log Format:
{
    "ts": "2025-02-05T14:30:22.123456+00:00",
    "level": "INFO",
    "module": "worker",
    "action": "quota_met",
    "msg": "Worker reached quota",
    "worker": 2,
    ...context fields
}

Usage:
    from hashtag_scraper.scraper_logging import log
    
    log.info("orchestrator", "run_start", "Starting parallel scrape", parallelism=5)
    log.error("session", "navigation_failed", "Search page never settled", error=str(e))
"""
import json
import os
import sys
import threading
from datetime import datetime, timezone


class ScraperLogger:
    """Structured JSON logger for the scraper service."""
    
    def __init__(self):
        self.pretty = os.environ.get("LOG_FORMAT", "").lower() == "pretty"
        self._write_lock = threading.Lock()
        # Force unbuffered output
        for stream in (sys.stdout, sys.stderr):
            reconfigure = getattr(stream, "reconfigure", None)
            if reconfigure is not None:
                reconfigure(line_buffering=True)
    
    def _log(self, level: str, module: str, action: str, msg: str, **kwargs):
        """Emit a structured log entry."""
        entry = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": level,
            "module": module,
            "action": action,
            "msg": msg,
            **kwargs
        }
        
        if self.pretty:
            # Human-readable format for local development
            context = " | ".join(f"{k}={v}" for k, v in kwargs.items()) if kwargs else ""
            output = f"{entry['ts'][:23]} | {level:5} | {module} | {action} | {msg}"
            if context:
                output += f" | {context}"
        else:
            output = json.dumps(entry, default=str)
        
        # Worker threads log concurrently; keep lines whole
        with self._write_lock:
            print(output, flush=True)
    
    def info(self, module: str, action: str, msg: str, **kwargs):
        """Log INFO level message."""
        self._log("INFO", module, action, msg, **kwargs)
    
    def warning(self, module: str, action: str, msg: str, **kwargs):
        """Log WARNING level message."""
        self._log("WARN", module, action, msg, **kwargs)
    
    def error(self, module: str, action: str, msg: str, **kwargs):
        """Log ERROR level message."""
        self._log("ERROR", module, action, msg, **kwargs)
    
    def debug(self, module: str, action: str, msg: str, **kwargs):
        """Log DEBUG level message."""
        self._log("DEBUG", module, action, msg, **kwargs)


# Singleton instance
log = ScraperLogger()
