"""
Scraper Data Models
===================

POST RECORD
───────────
One tweet as seen on the search page. Frozen so records can be shared across
worker threads without copying. `post_url` is the identity used for
deduplication.

Wire form (what the API returns):

    {"content": "...", "profile": "https://twitter.com/user",
     "url": "https://twitter.com/user/status/123", "date": "2025-01-01T12:00:00.000Z"}

SCRAPE REQUEST
──────────────
Caller input for one orchestrator run. Not validated on construction; the
orchestrator validates so the API can turn problems into a 400.

WORKER RESULT
─────────────
What one WorkerLoop hands back to the orchestrator for merging.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class PostRecord:
    content: str
    author_profile_url: str
    post_url: str
    timestamp: str

    def to_dict(self) -> Dict[str, str]:
        """Serialize using the API field names."""
        return {
            "content": self.content,
            "profile": self.author_profile_url,
            "url": self.post_url,
            "date": self.timestamp,
        }


@dataclass
class ScrapeRequest:
    auth_token: str
    search_term: str
    total_count: Any


class WorkerState(str, Enum):
    """States of the per-instance scrape loop"""
    INIT = "init"
    NAVIGATING = "navigating"
    CAPTURING = "capturing"
    FILTERING = "filtering"
    SCROLLING = "scrolling"
    DONE = "done"
    ABORTED = "aborted"


@dataclass
class WorkerResult:
    index: int
    state: WorkerState
    posts: List[PostRecord] = field(default_factory=list)
    attempts: int = 0
    error: Optional[str] = None

    @property
    def aborted(self) -> bool:
        return self.state is WorkerState.ABORTED
