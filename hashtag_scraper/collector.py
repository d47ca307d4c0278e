"""Cross-worker deduplication of scraped posts"""
import threading
from typing import Iterable, List, Set

from .models import PostRecord


class DedupCollector:
    """Seen-URL set shared by every worker of one scrape run.

    The only operation is admit(): check and insert happen under one lock, so
    two workers racing on the same post_url can never both be told it is new.
    """

    def __init__(self):
        self._seen: Set[str] = set()
        self._lock = threading.Lock()

    def admit(self, candidates: Iterable[PostRecord]) -> List[PostRecord]:
        """Return the candidates whose post_url was never admitted before.

        Order is preserved. Repeats inside the same batch count as seen.
        """
        novel = []
        with self._lock:
            for post in candidates:
                if post.post_url in self._seen:
                    continue
                self._seen.add(post.post_url)
                novel.append(post)
        return novel

    def __len__(self) -> int:
        with self._lock:
            return len(self._seen)
