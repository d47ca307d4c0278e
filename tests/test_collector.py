"""Tests for cross-worker deduplication"""
import threading

from hashtag_scraper.collector import DedupCollector
from hashtag_scraper.models import PostRecord


def record(n):
    return PostRecord(f"post {n}", f"https://twitter.com/u{n}",
                      f"https://twitter.com/u{n}/status/{n}", "2025-01-01T00:00:00.000Z")


class TestDedupCollector:
    """Test suite for DedupCollector"""

    def test_admits_new_records_in_order(self):
        collector = DedupCollector()

        novel = collector.admit([record(3), record(1), record(2)])

        assert novel == [record(3), record(1), record(2)]
        assert len(collector) == 3

    def test_rejects_previously_admitted(self):
        collector = DedupCollector()
        collector.admit([record(1), record(2)])

        novel = collector.admit([record(2), record(3), record(1)])

        assert novel == [record(3)]

    def test_duplicate_within_batch_admitted_once(self):
        collector = DedupCollector()

        novel = collector.admit([record(1), record(1), record(2)])

        assert novel == [record(1), record(2)]

    def test_identity_is_post_url(self):
        collector = DedupCollector()
        collector.admit([record(1)])
        same_url = PostRecord("edited text", "https://twitter.com/u1",
                              record(1).post_url, "2025-02-02T00:00:00.000Z")

        assert collector.admit([same_url]) == []

    def test_concurrent_admission_never_double_admits(self):
        collector = DedupCollector()
        admitted = []
        admitted_lock = threading.Lock()
        barrier = threading.Barrier(8)

        def worker(offset):
            barrier.wait()
            for start in range(0, 200, 10):
                # Overlapping windows so every url is contested
                batch = [record(n) for n in range(start + offset, start + offset + 20)]
                novel = collector.admit(batch)
                with admitted_lock:
                    admitted.extend(novel)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        urls = [r.post_url for r in admitted]
        assert len(urls) == len(set(urls))
        assert len(urls) == len(collector)
