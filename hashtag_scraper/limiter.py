"""Admission limiting and rate pacing

One ConcurrencyLimiter caps how many callers may be inside at once and, if
an interval is set, how many may start within any sliding window of that
length. The orchestrator uses one to admit worker loops; the API uses a
separate one as its request queue.
"""
import threading
import time
from collections import deque
from contextlib import contextmanager
from typing import Callable


class ConcurrencyLimiter:
    def __init__(self, concurrency: int, interval: float = 0.0, interval_cap: int = 1,
                 clock: Callable[[], float] = time.monotonic,
                 sleep: Callable[[float], None] = time.sleep):
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        if interval_cap < 1:
            raise ValueError("interval_cap must be at least 1")
        self.concurrency = concurrency
        self.interval = interval
        self.interval_cap = interval_cap
        self._clock = clock
        self._sleep = sleep
        self._slots = threading.BoundedSemaphore(concurrency)
        self._starts = deque()
        self._pace_lock = threading.Lock()
        self._count_lock = threading.Lock()
        self.active = 0
        self.pending = 0

    def _pace(self):
        """Block until starting now keeps within interval_cap per interval"""
        if self.interval <= 0:
            return
        with self._pace_lock:
            while True:
                now = self._clock()
                while self._starts and now - self._starts[0] >= self.interval:
                    self._starts.popleft()
                if len(self._starts) < self.interval_cap:
                    self._starts.append(now)
                    return
                self._sleep(self.interval - (now - self._starts[0]))

    @contextmanager
    def slot(self):
        with self._count_lock:
            self.pending += 1
        self._slots.acquire()
        try:
            self._pace()
        except BaseException:
            self._slots.release()
            with self._count_lock:
                self.pending -= 1
            raise

        with self._count_lock:
            self.pending -= 1
            self.active += 1
        try:
            yield
        finally:
            with self._count_lock:
                self.active -= 1
            self._slots.release()

    def run(self, fn, *args, **kwargs):
        """Call fn once a slot (and pacing window) is available"""
        with self.slot():
            return fn(*args, **kwargs)
