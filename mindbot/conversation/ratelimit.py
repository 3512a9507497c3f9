"""Per-caller fixed-window request counter.

State lives behind ``RateLimitStore`` so a shared backend (e.g. a cache
server) can replace the in-process default. The in-memory store is local to
one worker process: horizontally scaled instances each count separately and
all counts are lost on restart.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Union
import threading
import time

DEFAULT_MAX_REQUESTS = 40
DEFAULT_WINDOW_SECONDS = 60.0


@dataclass
class RateLimitEntry:
    key: str
    count: int
    window_start: float


class RateLimitStore(ABC):
    @abstractmethod
    def get(self, key: str) -> Optional[RateLimitEntry]:
        ...

    @abstractmethod
    def increment(self, key: str, now: float, window_seconds: float) -> RateLimitEntry:
        """Atomically roll the window if it elapsed, then add one hit."""

    @abstractmethod
    def reset(self, key: str) -> None:
        ...


class InMemoryRateLimitStore(RateLimitStore):
    def __init__(self) -> None:
        self._entries: Dict[str, RateLimitEntry] = {}
        self._locks: Dict[str, threading.Lock] = {}
        # guards the _locks registry; never waited on while a key lock is held
        self._registry_lock = threading.Lock()
        self._last_sweep: Optional[float] = None

    def __len__(self) -> int:
        return len(self._entries)

    def _lock_for(self, key: str) -> threading.Lock:
        lock = self._locks.get(key)
        if lock is None:
            with self._registry_lock:
                lock = self._locks.setdefault(key, threading.Lock())
        return lock

    def get(self, key: str) -> Optional[RateLimitEntry]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        return RateLimitEntry(entry.key, entry.count, entry.window_start)

    def increment(self, key: str, now: float, window_seconds: float) -> RateLimitEntry:
        while True:
            lock = self._lock_for(key)
            with lock:
                # the sweeper may have retired this lock while we waited
                if self._locks.get(key) is not lock:
                    continue
                entry = self._entries.get(key)
                if entry is None:
                    entry = RateLimitEntry(key=key, count=0, window_start=now)
                    self._entries[key] = entry
                elif now - entry.window_start > window_seconds:
                    entry.count = 0
                    entry.window_start = now
                entry.count += 1
                result = RateLimitEntry(entry.key, entry.count, entry.window_start)
            break
        self._sweep(now, window_seconds)
        return result

    def _sweep(self, now: float, window_seconds: float) -> None:
        """Drop keys whose window has elapsed, at most once per window."""
        if self._last_sweep is not None and now - self._last_sweep <= window_seconds:
            return
        with self._registry_lock:
            if self._last_sweep is not None and now - self._last_sweep <= window_seconds:
                return
            self._last_sweep = now
            for key, lock in list(self._locks.items()):
                if not lock.acquire(blocking=False):
                    continue
                try:
                    entry = self._entries.get(key)
                    if entry is None or now - entry.window_start > window_seconds:
                        self._entries.pop(key, None)
                        del self._locks[key]
                finally:
                    lock.release()

    def reset(self, key: str) -> None:
        with self._lock_for(key):
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._registry_lock:
            self._entries.clear()
            self._locks.clear()
            self._last_sweep = None


@dataclass(frozen=True)
class Limited:
    key: str
    count: int
    retry_after: float

    @property
    def limited(self) -> bool:
        return True


@dataclass(frozen=True)
class NotLimited:
    key: str
    count: int

    @property
    def limited(self) -> bool:
        return False


RateLimitResult = Union[Limited, NotLimited]


class RateLimiter:
    def __init__(
        self,
        max_requests: int = DEFAULT_MAX_REQUESTS,
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
        store: Optional[RateLimitStore] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.store = store or InMemoryRateLimitStore()
        self.clock = clock

    def check(self, key: str) -> RateLimitResult:
        now = self.clock()
        entry = self.store.increment(key, now, self.window_seconds)
        if entry.count > self.max_requests:
            retry_after = max(0.0, entry.window_start + self.window_seconds - now)
            return Limited(key, entry.count, retry_after)
        return NotLimited(key, entry.count)

    def should_limit(self, key: str) -> bool:
        return self.check(key).limited

    def reset(self, key: str) -> None:
        self.store.reset(key)
