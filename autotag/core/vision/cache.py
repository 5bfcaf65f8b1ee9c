# autotag/core/vision/cache.py
"""
Per-image result cache with single-flight computation.

Key = sha256 of the image bytes. A live entry is returned without computing.
On a miss exactly one caller runs `compute`; concurrent callers for the same key
block until it finishes and share its result. Only successful results are
stored, so a failed call is retried on the next trigger.

Entries expire `ttl_s` after insertion (reads do not extend them). When full,
the least-recently-used entry is evicted.
"""

from __future__ import annotations

import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass, field

from autotag.core.logging import get_logger
from autotag.core.vision.result import StepResult
from autotag.schemas.models import TaggingResult

logger = get_logger(__name__)

DEFAULT_TTL_S = 60.0
DEFAULT_MAX_ENTRIES = 100

Compute = Callable[[], StepResult[TaggingResult]]


@dataclass(frozen=True)
class CacheEntry:
    value: TaggingResult
    created_at: float


@dataclass
class _Flight:
    done: threading.Event = field(default_factory=threading.Event)
    result: StepResult[TaggingResult] | None = None


class DedupCache:
    def __init__(
        self,
        ttl_s: float = DEFAULT_TTL_S,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_s <= 0:
            raise ValueError("ttl_s must be > 0")
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self._ttl_s = float(ttl_s)
        self._max_entries = int(max_entries)
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._inflight: dict[str, _Flight] = {}

    # ---------- reads ----------
    def _live(self, key: str) -> TaggingResult | None:
        """Caller must hold the lock."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.created_at >= self._ttl_s:
            del self._entries[key]
            return None
        self._entries.move_to_end(key)
        return entry.value

    def get(self, key: str) -> TaggingResult | None:
        with self._lock:
            return self._live(key)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    # ---------- writes ----------
    def _store(self, key: str, value: TaggingResult) -> None:
        """Caller must hold the lock."""
        self._entries[key] = CacheEntry(value=value, created_at=self._clock())
        self._entries.move_to_end(key)
        while len(self._entries) > self._max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("evicted cached vision result %s", evicted[:12])

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    # ---------- single-flight ----------
    def get_or_compute(self, key: str, compute: Compute) -> StepResult[TaggingResult]:
        with self._lock:
            hit = self._live(key)
            if hit is not None:
                logger.debug("vision cache hit %s", key[:12])
                return StepResult.success(hit)
            flight = self._inflight.get(key)
            leader = flight is None
            if leader:
                flight = _Flight()
                self._inflight[key] = flight

        assert flight is not None
        if not leader:
            flight.done.wait()
            return flight.result or StepResult.failure("computation did not produce a result")

        result: StepResult[TaggingResult] = StepResult.failure("computation raised")
        try:
            result = compute()
            return result
        finally:
            with self._lock:
                if result.ok:
                    self._store(key, result.value)  # type: ignore[arg-type]
                self._inflight.pop(key, None)
            flight.result = result
            flight.done.set()


__all__ = [
    "CacheEntry",
    "DedupCache",
    "DEFAULT_TTL_S",
    "DEFAULT_MAX_ENTRIES",
]
