"""Triage result storage.

Durable persistence belongs to the caller; the engine only needs ``get`` and
``save``. ``InMemoryTriageResultStore`` is the default used by the service and
the evaluation runner.
"""

import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from typing import Any, Protocol

from src.services.triage.models import TriageAnalysisResult


class TriageResultStore(Protocol):
    """Where finished triage results are kept for later override."""

    def get(self, assessment_id: str) -> TriageAnalysisResult | None: ...

    def save(self, result: TriageAnalysisResult) -> None: ...


class InMemoryTriageResultStore:
    """Thread-safe store with max size and TTL, evicting least recently used."""

    def __init__(
        self,
        max_size: int = 500,
        ttl_seconds: float = 86_400,
        clock: Callable[[], float] = time.time,
    ):
        self._max_size = max_size
        self._ttl = ttl_seconds
        self._clock = clock
        self._results: OrderedDict[str, tuple[TriageAnalysisResult, float]] = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get(self, assessment_id: str) -> TriageAnalysisResult | None:
        with self._lock:
            entry = self._results.get(assessment_id)
            if entry is None:
                self._misses += 1
                return None
            result, stored_at = entry
            if self._clock() - stored_at > self._ttl:
                del self._results[assessment_id]
                self._misses += 1
                return None
            self._results.move_to_end(assessment_id)
            self._hits += 1
            return result

    def save(self, result: TriageAnalysisResult) -> None:
        with self._lock:
            key = result.assessment_id
            if key in self._results:
                self._results.move_to_end(key)
            elif len(self._results) >= self._max_size:
                self._results.popitem(last=False)
            self._results[key] = (result, self._clock())

    def delete(self, assessment_id: str) -> bool:
        with self._lock:
            return self._results.pop(assessment_id, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._results.clear()
            self._hits = 0
            self._misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._results)

    def get_stats(self) -> dict[str, Any]:
        with self._lock:
            total = self._hits + self._misses
            return {
                "size": len(self._results),
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": round(self._hits / total * 100, 2) if total > 0 else 0.0,
                "max_size": self._max_size,
                "ttl_seconds": self._ttl,
            }
