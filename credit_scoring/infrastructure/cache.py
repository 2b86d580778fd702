"""Caller-side result cache, injected into the API layer (the engine itself never caches)"""

import hashlib
import json
import threading
from collections import OrderedDict
from typing import Any, Dict, Optional, Protocol, runtime_checkable

from credit_scoring.domain.models import CreditScoreResult

CREDIT_SCORE_TOPIC = "credit-score"


def make_cache_key(business_id: str, topic: str, digest: str = "latest") -> str:
    """Build a "<business_id>:<topic>:<digest>" key. Topic and digest never contain ":"."""
    return f"{business_id}:{topic}:{digest}"


def _business_id_of(key: str) -> str:
    return key.rsplit(":", 2)[0]


def fingerprint(payload: Dict[str, Any]) -> str:
    """Stable digest of a JSON-compatible request payload"""
    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]


@runtime_checkable
class ScoreCache(Protocol):
    """Key-value store for computed results, owned by the caller"""

    def get(self, key: str) -> Optional[CreditScoreResult]:
        ...

    def set(self, key: str, value: CreditScoreResult) -> None:
        ...

    def clear(self, business_id: Optional[str] = None) -> int:
        """Drop one business's entries (or everything) and return how many were removed"""
        ...


class InMemoryScoreCache:
    """Bounded, thread-safe in-process cache; oldest entries are evicted first"""

    def __init__(self, max_entries: int = 1024):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self._entries: "OrderedDict[str, CreditScoreResult]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[CreditScoreResult]:
        with self._lock:
            return self._entries.get(key)

    def set(self, key: str, value: CreditScoreResult) -> None:
        with self._lock:
            self._entries[key] = value
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def clear(self, business_id: Optional[str] = None) -> int:
        with self._lock:
            if business_id is None:
                removed = len(self._entries)
                self._entries.clear()
                return removed

            stale = [key for key in self._entries if _business_id_of(key) == business_id]
            for key in stale:
                del self._entries[key]
            return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
