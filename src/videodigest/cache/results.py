"""
In-memory cache of finished video analyses.

Entries are keyed on (original filename, byte length). This is a weak
identity: two different files that share a name and size collide, and the
second one is answered with the first one's analysis. Entries are never
evicted or invalidated for the lifetime of the process.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, NamedTuple, Protocol, runtime_checkable

if TYPE_CHECKING:
    from videodigest.models.analysis import VideoAnalysisResult

logger = logging.getLogger(__name__)


class CacheKey(NamedTuple):
    """Identity of an input video."""

    filename: str
    byte_length: int

    def __str__(self) -> str:
        return f"{self.filename}_{self.byte_length}"


def make_cache_key(filename: str, data: bytes) -> CacheKey:
    """Build the cache key for an input."""
    return CacheKey(filename, len(data))


@runtime_checkable
class ResultStore(Protocol):
    """Storage used by the processor to short-circuit repeated inputs."""

    def get(self, key: CacheKey) -> VideoAnalysisResult | None:
        ...

    def put(self, key: CacheKey, result: VideoAnalysisResult) -> None:
        ...


class ResultCache:
    """Thread-safe, unbounded map from CacheKey to VideoAnalysisResult.

    Safe to share between concurrently running pipelines; on a key
    collision the last writer wins.
    """

    def __init__(self) -> None:
        self._entries: dict[CacheKey, VideoAnalysisResult] = {}
        self._lock = threading.Lock()

    def get(self, key: CacheKey) -> VideoAnalysisResult | None:
        with self._lock:
            return self._entries.get(key)

    def put(self, key: CacheKey, result: VideoAnalysisResult) -> None:
        with self._lock:
            if key in self._entries:
                logger.debug(f"Replacing cached analysis for {key}")
            self._entries[key] = result

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
