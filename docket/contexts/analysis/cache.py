"""
Analysis cache.

Stores one AnalysisResult per (document, target project) pair for a fixed
TTL. The store itself is a narrow async key-value interface (get/set/delete);
AnalysisCache adds the key format, the TTL check and soft-failure handling on
top of it. A cache failure never fails an analysis: a read error is a miss,
a write or delete error only skips persistence.

Expired entries are not deleted on read. They stay in the store until
overwritten by a fresh analysis or explicitly invalidated.
"""

import asyncio
import copy
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, Optional, Union

from docket.contexts.analysis.analysis_result import AnalysisResult
from docket.contexts.analysis.logger import (
    _log_debug,
    _log_warning,
    log_cache_failure,
    log_cache_hit,
    log_cache_miss,
)
from docket.exceptions import CacheStoreError
from docket.integrations.protocols import CacheStore
from docket.utils.timestamp import format_age, now_ms

CACHE_KEY_PREFIX = "backlog"
DEFAULT_TTL_MS = 3_600_000

# Errors that make a cache operation a soft failure
SOFT_CACHE_ERRORS = (OSError, ValueError, KeyError, TypeError, AttributeError, CacheStoreError)


def cache_key(document_id: str, target_collection_id: str) -> str:
    """
    Composite cache key for a document/target pair.

    Example:
        >>> cache_key("123456", "PAY")
        'backlog-123456-PAY'
    """
    return f"{CACHE_KEY_PREFIX}-{document_id}-{target_collection_id}"


@dataclass(frozen=True)
class CacheEntry:
    """
    Stored analysis plus the time it was written.

    Attributes:
        result: AnalysisResult in its to_dict() form
        created_at_epoch_ms: Write timestamp used for the TTL check
    """

    result: Dict[str, Any]
    created_at_epoch_ms: int

    def to_dict(self) -> Dict[str, Any]:
        return {"result": self.result, "createdAtEpochMs": self.created_at_epoch_ms}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CacheEntry":
        return cls(result=data["result"], created_at_epoch_ms=int(data["createdAtEpochMs"]))

    def age_ms(self, now: int) -> int:
        return now - self.created_at_epoch_ms


@dataclass(frozen=True)
class CachedAnalysis:
    """
    Result of a cache-aware lookup.

    Attributes:
        result: The analysis
        from_cache: True if the result was read from the store
        age_ms: Age of the stored entry (0 for a fresh analysis)
    """

    result: AnalysisResult
    from_cache: bool
    age_ms: int = 0

    @property
    def cache_age(self) -> str:
        return format_age(self.age_ms)


# =============================================================================
# STORES
# =============================================================================


class InMemoryCacheStore:
    """
    Dict-backed cache store.

    Entries are deep-copied on the way in and out so callers can never
    mutate what is stored, the same as with a persistent store.
    """

    def __init__(self):
        self.entries: Dict[str, Dict[str, Any]] = {}

    async def get(self, key: str) -> Optional[Dict[str, Any]]:
        entry = self.entries.get(key)
        return copy.deepcopy(entry) if entry is not None else None

    async def set(self, key: str, entry: Dict[str, Any]) -> None:
        self.entries[key] = copy.deepcopy(entry)

    async def delete(self, key: str) -> None:
        self.entries.pop(key, None)


class JsonFileCacheStore:
    """
    Cache store persisted as a single JSON file keyed by cache key.

    Every write rewrites the whole file through a temp file, off the event
    loop; writes are serialized by a lock. A corrupt file is logged and treated
    as empty; the next write replaces it.

    Args:
        path: JSON file location (parent directories are created on write)
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._write_lock = asyncio.Lock()

    def _read_all(self) -> Dict[str, Any]:
        if not self.path.exists() or self.path.stat().st_size == 0:
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            _log_warning(f"Cache file corrupted, treating as empty: {self.path} ({e})")
            return {}
        if not isinstance(data, dict):
            _log_warning(f"Cache file has unexpected shape, treating as empty: {self.path}")
            return {}
        return data

    def _write_all(self, data: Dict[str, Any]) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            tmp_path.replace(self.path)
        except (OSError, TypeError, ValueError) as e:
            # Clean up temp file if write failed
            if tmp_path.exists():
                tmp_path.unlink()
            raise CacheStoreError(f"Could not write cache file {self.path}: {e}") from e

    def _set_sync(self, key: str, entry: Dict[str, Any]) -> None:
        data = self._read_all()
        data[key] = entry
        self._write_all(data)

    def _delete_sync(self, key: str) -> None:
        data = self._read_all()
        if data.pop(key, None) is not None:
            self._write_all(data)

    async def get(self, key: str) -> Optional[Dict[str, Any]]:
        data = await asyncio.to_thread(self._read_all)
        return data.get(key)

    async def set(self, key: str, entry: Dict[str, Any]) -> None:
        async with self._write_lock:
            await asyncio.to_thread(self._set_sync, key, entry)

    async def delete(self, key: str) -> None:
        async with self._write_lock:
            await asyncio.to_thread(self._delete_sync, key)


# =============================================================================
# TTL WRAPPER
# =============================================================================


class AnalysisCache:
    """
    TTL cache of analysis results over a CacheStore.

    Args:
        store: Key-value store holding CacheEntry dicts
        ttl_ms: Entries at least this old are treated as absent
        clock: Returns the current time in epoch milliseconds (injectable for tests)

    Example:
        cache = AnalysisCache(InMemoryCacheStore())
        cached = await cache.get_or_analyze("123", "PAY", run_analysis)
        cached.from_cache  # False the first time, True within the hour
    """

    def __init__(
        self,
        store: CacheStore,
        ttl_ms: int = DEFAULT_TTL_MS,
        clock: Callable[[], int] = now_ms,
    ):
        self.store = store
        self.ttl_ms = ttl_ms
        self.clock = clock

    def is_fresh(self, entry: CacheEntry, now: Optional[int] = None) -> bool:
        now = self.clock() if now is None else now
        return entry.age_ms(now) < self.ttl_ms

    async def _read_fresh(self, key: str) -> Optional[CachedAnalysis]:
        """Fresh stored analysis for key, or None on miss, expiry or read error."""
        try:
            raw = await self.store.get(key)
            if raw is None:
                log_cache_miss(key)
                return None
            entry = CacheEntry.from_dict(raw)
            now = self.clock()
            if not self.is_fresh(entry, now):
                log_cache_miss(key, f"expired ({format_age(entry.age_ms(now))})")
                return None
            result = AnalysisResult.from_dict(entry.result)
        except SOFT_CACHE_ERRORS as e:
            log_cache_failure("read", key, e)
            return None

        cached = CachedAnalysis(result=result, from_cache=True, age_ms=entry.age_ms(now))
        log_cache_hit(key, cached.cache_age)
        return cached

    async def get_stored(self, document_id: str, target_collection_id: str) -> Optional[CachedAnalysis]:
        """
        Read a fresh stored analysis without computing anything.

        Returns:
            CachedAnalysis, or None if there is no fresh entry
        """
        return await self._read_fresh(cache_key(document_id, target_collection_id))

    async def put(self, document_id: str, target_collection_id: str, result: AnalysisResult) -> bool:
        """
        Store a result, overwriting any existing entry.

        Returns:
            True if the entry was written, False if the write failed
        """
        key = cache_key(document_id, target_collection_id)
        entry = CacheEntry(result=result.to_dict(), created_at_epoch_ms=self.clock())
        try:
            await self.store.set(key, entry.to_dict())
        except SOFT_CACHE_ERRORS as e:
            log_cache_failure("write", key, e)
            return False
        _log_debug(f"Cached analysis for {key}")
        return True

    async def get_or_analyze(
        self,
        document_id: str,
        target_collection_id: str,
        analyze_fn: Callable[[], Awaitable[AnalysisResult]],
    ) -> CachedAnalysis:
        """
        Return the stored analysis if fresh, otherwise compute and store it.

        Args:
            document_id: Source document ID
            target_collection_id: Target project key
            analyze_fn: Coroutine function producing a fresh AnalysisResult

        Returns:
            CachedAnalysis with from_cache set accordingly

        Raises:
            Whatever analyze_fn raises (fetch errors are not cache failures)
        """
        cached = await self.get_stored(document_id, target_collection_id)
        if cached is not None:
            return cached

        result = await analyze_fn()
        await self.put(document_id, target_collection_id, result)
        return CachedAnalysis(result=result, from_cache=False, age_ms=0)

    async def invalidate(self, document_id: str, target_collection_id: str) -> bool:
        """
        Remove the entry for a document/target pair.

        Returns:
            True if the delete succeeded (or there was nothing to delete)
        """
        key = cache_key(document_id, target_collection_id)
        try:
            await self.store.delete(key)
        except SOFT_CACHE_ERRORS as e:
            log_cache_failure("delete", key, e)
            return False
        _log_debug(f"Invalidated {key}")
        return True
