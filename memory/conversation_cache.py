"""In-process TTL cache for assembled conversation prefixes."""

import hashlib
import json
import logging
import threading
import time
from typing import Callable, Dict, Optional, Sequence, Tuple

from schemas.conversation import CacheEntry, CacheStats, CacheWriteResult, MessagePart

logger = logging.getLogger(__name__)


def hash_prompt(system_prompt: str) -> str:
    """Content hash of a system prompt, used as half of the cache key."""
    return hashlib.sha256((system_prompt or "").encode("utf-8")).hexdigest()


class ConversationCache:
    """
    Keyed store of conversation prefixes with lazy TTL expiry.

    Entries are keyed by (session_id, hash of system prompt) and are only
    ever replaced wholesale. Expired entries read as a miss; an eviction
    sweep runs before an insert at most once per sweep interval.

    Construct one instance per process and pass it to the optimizers
    that share it.
    """

    DEFAULT_TTL_SECONDS = 1800
    DEFAULT_SWEEP_INTERVAL_SECONDS = 300

    def __init__(
        self,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        sweep_interval_seconds: int = DEFAULT_SWEEP_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.time
    ):
        """
        Initialize conversation cache.

        Args:
            ttl_seconds: Maximum entry age before it is treated as absent
            sweep_interval_seconds: Minimum gap between insert-triggered sweeps
            clock: Time source in seconds (injectable for tests)
        """
        self.ttl_seconds = ttl_seconds
        self.sweep_interval_seconds = sweep_interval_seconds
        self.clock = clock
        self._entries: Dict[Tuple[str, str], CacheEntry] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    def _key(self, session_id: str, system_prompt: str) -> Tuple[str, str]:
        return (session_id, hash_prompt(system_prompt))

    def _is_expired(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.created_at > self.ttl_seconds

    def get(self, session_id: str, system_prompt: str) -> Optional[CacheEntry]:
        """
        Look up a fresh entry.

        Args:
            session_id: Session identifier
            system_prompt: System prompt the prefix was built with

        Returns:
            CacheEntry, or None on miss or expiry
        """
        key = self._key(session_id, system_prompt)
        now = self.clock()

        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._is_expired(entry, now):
                del self._entries[key]
                logger.debug(f"Cache entry expired for session {session_id}")
                return None

        return entry

    def put(
        self,
        session_id: str,
        system_prompt: str,
        content: Sequence[MessagePart],
        tokens: int
    ) -> CacheWriteResult:
        """
        Store a prefix, replacing any existing entry for the key.

        Never raises; failures come back in the result.

        Args:
            session_id: Session identifier
            system_prompt: System prompt the prefix was built with
            content: Model-ready parts making up the prefix
            tokens: Estimated token cost of content

        Returns:
            CacheWriteResult
        """
        try:
            now = self.clock()
            if now - self._last_sweep >= self.sweep_interval_seconds:
                self.clear_expired()

            _, prompt_hash = self._key(session_id, system_prompt)
            entry = CacheEntry(
                session_id=session_id,
                prompt_hash=prompt_hash,
                content=tuple(content),
                created_at=now,
                estimated_tokens=tokens,
            )
            with self._lock:
                self._entries[entry.key] = entry
            return CacheWriteResult(stored=True)
        except Exception as e:
            logger.warning(f"Cache write failed for session {session_id}: {e}")
            return CacheWriteResult(stored=False, error=str(e))

    def invalidate(self, session_id: str, system_prompt: str) -> bool:
        """Drop the entry for a key. Returns True if one was present."""
        with self._lock:
            return self._entries.pop(self._key(session_id, system_prompt), None) is not None

    def clear_expired(self) -> int:
        """
        Remove all entries older than the TTL.

        Returns:
            Number of entries removed
        """
        now = self.clock()
        with self._lock:
            expired_keys = [
                key for key, entry in self._entries.items()
                if self._is_expired(entry, now)
            ]
            for key in expired_keys:
                del self._entries[key]
            self._last_sweep = now

        logger.info(f"Cleared {len(expired_keys)} expired cache entries")
        return len(expired_keys)

    def get_stats(self) -> CacheStats:
        """Get cache statistics."""
        with self._lock:
            entries = list(self._entries.values())

        size = len(json.dumps([entry.model_dump() for entry in entries]))
        return CacheStats(
            entries=len(entries),
            total_tokens=sum(entry.estimated_tokens for entry in entries),
            approx_memory_kb=round(size / 1024),
        )

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
