"""Tests for the conversation prefix cache."""

import threading

from memory.conversation_cache import ConversationCache, hash_prompt
from schemas.conversation import MessagePart

from conftest import FakeClock


class TestConversationCache:
    """Test TTL, keying and eviction."""

    def setup_method(self):
        """Set up test fixtures."""
        self.clock = FakeClock()
        self.cache = ConversationCache(ttl_seconds=1800, sweep_interval_seconds=300, clock=self.clock)
        self.parts = [
            MessagePart(role="user", text="You are a consultant."),
            MessagePart(role="user", text="Hello"),
        ]

    def test_put_then_get_hits(self):
        """Test a fresh entry is returned."""
        result = self.cache.put("s1", "prompt", self.parts, 7)

        assert result.stored is True
        entry = self.cache.get("s1", "prompt")
        assert entry is not None
        assert list(entry.content) == self.parts
        assert entry.estimated_tokens == 7
        assert entry.key == ("s1", hash_prompt("prompt"))

    def test_entry_at_ttl_boundary_is_fresh(self):
        """Test an entry exactly TTL old is still served."""
        self.cache.put("s1", "prompt", self.parts, 7)
        self.clock.advance(1800)

        assert self.cache.get("s1", "prompt") is not None

    def test_expired_entry_is_miss(self):
        """Test entries older than the TTL read as absent."""
        self.cache.put("s1", "prompt", self.parts, 7)
        self.clock.advance(1801)

        assert self.cache.get("s1", "prompt") is None
        assert len(self.cache) == 0

    def test_prompts_do_not_collide(self):
        """Test two prompts for one session get separate entries."""
        self.cache.put("s1", "prompt A", self.parts, 7)

        assert self.cache.get("s1", "prompt B") is None
        assert self.cache.get("s2", "prompt A") is None

    def test_put_replaces_entry(self):
        """Test writes replace the whole entry."""
        self.cache.put("s1", "prompt", self.parts, 7)
        self.cache.put("s1", "prompt", self.parts[:1], 5)

        entry = self.cache.get("s1", "prompt")
        assert len(entry.content) == 1
        assert entry.estimated_tokens == 5
        assert len(self.cache) == 1

    def test_clear_expired(self):
        """Test the sweep removes only stale entries."""
        self.cache.put("s1", "prompt", self.parts, 7)
        self.cache.put("s2", "prompt", self.parts, 7)
        self.clock.advance(1000)
        self.cache.put("s3", "prompt", self.parts, 7)
        self.clock.advance(900)

        assert self.cache.clear_expired() == 2
        assert len(self.cache) == 1
        assert self.cache.get("s3", "prompt") is not None

    def test_insert_triggers_sweep(self):
        """Test stale entries are purged before an insert."""
        self.cache.put("s1", "prompt", self.parts, 7)
        self.clock.advance(2000)
        self.cache.put("s2", "prompt", self.parts, 7)

        assert len(self.cache) == 1

    def test_invalidate(self):
        """Test explicit eviction."""
        self.cache.put("s1", "prompt", self.parts, 7)

        assert self.cache.invalidate("s1", "prompt") is True
        assert self.cache.invalidate("s1", "prompt") is False
        assert self.cache.get("s1", "prompt") is None

    def test_failed_write_returns_result(self):
        """Test write failures are reported, not raised."""
        result = self.cache.put("s1", "prompt", self.parts, tokens="lots")

        assert result.stored is False
        assert result.error
        assert self.cache.get("s1", "prompt") is None

    def test_stats(self):
        """Test cache statistics."""
        self.cache.put("s1", "prompt", self.parts, 7)
        self.cache.put("s2", "prompt", self.parts, 3)

        stats = self.cache.get_stats()
        assert stats.entries == 2
        assert stats.total_tokens == 10
        assert stats.approx_memory_kb >= 0

    def test_prompt_hash_is_full_digest(self):
        """Test cache keys use the whole SHA-256 digest."""
        assert len(hash_prompt("x")) == 64
        assert hash_prompt("prompt A") != hash_prompt("prompt B")
        assert hash_prompt("prompt A") == hash_prompt("prompt A")

    def test_concurrent_sessions(self):
        """Test parallel writers and a sweeper keep entries intact."""
        cache = ConversationCache(ttl_seconds=1800, sweep_interval_seconds=0)
        errors = []

        def writer(n):
            session_id = f"s{n}"
            parts = [MessagePart(role="user", text=f"message {n}")]
            try:
                for _ in range(50):
                    assert cache.put(session_id, "prompt", parts, n).stored is True
                    entry = cache.get(session_id, "prompt")
                    assert entry is not None
                    assert entry.estimated_tokens == n
            except AssertionError as e:
                errors.append(e)

        def sweeper():
            for _ in range(50):
                cache.clear_expired()

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(8)]
        threads.append(threading.Thread(target=sweeper))
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert len(cache) == 8
        for n in range(8):
            entry = cache.get(f"s{n}", "prompt")
            assert list(entry.content) == [MessagePart(role="user", text=f"message {n}")]
            assert entry.estimated_tokens == n
