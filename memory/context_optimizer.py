"""Bounded context assembly for model calls."""

import logging
from typing import List, Optional, Sequence

from .conversation_cache import ConversationCache
from .summarizer import ConversationSummarizer
from .token_estimator import estimate_tokens, estimate_message_tokens
from schemas.conversation import ConversationMessage, MessagePart, OptimizedContent

logger = logging.getLogger(__name__)

SUMMARY_PREFIX = "Previous conversation summary: "


def format_messages(messages: Sequence[ConversationMessage]) -> List[MessagePart]:
    """Convert chat messages to model-ready parts (assistant -> model)."""
    return [
        MessagePart(role="model" if msg.role == "assistant" else "user", text=msg.content)
        for msg in messages
    ]


class ContextOptimizer:
    """Turns an unbounded conversation history into a bounded message list."""

    # Configuration
    SHORT_CONVERSATION_CUTOFF = 5  # Conversations this short are never cached
    SUMMARIZE_AFTER_MESSAGES = 6  # Longer histories get their older turns summarized
    RECENT_WINDOW = 4  # Messages always sent verbatim on a cache miss
    CACHE_TAIL_MESSAGES = 3  # Messages appended to a cached prefix
    CACHE_PREFIX_MESSAGES = 5  # Upper bound on messages stored in a prefix
    SUMMARY_BUDGET_FRACTION = 0.3
    DEFAULT_MAX_HISTORY_TOKENS = 4000

    def __init__(
        self,
        cache: Optional[ConversationCache] = None,
        summarizer: Optional[ConversationSummarizer] = None
    ):
        """
        Initialize context optimizer.

        Args:
            cache: Shared conversation cache (a private one is created if omitted)
            summarizer: Summarizer for older turns
        """
        self.cache = cache if cache is not None else ConversationCache()
        self.summarizer = summarizer or ConversationSummarizer()

    def optimize(
        self,
        messages: Sequence[ConversationMessage],
        system_prompt: str,
        session_id: str,
        max_history_tokens: int = DEFAULT_MAX_HISTORY_TOKENS
    ) -> OptimizedContent:
        """
        Build the model-ready context for one call.

        Uses a fresh cached prefix when one exists, otherwise places the
        system prompt first and either sends the whole history (short
        conversations) or a summary of older turns plus the recent window.
        Conversations longer than the short cutoff refresh the cache.

        Args:
            messages: Chronological conversation history
            system_prompt: System prompt for the model
            session_id: Session identifier (cache key half)
            max_history_tokens: Budget the summary is measured against

        Returns:
            OptimizedContent
        """
        messages = list(messages or [])
        system_prompt = system_prompt or ""
        if not messages:
            return self._system_only(system_prompt)

        cached = self._lookup(session_id, system_prompt)
        if cached is not None:
            tail = messages[-self.CACHE_TAIL_MESSAGES:]
            result = OptimizedContent(
                message_parts=list(cached.content) + format_messages(tail),
                estimated_tokens=cached.estimated_tokens + estimate_message_tokens(tail),
                used_cache=True,
            )
            logger.debug(f"Cache hit for session {session_id}: {result.estimated_tokens} tokens")
        else:
            try:
                result = self._build(messages, system_prompt, max_history_tokens)
            except Exception as e:
                logger.error(f"Context optimization failed for session {session_id}: {e}")
                return self._system_only(system_prompt)

        if len(messages) > self.SHORT_CONVERSATION_CUTOFF:
            self._store_prefix(messages, system_prompt, session_id)

        return result

    def _lookup(self, session_id: str, system_prompt: str):
        try:
            return self.cache.get(session_id, system_prompt)
        except Exception as e:
            logger.warning(f"Cache lookup failed for session {session_id}, treating as miss: {e}")
            return None

    def _build(
        self,
        messages: List[ConversationMessage],
        system_prompt: str,
        max_history_tokens: int
    ) -> OptimizedContent:
        parts = [MessagePart(role="user", text=system_prompt)]
        total_tokens = estimate_tokens(system_prompt)

        if len(messages) <= self.SUMMARIZE_AFTER_MESSAGES:
            parts.extend(format_messages(messages))
            total_tokens += estimate_message_tokens(messages)
            return OptimizedContent(message_parts=parts, estimated_tokens=total_tokens)

        recent = messages[-self.RECENT_WINDOW:]
        summary = self.summarizer.summarize(messages, keep_recent=self.RECENT_WINDOW)
        included_summary = None
        if summary and estimate_tokens(summary) < max_history_tokens * self.SUMMARY_BUDGET_FRACTION:
            summary_part = MessagePart(role="user", text=SUMMARY_PREFIX + summary)
            parts.append(summary_part)
            total_tokens += estimate_tokens(summary_part.text)
            included_summary = summary
        else:
            logger.debug("Summary dropped: exceeds history budget")

        parts.extend(format_messages(recent))
        total_tokens += estimate_message_tokens(recent)

        return OptimizedContent(
            message_parts=parts,
            estimated_tokens=total_tokens,
            summary=included_summary,
        )

    def _store_prefix(
        self,
        messages: List[ConversationMessage],
        system_prompt: str,
        session_id: str
    ):
        """Seed the cache with the system prompt and the earliest turns."""
        prefix_messages = messages[:min(self.CACHE_PREFIX_MESSAGES, len(messages) - self.CACHE_TAIL_MESSAGES)]
        content = [MessagePart(role="user", text=system_prompt)] + format_messages(prefix_messages)
        tokens = estimate_tokens(system_prompt) + estimate_message_tokens(prefix_messages)

        try:
            result = self.cache.put(session_id, system_prompt, content, tokens)
        except Exception as e:
            logger.warning(f"Cache write failed for session {session_id}, continuing without it: {e}")
            return
        if not result.stored:
            logger.debug(f"Skipped caching prefix for session {session_id}: {result.error}")

    def _system_only(self, system_prompt: str) -> OptimizedContent:
        return OptimizedContent(
            message_parts=[MessagePart(role="user", text=system_prompt)],
            estimated_tokens=estimate_tokens(system_prompt),
        )
