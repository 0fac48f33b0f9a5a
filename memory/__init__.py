"""Context optimization and session persistence."""

from .token_estimator import estimate_tokens, estimate_message_tokens
from .conversation_cache import ConversationCache
from .summarizer import ConversationSummarizer
from .context_optimizer import ContextOptimizer
from .models import SessionContext, StoredMessage, UsageTotals
from .sqlite_store import SQLiteSessionStore

__all__ = [
    "estimate_tokens",
    "estimate_message_tokens",
    "ConversationCache",
    "ConversationSummarizer",
    "ContextOptimizer",
    "SessionContext",
    "StoredMessage",
    "UsageTotals",
    "SQLiteSessionStore",
]
