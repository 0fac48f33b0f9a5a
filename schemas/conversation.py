"""Conversation and context-optimization schemas."""

from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field


class ConversationMessage(BaseModel):
    """A single chat turn. Immutable once created."""
    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: str
    timestamp: Optional[datetime] = None


class MessagePart(BaseModel):
    """Model-ready message part ("user" or "model" role)."""
    model_config = ConfigDict(frozen=True)

    role: Literal["user", "model"]
    text: str


class CacheEntry(BaseModel):
    """Cached conversation prefix for a (session, system prompt) pair."""
    model_config = ConfigDict(frozen=True)

    session_id: str
    prompt_hash: str
    content: tuple[MessagePart, ...]
    created_at: float
    estimated_tokens: int

    @property
    def key(self) -> tuple[str, str]:
        return (self.session_id, self.prompt_hash)


class CacheWriteResult(BaseModel):
    """Outcome of a best-effort cache write. Callers may ignore it."""
    stored: bool
    error: Optional[str] = None


class CacheStats(BaseModel):
    """Snapshot of cache occupancy."""
    entries: int = 0
    total_tokens: int = 0
    approx_memory_kb: int = 0


class OptimizedContent(BaseModel):
    """Bounded, model-ready context produced for one model call."""
    message_parts: list[MessagePart] = Field(default_factory=list)
    estimated_tokens: int = 0
    used_cache: bool = False
    summary: Optional[str] = None
