"""Session persistence models."""

from datetime import datetime
from typing import Optional, Dict, Any
from pydantic import BaseModel, Field


class SessionContext(BaseModel):
    """Lead context snapshot for a chat session."""
    session_id: str
    email: str
    name: Optional[str] = None
    company_url: Optional[str] = None
    role: Optional[str] = None
    role_confidence: float = 0.0
    research: Optional[Dict[str, Any]] = None  # Raw research signal snapshot
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


class StoredMessage(BaseModel):
    """A persisted conversation message."""
    message_id: int
    session_id: str
    role: str  # "user" or "assistant"
    content: str
    timestamp: datetime = Field(default_factory=datetime.now)


class UsageTotals(BaseModel):
    """Aggregated token usage for a session."""
    session_id: str
    calls: int = 0
    input_tokens: int = 0
    output_tokens: int = 0
    total_cost: float = 0.0
