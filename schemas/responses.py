"""Per-turn result schemas."""

from typing import Optional
from pydantic import BaseModel, Field

from .conversation import OptimizedContent
from .intelligence import IntentResult, RoleResult, ToolSuggestion
from .usage import TokenUsage, CostCalculation


class TurnResult(BaseModel):
    """Everything produced while handling one visitor message."""
    session_id: str
    reply: Optional[str] = None  # None when no model client is configured
    intent: IntentResult
    role: Optional[RoleResult] = None
    context: OptimizedContent
    suggestions: list[ToolSuggestion] = Field(default_factory=list)
    usage: Optional[TokenUsage] = None
    cost: Optional[CostCalculation] = None
