"""Pydantic schemas for the conversation intelligence core."""

from .conversation import (
    ConversationMessage,
    MessagePart,
    CacheEntry,
    CacheWriteResult,
    CacheStats,
    OptimizedContent,
)
from .intelligence import RoleSignal, RoleResult, IntentType, IntentResult, ToolSuggestion
from .usage import TokenUsage, ModelPricing, CostCalculation
from .responses import TurnResult

__all__ = [
    "ConversationMessage",
    "MessagePart",
    "CacheEntry",
    "CacheWriteResult",
    "CacheStats",
    "OptimizedContent",
    "RoleSignal",
    "RoleResult",
    "IntentType",
    "IntentResult",
    "ToolSuggestion",
    "TokenUsage",
    "ModelPricing",
    "CostCalculation",
    "TurnResult",
]
