"""Lead-intelligence agents."""

from .role_detector import RoleDetector, RoleRule
from .intent_detector import IntentDetector
from .tool_suggestions import ToolSuggestionEngine

__all__ = [
    "RoleDetector",
    "RoleRule",
    "IntentDetector",
    "ToolSuggestionEngine",
]
