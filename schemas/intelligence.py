"""Lead-intelligence schemas: role detection, intent, tool suggestions."""

from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RoleSignal(BaseModel):
    """Research snapshot about a visitor and their company.

    Accepts snake_case field names or the camelCase keys used by the
    research collaborator (companySummary, personRoleText, ...).
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    company_summary: Optional[str] = None
    company_industry: Optional[str] = None
    person_role_text: Optional[str] = None
    person_seniority: Optional[str] = None

    def is_empty(self) -> bool:
        """True when no field carries any non-blank text."""
        return not any(
            value and value.strip()
            for value in (
                self.company_summary,
                self.company_industry,
                self.person_role_text,
                self.person_seniority,
            )
        )


class RoleResult(BaseModel):
    """Detected professional role with confidence in [0, 1]."""
    role: str
    confidence: float = Field(ge=0.0, le=1.0)


class IntentType(str, Enum):
    """Conversational intent categories."""
    WORKSHOP = "workshop"
    CONSULTING = "consulting"
    OTHER = "other"


class IntentResult(BaseModel):
    """Detected intent of a visitor message."""
    type: IntentType
    confidence: float = Field(ge=0.0, le=1.0)
    slots: dict[str, Any] = Field(default_factory=dict)


class ToolSuggestion(BaseModel):
    """Actionable next step surfaced to the visitor."""
    id: str
    label: str
    action: str = "run_tool"
    capability: str
