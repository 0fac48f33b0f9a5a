"""Tool Suggestion Engine: ranked next steps for the visitor."""

from typing import List, Optional

from schemas.intelligence import IntentResult, IntentType, RoleResult, ToolSuggestion

ROI_TOOL = ToolSuggestion(id="roi", label="Estimate ROI", capability="roi")
EXPORT_PDF_TOOL = ToolSuggestion(id="exportPdf", label="Export summary PDF", capability="exportPdf")
SCREEN_SHARE_TOOL = ToolSuggestion(id="screen", label="Share screen", capability="screenShare")

EXECUTIVE_ROLES = {
    "CTO",
    "CEO",
    "Founder",
    "VP Engineering",
    "Head of Engineering",
    "Head of AI",
    "Head of ML",
}


class ToolSuggestionEngine:
    """Lookup from intent, role and stage to suggested tools."""

    MAX_SUGGESTIONS = 3

    def suggest(
        self,
        intent: IntentResult,
        role: Optional[RoleResult] = None,
        stage: Optional[str] = None
    ) -> List[ToolSuggestion]:
        """
        Suggest tools for the current turn.

        Args:
            intent: Detected intent
            role: Optional detected role
            stage: Optional conversation stage (e.g. "summary")

        Returns:
            Up to three suggestions, best first
        """
        suggestions = [ROI_TOOL, EXPORT_PDF_TOOL]

        if intent.type == IntentType.WORKSHOP:
            suggestions.insert(0, SCREEN_SHARE_TOOL)

        if role and role.role in EXECUTIVE_ROLES:
            suggestions = self._promote(suggestions, ROI_TOOL)

        if stage == "summary":
            suggestions = self._promote(suggestions, EXPORT_PDF_TOOL)

        return suggestions[:self.MAX_SUGGESTIONS]

    @staticmethod
    def _promote(suggestions: List[ToolSuggestion], tool: ToolSuggestion) -> List[ToolSuggestion]:
        return [tool] + [s for s in suggestions if s.id != tool.id]
