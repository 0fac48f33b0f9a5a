"""Intent Detector: classifies what a visitor message is after."""

import re

from schemas.intelligence import IntentType, IntentResult


class IntentDetector:
    """Keyword classifier for conversational intent."""

    def __init__(self):
        """Initialize detector with classification rules."""
        self.consulting_pattern = re.compile(r"(roi|cost|savings|automation)")

    def detect(self, text: str) -> IntentResult:
        """
        Detect intent of a message.

        Args:
            text: Visitor message

        Returns:
            IntentResult (workshop 0.8, consulting 0.7, other 0.5)
        """
        text_lower = (text or "").lower()

        if "workshop" in text_lower:
            return IntentResult(type=IntentType.WORKSHOP, confidence=0.8)

        if self.consulting_pattern.search(text_lower):
            return IntentResult(type=IntentType.CONSULTING, confidence=0.7)

        return IntentResult(type=IntentType.OTHER, confidence=0.5)
