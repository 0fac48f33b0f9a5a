"""Keyword digest of stale conversation history."""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from schemas.conversation import ConversationMessage

logger = logging.getLogger(__name__)

DEFAULT_TOPIC_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "business": ("business", "company"),
    "analysis": ("analysis", "analyze"),
    "documents": ("document", "file"),
    "images": ("image", "screenshot"),
    "assistance": ("help", "assist"),
}


class ConversationSummarizer:
    """
    Collapses older turns into a short topic/question digest.

    The digest only keeps the model loosely oriented about history that
    was dropped from the context; it is not a faithful summary.
    """

    MAX_SUMMARY_CHARS = 200
    MAX_KEY_QUESTIONS = 2
    KEY_QUESTION_MAX_LENGTH = 100  # Only messages shorter than this qualify
    KEY_QUESTION_TRUNCATE = 80
    DEFAULT_KEEP_RECENT = 4  # Recent turns are sent verbatim, never digested

    def __init__(self, topic_keywords: Optional[Dict[str, Sequence[str]]] = None):
        """
        Initialize summarizer.

        Args:
            topic_keywords: Topic label -> keywords. Defaults to the
                business/analysis/documents/images/assistance groups.
        """
        self.topic_keywords = {
            label: tuple(keyword.lower() for keyword in keywords)
            for label, keywords in (topic_keywords or DEFAULT_TOPIC_KEYWORDS).items()
        }

    def summarize(
        self,
        messages: Sequence[ConversationMessage],
        keep_recent: int = DEFAULT_KEEP_RECENT
    ) -> str:
        """
        Build a digest of a conversation.

        Args:
            messages: Chronological messages
            keep_recent: Number of trailing messages to leave out of the digest
                (pass 0 to digest a pre-sliced history)

        Returns:
            "Discussed topics: ... Key questions: ..." capped at 200 characters,
            or "" when there is nothing to summarize
        """
        scanned = list(messages[:-keep_recent]) if keep_recent > 0 else list(messages)
        if not scanned:
            return ""

        topics: List[str] = []
        key_questions: List[str] = []

        for msg in scanned:
            content = msg.content.lower()

            for label, keywords in self.topic_keywords.items():
                if label not in topics and any(keyword in content for keyword in keywords):
                    topics.append(label)

            if (
                msg.role == "user"
                and len(msg.content) < self.KEY_QUESTION_MAX_LENGTH
                and "?" in msg.content
                and len(key_questions) < self.MAX_KEY_QUESTIONS
            ):
                key_questions.append(msg.content[:self.KEY_QUESTION_TRUNCATE])

        summary = f"Discussed topics: {', '.join(topics) or 'general conversation'}."
        if key_questions:
            summary += f" Key questions: {'; '.join(key_questions)}"

        if len(summary) > self.MAX_SUMMARY_CHARS:
            summary = summary[:self.MAX_SUMMARY_CHARS - 3] + "..."

        logger.debug(f"Summarized {len(scanned)} messages into {len(summary)} chars")
        return summary
