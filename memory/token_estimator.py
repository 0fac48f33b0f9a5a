"""Approximate token counting for context budgeting."""

import math
from typing import Iterable

from schemas.conversation import ConversationMessage, MessagePart

CHARS_PER_TOKEN = 4


def estimate_tokens(text: str) -> int:
    """
    Estimate the token count of a piece of text.

    Rough heuristic of four characters per token. Use it for relative
    budgeting only, never as a billing figure.

    Args:
        text: Text to measure (None counts as empty)

    Returns:
        ceil(len(text) / 4)
    """
    if not text:
        return 0
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def estimate_message_tokens(messages: Iterable[ConversationMessage]) -> int:
    """Sum of per-message estimates."""
    return sum(estimate_tokens(msg.content) for msg in messages)


def estimate_part_tokens(parts: Iterable[MessagePart]) -> int:
    """Sum of per-part estimates."""
    return sum(estimate_tokens(part.text) for part in parts)
