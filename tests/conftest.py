"""Shared test fixtures."""

import pytest

from schemas.conversation import ConversationMessage


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


def make_conversation(count: int) -> list[ConversationMessage]:
    """Alternating user/assistant messages with distinct content."""
    return [
        ConversationMessage(
            role="user" if i % 2 == 0 else "assistant",
            content=f"Message number {i + 1} about our roadmap",
        )
        for i in range(count)
    ]


@pytest.fixture
def clock():
    return FakeClock()
