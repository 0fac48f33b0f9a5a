"""Tests for the conversation summarizer."""

from memory.summarizer import ConversationSummarizer
from schemas.conversation import ConversationMessage


def user(content):
    return ConversationMessage(role="user", content=content)


def assistant(content):
    return ConversationMessage(role="assistant", content=content)


class TestConversationSummarizer:
    """Test topic and key-question extraction."""

    def setup_method(self):
        """Set up test fixtures."""
        self.summarizer = ConversationSummarizer()

    def test_topics_and_questions(self):
        """Test topics are collected in first-seen order with key questions."""
        messages = [
            user("Tell me about your company"),
            assistant("We help businesses analyze data"),
            user("Can I upload a file?"),
        ]

        summary = self.summarizer.summarize(messages, keep_recent=0)

        assert summary == (
            "Discussed topics: business, analysis, assistance, documents. "
            "Key questions: Can I upload a file?"
        )

    def test_general_conversation_fallback(self):
        """Test conversations without topics."""
        assert self.summarizer.summarize([user("hi")], keep_recent=0) == "Discussed topics: general conversation."

    def test_empty_input(self):
        """Test nothing to summarize yields an empty digest."""
        assert self.summarizer.summarize([], keep_recent=0) == ""
        assert self.summarizer.summarize([user("hi")], keep_recent=1) == ""

    def test_recent_window_excluded_by_default(self):
        """Test the last four messages are left out of the digest by default."""
        older = [user("hi"), assistant("hello"), user("ok"), assistant("sure")]
        recent = [user("company?"), assistant("business data"), user("upload?"), assistant("help")]

        summary = self.summarizer.summarize(older + recent)

        assert summary == "Discussed topics: general conversation."

    def test_duplicate_topics_collapse(self):
        """Test a topic is listed once."""
        messages = [user("our company"), user("the company again"), user("business stuff")]

        assert self.summarizer.summarize(messages, keep_recent=0) == "Discussed topics: business."

    def test_only_user_questions_count(self):
        """Test assistant questions are not key questions."""
        summary = self.summarizer.summarize([assistant("Any questions?")], keep_recent=0)

        assert "Key questions" not in summary

    def test_at_most_two_key_questions(self):
        """Test the key question limit."""
        messages = [user("First?"), user("Second?"), user("Third?")]

        summary = self.summarizer.summarize(messages, keep_recent=0)

        assert "Key questions: First?; Second?" in summary
        assert "Third?" not in summary

    def test_long_messages_are_not_key_questions(self):
        """Test messages of 100+ characters are skipped."""
        long_question = "x" * 99 + "?"

        summary = self.summarizer.summarize([user(long_question)], keep_recent=0)

        assert "Key questions" not in summary

    def test_key_questions_truncated(self):
        """Test key questions are cut to 80 characters."""
        question = "y" * 89 + "?"

        summary = self.summarizer.summarize([user(question)], keep_recent=0)

        assert summary.endswith("Key questions: " + "y" * 80)

    def test_summary_capped_at_200_chars(self):
        """Test overlong digests are truncated with an ellipsis."""
        messages = [
            assistant("Business analysis of a document and an image, happy to help"),
            user("a" * 90 + "?"),
            user("b" * 90 + "?"),
        ]

        summary = self.summarizer.summarize(messages, keep_recent=0)

        assert len(summary) == 200
        assert summary.endswith("...")

    def test_summary_length_bound(self):
        """Test the 200 character bound across varied inputs."""
        for count in range(0, 30, 3):
            messages = [user(f"Question {i} about company file image help analysis?") for i in range(count)]
            assert len(self.summarizer.summarize(messages, keep_recent=0)) <= 200

    def test_keep_recent_excludes_tail(self):
        """Test trailing messages are left out of the digest."""
        messages = [user("hello"), user("send me the document")]

        assert self.summarizer.summarize(messages, keep_recent=1) == "Discussed topics: general conversation."

    def test_deterministic(self):
        """Test the same input gives the same digest."""
        messages = [user("company?"), assistant("screenshot analysis")]

        assert self.summarizer.summarize(messages, keep_recent=0) == self.summarizer.summarize(messages, keep_recent=0)

    def test_custom_topics(self):
        """Test topic groups can be replaced."""
        summarizer = ConversationSummarizer(topic_keywords={"pricing": ["Price", "cost"]})

        summary = summarizer.summarize([user("What is the price of the workshop")], keep_recent=0)

        assert summary == "Discussed topics: pricing."
