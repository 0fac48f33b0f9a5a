"""Tests for the Gemini client."""

import pytest
from unittest.mock import Mock, patch

from config.generation import create_generation_config
from llm.factory import create_llm_client, LLMProvider
from llm.gemini_client import GeminiClient, GeminiAPIError
from llm.openai_client import OpenAIClient
from schemas.conversation import MessagePart


class TestGeminiClient:
    """Test Gemini request building and response parsing."""

    def setup_method(self):
        """Set up test fixtures."""
        self.client = GeminiClient(api_key="test-key", base_url="https://gemini.test/v1beta/")
        self.parts = [
            MessagePart(role="user", text="You are a consultant."),
            MessagePart(role="user", text="Hi"),
            MessagePart(role="model", text="Hello!"),
        ]

    @patch('requests.post')
    def test_chat_success(self, mock_post):
        """Test a successful generateContent call."""
        mock_response = Mock()
        mock_response.status_code = 200
        mock_response.json.return_value = {
            "candidates": [
                {
                    "content": {"parts": [{"text": "Sure, "}, {"text": "let's talk."}]},
                    "finishReason": "STOP"
                }
            ],
            "usageMetadata": {"promptTokenCount": 12, "candidatesTokenCount": 4}
        }
        mock_post.return_value = mock_response

        response = self.client.chat(self.parts, create_generation_config("live"))

        assert response.content == "Sure, let's talk."
        assert response.usage.input_tokens == 12
        assert response.usage.output_tokens == 4
        assert response.finish_reason == "STOP"

        call_args = mock_post.call_args
        assert call_args[0][0] == "https://gemini.test/v1beta/models/gemini-2.5-flash:generateContent"
        assert call_args[1]["params"] == {"key": "test-key"}
        payload = call_args[1]["json"]
        assert [c["role"] for c in payload["contents"]] == ["user", "user", "model"]
        assert payload["contents"][2]["parts"] == [{"text": "Hello!"}]
        assert payload["generationConfig"]["maxOutputTokens"] == 512

    @patch('requests.post')
    def test_chat_http_error(self, mock_post):
        """Test non-200 responses raise GeminiAPIError."""
        mock_response = Mock()
        mock_response.status_code = 429
        mock_response.text = "quota"
        mock_post.return_value = mock_response

        with pytest.raises(GeminiAPIError) as exc_info:
            self.client.chat(self.parts)

        assert exc_info.value.status_code == 429

    @patch('requests.post')
    def test_chat_no_candidates(self, mock_post):
        """Test empty candidate lists raise."""
        mock_response = Mock()
        mock_response.status_code = 200
        mock_response.json.return_value = {"candidates": []}
        mock_post.return_value = mock_response

        with pytest.raises(GeminiAPIError):
            self.client.chat(self.parts)

    def test_chat_without_key(self, monkeypatch):
        """Test calls fail fast without an API key."""
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        client = GeminiClient(api_key=None)

        with pytest.raises(RuntimeError):
            client.chat(self.parts)

    def test_factory(self, monkeypatch):
        """Test provider selection."""
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)

        assert isinstance(create_llm_client(LLMProvider.GEMINI, api_key="k"), GeminiClient)
        assert isinstance(create_llm_client(LLMProvider.OPENAI), OpenAIClient)
        assert create_llm_client(LLMProvider.GEMINI, api_key="k", model="gemini-2.5").get_model_name() == "gemini-2.5"
