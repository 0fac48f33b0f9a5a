"""Google Gemini LLM client implementation (REST)."""

import os
import logging
from typing import Optional, List, Dict, Any

import requests

from .base_client import BaseLLMClient, LLMResponse
from config.generation import GenerationConfig
from schemas.conversation import MessagePart
from schemas.usage import TokenUsage

logger = logging.getLogger(__name__)


class GeminiAPIError(RuntimeError):
    """Raised when the Gemini API call fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class GeminiClient(BaseLLMClient):
    """Gemini generateContent client."""

    DEFAULT_MODEL = "gemini-2.5-flash"
    BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: int = 60
    ):
        """
        Initialize Gemini client.

        Args:
            api_key: Gemini API key (falls back to GEMINI_API_KEY env var)
            model: Model to use (default: gemini-2.5-flash)
            base_url: API base URL override
            timeout: Request timeout in seconds
        """
        self.api_key = api_key or os.environ.get("GEMINI_API_KEY")
        self.model = model or self.DEFAULT_MODEL
        self.base_url = (base_url or self.BASE_URL).rstrip('/')
        self.timeout = timeout

        if self.api_key:
            logger.info(f"Gemini client initialized with model: {self.model}")
        else:
            logger.warning("No Gemini API key provided")

    def _build_payload(
        self,
        parts: List[MessagePart],
        config: GenerationConfig
    ) -> Dict[str, Any]:
        """Build the generateContent request body."""
        return {
            "contents": [
                {"role": part.role, "parts": [{"text": part.text}]}
                for part in parts
            ],
            "generationConfig": {
                "maxOutputTokens": config.max_output_tokens,
                "temperature": config.temperature,
                "topP": config.top_p,
                "responseMimeType": config.response_mime_type,
            },
        }

    def chat(
        self,
        parts: List[MessagePart],
        config: Optional[GenerationConfig] = None
    ) -> LLMResponse:
        """Send generateContent request to Gemini."""
        if not self.api_key:
            raise RuntimeError("Gemini client not initialized. Check API key.")

        config = self._resolve_config(config)
        url = f"{self.base_url}/models/{self.model}:generateContent"

        try:
            response = requests.post(
                url,
                params={"key": self.api_key},
                json=self._build_payload(parts, config),
                timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"Gemini API error: {e}")
            raise GeminiAPIError(f"Gemini request failed: {e}") from e

        if response.status_code != 200:
            logger.error(f"Gemini API returned status {response.status_code}")
            raise GeminiAPIError(
                f"Gemini API returned status {response.status_code}: {response.text}",
                status_code=response.status_code
            )

        data = response.json()
        candidates = data.get("candidates") or []
        if not candidates:
            raise GeminiAPIError("Gemini API returned no candidates")

        candidate = candidates[0]
        text_parts = candidate.get("content", {}).get("parts", [])
        content = "".join(part.get("text", "") for part in text_parts)

        usage = None
        usage_metadata = data.get("usageMetadata")
        if usage_metadata:
            usage = TokenUsage(
                input_tokens=usage_metadata.get("promptTokenCount", 0),
                output_tokens=usage_metadata.get("candidatesTokenCount", 0),
            )

        return LLMResponse(
            content=content,
            usage=usage,
            finish_reason=candidate.get("finishReason")
        )

    def get_provider_name(self) -> str:
        """Get the provider name."""
        return "gemini"

    def get_model_name(self) -> str:
        """Get the model name."""
        return self.model
