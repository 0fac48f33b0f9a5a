"""OpenAI LLM client implementation."""

import os
import logging
from typing import Optional, List

from openai import OpenAI

from .base_client import BaseLLMClient, LLMResponse
from config.generation import GenerationConfig
from schemas.conversation import MessagePart
from schemas.usage import TokenUsage

logger = logging.getLogger(__name__)


class OpenAIClient(BaseLLMClient):
    """OpenAI GPT client implementation."""

    DEFAULT_MODEL = "gpt-4o-mini"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None
    ):
        """
        Initialize OpenAI client.

        Args:
            api_key: OpenAI API key (falls back to OPENAI_API_KEY env var)
            model: Model to use (default: gpt-4o-mini)
        """
        self.api_key = api_key or os.environ.get("OPENAI_API_KEY")
        self.model = model or self.DEFAULT_MODEL
        self.client = None

        if self.api_key:
            self.client = OpenAI(api_key=self.api_key)
            logger.info(f"OpenAI client initialized with model: {self.model}")
        else:
            logger.warning("No OpenAI API key provided")

    def chat(
        self,
        parts: List[MessagePart],
        config: Optional[GenerationConfig] = None
    ) -> LLMResponse:
        """Send chat completion request to OpenAI."""
        if not self.client:
            raise RuntimeError("OpenAI client not initialized. Check API key.")

        config = self._resolve_config(config)
        openai_messages = [
            {"role": "assistant" if part.role == "model" else "user", "content": part.text}
            for part in parts
        ]

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=openai_messages,
                temperature=config.temperature,
                top_p=config.top_p,
                max_completion_tokens=config.max_output_tokens,
            )

            choice = response.choices[0]

            usage = None
            if response.usage:
                usage = TokenUsage(
                    input_tokens=response.usage.prompt_tokens,
                    output_tokens=response.usage.completion_tokens,
                )

            return LLMResponse(
                content=choice.message.content or "",
                usage=usage,
                finish_reason=choice.finish_reason
            )

        except Exception as e:
            logger.error(f"OpenAI API error: {e}")
            raise

    def get_provider_name(self) -> str:
        """Get the provider name."""
        return "openai"

    def get_model_name(self) -> str:
        """Get the model name."""
        return self.model
