"""Anthropic Claude LLM client implementation."""

import os
import logging
from typing import Optional, List

import anthropic

from .base_client import BaseLLMClient, LLMResponse
from config.generation import GenerationConfig
from schemas.conversation import MessagePart
from schemas.usage import TokenUsage

logger = logging.getLogger(__name__)


class AnthropicClient(BaseLLMClient):
    """Anthropic Claude client implementation."""

    DEFAULT_MODEL = "claude-3-5-sonnet-latest"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None
    ):
        """
        Initialize Anthropic client.

        Args:
            api_key: Anthropic API key (falls back to ANTHROPIC_API_KEY env var)
            model: Model to use (default: claude-3-5-sonnet-latest)
        """
        self.api_key = api_key or os.environ.get("ANTHROPIC_API_KEY")
        self.model = model or self.DEFAULT_MODEL
        self.client = None

        if self.api_key:
            self.client = anthropic.Anthropic(api_key=self.api_key)
            logger.info(f"Anthropic client initialized with model: {self.model}")
        else:
            logger.warning("No Anthropic API key provided")

    def chat(
        self,
        parts: List[MessagePart],
        config: Optional[GenerationConfig] = None
    ) -> LLMResponse:
        """Send chat completion request to Anthropic."""
        if not self.client:
            raise RuntimeError("Anthropic client not initialized. Check API key.")

        config = self._resolve_config(config)

        # Anthropic requires alternating roles; merge consecutive parts of the same role
        conversation_messages = []
        for part in parts:
            role = "assistant" if part.role == "model" else "user"
            if conversation_messages and conversation_messages[-1]["role"] == role:
                conversation_messages[-1]["content"] += "\n\n" + part.text
            else:
                conversation_messages.append({"role": role, "content": part.text})

        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=config.max_output_tokens,
                temperature=config.temperature,
                messages=conversation_messages,
            )

            content = "".join(
                block.text for block in response.content if block.type == "text"
            )

            usage = None
            if response.usage:
                usage = TokenUsage(
                    input_tokens=response.usage.input_tokens,
                    output_tokens=response.usage.output_tokens,
                )

            return LLMResponse(
                content=content,
                usage=usage,
                finish_reason=response.stop_reason
            )

        except Exception as e:
            logger.error(f"Anthropic API error: {e}")
            raise

    def get_provider_name(self) -> str:
        """Get the provider name."""
        return "anthropic"

    def get_model_name(self) -> str:
        """Get the model name."""
        return self.model
