"""Base LLM client interface."""

from abc import ABC, abstractmethod
from typing import Optional, List
from pydantic import BaseModel

from config.generation import GenerationConfig, create_generation_config
from schemas.conversation import MessagePart
from schemas.usage import TokenUsage


class LLMResponse(BaseModel):
    """Response from LLM."""
    content: str
    usage: Optional[TokenUsage] = None
    finish_reason: Optional[str] = None


class BaseLLMClient(ABC):
    """Abstract base class for model-completion clients."""

    @abstractmethod
    def chat(
        self,
        parts: List[MessagePart],
        config: Optional[GenerationConfig] = None
    ) -> LLMResponse:
        """
        Send a completion request for an optimized context.

        Args:
            parts: Model-ready parts, system prompt first
            config: Generation parameters (defaults to the chat preset)

        Returns:
            LLMResponse with content and token usage
        """
        pass

    @abstractmethod
    def get_provider_name(self) -> str:
        """Get the name of the LLM provider."""
        pass

    @abstractmethod
    def get_model_name(self) -> str:
        """Get the name of the model being used."""
        pass

    @staticmethod
    def _resolve_config(config: Optional[GenerationConfig]) -> GenerationConfig:
        return config or create_generation_config("chat")
