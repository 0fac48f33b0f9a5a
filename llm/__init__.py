"""LLM client abstraction layer."""

from .base_client import BaseLLMClient, LLMResponse
from .factory import create_llm_client, LLMProvider
from .cost_calculator import TokenCostCalculator

__all__ = [
    "BaseLLMClient",
    "LLMResponse",
    "create_llm_client",
    "LLMProvider",
    "TokenCostCalculator",
]
