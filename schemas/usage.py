"""Token usage and cost schemas."""

from pydantic import BaseModel


class TokenUsage(BaseModel):
    """Token counts reported by a model provider."""
    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


class ModelPricing(BaseModel):
    """Price per one million tokens, in USD."""
    input_cost_per_1m: float
    output_cost_per_1m: float


class CostCalculation(BaseModel):
    """Cost of a single model call."""
    input_cost: float = 0.0
    output_cost: float = 0.0
    total_cost: float = 0.0
    currency: str = "USD"
