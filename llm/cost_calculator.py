"""Token cost calculation for model calls."""

import logging
from typing import Dict, List, Optional

from schemas.usage import CostCalculation, ModelPricing, TokenUsage

logger = logging.getLogger(__name__)


class TokenCostCalculator:
    """Prices token usage against a fixed per-1M-token table (USD)."""

    PRICING: Dict[str, Dict[str, ModelPricing]] = {
        "gemini": {
            "gemini-2.5": ModelPricing(input_cost_per_1m=1.25, output_cost_per_1m=5.0),
            "gemini-2.5-flash": ModelPricing(input_cost_per_1m=0.075, output_cost_per_1m=0.3),
        },
        "openai": {
            "gpt-4o": ModelPricing(input_cost_per_1m=2.5, output_cost_per_1m=10.0),
            "gpt-4o-mini": ModelPricing(input_cost_per_1m=0.15, output_cost_per_1m=0.6),
            "gpt-4-turbo": ModelPricing(input_cost_per_1m=10.0, output_cost_per_1m=30.0),
            "gpt-3.5-turbo": ModelPricing(input_cost_per_1m=0.5, output_cost_per_1m=1.5),
        },
        "anthropic": {
            "claude-3-5-sonnet": ModelPricing(input_cost_per_1m=3.0, output_cost_per_1m=15.0),
            "claude-3-haiku": ModelPricing(input_cost_per_1m=0.25, output_cost_per_1m=1.25),
            "claude-3-opus": ModelPricing(input_cost_per_1m=15.0, output_cost_per_1m=75.0),
        },
    }

    @classmethod
    def get_model_pricing(cls, provider: str, model: str) -> Optional[ModelPricing]:
        """
        Look up pricing for a model.

        Versioned model names (e.g. claude-3-5-sonnet-latest) resolve to the
        longest table entry they start with.
        """
        models = cls.PRICING.get(provider, {})
        if model in models:
            return models[model]
        prefixes = [name for name in models if model.startswith(name)]
        if not prefixes:
            return None
        return models[max(prefixes, key=len)]

    @classmethod
    def calculate_cost(cls, provider: str, model: str, usage: TokenUsage) -> CostCalculation:
        """
        Calculate the cost of a call.

        Args:
            provider: Provider name
            model: Model name
            usage: Token counts

        Returns:
            CostCalculation (zero cost when the model has no pricing)
        """
        pricing = cls.get_model_pricing(provider, model)
        if not pricing:
            logger.warning(f"No pricing found for {provider}/{model}")
            return CostCalculation()

        input_cost = usage.input_tokens / 1_000_000 * pricing.input_cost_per_1m
        output_cost = usage.output_tokens / 1_000_000 * pricing.output_cost_per_1m

        return CostCalculation(
            input_cost=round(input_cost, 6),
            output_cost=round(output_cost, 6),
            total_cost=round(input_cost + output_cost, 6),
        )

    @classmethod
    def get_supported_providers(cls) -> List[str]:
        return list(cls.PRICING)

    @classmethod
    def get_supported_models(cls, provider: str) -> List[str]:
        return list(cls.PRICING.get(provider, {}))
