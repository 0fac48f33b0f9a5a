"""Tests for cost calculation, generation presets and settings."""

import pytest

from config.generation import create_generation_config, SUPPORTED_FEATURES
from config.settings import Settings
from llm.cost_calculator import TokenCostCalculator
from schemas.usage import TokenUsage


class TestTokenCostCalculator:
    """Test token pricing."""

    def test_known_model(self):
        """Test cost of a priced model."""
        usage = TokenUsage(input_tokens=1_000_000, output_tokens=1_000_000)

        cost = TokenCostCalculator.calculate_cost("gemini", "gemini-2.5-flash", usage)

        assert cost.input_cost == pytest.approx(0.075)
        assert cost.output_cost == pytest.approx(0.3)
        assert cost.total_cost == pytest.approx(0.375)
        assert cost.currency == "USD"

    def test_versioned_model_uses_longest_prefix(self):
        """Test versioned model names resolve to table entries."""
        pricing = TokenCostCalculator.get_model_pricing("anthropic", "claude-3-5-sonnet-latest")
        assert pricing.input_cost_per_1m == 3.0

        pricing = TokenCostCalculator.get_model_pricing("gemini", "gemini-2.5-flash-001")
        assert pricing.input_cost_per_1m == 0.075

    def test_unknown_model_is_free(self):
        """Test missing pricing returns zero cost."""
        cost = TokenCostCalculator.calculate_cost("gemini", "unknown", TokenUsage(input_tokens=10))

        assert cost.total_cost == 0.0

    def test_supported_lists(self):
        """Test provider and model listings."""
        assert "openai" in TokenCostCalculator.get_supported_providers()
        assert "gpt-4o-mini" in TokenCostCalculator.get_supported_models("openai")
        assert TokenCostCalculator.get_supported_models("nobody") == []

    def test_usage_total(self):
        """Test total token property."""
        assert TokenUsage(input_tokens=3, output_tokens=4).total_tokens == 7


class TestGenerationConfig:
    """Test per-feature presets."""

    def test_presets(self):
        """Test preset values."""
        assert create_generation_config("chat").max_output_tokens == 2048
        assert create_generation_config("live").max_output_tokens == 512
        assert create_generation_config("analysis").temperature == 0.3
        assert set(SUPPORTED_FEATURES) == {"chat", "analysis", "document", "live", "research"}

    def test_overrides(self):
        """Test overrides replace preset values and leave presets intact."""
        config = create_generation_config("chat", temperature=0.1, top_p=None)

        assert config.temperature == 0.1
        assert config.top_p == 0.8
        assert create_generation_config("chat").temperature == 0.7

    def test_unknown_feature(self):
        """Test unsupported features raise."""
        with pytest.raises(ValueError):
            create_generation_config("poetry")


class TestSettings:
    """Test settings defaults and environment fallback."""

    def test_defaults(self):
        """Test context knobs."""
        settings = Settings()

        assert settings.cache_ttl_seconds == 1800
        assert settings.max_history_tokens == 4000

    def test_api_key_from_environment(self, monkeypatch):
        """Test provider keys fall back to the environment."""
        monkeypatch.setenv("GEMINI_API_KEY", "env-key")

        settings = Settings(llm_provider="gemini")

        assert settings.get_llm_api_key() == "env-key"
        assert Settings(gemini_api_key="explicit").get_llm_api_key() == "explicit"
        assert Settings(llm_provider="mystery").get_llm_api_key() is None
