"""Per-feature generation presets for model calls."""

from typing import Optional
from pydantic import BaseModel


class GenerationConfig(BaseModel):
    """Generation parameters sent alongside an optimized context."""
    max_output_tokens: int
    temperature: float = 0.7
    top_p: float = 0.8
    response_mime_type: str = "text/plain"


_PRESETS = {
    "chat": GenerationConfig(max_output_tokens=2048, temperature=0.7, top_p=0.8),
    "analysis": GenerationConfig(max_output_tokens=1024, temperature=0.3, top_p=0.9),
    "document": GenerationConfig(max_output_tokens=1536, temperature=0.4, top_p=0.85),
    "live": GenerationConfig(max_output_tokens=512, temperature=0.6, top_p=0.8),
    "research": GenerationConfig(max_output_tokens=3072, temperature=0.5, top_p=0.9),
}

SUPPORTED_FEATURES = tuple(_PRESETS)


def create_generation_config(feature: str, **overrides: Optional[object]) -> GenerationConfig:
    """
    Build the generation config for a feature.

    Args:
        feature: One of chat, analysis, document, live, research
        **overrides: Fields replacing the preset values

    Returns:
        GenerationConfig for the feature

    Raises:
        ValueError: If feature is not supported
    """
    if feature not in _PRESETS:
        raise ValueError(f"Unsupported generation feature: {feature}")
    overrides = {key: value for key, value in overrides.items() if value is not None}
    return _PRESETS[feature].model_copy(update=overrides)
