"""Application settings."""

import os
from typing import Optional
from pydantic import BaseModel


class Settings(BaseModel):
    """Application configuration settings."""

    # LLM Provider settings
    llm_provider: str = "gemini"  # "gemini", "openai" or "anthropic"
    llm_model: Optional[str] = None  # Override provider default model

    # API Keys
    gemini_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    anthropic_api_key: Optional[str] = None

    # Context optimization
    cache_ttl_seconds: int = 1800
    cache_sweep_interval_seconds: int = 300
    max_history_tokens: int = 4000

    # Memory settings
    memory_enabled: bool = True
    db_path: str = "data/sessions.db"

    # Logging
    verbose: bool = False

    def __init__(self, **data):
        # Auto-load API keys from environment if not provided
        for field, env_var in (
            ("gemini_api_key", "GEMINI_API_KEY"),
            ("openai_api_key", "OPENAI_API_KEY"),
            ("anthropic_api_key", "ANTHROPIC_API_KEY"),
        ):
            if data.get(field) is None:
                data[field] = os.environ.get(env_var)

        super().__init__(**data)

    def get_llm_api_key(self) -> Optional[str]:
        """Get the API key for the configured LLM provider."""
        if self.llm_provider == "gemini":
            return self.gemini_api_key
        elif self.llm_provider == "openai":
            return self.openai_api_key
        elif self.llm_provider == "anthropic":
            return self.anthropic_api_key
        return None
