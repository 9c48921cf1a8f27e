# src/config/settings.py — v2
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for provider credentials, the fallback chain,
cache and queue tuning, feature flag defaults and logging.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === LLM PROVIDERS ===
    # Fallback preference order: first entry is tried first.
    ai_provider_chain: str = (
        "openai:gpt-4o,"
        "anthropic:claude-3-7-sonnet-20250219,"
        "deepseek:deepseek-chat"
    )
    llm_default_temperature: float = 0.7
    llm_default_max_tokens: int = 800
    llm_request_timeout_s: float = 60.0
    llm_attempt_timeout_s: float = 90.0

    # Provider API keys
    openai_api_key: str = ""
    anthropic_api_key: str = ""
    deepseek_api_key: str = ""
    deepseek_base_url: str = "https://api.deepseek.com/v1"

    # === Cache ===
    cache_backend: Literal["sqlite", "redis"] = "sqlite"
    cache_db_path: Path = Path("~/.lexassist/cache/ai_response_cache.db")
    cache_redis_url: str = ""
    cache_ttl_hours: int = 24
    memory_cache_ttl_s: int = 3600
    memory_cache_max_entries: int = 1000
    degraded_cache_ttl_s: int = 60
    cache_sweep_interval_s: int = 3600

    # === Request queue ===
    queue_concurrency_limit: int = 3

    # === Contract processing ===
    contract_max_tokens: int = 30000

    # === Feature flag defaults ===
    ai_use_cache: bool = True
    ai_use_request_queue: bool = True
    ai_fallback_enabled: bool = True
    ai_enable_chat_assistant: bool = True
    ai_enable_document_generation: bool = True
    ai_enable_legal_research: bool = True
    ai_enable_contract_analysis: bool = True
    ai_detailed_logging: bool = True

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.queue_concurrency_limit < 1:
            errors.append("QUEUE_CONCURRENCY_LIMIT must be >= 1")

        for name in (
            "cache_ttl_hours",
            "memory_cache_ttl_s",
            "degraded_cache_ttl_s",
            "cache_sweep_interval_s",
        ):
            if getattr(self, name) <= 0:
                errors.append(f"{name.upper()} must be > 0")

        if self.memory_cache_max_entries < 1:
            errors.append("MEMORY_CACHE_MAX_ENTRIES must be >= 1")

        if self.cache_backend == "redis" and not self.cache_redis_url:
            errors.append("CACHE_REDIS_URL must be set when CACHE_BACKEND=redis")

        if not self.provider_chain_list:
            errors.append("AI_PROVIDER_CHAIN must list at least one provider:model")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def provider_chain_list(self) -> list[str]:
        """Parse comma-separated provider chain, keeping only provider:model items."""
        return [
            item.strip()
            for item in self.ai_provider_chain.split(",")
            if ":" in item and item.split(":", 1)[0].strip() and item.split(":", 1)[1].strip()
        ]

    @property
    def cache_ttl_s(self) -> int:
        """Persistent cache TTL in seconds."""
        return self.cache_ttl_hours * 3600


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or per-process config).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
