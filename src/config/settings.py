"""Application settings using Pydantic BaseSettings."""

import logging
from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Domain Triage Engine"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        upper = v.upper()
        if upper not in _VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {_VALID_LOG_LEVELS}, got '{v}'")
        return upper

    @model_validator(mode="after")
    def validate_budgets_positive(self) -> "Settings":
        for field_name in (
            "max_processing_time_ms",
            "max_tokens_per_request",
            "max_cost_per_triage",
            "triage_max_tokens",
            "circuit_breaker_threshold",
            "circuit_breaker_reset_seconds",
        ):
            value = getattr(self, field_name)
            if value <= 0:
                raise ValueError(f"{field_name} must be positive, got {value}")
        return self

    @model_validator(mode="after")
    def validate_ratios(self) -> "Settings":
        for field_name in (
            "confidence_minimum",
            "data_completeness_required",
            "target_confidence",
        ):
            value = getattr(self, field_name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{field_name} must be between 0 and 1, got {value}")
        if not 1.0 <= self.domain_selection_threshold <= 5.0:
            raise ValueError(
                f"domain_selection_threshold must be between 1 and 5, "
                f"got {self.domain_selection_threshold}"
            )
        return self

    @model_validator(mode="after")
    def warn_enhancement_disabled(self) -> "Settings":
        if not self.triage_enhancement_enabled:
            logging.getLogger(__name__).warning(
                "triage_enhancement_enabled is False; triage will use base scores only"
            )
        return self

    # Providers
    openai_api_key: str | None = None
    openai_organization_id: str | None = None
    anthropic_api_key: str | None = None

    # Triage Agent
    triage_agent_model: str = "gpt-4o-mini"
    triage_temperature: float = 0.1
    triage_max_tokens: int = 3000
    triage_enhancement_enabled: bool = True

    # Thresholds
    domain_selection_threshold: float = 4.0
    confidence_minimum: float = 0.7
    data_completeness_required: float = 0.6

    # Performance budget
    max_processing_time_ms: int = 120_000
    max_tokens_per_request: int = 8000
    max_cost_per_triage: float = 0.5
    target_confidence: float = 0.7

    # Pricing (per 1K tokens)
    prompt_token_cost_per_1k: float = 0.00015
    completion_token_cost_per_1k: float = 0.0006
    base_call_cost: float = 0.1
    time_cost_per_minute: float = 0.05

    # Circuit breaker
    circuit_breaker_threshold: int = 5
    circuit_breaker_reset_seconds: float = 300.0

    # Result store
    result_store_max_size: int = 500
    result_store_ttl: int = 86_400


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
