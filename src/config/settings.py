"""Environment configuration and validation.

Strongly-typed settings loaded from environment variables (optionally via a local `.env` file).
Invalid matching thresholds or an incomplete LLM configuration are rejected at startup.
"""

from __future__ import annotations

from pydantic import Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    employees_path: str | None = Field(default=None, alias="EMPLOYEES_PATH")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    name_min_score: int = Field(default=85, ge=0, le=100, alias="NAME_MIN_SCORE")
    field_min_score: int = Field(default=85, ge=0, le=100, alias="FIELD_MIN_SCORE")
    match_top_n: int = Field(default=3, ge=1, alias="MATCH_TOP_N")

    llm_enabled: bool = Field(default=False, alias="LLM_ENABLED")
    llm_api_key: str | None = Field(default=None, alias="LLM_API_KEY")

    @model_validator(mode="after")
    def validate_llm_config(self) -> Settings:
        """Validate the optional LLM predictor configuration.

        If LLM intent prediction is enabled, an API key must be provided.
        """

        if self.llm_enabled and not self.llm_api_key:
            raise ValueError("LLM_API_KEY is required when LLM_ENABLED=true")
        return self


def load_settings() -> Settings:
    """Load and validate settings from environment variables.

    Raises:
        RuntimeError: If the environment configuration is missing or invalid.
    """

    try:
        return Settings()
    except ValidationError as exc:
        raise RuntimeError(f"Invalid environment configuration: {exc}") from exc
