import os
from pathlib import Path

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_database_url() -> str:
    """Get database URL, using absolute path for SQLite to avoid path resolution issues.

    ⚠️ WARNING: SQLite is for local development only. Set DATABASE_URL to a
    PostgreSQL connection string in production.
    """
    db_url = os.getenv("DATABASE_URL", "")
    if db_url:
        logger.info(f"Using DATABASE_URL from environment: {db_url}")
        return db_url

    db_path = Path(__file__).parent.parent.parent / "vlife.db"
    db_url = f"sqlite:///{db_path.resolve()}"
    logger.warning(f"⚠️ Using SQLite database (LOCAL DEV ONLY): {db_url}")
    return db_url


class Settings(BaseSettings):
    database_url: str = Field(
        default_factory=get_database_url,
        validation_alias="DATABASE_URL",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_file: str = Field(default="", validation_alias="LOG_FILE")

    openai_api_key: str = Field(default="", validation_alias="OPENAI_API_KEY")
    openai_model: str = Field(default="gpt-4o", validation_alias="OPENAI_MODEL")
    week_generation_temperature: float = Field(default=0.7, validation_alias="WEEK_GENERATION_TEMPERATURE")
    week_generation_max_tokens: int = Field(
        default=6000,
        validation_alias="WEEK_GENERATION_MAX_TOKENS",
        description="Completion token ceiling for one generated week",
    )
    week_generation_max_attempts: int = Field(
        default=2,
        validation_alias="WEEK_GENERATION_MAX_ATTEMPTS",
        description="Attempts allowed when the model returns exercise IDs outside the candidate list",
    )

    revenuecat_webhook_auth: str = Field(default="", validation_alias="REVENUECAT_WEBHOOK_AUTH")

    rapidapi_key: str = Field(default="", validation_alias="RAPIDAPI_KEY")
    exercisedb_base_url: str = Field(
        default="https://exercisedb-api1.p.rapidapi.com",
        validation_alias="EXERCISEDB_BASE_URL",
    )
    exercisedb_host: str = Field(default="exercisedb-api1.p.rapidapi.com", validation_alias="EXERCISEDB_HOST")
    exercisedb_cache_ttl_seconds: int = Field(
        default=3600,
        validation_alias="EXERCISEDB_CACHE_TTL_SECONDS",
        description="ExerciseDB terms of use allow at most one hour of caching",
    )
    exercisedb_cache_max_entries: int = Field(default=512, validation_alias="EXERCISEDB_CACHE_MAX_ENTRIES")
    exercisedb_cache_sweep_minutes: int = Field(default=30, validation_alias="EXERCISEDB_CACHE_SWEEP_MINUTES")

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that log level is one of the standard logging levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            logger.warning(f"Invalid LOG_LEVEL '{value}'. Valid levels are: {', '.join(sorted(valid_levels))}. Defaulting to INFO.")
            return "INFO"
        return upper_value

    @field_validator("week_generation_max_attempts")
    @classmethod
    def validate_max_attempts(cls, value: int) -> int:
        if value < 1:
            logger.warning(f"WEEK_GENERATION_MAX_ATTEMPTS must be >= 1, got {value}. Using 1.")
            return 1
        return value

    @field_validator("openai_api_key", "rapidapi_key")
    @classmethod
    def warn_missing_key(cls, value: str) -> str:
        """Missing provider keys are allowed; the dependent endpoints answer 503."""
        if not value:
            logger.warning("⚠️ A provider API key is not set. Endpoints depending on it will return 503.")
        return value


settings = Settings()
