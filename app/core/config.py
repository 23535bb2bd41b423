# python
# app/core/config.py
"""Configuration settings for the Phangan Guide API.

Uses Pydantic BaseSettings for environment variable management.
"""
from enum import Enum

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentEnum(str, Enum):
    development = "development"
    testing = "testing"
    staging = "staging"
    production = "production"


class LogLevelEnum(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormatEnum(str, Enum):
    simple = "simple"
    json = "json"


class Settings(BaseSettings):
    # Pydantic v2 settings configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ===== Application Settings =====
    app_name: str = Field(default="Phangan Guide API", description="Application name")
    environment: EnvironmentEnum = Field(
        default=EnvironmentEnum.development, description="Environment type"
    )
    debug: bool = Field(default=False, description="Debug mode")
    version: str = Field(default="1.0.0", description="Application version")

    # ===== Database Settings =====
    database_url: str | None = Field(default=None, description="Database connection URL")
    test_database_url: str | None = Field(default=None, description="Test database URL")

    # ===== Authentication (Supabase) =====
    auth_jwt_secret: str | None = Field(
        default=None, description="Secret used by the identity provider to sign access tokens"
    )
    auth_jwt_algorithm: str = Field(default="HS256", description="Access token algorithm")
    auth_jwt_audience: str | None = Field(
        default="authenticated", description="Expected access token audience"
    )
    auth_cookie_name: str = Field(
        default="sb-access-token", description="Cookie carrying the web session token"
    )

    # ===== AI Service (Gemini) =====
    gemini_api_key: str | None = Field(default=None, description="Google Gemini API key")
    gemini_model: str = Field(default="gemini-1.5-flash", description="Default Gemini model")
    gemini_max_tokens: int = Field(default=2048, description="Maximum output tokens per step")
    gemini_temperature: float = Field(default=0.7, description="Sampling temperature")

    # ===== Chat =====
    chat_max_steps: int = Field(default=5, description="Maximum tool-call steps per completion")
    chat_max_duration: int = Field(
        default=60, description="Deadline for a whole chat completion in seconds"
    )

    # ===== Weather =====
    weather_api_url: str = Field(
        default="https://api.open-meteo.com/v1/forecast", description="Forecast API URL"
    )
    weather_latitude: float = Field(default=9.7313, description="Forecast latitude")
    weather_longitude: float = Field(default=100.0137, description="Forecast longitude")
    weather_timeout: float = Field(default=10.0, description="Forecast request timeout in seconds")

    # ===== Query cache TTLs (seconds) =====
    cache_ttl_chat: int = Field(default=10, description="Chat and message reads")
    cache_ttl_events: int = Field(default=5, description="Event reads")
    cache_ttl_partners: int = Field(default=5, description="Partner reads")
    cache_ttl_guides: int = Field(default=60, description="Guide reads")
    cache_ttl_catalog: int = Field(default=30, description="Activity and service reads")
    cache_ttl_profile: int = Field(default=60, description="Profile and admin flag reads")
    cache_ttl_counts: int = Field(default=30, description="Aggregate counts")

    # ===== CORS Settings =====
    allowed_origins: str = Field(
        default="http://localhost:3000,http://localhost:8081,http://127.0.0.1:3000",
        description="Allowed CORS origins (comma-separated)",
    )

    @property
    def allowed_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    # ===== Monitoring & Logging =====
    log_level: LogLevelEnum = Field(default=LogLevelEnum.INFO, description="Logging level")
    log_format: LogFormatEnum = Field(default=LogFormatEnum.simple, description="Log format")

    # ===== Server Settings =====
    host: str = Field(default="127.0.0.1", description="Host to bind the server")
    port: int = Field(default=8000, description="Port to bind the server")

    # ===== Computed Properties =====
    @property
    def is_development(self) -> bool:
        return self.environment == EnvironmentEnum.development

    @property
    def is_production(self) -> bool:
        return self.environment == EnvironmentEnum.production

    @property
    def is_testing(self) -> bool:
        return self.environment == EnvironmentEnum.testing

    @property
    def has_ai_enabled(self) -> bool:
        return bool(self.gemini_api_key)

    @property
    def has_auth_configured(self) -> bool:
        return bool(self.auth_jwt_secret)

    # ===== Validation Methods =====
    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v):
        if v and isinstance(v, str):
            lv = v.lower()
            if lv in ["dev", "develop"]:
                return "development"
            if lv in ["prod"]:
                return "production"
            return lv
        return v

    @field_validator("chat_max_steps")
    @classmethod
    def validate_max_steps(cls, v):
        if v < 1:
            raise ValueError("chat_max_steps must be at least 1")
        return v

    @field_validator("chat_max_duration")
    @classmethod
    def validate_max_duration(cls, v):
        if v < 1 or v > 300:
            raise ValueError("chat_max_duration must be between 1 and 300 seconds")
        return v

    @model_validator(mode="after")
    def set_computed_fields(self):
        if not self.test_database_url and self.database_url and self.database_url.startswith("sqlite"):
            self.test_database_url = self.database_url
        return self


settings = Settings()


class ConfigValidator:
    @staticmethod
    def validate_required_settings():
        errors = []
        if not settings.database_url:
            errors.append("DATABASE_URL is required")
        if not settings.auth_jwt_secret:
            errors.append("AUTH_JWT_SECRET is required")
        if settings.is_production and not settings.gemini_api_key:
            errors.append("GEMINI_API_KEY is required in production")
        if errors:
            raise ValueError(f"Configuration errors: {', '.join(errors)}")

    @staticmethod
    def get_feature_status() -> dict:
        return {
            "ai_enabled": settings.has_ai_enabled,
            "auth_configured": settings.has_auth_configured,
            "environment": settings.environment,
        }


def get_config_summary() -> dict:
    return {
        "app_name": settings.app_name,
        "version": settings.version,
        "environment": settings.environment,
        "debug": settings.debug,
        "features": ConfigValidator.get_feature_status(),
        "database_configured": bool(settings.database_url),
        "chat": {
            "max_steps": settings.chat_max_steps,
            "max_duration": settings.chat_max_duration,
        },
    }


__all__ = [
    "settings",
    "Settings",
    "ConfigValidator",
    "get_config_summary",
    "EnvironmentEnum",
    "LogLevelEnum",
    "LogFormatEnum",
]
