"""
Unit tests for Configuration module.

This module contains unit tests for the configuration settings, validators,
and computed properties.
"""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from app.core.config import (
    ConfigValidator,
    EnvironmentEnum,
    LogFormatEnum,
    LogLevelEnum,
    Settings,
    get_config_summary,
    settings,
)


class TestSettings:
    """Test cases for Settings configuration."""

    def test_default_settings(self):
        """Test default configuration values."""
        test_settings = Settings()

        assert test_settings.app_name == "Phangan Guide API"
        assert test_settings.version == "1.0.0"
        assert test_settings.auth_jwt_algorithm == "HS256"
        assert test_settings.auth_jwt_audience == "authenticated"
        assert test_settings.gemini_model == "gemini-1.5-flash"
        assert test_settings.chat_max_steps == 5
        assert test_settings.chat_max_duration == 60
        assert test_settings.weather_latitude == pytest.approx(9.7313)
        assert test_settings.weather_longitude == pytest.approx(100.0137)

    def test_environment_validation(self):
        """Test environment validation with various inputs."""
        test_settings = Settings(environment="production")
        assert test_settings.environment == EnvironmentEnum.production

        # Test case insensitive
        test_settings = Settings(environment="DEVELOPMENT")
        assert test_settings.environment == EnvironmentEnum.development

        # Test shortcuts
        test_settings = Settings(environment="dev")
        assert test_settings.environment == EnvironmentEnum.development

        test_settings = Settings(environment="prod")
        assert test_settings.environment == EnvironmentEnum.production

    def test_computed_properties(self):
        """Test computed properties."""
        dev_settings = Settings(environment="development")
        assert dev_settings.is_development is True
        assert dev_settings.is_production is False
        assert dev_settings.is_testing is False

        prod_settings = Settings(environment="production")
        assert prod_settings.is_development is False
        assert prod_settings.is_production is True

        test_settings = Settings(environment="testing")
        assert test_settings.is_testing is True

    def test_has_ai_enabled_property(self):
        """Test AI enabled property."""
        assert Settings(gemini_api_key=None).has_ai_enabled is False
        assert Settings(gemini_api_key="").has_ai_enabled is False
        assert Settings(gemini_api_key="test_key").has_ai_enabled is True

    def test_has_auth_configured_property(self):
        assert Settings(auth_jwt_secret="").has_auth_configured is False
        assert Settings(auth_jwt_secret="secret").has_auth_configured is True

    def test_allowed_origins_list(self):
        test_settings = Settings(allowed_origins="http://a.test, http://b.test,,")
        assert test_settings.allowed_origins_list == ["http://a.test", "http://b.test"]

    def test_max_steps_validation(self):
        with pytest.raises(ValidationError) as exc_info:
            Settings(chat_max_steps=0)
        assert "chat_max_steps must be at least 1" in str(exc_info.value)

    def test_max_duration_validation(self):
        assert Settings(chat_max_duration=300).chat_max_duration == 300

        with pytest.raises(ValidationError) as exc_info:
            Settings(chat_max_duration=301)
        assert "between 1 and 300 seconds" in str(exc_info.value)

    def test_sqlite_database_url_doubles_as_test_url(self):
        test_settings = Settings(database_url="sqlite+aiosqlite:///./x.db", test_database_url=None)
        assert test_settings.test_database_url == "sqlite+aiosqlite:///./x.db"

    def test_environment_variables_loading(self):
        """Test loading configuration from environment variables."""
        with patch.dict(
            os.environ,
            {
                "APP_NAME": "Test App",
                "ENVIRONMENT": "production",
                "DEBUG": "true",
                "DATABASE_URL": "postgresql+asyncpg://test",
                "GEMINI_API_KEY": "test_key",
                "CHAT_MAX_STEPS": "3",
            },
        ):
            test_settings = Settings()
            assert test_settings.app_name == "Test App"
            assert test_settings.environment == EnvironmentEnum.production
            assert test_settings.debug is True
            assert test_settings.database_url == "postgresql+asyncpg://test"
            assert test_settings.gemini_api_key == "test_key"
            assert test_settings.chat_max_steps == 3


class TestConfigValidator:
    """Test cases for ConfigValidator."""

    def test_validate_required_settings_success(self):
        with patch.object(settings, "database_url", "postgresql+asyncpg://test"):
            with patch.object(settings, "auth_jwt_secret", "secret"):
                with patch.object(settings, "environment", EnvironmentEnum.development):
                    # Should not raise exception
                    ConfigValidator.validate_required_settings()

    def test_validate_required_settings_missing_database(self):
        with patch.object(settings, "database_url", None):
            with patch.object(settings, "auth_jwt_secret", "secret"):
                with pytest.raises(ValueError) as exc_info:
                    ConfigValidator.validate_required_settings()
                assert "DATABASE_URL is required" in str(exc_info.value)

    def test_validate_required_settings_missing_auth_secret(self):
        with patch.object(settings, "database_url", "postgresql+asyncpg://test"):
            with patch.object(settings, "auth_jwt_secret", None):
                with pytest.raises(ValueError) as exc_info:
                    ConfigValidator.validate_required_settings()
                assert "AUTH_JWT_SECRET is required" in str(exc_info.value)

    def test_validate_required_settings_production_missing_ai(self):
        with patch.object(settings, "database_url", "postgresql+asyncpg://test"):
            with patch.object(settings, "auth_jwt_secret", "secret"):
                with patch.object(settings, "environment", EnvironmentEnum.production):
                    with patch.object(settings, "gemini_api_key", None):
                        with pytest.raises(ValueError) as exc_info:
                            ConfigValidator.validate_required_settings()
                        assert "GEMINI_API_KEY is required in production" in str(exc_info.value)

    def test_get_feature_status(self):
        with patch.object(settings, "gemini_api_key", "key"):
            with patch.object(settings, "auth_jwt_secret", None):
                status = ConfigValidator.get_feature_status()

                assert status["ai_enabled"] is True
                assert status["auth_configured"] is False
                assert status["environment"] == settings.environment


class TestEnums:
    """Test cases for configuration enums."""

    def test_environment_enum(self):
        assert EnvironmentEnum.development == "development"
        assert EnvironmentEnum.testing == "testing"
        assert EnvironmentEnum.staging == "staging"
        assert EnvironmentEnum.production == "production"

    def test_log_level_enum(self):
        assert LogLevelEnum.DEBUG == "DEBUG"
        assert LogLevelEnum.CRITICAL == "CRITICAL"

    def test_log_format_enum(self):
        assert LogFormatEnum.simple == "simple"
        assert LogFormatEnum.json == "json"


def test_get_config_summary():
    """Test configuration summary function."""
    with patch.object(settings, "app_name", "Test App"):
        with patch.object(settings, "chat_max_steps", 4):
            summary = get_config_summary()

            assert summary["app_name"] == "Test App"
            assert summary["chat"]["max_steps"] == 4
            assert "features" in summary
