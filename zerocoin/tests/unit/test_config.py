"""
Unit Tests for Configuration Module

Tests the configuration loading and validation from environment variables.
"""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from zerocoin.config import Settings, get_settings


class TestSettings:
    """Test configuration settings and environment variable loading."""

    @patch.dict(os.environ, {}, clear=True)
    def test_default_settings(self):
        """Test default configuration values."""
        settings = Settings(_env_file=None)

        assert settings.security_level == 80
        assert settings.protocol_version == "1"
        assert settings.max_mint_attempts == 10000
        assert settings.mint_prime_rounds == 20
        assert settings.param_prime_rounds == 64
        assert settings.max_primegen_attempts == 10000
        assert settings.max_generator_attempts == 10000
        assert settings.max_schnorrgen_attempts == 10000
        assert settings.log_level == "INFO"
        assert settings.log_format == "text"
        assert settings.app_name == "zerocoin"

    @patch.dict(os.environ, {
        'ZEROCOIN_SECURITY_LEVEL': '112',
        'ZEROCOIN_PROTOCOL_VERSION': '2',
        'ZEROCOIN_LOG_FORMAT': 'json',
        'ZEROCOIN_LOG_LEVEL': 'DEBUG',
    })
    def test_environment_variable_override(self):
        """Test that prefixed environment variables override defaults."""
        settings = Settings(_env_file=None)

        assert settings.security_level == 112
        assert settings.protocol_version == "2"
        assert settings.log_format == "json"
        assert settings.log_level == "DEBUG"

    @patch.dict(os.environ, {'SECURITY_LEVEL': '128'}, clear=True)
    def test_unprefixed_variables_ignored(self):
        settings = Settings(_env_file=None)
        assert settings.security_level == 80

    @patch.dict(os.environ, {'ZEROCOIN_MAX_MINT_ATTEMPTS': '0'})
    def test_attempt_limits_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    @patch.dict(os.environ, {'ZEROCOIN_SECURITY_LEVEL': 'high'})
    def test_invalid_numeric_values(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("ZEROCOIN_MINT_PRIME_ROUNDS=30\n")

        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=str(env_file))
        assert settings.mint_prime_rounds == 30

    def test_get_settings_singleton(self):
        """Test that get_settings returns the same instance."""
        assert get_settings() is get_settings()
