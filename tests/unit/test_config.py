"""
Unit tests for configuration management functionality.
Tests the Settings class and adapter options.
"""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from completion_compat.adapter import CompletionCompat, create_adapter
from completion_compat.backends.http import HTTPResponsesBackend
from completion_compat.config import AdapterOptions, Settings, get_settings, reset_settings
from completion_compat.strategies import (
    DEFAULT_PROMPT_SPLIT_DELIMITER,
    DEFAULT_PROMPT_SPLIT_INSTRUCTION,
    MultiStrategy,
)


class TestSettings:
    """Test the Settings configuration class."""

    def test_default_settings(self):
        """Test default settings types when no overrides are present."""
        settings = Settings()

        assert isinstance(settings.log_level, str)
        assert isinstance(settings.openai_base_url, str)
        assert isinstance(settings.request_timeout, int)
        assert isinstance(settings.multi_strategy, MultiStrategy)
        assert settings.openai_api_key is None or isinstance(settings.openai_api_key, str)

    def test_settings_from_env_vars(self):
        """Test settings loaded from environment variables."""
        with patch.dict(os.environ, {
            'OPENAI_API_KEY': 'sk-test-key',
            'OPENAI_BASE_URL': 'https://ark.example.com/api/v3',
            'COMPLETION_COMPAT_LOG_LEVEL': 'DEBUG',
            'COMPLETION_COMPAT_REQUEST_TIMEOUT': '120',
            'COMPLETION_COMPAT_MULTI_STRATEGY': 'parallel',
            'COMPLETION_COMPAT_PROMPT_SPLIT_INSTRUCTION': 'List {n} ideas.',
            'COMPLETION_COMPAT_ATTACH_RAW_RESPONSES': 'true',
            'COMPLETION_COMPAT_TAG_METADATA': '1',
        }):
            settings = Settings()

            assert settings.openai_api_key == "sk-test-key"
            assert settings.openai_base_url == "https://ark.example.com/api/v3"
            assert settings.log_level == "DEBUG"
            assert settings.request_timeout == 120
            assert settings.multi_strategy == MultiStrategy.PARALLEL
            assert settings.prompt_split_instruction == "List {n} ideas."
            assert settings.attach_raw_responses is True
            assert settings.tag_metadata is True

    def test_unknown_strategy_is_rejected(self):
        """Unknown strategies fail at construction instead of degrading silently."""
        with patch.dict(os.environ, {'COMPLETION_COMPAT_MULTI_STRATEGY': 'best_of'}):
            with pytest.raises(ValidationError):
                Settings()

    def test_adapter_options_from_settings(self):
        settings = Settings(
            multi_strategy="prompt_split",
            prompt_split_delimiter="||",
            attach_raw_responses=True,
        )

        options = settings.adapter_options()

        assert options.multi_strategy == MultiStrategy.PROMPT_SPLIT
        assert options.prompt_split_delimiter == "||"
        assert options.attach_raw_responses is True

    def test_get_settings_singleton(self):
        reset_settings()
        try:
            assert get_settings() is get_settings()
        finally:
            reset_settings()

    def test_get_settings_warns_without_api_key(self, caplog):
        reset_settings()
        try:
            with patch.dict(os.environ, {'OPENAI_API_KEY': ''}):
                get_settings()
        finally:
            reset_settings()

        assert "OPENAI_API_KEY is not configured" in caplog.text


class TestAdapterOptions:
    """Test adapter construction options."""

    def test_defaults(self):
        options = AdapterOptions()

        assert options.multi_strategy == MultiStrategy.FIRST_ONLY
        assert options.prompt_split_delimiter == "\n"
        assert "{n}" in options.prompt_split_instruction
        assert options.attach_raw_responses is False
        assert options.tag_metadata is False

    def test_unknown_strategy_is_rejected(self):
        with pytest.raises(ValidationError):
            AdapterOptions(multi_strategy="best_of")

    def test_empty_values_fall_back_to_defaults(self):
        options = AdapterOptions(prompt_split_delimiter="", prompt_split_instruction="")

        assert options.prompt_split_delimiter == DEFAULT_PROMPT_SPLIT_DELIMITER
        assert options.prompt_split_instruction == DEFAULT_PROMPT_SPLIT_INSTRUCTION

    def test_create_adapter_uses_settings(self):
        settings = Settings(
            openai_api_key="sk-test",
            openai_base_url="http://fake-api.test/v1",
            request_timeout=30,
            multi_strategy="parallel",
        )

        compat = create_adapter(settings)

        assert isinstance(compat, CompletionCompat)
        assert isinstance(compat.backend, HTTPResponsesBackend)
        assert compat.backend.base_url == "http://fake-api.test/v1"
        assert compat.backend.api_key == "sk-test"
        assert compat.backend.timeout == 30
        assert compat.options.multi_strategy == MultiStrategy.PARALLEL
