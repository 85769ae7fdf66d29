"""Configuration management for the completion compatibility adapter."""

import logging
from typing import Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings

from .strategies import (
    DEFAULT_PROMPT_SPLIT_DELIMITER,
    DEFAULT_PROMPT_SPLIT_INSTRUCTION,
    MultiStrategy,
)

logger = logging.getLogger(__name__)


class AdapterOptions(BaseModel):
    """Construction-time options of ``CompletionCompat``.

    ``multi_strategy`` is a closed enum: an unknown value fails validation
    here instead of silently degrading to ``first_only`` at call time.
    """
    multi_strategy: MultiStrategy = Field(default=MultiStrategy.FIRST_ONLY)
    prompt_split_delimiter: str = Field(default=DEFAULT_PROMPT_SPLIT_DELIMITER)
    prompt_split_instruction: str = Field(default=DEFAULT_PROMPT_SPLIT_INSTRUCTION)
    attach_raw_responses: bool = Field(default=False)
    tag_metadata: bool = Field(default=False, description="Send compat metadata to the backend")

    model_config = {"frozen": True}

    @field_validator("prompt_split_delimiter", mode="before")
    @classmethod
    def _default_delimiter(cls, value):
        return value or DEFAULT_PROMPT_SPLIT_DELIMITER

    @field_validator("prompt_split_instruction", mode="before")
    @classmethod
    def _default_instruction(cls, value):
        return value or DEFAULT_PROMPT_SPLIT_INSTRUCTION


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    log_level: str = Field(default="INFO", description="Log level", alias="COMPLETION_COMPAT_LOG_LEVEL")

    # Backend settings
    openai_api_key: Optional[str] = Field(default=None, description="Backend API key", alias="OPENAI_API_KEY")
    openai_base_url: str = Field(
        default="https://api.openai.com/v1",
        description="Backend API base URL",
        alias="OPENAI_BASE_URL"
    )
    request_timeout: int = Field(default=90, description="Request timeout in seconds", alias="COMPLETION_COMPAT_REQUEST_TIMEOUT")

    # Adapter settings
    multi_strategy: MultiStrategy = Field(
        default=MultiStrategy.FIRST_ONLY,
        description="How n > 1 is emulated",
        alias="COMPLETION_COMPAT_MULTI_STRATEGY"
    )
    prompt_split_delimiter: str = Field(
        default=DEFAULT_PROMPT_SPLIT_DELIMITER, alias="COMPLETION_COMPAT_PROMPT_SPLIT_DELIMITER"
    )
    prompt_split_instruction: str = Field(
        default=DEFAULT_PROMPT_SPLIT_INSTRUCTION, alias="COMPLETION_COMPAT_PROMPT_SPLIT_INSTRUCTION"
    )
    attach_raw_responses: bool = Field(default=False, alias="COMPLETION_COMPAT_ATTACH_RAW_RESPONSES")
    tag_metadata: bool = Field(default=False, alias="COMPLETION_COMPAT_TAG_METADATA")

    model_config = {"env_file": ".env", "case_sensitive": False, "extra": "ignore", "populate_by_name": True}

    def adapter_options(self) -> AdapterOptions:
        """Build adapter options from these settings."""
        return AdapterOptions(
            multi_strategy=self.multi_strategy,
            prompt_split_delimiter=self.prompt_split_delimiter,
            prompt_split_instruction=self.prompt_split_instruction,
            attach_raw_responses=self.attach_raw_responses,
            tag_metadata=self.tag_metadata,
        )


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get application settings (singleton pattern)."""
    global _settings
    if _settings is None:
        _settings = Settings()

        if not _settings.openai_api_key:
            logger.warning(
                "OPENAI_API_KEY is not configured. Requests are sent without "
                "an Authorization header."
            )

    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
