"""Data models for the completion compatibility adapter."""

from .legacy import (
    LegacyChoice,
    LegacyCompletionRequest,
    LegacyCompletionResponse,
    LegacyMessage,
    LegacyStreamChoice,
    LegacyStreamChunk,
    LegacyStreamError,
    LegacyUsage,
)
from .responses import ResponseEventType, ResponseStreamEvent

__all__ = [
    "LegacyChoice",
    "LegacyCompletionRequest",
    "LegacyCompletionResponse",
    "LegacyMessage",
    "LegacyStreamChoice",
    "LegacyStreamChunk",
    "LegacyStreamError",
    "LegacyUsage",
    "ResponseEventType",
    "ResponseStreamEvent",
]
