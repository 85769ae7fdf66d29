"""Legacy completion API adapter for the Responses API."""

__version__ = "0.1.0"

from .adapter import CompletionCompat, create_adapter
from .config import AdapterOptions, Settings, get_settings
from .exceptions import BackendConnectionError, BackendError, BackendStatusError, CompatError
from .models.legacy import (
    LegacyChoice,
    LegacyCompletionRequest,
    LegacyCompletionResponse,
    LegacyMessage,
    LegacyStreamChoice,
    LegacyStreamChunk,
    LegacyStreamError,
    LegacyUsage,
)
from .strategies import MultiStrategy
from .streaming import CompletionStream

__all__ = [
    "AdapterOptions",
    "BackendConnectionError",
    "BackendError",
    "BackendStatusError",
    "CompatError",
    "CompletionCompat",
    "CompletionStream",
    "LegacyChoice",
    "LegacyCompletionRequest",
    "LegacyCompletionResponse",
    "LegacyMessage",
    "LegacyStreamChoice",
    "LegacyStreamChunk",
    "LegacyStreamError",
    "LegacyUsage",
    "MultiStrategy",
    "Settings",
    "create_adapter",
    "get_settings",
]
