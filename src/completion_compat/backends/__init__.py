"""Responses API backends."""

from .base import BackendStream, BaseBackend
from .http import HTTPResponsesBackend, SSEResponseStream

__all__ = ["BackendStream", "BaseBackend", "HTTPResponsesBackend", "SSEResponseStream"]
