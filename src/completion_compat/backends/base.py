"""Base classes for Responses API backends."""

from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, Dict, Optional

import httpx

from ..models.responses import ResponseStreamEvent


class BackendStream(ABC):
    """A live Responses API event stream.

    Iterating yields events in arrival order. ``abort()`` stops upstream
    delivery; iteration then ends normally instead of raising.
    """

    def __aiter__(self) -> AsyncIterator[ResponseStreamEvent]:
        return self.events()

    @abstractmethod
    def events(self) -> AsyncIterator[ResponseStreamEvent]:
        """Yield parsed events until the stream ends or is aborted."""
        pass

    @abstractmethod
    async def abort(self) -> None:
        """Stop event delivery. Safe to call more than once."""
        pass

    @property
    @abstractmethod
    def aborted(self) -> bool:
        pass


class BaseBackend(ABC):
    """Abstract base class for Responses API backends.

    One instance is shared by every translation; it holds no per-call state.
    """

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str,
        timeout: int = 90,
        client: Optional[httpx.AsyncClient] = None
    ):
        """Initialize backend with API credentials."""
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            limits=httpx.Limits(max_keepalive_connections=20, max_connections=100)
        )

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    @abstractmethod
    async def create(self, body: Dict[str, Any], request_id: str = "") -> Dict[str, Any]:
        """Create a response and return the backend record."""
        pass

    @abstractmethod
    async def create_stream(self, body: Dict[str, Any], request_id: str = "") -> BackendStream:
        """Create a streaming response and return its event stream."""
        pass
