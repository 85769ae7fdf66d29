"""
Shared test configuration and fixtures.
"""

import asyncio
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest
from dotenv import load_dotenv

# Add src to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

# Load environment from project root .env file
project_env_file = project_root / ".env"
if project_env_file.exists():
    load_dotenv(project_env_file)

from completion_compat.backends.base import BackendStream, BaseBackend  # noqa: E402
from completion_compat.models.responses import ResponseStreamEvent  # noqa: E402


def make_response(
    text: str = "Hello!",
    response_id: str = "resp_123",
    status: str = "completed",
    usage: Optional[Dict[str, Any]] = None,
    role: Optional[str] = "assistant",
    **extra: Any,
) -> Dict[str, Any]:
    """Build a Responses API response record with one message item."""
    item: Dict[str, Any] = {
        "type": "message",
        "id": "msg_1",
        "content": [{"type": "output_text", "text": text, "annotations": []}],
    }
    if role:
        item["role"] = role
    response = {
        "id": response_id,
        "object": "response",
        "created_at": 1700000000,
        "model": "gpt-4.1-mini",
        "status": status,
        "output": [item],
    }
    if usage is not None:
        response["usage"] = usage
    response.update(extra)
    return response


class FakeBackend(BaseBackend):
    """Backend returning canned responses, in call order."""

    def __init__(self, responses: Optional[List[Any]] = None, delays: Optional[List[float]] = None):
        super().__init__(api_key=None, base_url="http://fake-backend.test/v1")
        self.responses = list(responses or [make_response()])
        self.delays = list(delays or [])
        self.calls: List[Dict[str, Any]] = []
        self.cancelled = 0
        self.stream: Optional["FakeStream"] = None

    async def create(self, body: Dict[str, Any], request_id: str = "") -> Dict[str, Any]:
        index = len(self.calls)
        self.calls.append(body)
        try:
            if index < len(self.delays):
                await asyncio.sleep(self.delays[index])
        except asyncio.CancelledError:
            self.cancelled += 1
            raise
        result = self.responses[min(index, len(self.responses) - 1)]
        if isinstance(result, Exception):
            raise result
        return result

    async def create_stream(self, body: Dict[str, Any], request_id: str = "") -> "FakeStream":
        self.calls.append(body)
        return self.stream


class FakeStream(BackendStream):
    """Event stream replaying a fixed list of events."""

    def __init__(self, events: List[Any]):
        self._events = list(events)
        self._aborted = False
        self.read = 0

    @property
    def aborted(self) -> bool:
        return self._aborted

    async def abort(self) -> None:
        self._aborted = True

    async def events(self):
        for event in self._events:
            if self._aborted:
                return
            self.read += 1
            yield event


def event(event_type: str, **fields: Any) -> ResponseStreamEvent:
    return ResponseStreamEvent(type=event_type, **fields)


@pytest.fixture
def fake_backend():
    """Fake backend with a single canned response."""
    return FakeBackend()
