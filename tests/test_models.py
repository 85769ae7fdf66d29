"""Tests for data models."""

import pytest
from pydantic import ValidationError

from completion_compat.models.legacy import (
    LegacyCompletionRequest,
    LegacyMessage,
    LegacyStreamChoice,
    LegacyStreamChunk,
    LegacyStreamError,
)
from completion_compat.models.responses import ResponseEventType, ResponseStreamEvent


def test_request_defaults():
    request = LegacyCompletionRequest(model="gpt-4.1-mini")

    assert request.messages == []
    assert request.n is None
    assert request.requested_n == 1
    assert request.passthrough == {}


def test_request_passthrough_keeps_unknown_keys():
    request = LegacyCompletionRequest(
        model="doubao-seed",
        messages=[{"role": "user", "content": "Hi"}],
        thinking={"type": "disabled"},
    )

    assert request.messages[0] == LegacyMessage(role="user", content="Hi")
    assert request.passthrough == {"thinking": {"type": "disabled"}}


def test_request_is_immutable():
    request = LegacyCompletionRequest(model="gpt-4.1-mini", n=2)

    with pytest.raises(ValidationError):
        request.n = 3


def test_request_requires_model():
    with pytest.raises(ValidationError):
        LegacyCompletionRequest(messages=[])


def test_stream_chunk_to_dict_keeps_null_finish_reason():
    chunk = LegacyStreamChunk(id="msg_1", choices=[LegacyStreamChoice(text="Hi")])

    data = chunk.to_dict()

    assert data == {
        "id": "msg_1",
        "object": "text_completion.chunk",
        "choices": [{"text": "Hi", "index": 0, "finish_reason": None}],
    }
    assert not chunk.is_final


def test_stream_error_to_dict():
    error = LegacyStreamError(error={"code": "server_error"})

    assert error.to_dict() == {"object": "error", "error": {"code": "server_error"}}


def test_stream_event_keeps_extra_fields():
    event = ResponseStreamEvent(type="error", code="bad", message="oops")

    assert event.type == ResponseEventType.ERROR
    assert event.payload() == {"type": "error", "code": "bad", "message": "oops"}
