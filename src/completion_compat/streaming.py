"""Translate a Responses API event stream into legacy completion chunks."""

import logging
from typing import Any, AsyncIterator, Dict, Optional, Union

from .backends.base import BackendStream
from .models.legacy import (
    LegacyStreamChoice,
    LegacyStreamChunk,
    LegacyStreamError,
    LegacyUsage,
)
from .models.responses import ResponseEventType, ResponseStreamEvent
from .translate import responses_to_completion
from .utils import current_timestamp

logger = logging.getLogger(__name__)

PARTIAL_RESPONSE_ID = "unknown"

StreamItem = Union[LegacyStreamChunk, LegacyStreamError]


class CompletionStream:
    """Single-pass async sequence of legacy chunks with a cancellation handle.

    Events are handled strictly in arrival order:

    * ``response.output_item.added`` records role and item type, emits nothing.
    * ``response.output_text.delta`` appends to the accumulated text and
      emits one delta chunk.
    * ``response.output_text.done`` is ignored.
    * ``response.completed`` / ``response.incomplete`` record the final
      response; its chunk is emitted once the upstream ends.
    * ``response.failed`` / ``error`` emit a ``LegacyStreamError`` and stop
      reading immediately.

    If the upstream ends without a final response (e.g. after ``abort()``)
    and some text was accumulated, one synthetic final chunk carrying the
    full text is emitted. Otherwise the sequence simply ends, which is a
    valid empty result.
    """

    def __init__(self, upstream: BackendStream, model: Optional[str] = None, request_id: str = ""):
        self._upstream = upstream
        self._model = model
        self._request_id = request_id
        self._text = ""
        self._role: Optional[str] = None
        self._item_type: Optional[str] = None
        self._final_response: Optional[Dict[str, Any]] = None
        self._started = False

    @property
    def text(self) -> str:
        """Text accumulated from the deltas seen so far."""
        return self._text

    @property
    def role(self) -> Optional[str]:
        return self._role

    @property
    def item_type(self) -> Optional[str]:
        return self._item_type

    @property
    def final_response(self) -> Optional[Dict[str, Any]]:
        return self._final_response

    async def abort(self) -> None:
        """Stop upstream delivery. Chunks already emitted stay emitted."""
        await self._upstream.abort()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.abort()

    def __aiter__(self) -> AsyncIterator[StreamItem]:
        if self._started:
            raise RuntimeError("CompletionStream can only be iterated once")
        self._started = True
        return self._chunks()

    async def _chunks(self) -> AsyncIterator[StreamItem]:
        events = self._upstream.events()
        try:
            async for event in events:
                if isinstance(event, dict):
                    event = ResponseStreamEvent.model_validate(event)

                if event.type == ResponseEventType.OUTPUT_ITEM_ADDED:
                    item = event.item or {}
                    if self._role is None and item.get("role"):
                        self._role = item["role"]
                    self._item_type = item.get("type")

                elif event.type == ResponseEventType.OUTPUT_TEXT_DELTA:
                    delta = event.delta or ""
                    self._text += delta
                    yield LegacyStreamChunk(
                        id=event.item_id,
                        choices=[
                            LegacyStreamChoice(
                                text=delta, index=0, finish_reason=None, role=self._role
                            )
                        ],
                    )

                elif event.type == ResponseEventType.OUTPUT_TEXT_DONE:
                    continue

                elif event.type in (ResponseEventType.COMPLETED, ResponseEventType.INCOMPLETE):
                    self._final_response = event.response or {}

                elif event.type in (ResponseEventType.FAILED, ResponseEventType.ERROR):
                    error = (event.response or {}).get("error") or event.payload()
                    logger.error(f"[{self._request_id}] backend stream failed: {error}")
                    yield LegacyStreamError(error=error)
                    return

                else:
                    logger.debug(f"[{self._request_id}] ignoring stream event {event.type}")
        finally:
            aclose = getattr(events, "aclose", None)
            if aclose is not None:
                await aclose()

        if self._final_response is not None:
            legacy = responses_to_completion(self._final_response)
            choice = legacy.choices[0]
            logger.info(
                f"[{self._request_id}] stream completed: {len(self._text)} chars, "
                f"finish_reason={choice.finish_reason}"
            )
            yield LegacyStreamChunk(
                id=legacy.id,
                created=legacy.created,
                model=legacy.model,
                choices=[
                    LegacyStreamChoice(
                        text="",
                        index=0,
                        finish_reason=choice.finish_reason,
                        role=self._role or (choice.message.role if choice.message else None),
                    )
                ],
                usage=legacy.usage,
            )
        elif self._text:
            logger.info(
                f"[{self._request_id}] stream ended without completion, "
                f"returning {len(self._text)} accumulated chars"
            )
            yield LegacyStreamChunk(
                id=PARTIAL_RESPONSE_ID,
                created=current_timestamp(),
                model=self._model,
                choices=[
                    LegacyStreamChoice(
                        text=self._text, index=0, finish_reason="stop", role=self._role
                    )
                ],
                usage=LegacyUsage(),
            )
        else:
            logger.info(f"[{self._request_id}] stream ended with no output")
