"""Responses API streaming event models.

Backend responses themselves stay plain dicts: the adapter only reads a
handful of their fields and forwards the rest untouched.
"""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel


class ResponseEventType(str, Enum):
    """Event types the stream translator reacts to."""
    OUTPUT_ITEM_ADDED = "response.output_item.added"
    OUTPUT_TEXT_DELTA = "response.output_text.delta"
    OUTPUT_TEXT_DONE = "response.output_text.done"
    COMPLETED = "response.completed"
    INCOMPLETE = "response.incomplete"
    FAILED = "response.failed"
    ERROR = "error"


class ResponseStreamEvent(BaseModel):
    """One Responses API server-sent event.

    Fields not listed here (``code``, ``message``, ``param`` ...) are kept
    as extras so failure payloads reach the consumer intact.
    """
    type: str
    sequence_number: Optional[int] = None
    item_id: Optional[str] = None
    output_index: Optional[int] = None
    content_index: Optional[int] = None
    delta: Optional[str] = None
    text: Optional[str] = None
    item: Optional[Dict[str, Any]] = None
    response: Optional[Dict[str, Any]] = None

    model_config = {"extra": "allow"}

    def payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)
