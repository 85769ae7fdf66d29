"""Translation between legacy completion records and Responses API records.

Both directions are pure functions: no I/O, no hidden state, and no
validation (the backend validates what it receives).
"""

from typing import Any, Dict, List, Optional

from .models.legacy import (
    LegacyChoice,
    LegacyCompletionRequest,
    LegacyCompletionResponse,
    LegacyMessage,
    LegacyUsage,
)
from .utils import current_timestamp

COMPAT_SOURCE = "legacy_completion"

# Legacy keys consumed here and never forwarded.
_CONSUMED_FIELDS = {"user", "n", "logprobs", "stream", "prompt"}


def completion_request_to_responses(
    request: LegacyCompletionRequest, tag_metadata: bool = False
) -> Dict[str, Any]:
    """Convert a legacy completion request to a Responses API request body.

    Renames ``messages`` to ``input`` and ``max_tokens`` to
    ``max_output_tokens``. Sampling parameters keep their names. Any key
    whose value is absent is left out of the body, never sent as null.
    """
    if request.messages:
        input_value: Any = [
            message.model_dump(exclude_none=True) for message in request.messages
        ]
    else:
        input_value = request.prompt

    body: Dict[str, Any] = {
        "model": request.model,
        "input": input_value,
        "max_output_tokens": request.max_tokens,
        "temperature": request.temperature,
        "top_p": request.top_p,
        "stop": request.stop,
        "presence_penalty": request.presence_penalty,
        "frequency_penalty": request.frequency_penalty,
    }

    for key, value in request.passthrough.items():
        if key in _CONSUMED_FIELDS or body.get(key) is not None:
            continue
        body[key] = value

    if tag_metadata:
        caller_metadata = body.get("metadata")
        if caller_metadata is None or isinstance(caller_metadata, dict):
            body["metadata"] = {
                **(caller_metadata or {}),
                "compat_source": COMPAT_SOURCE,
                "user": request.user,
            }

    body = {key: value for key, value in body.items() if value is not None}
    metadata = body.get("metadata")
    if isinstance(metadata, dict):
        metadata = {key: value for key, value in metadata.items() if value is not None}
        if metadata:
            body["metadata"] = metadata
        else:
            del body["metadata"]
    return body


def _as_dict(obj: Any) -> Dict[str, Any]:
    if obj is None:
        return {}
    if isinstance(obj, dict):
        return obj
    if hasattr(obj, "model_dump"):
        return obj.model_dump()
    return dict(obj)


def extract_output_text(response: Dict[str, Any]) -> str:
    """Concatenate every ``output_text`` segment of every output item, in order."""
    parts: List[str] = []
    for item in response.get("output") or []:
        item = _as_dict(item)
        for content in item.get("content") or []:
            content = _as_dict(content)
            if content.get("type") == "output_text":
                parts.append(content.get("text") or "")
    return "".join(parts)


def extract_role(response: Dict[str, Any]) -> Optional[str]:
    """Role of the first output item, if it has one."""
    output = response.get("output") or []
    if not output:
        return None
    return _as_dict(output[0]).get("role")


def convert_finish_reason(response: Dict[str, Any]) -> str:
    """Map backend status to a legacy finish reason. Never returns None."""
    if response.get("status") == "completed":
        return "stop"
    incomplete = _as_dict(response.get("incomplete_details"))
    if incomplete.get("reason"):
        return incomplete["reason"]
    status_details = _as_dict(response.get("status_details"))
    if status_details.get("type"):
        return status_details["type"]
    return "stop"


def convert_usage(usage_data: Optional[Dict[str, Any]]) -> Optional[LegacyUsage]:
    """Map backend usage counters 1:1. Absent counters stay absent."""
    if usage_data is None:
        return None
    usage_data = _as_dict(usage_data)

    prompt_details = None
    input_details = _as_dict(usage_data.get("input_tokens_details"))
    if input_details.get("cached_tokens") is not None:
        prompt_details = {"cached_tokens": input_details["cached_tokens"]}

    completion_details = None
    output_details = _as_dict(usage_data.get("output_tokens_details"))
    if output_details.get("reasoning_tokens") is not None:
        completion_details = {"reasoning_tokens": output_details["reasoning_tokens"]}

    return LegacyUsage(
        prompt_tokens=usage_data.get("input_tokens"),
        completion_tokens=usage_data.get("output_tokens"),
        total_tokens=usage_data.get("total_tokens"),
        prompt_tokens_details=prompt_details,
        completion_tokens_details=completion_details,
    )


def responses_to_completion(response: Any) -> LegacyCompletionResponse:
    """Flatten one Responses API response into a single-choice legacy response."""
    response = _as_dict(response)
    text = extract_output_text(response)
    role = extract_role(response)

    return LegacyCompletionResponse(
        id=response.get("id") or "",
        created=int(response.get("created_at") or response.get("created") or current_timestamp()),
        model=response.get("model"),
        choices=[
            LegacyChoice(
                text=text,
                index=0,
                finish_reason=convert_finish_reason(response),
                message=LegacyMessage(role=role, content=text) if role else None,
            )
        ],
        usage=convert_usage(response.get("usage")),
    )
