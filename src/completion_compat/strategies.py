"""Strategies for emulating ``n`` independent completions.

The Responses backend produces one completion per call, so ``n > 1`` is
emulated in one of three ways:

* ``first_only``: one call, one choice. Default, and the only behaviour
  for ``n <= 1``.
* ``parallel``: ``n`` concurrent calls merged into one response. All or
  nothing: if any call fails the whole operation fails.
* ``prompt_split``: one call asking the model for ``n`` delimiter-separated
  results, split client-side. Best effort only; nothing guarantees the
  model returns ``n`` distinct results, so output is truncated or padded
  with empty strings.
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from .backends.base import BaseBackend
from .models.legacy import (
    LegacyChoice,
    LegacyCompletionRequest,
    LegacyCompletionResponse,
    LegacyMessage,
    LegacyUsage,
)
from .translate import completion_request_to_responses, responses_to_completion

logger = logging.getLogger(__name__)

DEFAULT_PROMPT_SPLIT_DELIMITER = "\n"
DEFAULT_PROMPT_SPLIT_INSTRUCTION = (
    "Generate {n} results, each on its own line, without any extra explanation."
)
LINE_COUNT_DIRECTIVE = "(Output one result per line, {n} lines in total)"


class MultiStrategy(str, Enum):
    """How ``n > 1`` requests are served."""
    PARALLEL = "parallel"
    PROMPT_SPLIT = "prompt_split"
    FIRST_ONLY = "first_only"


def _sum(values: Iterable[Optional[int]]) -> int:
    return sum(value for value in values if isinstance(value, int))


def _sum_details(details: List[Optional[Dict[str, int]]]) -> Optional[Dict[str, int]]:
    present = [d for d in details if d]
    if not present:
        return None
    totals: Dict[str, int] = {}
    for detail in present:
        for key, value in detail.items():
            totals[key] = totals.get(key, 0) + (value if isinstance(value, int) else 0)
    return totals


def sum_usage(usages: List[Optional[LegacyUsage]]) -> LegacyUsage:
    """Add usage counters together, counting absent fields as zero."""
    usages = [usage or LegacyUsage() for usage in usages]
    return LegacyUsage(
        prompt_tokens=_sum(u.prompt_tokens for u in usages),
        completion_tokens=_sum(u.completion_tokens for u in usages),
        total_tokens=_sum(u.total_tokens for u in usages),
        prompt_tokens_details=_sum_details([u.prompt_tokens_details for u in usages]),
        completion_tokens_details=_sum_details([u.completion_tokens_details for u in usages]),
    )


async def complete_first_only(
    backend: BaseBackend,
    request: LegacyCompletionRequest,
    tag_metadata: bool = False,
    attach_raw_responses: bool = False,
    request_id: str = "",
) -> LegacyCompletionResponse:
    """One backend call, flattened into a single-choice response."""
    body = completion_request_to_responses(request, tag_metadata=tag_metadata)
    raw = await backend.create(body, request_id=request_id)
    legacy = responses_to_completion(raw)
    if attach_raw_responses:
        legacy.raw_responses = raw
    return legacy


async def complete_parallel(
    backend: BaseBackend,
    request: LegacyCompletionRequest,
    n: int,
    tag_metadata: bool = False,
    attach_raw_responses: bool = False,
    request_id: str = "",
) -> LegacyCompletionResponse:
    """Issue ``n`` concurrent calls and merge them.

    Choice indices follow dispatch order, not completion order. ``id``,
    ``created`` and ``model`` come from the first call.
    """
    single = request.model_copy(update={"n": 1})
    body = completion_request_to_responses(single, tag_metadata=tag_metadata)

    tasks = [
        asyncio.ensure_future(backend.create(dict(body), request_id=request_id))
        for _ in range(n)
    ]
    try:
        results = await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        # Reap the siblings so their exceptions are retrieved.
        await asyncio.gather(*tasks, return_exceptions=True)
        raise

    legacy_results = [responses_to_completion(result) for result in results]
    first = legacy_results[0]
    merged = LegacyCompletionResponse(
        id=first.id,
        created=first.created,
        model=first.model,
        choices=[
            legacy.choices[0].model_copy(update={"index": idx})
            for idx, legacy in enumerate(legacy_results)
        ],
        usage=sum_usage([legacy.usage for legacy in legacy_results]),
    )
    if attach_raw_responses:
        merged.raw_responses = list(results)
    return merged


def _message_text(message: LegacyMessage) -> str:
    if isinstance(message.content, str):
        return message.content
    if isinstance(message.content, list):
        return "".join(
            part.get("text", "")
            for part in message.content
            if isinstance(part, dict) and isinstance(part.get("text"), str)
        )
    return ""


def build_prompt_split_request(
    request: LegacyCompletionRequest,
    n: int,
    delimiter: str = DEFAULT_PROMPT_SPLIT_DELIMITER,
    instruction: str = DEFAULT_PROMPT_SPLIT_INSTRUCTION,
) -> LegacyCompletionRequest:
    """Fold the whole conversation into one user prompt asking for ``n`` results."""
    if request.messages:
        joined = delimiter.join(_message_text(message) for message in request.messages)
    else:
        joined = request.prompt or ""
    combined = "{}\n\n{}\n{}".format(
        joined,
        instruction.replace("{n}", str(n)),
        LINE_COUNT_DIRECTIVE.format(n=n),
    )
    return request.model_copy(
        update={
            "messages": [LegacyMessage(role="user", content=combined)],
            "prompt": None,
            "n": 1,
        }
    )


def split_prompt_output(text: str, n: int, delimiter: str = DEFAULT_PROMPT_SPLIT_DELIMITER) -> List[str]:
    """Split model output into exactly ``n`` trimmed, non-empty segments.

    Extra segments are dropped; missing ones are padded with ``""``.
    """
    segments = [segment.strip() for segment in text.strip().split(delimiter)]
    segments = [segment for segment in segments if segment]
    if len(segments) < n:
        logger.warning(
            f"prompt_split produced {len(segments)} of {n} results, padding with empty choices"
        )
    segments = segments[:n]
    segments.extend([""] * (n - len(segments)))
    return segments


async def complete_prompt_split(
    backend: BaseBackend,
    request: LegacyCompletionRequest,
    n: int,
    delimiter: str = DEFAULT_PROMPT_SPLIT_DELIMITER,
    instruction: str = DEFAULT_PROMPT_SPLIT_INSTRUCTION,
    tag_metadata: bool = False,
    attach_raw_responses: bool = False,
    request_id: str = "",
) -> LegacyCompletionResponse:
    """One call, split client-side into ``n`` choices."""
    single = build_prompt_split_request(request, n, delimiter, instruction)
    body = completion_request_to_responses(single, tag_metadata=tag_metadata)
    raw: Any = await backend.create(body, request_id=request_id)
    legacy = responses_to_completion(raw)

    lines = split_prompt_output(legacy.choices[0].text, n, delimiter)
    merged = LegacyCompletionResponse(
        id=legacy.id,
        created=legacy.created,
        model=legacy.model,
        choices=[
            LegacyChoice(text=text, index=idx, finish_reason="stop")
            for idx, text in enumerate(lines)
        ],
        usage=legacy.usage,
    )
    if attach_raw_responses:
        merged.raw_responses = raw
    return merged
