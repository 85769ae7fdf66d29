"""Legacy completion API on top of the Responses API."""

import logging
from typing import Optional

from .backends.base import BaseBackend
from .backends.http import HTTPResponsesBackend
from .config import AdapterOptions, Settings, get_settings
from .models.legacy import LegacyCompletionRequest, LegacyCompletionResponse
from .strategies import (
    MultiStrategy,
    complete_first_only,
    complete_parallel,
    complete_prompt_split,
)
from .streaming import CompletionStream
from .translate import completion_request_to_responses
from .utils import generate_request_id

logger = logging.getLogger(__name__)


class CompletionCompat:
    """Serve legacy completion requests with a Responses API backend.

    Known incompatibilities: ``logprobs`` is always null, and streaming
    ``n > 1`` only streams one completion.
    """

    def __init__(self, backend: BaseBackend, options: Optional[AdapterOptions] = None):
        self.backend = backend
        self.options = options or AdapterOptions()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.backend.aclose()

    async def create_completion(self, request: LegacyCompletionRequest) -> LegacyCompletionResponse:
        """Non-streaming completion, emulating ``n`` per the configured strategy."""
        request_id = generate_request_id()
        n = request.requested_n
        strategy = self.options.multi_strategy
        if n <= 1:
            strategy = MultiStrategy.FIRST_ONLY

        logger.info(
            f"Processing request {request_id}: model={request.model}, "
            f"n={n}, strategy={strategy.value}"
        )

        try:
            if strategy == MultiStrategy.PARALLEL:
                response = await complete_parallel(
                    self.backend,
                    request,
                    n,
                    tag_metadata=self.options.tag_metadata,
                    attach_raw_responses=self.options.attach_raw_responses,
                    request_id=request_id,
                )
            elif strategy == MultiStrategy.PROMPT_SPLIT:
                response = await complete_prompt_split(
                    self.backend,
                    request,
                    n,
                    delimiter=self.options.prompt_split_delimiter,
                    instruction=self.options.prompt_split_instruction,
                    tag_metadata=self.options.tag_metadata,
                    attach_raw_responses=self.options.attach_raw_responses,
                    request_id=request_id,
                )
            else:
                response = await complete_first_only(
                    self.backend,
                    request,
                    tag_metadata=self.options.tag_metadata,
                    attach_raw_responses=self.options.attach_raw_responses,
                    request_id=request_id,
                )
        except Exception as e:
            logger.error(f"Request {request_id} failed: {e}")
            raise

        logger.info(f"Request {request_id} completed with {len(response.choices)} choice(s)")
        return response

    async def create_completion_stream(self, request: LegacyCompletionRequest) -> CompletionStream:
        """Open a streaming completion.

        Iterate the returned ``CompletionStream`` for chunks and call its
        ``abort()`` to cancel. Only one completion is streamed, whatever ``n``.
        """
        request_id = generate_request_id()
        if request.requested_n > 1:
            logger.warning(
                f"Request {request_id}: streaming does not support n>1, only one "
                "completion is streamed; open several streams instead"
            )

        body = completion_request_to_responses(request, tag_metadata=self.options.tag_metadata)
        logger.info(f"Processing stream {request_id}: model={request.model}")
        upstream = await self.backend.create_stream(body, request_id=request_id)
        return CompletionStream(upstream, model=request.model, request_id=request_id)


def create_adapter(settings: Optional[Settings] = None) -> CompletionCompat:
    """Build an adapter with an HTTP backend from settings."""
    settings = settings or get_settings()
    backend = HTTPResponsesBackend(
        api_key=settings.openai_api_key,
        base_url=settings.openai_base_url,
        timeout=settings.request_timeout,
    )
    return CompletionCompat(backend, settings.adapter_options())
