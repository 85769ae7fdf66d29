"""Legacy completion API data models."""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field


class LegacyMessage(BaseModel):
    """One role-tagged conversation turn.

    Unknown keys (``tool_call_id``, ``tool_calls`` and the like) are kept and
    forwarded with the message.
    """
    model_config = {"extra": "allow"}

    role: str = Field(..., description="Message role: system, user, assistant")
    content: Optional[Union[str, List[Dict[str, Any]]]] = Field(
        default=None, description="Message content"
    )
    name: Optional[str] = Field(default=None, description="Message name")


class LegacyCompletionRequest(BaseModel):
    """Legacy completion request.

    Only the field names are modelled; values are not validated because the
    backend is the sole validator. Unknown keys are kept as a pass-through bag
    (see ``passthrough``) and forwarded verbatim.
    """
    model: str = Field(..., description="Model name")
    messages: List[LegacyMessage] = Field(default_factory=list, description="Conversation messages")
    prompt: Optional[str] = Field(default=None, description="Plain prompt, used when messages is empty")
    max_tokens: Optional[int] = Field(default=None)
    temperature: Optional[float] = Field(default=None)
    top_p: Optional[float] = Field(default=None)
    stop: Optional[Union[str, List[str]]] = Field(default=None)
    presence_penalty: Optional[float] = Field(default=None)
    frequency_penalty: Optional[float] = Field(default=None)
    user: Optional[str] = Field(default=None)
    n: Optional[int] = Field(default=None, description="Number of completions, 1 when absent")
    logprobs: Optional[int] = Field(default=None, description="Accepted but unsupported")
    stream: Optional[bool] = Field(default=None)

    model_config = {"extra": "allow", "frozen": True}

    @property
    def requested_n(self) -> int:
        return 1 if self.n is None else self.n

    @property
    def passthrough(self) -> Dict[str, Any]:
        """Unknown request keys, in the order they were given."""
        return dict(self.model_extra or {})


class LegacyUsage(BaseModel):
    """Legacy usage statistics. Absent counters stay absent."""
    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None
    total_tokens: Optional[int] = None
    prompt_tokens_details: Optional[Dict[str, int]] = None
    completion_tokens_details: Optional[Dict[str, int]] = None


class LegacyChoice(BaseModel):
    """One completion result.

    ``logprobs`` is always null: the Responses backend exposes no per-token
    probabilities, so this is a permanent incompatibility.
    """
    text: str
    index: int
    logprobs: None = None
    finish_reason: Optional[str] = None
    message: Optional[LegacyMessage] = None


class LegacyCompletionResponse(BaseModel):
    """Legacy completion response format."""
    id: str
    object: str = "text_completion"
    created: int
    model: Optional[str] = None
    choices: List[LegacyChoice]
    usage: Optional[LegacyUsage] = None
    raw_responses: Optional[Union[Dict[str, Any], List[Dict[str, Any]]]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Dump without absent fields, keeping the always-null ``logprobs``."""
        data = self.model_dump(exclude_none=True)
        for choice, source in zip(data["choices"], self.choices):
            choice["logprobs"] = None
            choice["finish_reason"] = source.finish_reason
        return data


class LegacyStreamChoice(BaseModel):
    """Streaming choice: a delta, or the full text for a synthetic final chunk."""
    text: str
    index: int = 0
    finish_reason: Optional[str] = None
    role: Optional[str] = None


class LegacyStreamChunk(BaseModel):
    """Legacy streaming chunk format."""
    id: Optional[str] = None
    object: str = "text_completion.chunk"
    created: Optional[int] = None
    model: Optional[str] = None
    choices: List[LegacyStreamChoice]
    usage: Optional[LegacyUsage] = None

    @property
    def is_final(self) -> bool:
        return any(choice.finish_reason is not None for choice in self.choices)

    def to_dict(self) -> Dict[str, Any]:
        """Dump without absent fields, keeping ``finish_reason`` on every choice."""
        data = self.model_dump(exclude_none=True)
        for choice, source in zip(data["choices"], self.choices):
            choice["finish_reason"] = source.finish_reason
        return data


class LegacyStreamError(BaseModel):
    """Terminal value surfaced when the backend reports a failed stream."""
    object: str = "error"
    error: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()
