"""Provider-neutral completion request/response models."""

from enum import Enum
from typing import Any, List, Optional

import orjson
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from llmshim.common.exceptions import SerializationException

UINT32_MAX = 2**32 - 1


class Role(str, Enum):
    """Author of a message."""

    SYSTEM = 'system'
    USER = 'user'
    ASSISTANT = 'assistant'
    TOOL = 'tool'


class Message(BaseModel):
    """Single chat message."""

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str

    @classmethod
    def system(cls, content: str) -> 'Message':
        return cls(role=Role.SYSTEM, content=content)

    @classmethod
    def user(cls, content: str) -> 'Message':
        return cls(role=Role.USER, content=content)

    @classmethod
    def assistant(cls, content: str) -> 'Message':
        return cls(role=Role.ASSISTANT, content=content)

    @classmethod
    def tool(cls, content: str) -> 'Message':
        return cls(role=Role.TOOL, content=content)


class CompletionRequest(BaseModel):
    """Unified completion request shared by every provider."""

    model_config = ConfigDict(frozen=True)

    model: str = Field(min_length=1)
    messages: List[Message] = Field(min_length=1)
    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)
    max_tokens: Optional[int] = Field(default=None, ge=1)
    top_p: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    n: Optional[int] = Field(default=None, ge=1)
    stop: Optional[List[str]] = None

    @field_validator('model')
    @classmethod
    def validate_model(cls, v: str) -> str:
        if not v.strip():
            raise ValueError('Model cannot be blank')
        return v


class FinishReason(str, Enum):
    """Normalized reason a generation stopped."""

    STOP = 'stop'
    LENGTH = 'length'
    CONTENT_FILTER = 'content_filter'
    TOOL_CALLS = 'tool_calls'

    @classmethod
    def from_vendor(cls, value: Optional[str]) -> 'FinishReason':
        """Map a vendor finish string, falling back to STOP for unknown or missing values."""
        if value is None:
            return cls.STOP
        try:
            return cls(value)
        except ValueError:
            return cls.STOP


class Usage(BaseModel):
    """Token accounting; ``total_tokens`` is always the sum of the other two."""

    model_config = ConfigDict(frozen=True)

    prompt_tokens: int = Field(ge=0, le=UINT32_MAX)
    completion_tokens: int = Field(ge=0, le=UINT32_MAX)
    total_tokens: int = Field(default=0, ge=0, le=UINT32_MAX)

    @model_validator(mode='after')
    def compute_total(self) -> 'Usage':
        expected = self.prompt_tokens + self.completion_tokens
        if expected > UINT32_MAX:
            raise ValueError(f'total_tokens ({expected}) exceeds {UINT32_MAX}')
        if 'total_tokens' not in self.model_fields_set:
            # frozen model: bypass the pydantic setattr guard during construction
            object.__setattr__(self, 'total_tokens', expected)
        elif self.total_tokens != expected:
            raise ValueError(f'total_tokens ({self.total_tokens}) must equal prompt_tokens + completion_tokens ({expected})')
        return self


class CompletionChoice(BaseModel):
    """A single generated alternative."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0, le=UINT32_MAX)
    message: Message
    finish_reason: FinishReason
    logprobs: Optional[Any] = None


class CompletionResponse(BaseModel):
    """Unified completion response returned regardless of backend."""

    model_config = ConfigDict(frozen=True)

    id: str
    model: str
    choices: List[CompletionChoice]
    usage: Usage
    created: Optional[int] = None
    provider: Optional[str] = None

    def first_choice(self) -> Optional[CompletionChoice]:
        return self.choices[0] if self.choices else None

    def content(self) -> Optional[str]:
        """Text of the first choice, if any."""
        choice = self.first_choice()
        return choice.message.content if choice else None

    def to_bytes(self) -> bytes:
        return orjson.dumps(self.model_dump(mode='json', exclude_none=True))

    @classmethod
    def from_bytes(cls, data: bytes) -> 'CompletionResponse':
        try:
            return cls.model_validate(orjson.loads(data))
        except (orjson.JSONDecodeError, ValidationError) as e:
            raise SerializationException(f'Failed to decode completion response: {e}') from e


__all__ = ['CompletionChoice', 'CompletionRequest', 'CompletionResponse', 'FinishReason', 'Message', 'Role', 'UINT32_MAX', 'Usage']
