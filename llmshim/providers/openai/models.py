"""OpenAI chat completions wire models."""

from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from llmshim.common.models import UINT32_MAX


class OpenAIMessage(BaseModel):
    model_config = ConfigDict(extra='allow')

    role: str
    content: Optional[str] = None


class OpenAICompletionRequest(BaseModel):
    """Body of ``POST /chat/completions``."""

    model: str
    messages: List[OpenAIMessage]
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    top_p: Optional[float] = None
    n: Optional[int] = None
    stream: bool = False
    stop: Optional[List[str]] = None


class OpenAIChoice(BaseModel):
    model_config = ConfigDict(extra='allow')

    index: int = Field(ge=0, le=UINT32_MAX)
    message: OpenAIMessage
    finish_reason: Optional[str] = None
    logprobs: Optional[Any] = None


class OpenAIUsage(BaseModel):
    model_config = ConfigDict(extra='allow')

    prompt_tokens: int = Field(ge=0, le=UINT32_MAX)
    completion_tokens: int = Field(ge=0, le=UINT32_MAX)
    total_tokens: int = Field(ge=0, le=UINT32_MAX)


class OpenAICompletionResponse(BaseModel):
    model_config = ConfigDict(extra='allow')

    id: str
    model: str
    choices: List[OpenAIChoice]
    usage: OpenAIUsage
    created: Optional[int] = None


class OpenAIErrorDetail(BaseModel):
    model_config = ConfigDict(extra='allow')

    message: str = ''
    type: Optional[str] = None
    code: Optional[Union[str, int]] = None
    param: Optional[str] = None


class OpenAIErrorBody(BaseModel):
    error: OpenAIErrorDetail
