"""OpenAI error-body parser folding vendor errors into the unified taxonomy."""

from typing import Mapping, Optional

import orjson
from pydantic import ValidationError

from llmshim.common.exceptions import (
    AuthenticationException,
    InvalidResponseException,
    NotFoundException,
    ProviderException,
    RateLimitException,
)
from llmshim.common.vars import get_correlation_id
from llmshim.providers.openai.models import OpenAIErrorBody, OpenAIErrorDetail

PROVIDER_NAME = 'openai'


def parse_error_detail(body_text: str) -> Optional[OpenAIErrorDetail]:
    """Return the ``error`` object of an OpenAI error body, or None if it has another shape."""
    if not body_text:
        return None
    try:
        return OpenAIErrorBody.model_validate(orjson.loads(body_text)).error
    except (orjson.JSONDecodeError, ValidationError):
        return None


def parse_retry_after(headers: Optional[Mapping[str, str]]) -> Optional[float]:
    """Read ``Retry-After`` as seconds; HTTP-date values are ignored."""
    if not headers:
        return None
    for key, value in headers.items():
        if key.lower() == 'retry-after':
            try:
                seconds = float(value)
            except (TypeError, ValueError):
                return None
            return seconds if seconds >= 0 else None
    return None


def parse_error_response(status_code: int, body_text: str, headers: Optional[Mapping[str, str]] = None, provider: str = PROVIDER_NAME) -> ProviderException:
    """Map a non-2xx OpenAI response to a unified provider exception."""

    detail = parse_error_detail(body_text)
    if detail and detail.message:
        message = detail.message
    else:
        message = f'HTTP {status_code}: {body_text or "<empty body>"}'

    kwargs = {
        'provider': provider,
        'status_code': status_code,
        'response_body': body_text,
        'vendor_type': detail.type if detail else None,
        'vendor_code': str(detail.code) if detail and detail.code is not None else None,
        'correlation_id': get_correlation_id(),
    }

    match status_code:
        case 401 | 403:
            return AuthenticationException(message, **kwargs)
        case 404:
            return NotFoundException(message, **kwargs)
        case 429:
            return RateLimitException(message, retry_after=parse_retry_after(headers), **kwargs)
        case _:
            # >=500 is retryable, any other status is a caller-side problem
            return InvalidResponseException(message, **kwargs)
