"""Exception mapper converting httpx transport failures into domain exceptions."""

from typing import Optional

import httpx

from llmshim.common.exceptions import LLMShimException, NetworkException, ProviderTimeoutException
from llmshim.common.vars import get_correlation_id

from .interfaces import ExceptionMapper


class HttpExceptionMapper(ExceptionMapper):
    """Maps httpx exceptions to domain exceptions.

    Status-code errors never reach this mapper: providers read non-2xx bodies
    themselves and run them through their own error-body parser.
    """

    def __init__(self, provider: Optional[str] = None):
        self.provider = provider

    def map_httpx_exception(self, exc: httpx.HTTPError, timeout: Optional[float] = None, correlation_id: Optional[str] = None) -> LLMShimException:
        """Convert httpx exceptions to domain exceptions."""
        if not correlation_id:
            correlation_id = get_correlation_id()

        if isinstance(exc, httpx.TimeoutException):
            return ProviderTimeoutException(timeout, provider=self.provider, correlation_id=correlation_id)
        elif isinstance(exc, httpx.RequestError):
            return NetworkException(f'Network error: {exc}', correlation_id=correlation_id)
        else:
            return NetworkException(f'Unknown HTTP error: {exc}', correlation_id=correlation_id)
