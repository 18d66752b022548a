"""Unified error taxonomy for the provider pipeline.

Every failure that crosses a provider boundary is one of the exceptions below.
Vendor specific error payloads are folded into these kinds by each provider's
error parser; the vendor's own ``type``/``code`` strings ride along as
``vendor_type``/``vendor_code`` so callers never need vendor-specific handling.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Closed set of failure kinds."""

    CONFIG = 'config'
    NETWORK = 'network'
    TIMEOUT = 'timeout'
    RATE_LIMIT = 'rate_limit'
    AUTH = 'auth'
    INVALID_RESPONSE = 'invalid_response'
    NOT_FOUND = 'not_found'
    SERIALIZATION = 'serialization'


class LLMShimException(Exception):
    """Base exception for all pipeline failures."""

    kind: ErrorKind = ErrorKind.CONFIG

    def __init__(self, message: str, correlation_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.correlation_id = correlation_id
        self.attempts = 1

    @property
    def retryable(self) -> bool:
        return False


class ConfigException(LLMShimException):
    """Local misconfiguration (malformed secret, base URL, unknown provider)."""

    kind = ErrorKind.CONFIG


class NetworkException(LLMShimException):
    """Transport-level failure other than a timeout."""

    kind = ErrorKind.NETWORK

    @property
    def retryable(self) -> bool:
        return True


class SerializationException(LLMShimException):
    """A value could not be encoded or decoded."""

    kind = ErrorKind.SERIALIZATION


class ProviderException(LLMShimException):
    """Failure reported by, or attributed to, a vendor API."""

    def __init__(
        self,
        message: str,
        *,
        provider: Optional[str] = None,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
        vendor_type: Optional[str] = None,
        vendor_code: Optional[str] = None,
        correlation_id: Optional[str] = None,
    ):
        super().__init__(message, correlation_id)
        self.provider = provider
        self.status_code = status_code
        self.response_body = response_body
        self.vendor_type = vendor_type
        self.vendor_code = vendor_code


class ProviderTimeoutException(ProviderException):
    """The provider call did not complete within the configured timeout."""

    kind = ErrorKind.TIMEOUT

    def __init__(self, timeout: Optional[float], message: Optional[str] = None, **kwargs):
        super().__init__(message or f'Request timed out after {timeout}s', **kwargs)
        self.timeout = timeout

    @property
    def retryable(self) -> bool:
        return True


class RateLimitException(ProviderException):
    """Rate limit exceeded on the vendor API."""

    kind = ErrorKind.RATE_LIMIT

    def __init__(self, message: str, *, retry_after: Optional[float] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.retry_after = retry_after

    @property
    def retryable(self) -> bool:
        return True


class AuthenticationException(ProviderException):
    """Credentials were rejected (401/403)."""

    kind = ErrorKind.AUTH


class NotFoundException(ProviderException):
    """Endpoint or model not found."""

    kind = ErrorKind.NOT_FOUND


class InvalidResponseException(ProviderException):
    """Malformed payload, unexpected status, or vendor server error."""

    kind = ErrorKind.INVALID_RESPONSE

    @property
    def retryable(self) -> bool:
        return self.status_code is not None and self.status_code >= 500


__all__ = [
    'AuthenticationException',
    'ConfigException',
    'ErrorKind',
    'InvalidResponseException',
    'LLMShimException',
    'NetworkException',
    'NotFoundException',
    'ProviderException',
    'ProviderTimeoutException',
    'RateLimitException',
    'SerializationException',
]
