"""Provider-agnostic LLM completion pipeline."""

from llmshim.cache.interfaces import Cache, NoopCache
from llmshim.cache.keys import CacheKey
from llmshim.common.exceptions import (
    AuthenticationException,
    ConfigException,
    ErrorKind,
    InvalidResponseException,
    LLMShimException,
    NetworkException,
    NotFoundException,
    ProviderException,
    ProviderTimeoutException,
    RateLimitException,
    SerializationException,
)
from llmshim.common.models import CompletionChoice, CompletionRequest, CompletionResponse, FinishReason, Message, Role, Usage
from llmshim.common.secrets import ApiKey
from llmshim.config.models import CacheConfig, ConfigModel, ProviderConfig, RetryConfig
from llmshim.providers.openai.provider import OpenAIProvider
from llmshim.providers.provider import Provider
from llmshim.providers.registry import create_provider
from llmshim.routing.exchange import ProviderRequest, ProviderResponse
from llmshim.services.completion_service import CompletionService
from llmshim.services.retry import RetryCoordinator, RetryState

__version__ = '0.1.0'

__all__ = [
    'ApiKey',
    'AuthenticationException',
    'Cache',
    'CacheConfig',
    'CacheKey',
    'CompletionChoice',
    'CompletionRequest',
    'CompletionResponse',
    'CompletionService',
    'ConfigException',
    'ConfigModel',
    'ErrorKind',
    'FinishReason',
    'InvalidResponseException',
    'LLMShimException',
    'Message',
    'NetworkException',
    'NoopCache',
    'NotFoundException',
    'OpenAIProvider',
    'Provider',
    'ProviderConfig',
    'ProviderException',
    'ProviderRequest',
    'ProviderResponse',
    'ProviderTimeoutException',
    'RateLimitException',
    'RetryConfig',
    'RetryCoordinator',
    'RetryState',
    'Role',
    'SerializationException',
    'Usage',
    'create_provider',
]
