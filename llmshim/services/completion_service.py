"""Completion pipeline: cache lookup, transform, retried execute, transform, cache store."""

import asyncio
from typing import Optional

from llmshim.cache.interfaces import Cache, NoopCache
from llmshim.cache.keys import CacheKey
from llmshim.common.exceptions import LLMShimException, SerializationException
from llmshim.common.models import CompletionRequest, CompletionResponse
from llmshim.common.vars import generate_correlation_id, get_correlation_id, reset_correlation_id, set_correlation_id
from llmshim.config.log import get_logger
from llmshim.config.models import CacheConfig
from llmshim.providers.provider import Provider
from llmshim.services.retry import RetryCoordinator

logger = get_logger(__name__)


class CompletionService:
    def __init__(
        self,
        provider: Provider,
        retry: Optional[RetryCoordinator] = None,
        cache: Optional[Cache] = None,
        cache_config: Optional[CacheConfig] = None,
    ):
        self._provider = provider
        self._retry = retry or RetryCoordinator()
        self._cache_config = cache_config or CacheConfig()
        if cache is None or not self._cache_config.enabled:
            cache = NoopCache()
        self._cache = cache

    @property
    def provider(self) -> Provider:
        return self._provider

    def cache_key(self, request: CompletionRequest) -> str:
        key = CacheKey.from_request(self._provider.name(), request)
        if self._cache_config.namespace:
            key = CacheKey.with_namespace(self._cache_config.namespace, key)
        return key

    async def complete(self, request: CompletionRequest, *, cancel_event: Optional[asyncio.Event] = None) -> CompletionResponse:
        """Return a completion for ``request``, from cache when possible.

        Raises:
            LLMShimException: the classified pipeline failure. Cache failures never surface here.
        """
        token = set_correlation_id(get_correlation_id() or generate_correlation_id())
        try:
            return await self._complete(request, cancel_event)
        finally:
            reset_correlation_id(token)

    async def _complete(self, request: CompletionRequest, cancel_event: Optional[asyncio.Event]) -> CompletionResponse:
        provider_name = self._provider.name()
        key = self.cache_key(request) if self._cache.is_enabled() else None

        if key is not None:
            cached = await self._cache_get(key)
            if cached is not None:
                logger.debug('Cache hit', provider=provider_name, model=request.model, cache=self._cache.name())
                return cached

        try:
            provider_request = self._provider.transform_request(request)
            provider_response = await self._retry.run(lambda: self._provider.execute(provider_request), cancel_event=cancel_event)
            response = self._provider.transform_response(provider_response)
        except LLMShimException as e:
            if e.correlation_id is None:
                e.correlation_id = get_correlation_id()
            logger.error('Completion failed', provider=provider_name, model=request.model, error_kind=e.kind.value, attempts=e.attempts)
            raise

        if key is not None:
            await self._cache_set(key, response)
        logger.info(
            'Completion succeeded',
            provider=provider_name,
            model=response.model,
            prompt_tokens=response.usage.prompt_tokens,
            completion_tokens=response.usage.completion_tokens,
        )
        return response

    async def _cache_get(self, key: str) -> Optional[CompletionResponse]:
        try:
            data = await self._cache.get(key)
        except Exception:
            logger.warning('Cache lookup failed, treating as miss', cache=self._cache.name(), exc_info=True)
            return None
        if data is None:
            return None
        try:
            return CompletionResponse.from_bytes(data)
        except SerializationException as e:
            logger.warning('Discarding undecodable cache entry', cache=self._cache.name(), error=e.message)
            return None

    async def _cache_set(self, key: str, response: CompletionResponse) -> None:
        try:
            await self._cache.set(key, response.to_bytes(), self._cache_config.ttl_seconds)
        except Exception:
            logger.warning('Cache store failed', cache=self._cache.name(), exc_info=True)
