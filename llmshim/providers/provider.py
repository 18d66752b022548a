"""Provider capability contract shared by every vendor implementation."""

from __future__ import annotations

from abc import ABC, abstractmethod

from llmshim.common.models import CompletionRequest, CompletionResponse
from llmshim.routing.exchange import ProviderRequest, ProviderResponse


class Provider(ABC):
    """Vendor-specific request/execute/response transformation.

    ``transform_request`` and ``transform_response`` are pure and never
    suspend. ``execute`` is the only I/O boundary. All three raise
    :class:`~llmshim.common.exceptions.LLMShimException` subclasses on failure.
    """

    @abstractmethod
    def name(self) -> str:
        """Stable identifier used for logging and cache-key namespacing."""

    @abstractmethod
    def transform_request(self, request: CompletionRequest) -> ProviderRequest:
        """Build the vendor wire request from the unified request."""

    @abstractmethod
    async def execute(self, request: ProviderRequest) -> ProviderResponse:
        """Issue the HTTP call and classify failures."""

    @abstractmethod
    def transform_response(self, response: ProviderResponse) -> CompletionResponse:
        """Parse the vendor wire response into the unified response."""

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        """Run the three steps once, without retry or caching."""

        provider_request = self.transform_request(request)
        provider_response = await self.execute(provider_request)
        return self.transform_response(provider_response)

    async def aclose(self) -> None:
        """Release transport resources. Default is a no-op."""

    def __repr__(self) -> str:
        return f'{type(self).__name__}(name={self.name()!r})'
