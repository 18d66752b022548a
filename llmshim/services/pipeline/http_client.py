from typing import Optional

import httpx
import orjson

from llmshim.common.exceptions import SerializationException
from llmshim.routing.exchange import ProviderRequest

DEFAULT_TIMEOUT = 30.0


class HttpClientService:
    """Opaque transport: POST a JSON body, return the raw httpx response."""

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(DEFAULT_TIMEOUT), http2=True)

    async def post_json(self, prepared_request: ProviderRequest) -> httpx.Response:
        """Execute a non-streaming JSON POST."""
        try:
            content = orjson.dumps(prepared_request.body)
        except TypeError as e:
            raise SerializationException(f'Failed to serialize request body: {e}') from e

        timeout = httpx.Timeout(prepared_request.timeout) if prepared_request.timeout is not None else httpx.USE_CLIENT_DEFAULT
        return await self._client.post(prepared_request.url, headers=prepared_request.headers, content=content, timeout=timeout)

    async def aclose(self) -> None:
        await self._client.aclose()
