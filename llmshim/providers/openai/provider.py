"""OpenAI-shaped reference provider."""

from typing import List, Optional
from urllib.parse import urlparse

import httpx
import orjson
from pydantic import ValidationError

from llmshim.common.exceptions import ConfigException, InvalidResponseException, SerializationException
from llmshim.common.models import CompletionChoice, CompletionRequest, CompletionResponse, FinishReason, Message, Usage
from llmshim.common.secrets import ApiKey
from llmshim.config.log import get_logger
from llmshim.providers.openai.errors import PROVIDER_NAME, parse_error_response
from llmshim.providers.openai.models import OpenAIChoice, OpenAICompletionRequest, OpenAICompletionResponse, OpenAIMessage
from llmshim.providers.provider import Provider
from llmshim.routing.exchange import ProviderRequest, ProviderResponse
from llmshim.services.error_handling.exception_mapper import HttpExceptionMapper
from llmshim.services.pipeline.http_client import DEFAULT_TIMEOUT, HttpClientService

logger = get_logger(__name__)


class OpenAIProvider(Provider):
    """Chat completions against any OpenAI-compatible endpoint."""

    DEFAULT_BASE_URL = 'https://api.openai.com/v1'
    COMPLETIONS_PATH = '/chat/completions'

    def __init__(
        self,
        api_key: ApiKey,
        base_url: str = DEFAULT_BASE_URL,
        http_client: Optional[HttpClientService] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        if not isinstance(api_key, ApiKey):
            raise ConfigException('api_key must be an ApiKey instance')
        parsed = urlparse(base_url or '')
        if parsed.scheme not in ('http', 'https') or not parsed.netloc:
            raise ConfigException(f'Invalid base URL: {base_url!r}')

        self._api_key = api_key
        self._base_url = base_url.rstrip('/')
        self._timeout = timeout
        self._http_client = http_client or HttpClientService()
        self._exception_mapper = HttpExceptionMapper(provider=PROVIDER_NAME)

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def timeout(self) -> float:
        return self._timeout

    def name(self) -> str:
        return PROVIDER_NAME

    def transform_request(self, request: CompletionRequest) -> ProviderRequest:
        """Convert the unified request to the chat completions body."""
        try:
            openai_request = OpenAICompletionRequest(
                model=request.model,
                messages=[OpenAIMessage(role=m.role.value, content=m.content) for m in request.messages],
                temperature=request.temperature,
                max_tokens=request.max_tokens,
                top_p=request.top_p,
                n=request.n,
                stream=False,
                stop=list(request.stop) if request.stop is not None else None,
            )
            body = openai_request.model_dump(mode='json', exclude_none=True)
        except ValidationError as e:
            raise SerializationException(f'Failed to serialize request: {e}') from e

        return ProviderRequest(
            url=f'{self._base_url}{self.COMPLETIONS_PATH}',
            headers=[
                ('Authorization', f'Bearer {self._api_key.expose()}'),
                ('Content-Type', 'application/json'),
            ],
            body=body,
            timeout=self._timeout,
        )

    async def execute(self, request: ProviderRequest) -> ProviderResponse:
        timeout = request.timeout if request.timeout is not None else self._timeout
        logger.debug('Sending provider request', provider=self.name(), url=request.url, headers=request.redacted_headers())

        try:
            raw = await self._http_client.post_json(request)
        except httpx.HTTPError as e:
            raise self._exception_mapper.map_httpx_exception(e, timeout=timeout) from e
        except UnicodeEncodeError as e:
            raise ConfigException(f'Invalid headers: {e}') from e
        except httpx.InvalidURL as e:
            raise ConfigException(f'Invalid URL: {e}') from e

        if not raw.is_success:
            error = parse_error_response(raw.status_code, raw.text, raw.headers, provider=self.name())
            logger.warning('Provider returned error status', provider=self.name(), status_code=raw.status_code, error_kind=error.kind.value)
            raise error

        try:
            body = orjson.loads(raw.content)
        except orjson.JSONDecodeError as e:
            raise InvalidResponseException(
                f'Failed to parse JSON response: {e}', provider=self.name(), status_code=raw.status_code, response_body=raw.text
            ) from e

        return ProviderResponse(status=raw.status_code, body=body, headers=dict(raw.headers))

    def transform_response(self, response: ProviderResponse) -> CompletionResponse:
        try:
            openai_response = OpenAICompletionResponse.model_validate(response.body)
        except ValidationError as e:
            raise InvalidResponseException(f'Failed to deserialize response: {e}', provider=self.name(), status_code=response.status) from e

        usage = openai_response.usage
        try:
            unified_usage = Usage(prompt_tokens=usage.prompt_tokens, completion_tokens=usage.completion_tokens, total_tokens=usage.total_tokens)
        except ValidationError as e:
            raise InvalidResponseException(
                f'Inconsistent usage: total_tokens={usage.total_tokens}, prompt_tokens={usage.prompt_tokens}, completion_tokens={usage.completion_tokens}',
                provider=self.name(),
                status_code=response.status,
            ) from e

        return CompletionResponse(
            id=openai_response.id,
            model=openai_response.model,
            choices=self._convert_choices(openai_response.choices, response.status),
            usage=unified_usage,
            created=openai_response.created,
            provider=self.name(),
        )

    def _convert_choices(self, choices: List[OpenAIChoice], status: int) -> List[CompletionChoice]:
        converted = []
        for choice in choices:
            finish_reason = FinishReason.from_vendor(choice.finish_reason)
            if choice.finish_reason is not None and finish_reason.value != choice.finish_reason:
                logger.debug('Unknown finish_reason mapped to stop', provider=self.name(), finish_reason=choice.finish_reason)
            try:
                message = Message(role=choice.message.role, content=choice.message.content or '')
            except ValidationError as e:
                raise InvalidResponseException(f'Invalid message in choice {choice.index}: {e}', provider=self.name(), status_code=status) from e
            converted.append(CompletionChoice(index=choice.index, message=message, finish_reason=finish_reason, logprobs=choice.logprobs))
        return converted

    async def aclose(self) -> None:
        await self._http_client.aclose()
