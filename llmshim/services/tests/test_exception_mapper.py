import httpx
import pytest

from llmshim.common.exceptions import NetworkException, ProviderTimeoutException
from llmshim.common.vars import reset_correlation_id, set_correlation_id
from llmshim.services.error_handling.exception_mapper import HttpExceptionMapper

REQUEST = httpx.Request('POST', 'https://api.openai.com/v1/chat/completions')


@pytest.mark.parametrize(
    'exc',
    [
        httpx.ConnectTimeout('connect timed out', request=REQUEST),
        httpx.ReadTimeout('read timed out', request=REQUEST),
        httpx.PoolTimeout('pool exhausted', request=REQUEST),
    ],
)
def test_timeouts_map_to_provider_timeout(exc):
    mapped = HttpExceptionMapper(provider='openai').map_httpx_exception(exc, timeout=12.5)

    assert isinstance(mapped, ProviderTimeoutException)
    assert mapped.timeout == 12.5
    assert mapped.provider == 'openai'
    assert mapped.message == 'Request timed out after 12.5s'
    assert mapped.retryable


@pytest.mark.parametrize(
    'exc',
    [
        httpx.ConnectError('connection refused', request=REQUEST),
        httpx.RemoteProtocolError('peer closed connection', request=REQUEST),
        httpx.ReadError('connection reset', request=REQUEST),
    ],
)
def test_request_errors_map_to_network(exc):
    mapped = HttpExceptionMapper().map_httpx_exception(exc)

    assert isinstance(mapped, NetworkException)
    assert mapped.message.startswith('Network error: ')
    assert mapped.retryable


def test_other_http_errors_map_to_network():
    exc = httpx.HTTPStatusError('server error', request=REQUEST, response=httpx.Response(500, request=REQUEST))
    mapped = HttpExceptionMapper().map_httpx_exception(exc)

    assert isinstance(mapped, NetworkException)
    assert mapped.message.startswith('Unknown HTTP error: ')


def test_correlation_id_from_context():
    token = set_correlation_id('ctx-1')
    try:
        assert HttpExceptionMapper().map_httpx_exception(httpx.ConnectError('x', request=REQUEST)).correlation_id == 'ctx-1'
        assert HttpExceptionMapper().map_httpx_exception(httpx.ConnectError('x', request=REQUEST), correlation_id='explicit').correlation_id == 'explicit'
    finally:
        reset_correlation_id(token)
