import pytest

from llmshim.common.exceptions import ConfigException, ErrorKind
from llmshim.common.secrets import ApiKey


def test_expose_returns_raw_value():
    key = ApiKey('sk-test1234567890')
    assert key.expose() == 'sk-test1234567890'


def test_string_conversions_are_masked():
    key = ApiKey('sk-supersecret')
    assert 'supersecret' not in str(key)
    assert 'supersecret' not in repr(key)
    assert 'supersecret' not in f'{key}'
    assert 'supersecret' not in repr({'key': key})


@pytest.mark.parametrize('value', ['', 'sk 1234567', 'sk-12', '\tsk-1234567', 'sk-cl\u00e9-123456', 'sk-\x00123456', 'sk-\u2603-123456'])
def test_invalid_keys_rejected(value):
    with pytest.raises(ConfigException) as exc_info:
        ApiKey(value)
    assert exc_info.value.kind == ErrorKind.CONFIG


def test_non_string_rejected():
    with pytest.raises(ConfigException):
        ApiKey(None)


def test_short_local_proxy_key_accepted():
    assert ApiKey('sk-1234').expose() == 'sk-1234'


def test_equality():
    assert ApiKey('sk-1234') == ApiKey('sk-1234')
    assert ApiKey('sk-1234') != ApiKey('sk-5678')
