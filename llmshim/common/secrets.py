"""Opaque holder for provider credentials."""

from llmshim.common.exceptions import ConfigException

MIN_KEY_LENGTH = 6


class ApiKey:
    """Secret token that only reveals its value through :meth:`expose`.

    ``str()``/``repr()`` are masked so the key cannot leak through logging or
    f-string formatting by accident.
    """

    __slots__ = ('_value',)

    def __init__(self, value: str):
        if not isinstance(value, str):
            raise ConfigException(f'API key must be a string, got {type(value).__name__}')
        if not value:
            raise ConfigException('API key cannot be empty')
        if any(ch.isspace() for ch in value):
            raise ConfigException('API key cannot contain whitespace')
        if not (value.isascii() and value.isprintable()):
            # sent verbatim as a header value
            raise ConfigException('API key must contain only printable ASCII characters')
        if len(value) < MIN_KEY_LENGTH:
            raise ConfigException(f'API key is too short (minimum {MIN_KEY_LENGTH} characters)')
        self._value = value

    def expose(self) -> str:
        """Return the raw secret. Only call this where the value goes on the wire."""
        return self._value

    def __repr__(self) -> str:
        return 'ApiKey(****)'

    __str__ = __repr__

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ApiKey):
            return NotImplemented
        return self._value == other._value

    def __hash__(self) -> int:
        return hash(self._value)


__all__ = ['ApiKey', 'MIN_KEY_LENGTH']
