"""Provider-related enumerations."""

from __future__ import annotations

from enum import Enum


class ProviderType(str, Enum):
    """Supported provider backend identifiers."""

    OPENAI = 'openai'
    ANTHROPIC = 'anthropic'
