"""Wire-level request/response exchange primitives.

These are provider specific in content but transport agnostic: a provider
builds a :class:`ProviderRequest` and the transport only has to POST its JSON
body and hand back status and parsed body.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

REDACTED_HEADERS = frozenset({'authorization', 'x-api-key', 'api-key', 'cookie', 'set-cookie'})


@dataclass(slots=True)
class ProviderRequest:
    """Transport-ready request produced by ``Provider.transform_request``."""

    url: str
    headers: List[Tuple[str, str]] = field(default_factory=list, repr=False)
    body: Any = None
    timeout: Optional[float] = None

    def header(self, name: str) -> Optional[str]:
        """Return the first header value matching ``name`` case-insensitively."""

        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return None

    def redacted_headers(self) -> List[Tuple[str, str]]:
        """Headers safe for logging, with credential values masked."""

        return [(key, '****' if key.lower() in REDACTED_HEADERS else value) for key, value in self.headers]


@dataclass(slots=True)
class ProviderResponse:
    """Wire-level response handed from ``execute`` to ``transform_response``."""

    status: int
    body: Any
    headers: Optional[Dict[str, str]] = None

    @property
    def is_success(self) -> bool:
        return 200 <= self.status < 300


__all__ = ['ProviderRequest', 'ProviderResponse', 'REDACTED_HEADERS']
