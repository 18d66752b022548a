"""Interfaces for error handling."""

from abc import ABC, abstractmethod
from typing import Optional

import httpx

from llmshim.common.exceptions import LLMShimException


class ExceptionMapper(ABC):
    """Interface for mapping transport exceptions to the unified taxonomy."""

    @abstractmethod
    def map_httpx_exception(self, exc: httpx.HTTPError, timeout: Optional[float] = None, correlation_id: Optional[str] = None) -> LLMShimException:
        """Map httpx exceptions to domain exceptions."""
