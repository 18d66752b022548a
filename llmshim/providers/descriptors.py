"""Provider descriptor definitions describing default behaviour per backend."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from llmshim.providers.types import ProviderType


@dataclass(frozen=True)
class ProviderDescriptor:
    """Describes defaults for a provider backend."""

    type: ProviderType
    default_base_url: str
    completions_path: str
    # Fully qualified class path, imported lazily; None marks a placeholder backend
    provider_class: Optional[str] = None

    @property
    def implemented(self) -> bool:
        return self.provider_class is not None

    def completions_url(self, base_url: Optional[str] = None) -> str:
        return f'{(base_url or self.default_base_url).rstrip("/")}{self.completions_path}'
