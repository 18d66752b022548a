"""Registry of provider descriptors and provider construction."""

from __future__ import annotations

import importlib
from typing import Dict, Optional

from llmshim.common.exceptions import ConfigException
from llmshim.config.log import get_logger
from llmshim.config.models import ProviderConfig
from llmshim.providers.descriptors import ProviderDescriptor
from llmshim.providers.provider import Provider
from llmshim.providers.types import ProviderType
from llmshim.services.pipeline.http_client import HttpClientService

logger = get_logger(__name__)

PROVIDER_REGISTRY: Dict[ProviderType, ProviderDescriptor] = {
    ProviderType.OPENAI: ProviderDescriptor(
        type=ProviderType.OPENAI,
        default_base_url='https://api.openai.com/v1',
        completions_path='/chat/completions',
        provider_class='llmshim.providers.openai.provider.OpenAIProvider',
    ),
    ProviderType.ANTHROPIC: ProviderDescriptor(
        type=ProviderType.ANTHROPIC,
        default_base_url='https://api.anthropic.com/v1',
        completions_path='/messages',
    ),
}


def get_descriptor(provider_type: ProviderType) -> ProviderDescriptor:
    """Retrieve the descriptor for a provider type."""

    try:
        return PROVIDER_REGISTRY[ProviderType(provider_type)]
    except (KeyError, ValueError):
        raise ConfigException(f'Unknown provider type: {provider_type!r}') from None


def register_descriptor(descriptor: ProviderDescriptor) -> None:
    """Register or replace the descriptor for a provider type."""

    PROVIDER_REGISTRY[descriptor.type] = descriptor
    logger.info('Registered provider descriptor', provider_type=descriptor.type.value, provider_class=descriptor.provider_class)


def create_provider(config: ProviderConfig, http_client: Optional[HttpClientService] = None) -> Provider:
    """Instantiate the provider described by ``config``.

    Raises:
        ConfigException: unknown or unimplemented provider type, or an invalid API key.
    """

    descriptor = get_descriptor(config.type)
    if not descriptor.implemented:
        raise ConfigException(f"Provider type '{descriptor.type.value}' is not implemented yet")

    provider_cls = _import_class(descriptor.provider_class)
    provider = provider_cls(
        config.api_key_secret(),
        base_url=config.base_url or descriptor.default_base_url,
        http_client=http_client,
        timeout=config.timeout,
    )
    logger.debug('Created provider', provider=config.name, provider_type=descriptor.type.value)
    return provider


def _import_class(class_path: str) -> type:
    module_path, class_name = class_path.rsplit('.', 1)
    try:
        module = importlib.import_module(module_path)
        return getattr(module, class_name)
    except (ImportError, AttributeError) as e:
        raise ConfigException(f"Cannot load provider class '{class_path}': {e}") from e
