import os
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

from llmshim.common.secrets import ApiKey
from llmshim.config.paths import get_app_dir
from llmshim.config.yaml import safe_load_with_env
from llmshim.providers.types import ProviderType


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default='INFO', description='Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)')
    console_enabled: bool = Field(default=True, description='Enable console logging')
    file_enabled: bool = Field(default=False, description='Enable file logging')
    log_file_dir: Optional[str] = Field(default=None, description='Log directory (defaults to ~/.llmshim/logs)')
    max_file_size: str = Field(default='10MB', description='Maximum log file size before rotation')
    backup_count: int = Field(default=4, description='Number of backup files to keep')


class RetryConfig(BaseModel):
    """Backoff/retry policy for a single provider call."""

    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(default=3, ge=1, description='Total attempts including the first one')
    base_delay: float = Field(default=0.5, ge=0.0, description='Delay before the first retry, in seconds')
    max_delay: float = Field(default=30.0, ge=0.0, description='Upper bound for any single delay, in seconds')
    backoff_factor: float = Field(default=2.0, ge=1.0, description='Multiplier applied per failed attempt')
    jitter: bool = Field(default=True, description='Randomize delays to avoid synchronized retries')
    total_timeout: Optional[float] = Field(default=None, gt=0.0, description='Deadline for the whole retry loop, in seconds')

    @model_validator(mode='after')
    def _check_delays(self) -> 'RetryConfig':
        if self.max_delay < self.base_delay:
            raise ValueError('max_delay must be greater than or equal to base_delay')
        return self


class CacheConfig(BaseModel):
    """Response cache settings."""

    enabled: bool = Field(default=True)
    ttl_seconds: float = Field(default=3600, gt=0)
    namespace: Optional[str] = Field(default='completions', description='Prefix applied to every cache key')


class ProviderConfig(BaseModel):
    """Provider connection settings."""

    name: str = Field(description='Unique provider name')
    type: ProviderType = Field(description='Provider API type')
    base_url: Optional[str] = Field(default=None, description='Base URL (defaults to the provider descriptor)')
    api_key: str = Field(default='', repr=False, description='API key for the provider')
    timeout: float = Field(default=30.0, gt=0, description='Request timeout in seconds')

    def api_key_secret(self) -> ApiKey:
        """Wrap the configured key, validating its shape."""
        return ApiKey(self.api_key)


class ConfigModel(BaseModel):
    """Configuration model with validation."""

    model_config = ConfigDict(extra='allow')

    version: str = Field(default='1', description='Config version')
    logging: LoggingConfig = Field(default_factory=LoggingConfig, description='Logging configuration')
    providers: List[ProviderConfig] = Field(default_factory=list, description='Provider configurations')
    retry: RetryConfig = Field(default_factory=RetryConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)

    @model_validator(mode='after')
    def _unique_provider_names(self) -> 'ConfigModel':
        names = [p.name for p in self.providers]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f'Duplicate provider names: {", ".join(duplicates)}')
        return self

    @classmethod
    def load(cls, config_path: str | None = None) -> 'ConfigModel':
        """Load configuration from YAML file.

        Tries multiple locations in order:
        1. Explicit config_path if provided
        2. ~/.llmshim/config.yaml in user home directory
        3. ./config.yaml in current directory
        """

        config_paths = []
        if config_path:
            config_paths.append(config_path)
        else:
            home_config = get_app_dir() / 'config.yaml'
            if home_config.exists():
                config_paths.append(str(home_config))
            config_paths.append('config.yaml')

        # Later files override earlier ones
        data = {}
        for path in config_paths:
            try:
                with open(path, 'r', encoding='utf-8') as f:
                    file_data = safe_load_with_env(f) or {}
                    data.update(file_data)
            except FileNotFoundError:
                continue
            except yaml.YAMLError as e:
                raise ValueError(f'Invalid YAML in config file {path}: {e}')

        return cls(**data)

    def save(self, config_path: str) -> None:
        """Save configuration to YAML file."""
        Path(config_path).parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(self.model_dump(mode='json'), f, default_flow_style=False, sort_keys=False, indent=2)
        os.chmod(config_path, 0o600)

    def get_provider(self, name: str) -> Optional[ProviderConfig]:
        """Get provider configuration by name."""
        for provider in self.providers:
            if provider.name == name:
                return provider
        return None
