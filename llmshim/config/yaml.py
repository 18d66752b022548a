"""``!env`` tag for llmshim YAML configuration.

``api_key: !env OPENAI_API_KEY`` requires the variable to be set, while
``base_url: !env [OPENAI_BASE_URL, http://localhost:4000]`` falls back to the default.
"""

import os
from typing import Any

import yaml
from yaml.constructor import ConstructorError

ENV_TAG = '!env'

_MISSING = object()


def _lookup(name: Any, node: yaml.Node, default: Any = _MISSING) -> Any:
    if not isinstance(name, str) or not name:
        raise ConstructorError(None, None, f'{ENV_TAG} needs a non-empty variable name, got {name!r}', node.start_mark)
    value = os.environ.get(name)
    if value is not None:
        return value
    if default is _MISSING:
        raise ValueError(f"Required environment variable '{name}' is not set")
    return default


class EnvSafeLoader(yaml.SafeLoader):
    """SafeLoader resolving ``!env`` nodes from the process environment."""

    def construct_env(self, node: yaml.Node) -> Any:
        if isinstance(node, yaml.ScalarNode):
            return _lookup(self.construct_scalar(node), node)
        if isinstance(node, yaml.SequenceNode):
            items = self.construct_sequence(node)
            if len(items) == 2:
                return _lookup(items[0], node, default=items[1])
        raise ConstructorError(None, None, f'{ENV_TAG} takes VAR or [VAR, default]', node.start_mark)


EnvSafeLoader.add_constructor(ENV_TAG, EnvSafeLoader.construct_env)


def safe_load_with_env(stream) -> Any:
    return yaml.load(stream, Loader=EnvSafeLoader)  # noqa: S506


__all__ = ['ENV_TAG', 'EnvSafeLoader', 'safe_load_with_env']
