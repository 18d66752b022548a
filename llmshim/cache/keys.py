"""Deterministic cache key derivation."""

import hashlib

import orjson

from llmshim.common.models import CompletionRequest


class CacheKey:
    """Builds ``{provider}:{model}:{sha256-hex}`` keys.

    SHA-256 keeps keys identical across processes and machines, which any
    persistent backend relies on.
    """

    @staticmethod
    def from_parts(provider: str, model: str, content: str) -> str:
        digest = hashlib.sha256()
        for part in (provider, model, content):
            encoded = part.encode('utf-8')
            # length prefix keeps ('ab', 'c') and ('a', 'bc') apart
            digest.update(len(encoded).to_bytes(8, 'big'))
            digest.update(encoded)
        return f'{provider}:{model}:{digest.hexdigest()}'

    @staticmethod
    def with_namespace(namespace: str, key: str) -> str:
        return f'{namespace}:{key}'

    @classmethod
    def from_request(cls, provider: str, request: CompletionRequest) -> str:
        """Key a request by its canonical JSON, so sampling parameters are part of its identity."""
        content = orjson.dumps(request.model_dump(mode='json', exclude_none=True), option=orjson.OPT_SORT_KEYS).decode('utf-8')
        return cls.from_parts(provider, request.model, content)
