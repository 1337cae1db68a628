"""Embedding cache (Redis)."""

from codegraph_rca.cache.embedding_cache import (
    CACHE_PREFIX,
    DEFAULT_TTL_SECONDS,
    CachedEmbedding,
    EmbeddingCache,
    EmbeddingCacheStats,
)
from codegraph_rca.cache.redis import RedisConnection

__all__ = [
    "CACHE_PREFIX",
    "DEFAULT_TTL_SECONDS",
    "CachedEmbedding",
    "EmbeddingCache",
    "EmbeddingCacheStats",
    "RedisConnection",
]
