"""
Embedding Cache

Content-hash keyed embedding cache on Redis, so unchanged code is never
re-embedded.

Key format: embedding:{content_hash}
Value: JSON-encoded float list (1536 dimensions)
TTL: 30 days, refreshed on every hit (sliding expiration)

The cache is best-effort: every Redis or decode failure is logged and
reported as a miss / no-op. It is never a source of truth.
"""

import json
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from redis.asyncio import Redis

from codegraph_rca.common.observability import get_logger
from codegraph_rca.common.types import EMBEDDING_DIMENSIONS, EmbeddingVector, is_valid_embedding, to_embedding_array

logger = get_logger(__name__)

# ============================================================
# Constants
# ============================================================

CACHE_PREFIX = "embedding:"

DEFAULT_TTL_SECONDS = 30 * 24 * 60 * 60

SCAN_COUNT = 1000


@dataclass(slots=True)
class CachedEmbedding:
    content_hash: str
    embedding: EmbeddingVector


@dataclass(frozen=True, slots=True)
class EmbeddingCacheStats:
    hits: int
    misses: int
    hit_rate: float

    def to_dict(self) -> dict[str, Any]:
        return {"hits": self.hits, "misses": self.misses, "hit_rate": self.hit_rate}


def cache_key(content_hash: str) -> str:
    return f"{CACHE_PREFIX}{content_hash}"


def _decode(value: Any) -> EmbeddingVector | None:
    """Parse a cached value; None if it is not a valid embedding."""
    if isinstance(value, bytes):
        value = value.decode("utf-8")
    try:
        embedding = json.loads(value)
    except (TypeError, ValueError):
        return None
    if not is_valid_embedding(embedding):
        return None
    return [float(v) for v in embedding]


class EmbeddingCache:
    """
    Redis-backed embedding cache.

    Usage:
        connection = RedisConnection.from_config(settings.cache)
        cache = EmbeddingCache(await connection.get_client())

        vector = await cache.get(chunk.content_hash)
        if vector is None:
            vector = await provider.embed(chunk.content)
            await cache.set(chunk.content_hash, vector)
    """

    def __init__(self, redis: Redis, ttl_seconds: int = DEFAULT_TTL_SECONDS):
        """
        Args:
            redis: Caller-owned async Redis client
            ttl_seconds: Sliding expiration for cached embeddings
        """
        self.redis = redis
        self.ttl_seconds = ttl_seconds
        self._hits = 0
        self._misses = 0

    # ============================================================
    # Single Operations
    # ============================================================

    async def get(self, content_hash: str) -> EmbeddingVector | None:
        """
        Get cached embedding by content hash.

        Returns:
            Embedding or None if missing, invalid, or on error
        """
        key = cache_key(content_hash)
        try:
            cached = await self.redis.get(key)
            if cached is None:
                self._misses += 1
                return None

            embedding = _decode(cached)
            if embedding is None:
                logger.warning(f"Invalid cached embedding for {content_hash}, treating as miss")
                self._misses += 1
                return None

            await self.redis.expire(key, self.ttl_seconds)
            self._hits += 1
            return embedding

        except Exception as e:
            logger.warning(f"Embedding cache get failed: {e}")
            self._misses += 1
            return None

    async def set(self, content_hash: str, embedding: Sequence[float]) -> None:
        """Cache an embedding. Invalid vectors are dropped with a warning."""
        vector = to_embedding_array(embedding)
        if vector is None:
            logger.warning(
                f"Refusing to cache embedding for {content_hash}: "
                f"expected {EMBEDDING_DIMENSIONS} dimensions"
            )
            return

        try:
            await self.redis.setex(cache_key(content_hash), self.ttl_seconds, json.dumps(vector.tolist()))
        except Exception as e:
            logger.warning(f"Embedding cache set failed: {e}")

    # ============================================================
    # Batch Operations
    # ============================================================

    async def get_many(self, content_hashes: Sequence[str]) -> dict[str, EmbeddingVector]:
        """
        Get multiple embeddings in one MGET round-trip.

        TTLs of found entries are refreshed in one pipelined batch. On any
        failure every requested hash counts as a miss and nothing is returned.

        Returns:
            content_hash → embedding for found entries
        """
        if not content_hashes:
            return {}

        results: dict[str, EmbeddingVector] = {}
        try:
            values = await self.redis.mget([cache_key(h) for h in content_hashes])

            hits = 0
            misses = 0
            for content_hash, value in zip(content_hashes, values):
                embedding = _decode(value) if value is not None else None
                if embedding is None:
                    misses += 1
                    continue
                results[content_hash] = embedding
                hits += 1

            if results:
                async with self.redis.pipeline(transaction=False) as pipe:
                    for content_hash in results:
                        pipe.expire(cache_key(content_hash), self.ttl_seconds)
                    await pipe.execute()

        except Exception as e:
            logger.warning(f"Embedding cache get_many failed: {e}")
            self._misses += len(content_hashes)
            return {}

        self._hits += hits
        self._misses += misses
        return results

    async def set_many(self, items: Iterable[CachedEmbedding]) -> None:
        """Cache multiple embeddings in one pipelined batch. Invalid items are skipped."""
        valid: list[tuple[str, list[float]]] = []
        for item in items:
            vector = to_embedding_array(item.embedding)
            if vector is not None:
                valid.append((item.content_hash, vector.tolist()))
            else:
                logger.warning(f"Skipping invalid embedding for {item.content_hash}")

        if not valid:
            return

        try:
            async with self.redis.pipeline(transaction=False) as pipe:
                for content_hash, vector in valid:
                    pipe.setex(cache_key(content_hash), self.ttl_seconds, json.dumps(vector))
                await pipe.execute()
        except Exception as e:
            logger.warning(f"Embedding cache set_many failed: {e}")

    # ============================================================
    # Utility Methods
    # ============================================================

    async def has(self, content_hash: str) -> bool:
        try:
            return await self.redis.exists(cache_key(content_hash)) == 1
        except Exception as e:
            logger.warning(f"Embedding cache exists check failed: {e}")
            return False

    async def delete(self, content_hash: str) -> None:
        try:
            await self.redis.delete(cache_key(content_hash))
        except Exception as e:
            logger.warning(f"Embedding cache delete failed: {e}")

    async def delete_many(self, content_hashes: Sequence[str]) -> int:
        """Invalidate several entries; returns the number of keys removed."""
        if not content_hashes:
            return 0
        try:
            return await self.redis.delete(*[cache_key(h) for h in content_hashes])
        except Exception as e:
            logger.warning(f"Embedding cache delete_many failed: {e}")
            return 0

    async def get_size(self) -> int:
        """Approximate number of cached embeddings (cursor-based SCAN)."""
        try:
            count = 0
            async for _ in self.redis.scan_iter(match=f"{CACHE_PREFIX}*", count=SCAN_COUNT):
                count += 1
            return count
        except Exception as e:
            logger.warning(f"Embedding cache size scan failed: {e}")
            return 0

    def get_stats(self) -> EmbeddingCacheStats:
        total = self._hits + self._misses
        return EmbeddingCacheStats(
            hits=self._hits,
            misses=self._misses,
            hit_rate=self._hits / total if total > 0 else 0.0,
        )

    def reset_stats(self) -> None:
        self._hits = 0
        self._misses = 0


__all__ = [
    "CACHE_PREFIX",
    "DEFAULT_TTL_SECONDS",
    "CachedEmbedding",
    "EmbeddingCache",
    "EmbeddingCacheStats",
    "cache_key",
]
