"""
Embedding Indexer

Decides which stored chunks need embedding and writes results back.

Flow:
    plan(chunks)            → one cache get_many: cached vectors vs. missing chunks
    apply_cached(plan)      → cached vectors written to the vector store
    generate_embeddings()   → missing chunks sent to the injected provider in batches
    store_embeddings()      → provider vectors written to cache and vector store

The embedding model itself is never called from here directly; callers
inject an async ``embed_batch(texts) -> vectors`` callable.
"""

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field

from pydantic import BaseModel

from codegraph_rca.cache.embedding_cache import CachedEmbedding, EmbeddingCache
from codegraph_rca.common.observability import get_logger
from codegraph_rca.common.types import EmbeddingVector, validate_embedding
from codegraph_rca.common.utils import batched
from codegraph_rca.storage.vector_store import EmbeddingBatchItem, PgVectorStore

logger = get_logger(__name__)

# ============================================================
# Constants
# ============================================================

# Provider limit is 8191 tokens per input
MAX_TOKENS_PER_CHUNK = 8000

# Conservative characters-per-token estimate for code
CHARS_PER_TOKEN = 3

MAX_CHARS_PER_CHUNK = MAX_TOKENS_PER_CHUNK * CHARS_PER_TOKEN

TRUNCATION_MARKER = "\n[...truncated]"

MAX_BATCH_SIZE = 100

DEFAULT_BATCH_SIZE = 50

EmbedBatch = Callable[[list[str]], Awaitable[Sequence[Sequence[float]]]]


def truncate_to_token_limit(content: str) -> str:
    """Truncate content to fit the embedding model's token limit."""
    if len(content) <= MAX_CHARS_PER_CHUNK:
        return content
    return content[: MAX_CHARS_PER_CHUNK - 20] + TRUNCATION_MARKER


# ============================================================
# Models
# ============================================================


class StoredChunk(BaseModel):
    """Chunk row already persisted in the vector store."""

    chunk_id: str
    content_hash: str
    content: str


@dataclass
class EmbeddingPlan:
    cached: list[EmbeddingBatchItem] = field(default_factory=list)
    missing: list[StoredChunk] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.cached) + len(self.missing)


# ============================================================
# Indexer
# ============================================================


class EmbeddingIndexer:
    """
    Cache-aware embedding writer.

    Usage:
        indexer = EmbeddingIndexer(cache, vector_store)
        plan = await indexer.plan(stored_chunks)
        await indexer.apply_cached(plan)
        vectors = await indexer.generate_embeddings(plan.missing, provider.embed)
        await indexer.store_embeddings(plan.missing, vectors)
    """

    def __init__(self, cache: EmbeddingCache, vector_store: PgVectorStore):
        self.cache = cache
        self.vector_store = vector_store

    async def plan(self, chunks: Sequence[StoredChunk]) -> EmbeddingPlan:
        """Split chunks into cache hits and chunks that still need embedding."""
        if not chunks:
            return EmbeddingPlan()

        hashes = list(dict.fromkeys(chunk.content_hash for chunk in chunks))
        cached = await self.cache.get_many(hashes)

        plan = EmbeddingPlan()
        for chunk in chunks:
            vector = cached.get(chunk.content_hash)
            if vector is None:
                plan.missing.append(chunk)
            else:
                plan.cached.append(EmbeddingBatchItem(chunk_id=chunk.chunk_id, embedding=vector))

        logger.info(f"Embedding plan: {len(plan.cached)} cached, {len(plan.missing)} to embed")
        return plan

    async def apply_cached(self, plan: EmbeddingPlan) -> int:
        """Write cached vectors to the vector store; returns the number written."""
        if not plan.cached:
            return 0
        await self.vector_store.set_chunk_embeddings(plan.cached)
        return len(plan.cached)

    async def generate_embeddings(
        self,
        chunks: Sequence[StoredChunk],
        embed_batch: EmbedBatch,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> list[EmbeddingVector]:
        """
        Embed chunk contents through the injected provider, in batches.

        Raises:
            ValueError: provider returned a different number of vectors than inputs
            InvalidEmbeddingError: provider returned a malformed vector
        """
        vectors: list[EmbeddingVector] = []
        effective_size = min(batch_size, MAX_BATCH_SIZE)

        for batch in batched(list(chunks), effective_size):
            texts = [truncate_to_token_limit(chunk.content) for chunk in batch]
            result = await embed_batch(texts)
            if len(result) != len(batch):
                raise ValueError(f"Embedding count mismatch: expected {len(batch)}, got {len(result)}")
            vectors.extend(validate_embedding(vector) for vector in result)

        logger.debug(f"Generated {len(vectors)} embeddings")
        return vectors

    async def store_embeddings(self, chunks: Sequence[StoredChunk], vectors: Sequence[Sequence[float]]) -> int:
        """
        Write provider vectors to the vector store, then the cache.

        Idempotent: re-running with the same input rewrites the same values.

        Raises:
            ValueError: chunks and vectors differ in length
            InvalidEmbeddingError: a vector is malformed (nothing is written)
            InvalidIdentifierError: from the vector store
        """
        if len(chunks) != len(vectors):
            raise ValueError(f"Got {len(vectors)} vectors for {len(chunks)} chunks")
        if not chunks:
            return 0

        embeddings = [validate_embedding(vector) for vector in vectors]
        items = [
            EmbeddingBatchItem(chunk_id=chunk.chunk_id, embedding=embedding)
            for chunk, embedding in zip(chunks, embeddings)
        ]
        await self.vector_store.set_chunk_embeddings(items)
        await self.cache.set_many(
            CachedEmbedding(content_hash=chunk.content_hash, embedding=embedding)
            for chunk, embedding in zip(chunks, embeddings)
        )

        logger.info(f"Stored {len(items)} embeddings")
        return len(items)


__all__ = [
    "MAX_CHARS_PER_CHUNK",
    "EmbeddingIndexer",
    "EmbeddingPlan",
    "StoredChunk",
    "truncate_to_token_limit",
]
