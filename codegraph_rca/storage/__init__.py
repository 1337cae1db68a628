"""Vector storage (PostgreSQL + pgvector)."""

from codegraph_rca.storage.postgres import PostgresStore
from codegraph_rca.storage.vector_store import (
    CUID_PATTERN,
    DEFAULT_MIN_SIMILARITY,
    DEFAULT_TOP_K,
    SCHEMA_SQL,
    EmbeddingBatchItem,
    EmbeddingCount,
    PgVectorStore,
    SimilarChunk,
    glob_to_like_pattern,
    new_chunk_id,
    validate_cuid,
)

__all__ = [
    "CUID_PATTERN",
    "DEFAULT_MIN_SIMILARITY",
    "DEFAULT_TOP_K",
    "SCHEMA_SQL",
    "EmbeddingBatchItem",
    "EmbeddingCount",
    "PgVectorStore",
    "PostgresStore",
    "SimilarChunk",
    "glob_to_like_pattern",
    "new_chunk_id",
    "validate_cuid",
]
