"""
pgvector Store

Embedding storage and cosine similarity search over ``code_chunks``.

All values (vectors, ids, LIKE patterns) travel as bound parameters through
the pgvector asyncpg codec. Input validation still applies and raises before
any query is issued:
- embeddings must have exactly 1536 dimensions
- chunk ids must be CUID-shaped (``c`` + 24 lowercase alphanumerics)
"""

import re
import secrets
import string
from collections.abc import Sequence

import numpy as np
from pydantic import BaseModel

from codegraph_rca.chunking.models import CodeChunk
from codegraph_rca.common.exceptions import InvalidIdentifierError
from codegraph_rca.common.observability import get_logger
from codegraph_rca.common.types import EMBEDDING_DIMENSIONS, EmbeddingVector, validate_embedding
from codegraph_rca.storage.postgres import PostgresStore

logger = get_logger(__name__)

# ============================================================
# Constants
# ============================================================

DEFAULT_TOP_K = 10

DEFAULT_MIN_SIMILARITY = 0.5

CUID_PATTERN = re.compile(r"^c[a-z0-9]{24}$")

_CUID_ALPHABET = string.ascii_lowercase + string.digits

SCHEMA_SQL = f"""
CREATE EXTENSION IF NOT EXISTS vector;

CREATE TABLE IF NOT EXISTS code_chunks (
    id TEXT PRIMARY KEY,
    repo_id TEXT NOT NULL,
    file_path TEXT NOT NULL,
    start_line INTEGER NOT NULL,
    end_line INTEGER NOT NULL,
    content TEXT NOT NULL,
    content_hash TEXT NOT NULL,
    language TEXT,
    chunk_type TEXT NOT NULL DEFAULT 'block',
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    embedding vector({EMBEDDING_DIMENSIONS})
);

CREATE INDEX IF NOT EXISTS code_chunks_repo_file_idx ON code_chunks (repo_id, file_path);
CREATE INDEX IF NOT EXISTS code_chunks_content_hash_idx ON code_chunks (content_hash);
CREATE INDEX IF NOT EXISTS code_chunks_embedding_idx
    ON code_chunks USING hnsw (embedding vector_cosine_ops) WITH (m = 16, ef_construction = 64);
CREATE INDEX IF NOT EXISTS code_chunks_repo_has_embedding_idx
    ON code_chunks (repo_id) WHERE embedding IS NOT NULL;
"""

_SELECT_SIMILAR = """
    SELECT
        id,
        repo_id,
        file_path,
        start_line,
        end_line,
        content,
        language,
        chunk_type,
        1 - (embedding <=> $2) AS similarity
    FROM code_chunks
    WHERE repo_id = $1
      AND embedding IS NOT NULL
      AND 1 - (embedding <=> $2) >= $3
"""

_INSERT_CHUNK = """
    INSERT INTO code_chunks
        (id, repo_id, file_path, start_line, end_line, content, content_hash, language, chunk_type)
    VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9)
"""


# ============================================================
# Models
# ============================================================


class SimilarChunk(BaseModel):
    """Result from similarity search."""

    id: str
    repo_id: str
    file_path: str
    start_line: int
    end_line: int
    content: str
    language: str | None
    chunk_type: str
    similarity: float


class EmbeddingBatchItem(BaseModel):
    chunk_id: str
    embedding: EmbeddingVector


class EmbeddingCount(BaseModel):
    total: int
    with_embedding: int


# ============================================================
# Validation Helpers
# ============================================================


def validate_cuid(value: str, field_name: str = "id") -> None:
    """
    Raises:
        InvalidIdentifierError: value is not CUID-shaped
    """
    if not isinstance(value, str) or not CUID_PATTERN.match(value):
        raise InvalidIdentifierError(field_name, str(value))


def new_chunk_id() -> str:
    """Generate a CUID-shaped chunk id."""
    return "c" + "".join(secrets.choice(_CUID_ALPHABET) for _ in range(24))


def glob_to_like_pattern(pattern: str) -> str:
    """
    Convert a glob to a SQL LIKE pattern.

    ``**`` and ``*`` → ``%``, ``?`` → ``_``. The result is bound as a
    parameter, so quotes need no escaping.
    """
    return pattern.replace("**", "%").replace("*", "%").replace("?", "_")


def _to_vector(embedding: Sequence[float]) -> np.ndarray:
    return np.asarray(embedding, dtype=np.float32)


def _row_to_similar_chunk(row) -> SimilarChunk:
    return SimilarChunk(
        id=row["id"],
        repo_id=row["repo_id"],
        file_path=row["file_path"],
        start_line=row["start_line"],
        end_line=row["end_line"],
        content=row["content"],
        language=row["language"],
        chunk_type=row["chunk_type"],
        similarity=float(row["similarity"]),
    )


# ============================================================
# Vector Store
# ============================================================


class PgVectorStore:
    """
    Chunk embedding store on PostgreSQL + pgvector.

    Usage:
        store = PostgresStore.from_config(settings.db)
        vectors = PgVectorStore(store)

        await vectors.set_chunk_embeddings(items)
        similar = await vectors.search_similar_chunks(repo_id, query_embedding)
    """

    def __init__(self, store: PostgresStore):
        self.store = store

    async def ensure_schema(self) -> None:
        """Create the pgvector extension, table and indexes if missing."""
        await self.store.run_script(SCHEMA_SQL)

    # ============================================================
    # Chunk Rows
    # ============================================================

    async def insert_chunks(self, repo_id: str, chunks: Sequence[CodeChunk]) -> list[str]:
        """
        Insert chunk rows (without embeddings).

        Returns:
            Generated chunk ids, in input order
        """
        if not chunks:
            return []

        ids = [new_chunk_id() for _ in chunks]
        await self.store.executemany(_INSERT_CHUNK, self._chunk_rows(repo_id, ids, chunks))
        logger.debug(f"Inserted {len(ids)} chunks for repo {repo_id}")
        return ids

    async def replace_file_chunks(self, repo_id: str, file_path: str, chunks: Sequence[CodeChunk]) -> list[str]:
        """
        Supersede all chunks of one file in a single transaction.

        Returns:
            Generated chunk ids, in input order
        """
        ids = [new_chunk_id() for _ in chunks]
        async with self.store.transaction() as conn:
            await conn.execute(
                "DELETE FROM code_chunks WHERE repo_id = $1 AND file_path = $2",
                repo_id,
                file_path,
            )
            if chunks:
                await conn.executemany(_INSERT_CHUNK, self._chunk_rows(repo_id, ids, chunks))

        logger.debug(f"Replaced chunks for {file_path}: {len(ids)} rows")
        return ids

    @staticmethod
    def _chunk_rows(repo_id: str, ids: list[str], chunks: Sequence[CodeChunk]) -> list[tuple]:
        return [
            (
                chunk_id,
                repo_id,
                chunk.file_path,
                chunk.start_line,
                chunk.end_line,
                chunk.content,
                chunk.content_hash,
                chunk.language,
                chunk.chunk_type,
            )
            for chunk_id, chunk in zip(ids, chunks)
        ]

    # ============================================================
    # Single Embedding Operations
    # ============================================================

    async def set_chunk_embedding(self, chunk_id: str, embedding: Sequence[float]) -> None:
        """
        Store embedding for a single code chunk.

        Raises:
            InvalidEmbeddingError: embedding is not 1536-dimensional
            InvalidIdentifierError: chunk_id is not CUID-shaped
        """
        validate_embedding(embedding)
        validate_cuid(chunk_id, "chunk_id")

        await self.store.execute(
            "UPDATE code_chunks SET embedding = $2 WHERE id = $1",
            chunk_id,
            _to_vector(embedding),
        )

    async def get_chunk_embedding(self, chunk_id: str) -> EmbeddingVector | None:
        """
        Returns:
            Embedding or None if the chunk has none (or does not exist)
        """
        value = await self.store.fetchval("SELECT embedding FROM code_chunks WHERE id = $1", chunk_id)
        if value is None:
            return None
        return [float(v) for v in np.asarray(value).tolist()]

    # ============================================================
    # Batch Embedding Operations
    # ============================================================

    async def set_chunk_embeddings(self, items: Sequence[EmbeddingBatchItem]) -> None:
        """
        Store embeddings for multiple chunks in one batched statement.

        Every item is validated before anything is written.

        Raises:
            InvalidEmbeddingError / InvalidIdentifierError: on the first invalid item
        """
        if not items:
            return

        for item in items:
            validate_cuid(item.chunk_id, "chunk_id")
            validate_embedding(item.embedding)

        await self.store.executemany(
            "UPDATE code_chunks SET embedding = $2 WHERE id = $1",
            [(item.chunk_id, _to_vector(item.embedding)) for item in items],
        )
        logger.debug(f"Stored {len(items)} chunk embeddings")

    # ============================================================
    # Similarity Search
    # ============================================================

    async def search_similar_chunks(
        self,
        repo_id: str,
        query_embedding: Sequence[float],
        top_k: int = DEFAULT_TOP_K,
        min_similarity: float = DEFAULT_MIN_SIMILARITY,
    ) -> list[SimilarChunk]:
        """
        Search for similar code chunks using cosine similarity.

        Args:
            repo_id: Repository to search within
            query_embedding: 1536-dimensional query embedding
            top_k: Maximum number of results
            min_similarity: Minimum similarity threshold (0-1)

        Returns:
            Chunks ordered by descending similarity
        """
        validate_embedding(query_embedding)

        rows = await self.store.fetch(
            _SELECT_SIMILAR + "ORDER BY embedding <=> $2\nLIMIT $4",
            repo_id,
            _to_vector(query_embedding),
            min_similarity,
            top_k,
        )
        return [_row_to_similar_chunk(row) for row in rows]

    async def search_similar_chunks_with_patterns(
        self,
        repo_id: str,
        query_embedding: Sequence[float],
        file_patterns: Sequence[str],
        top_k: int = DEFAULT_TOP_K,
        min_similarity: float = DEFAULT_MIN_SIMILARITY,
    ) -> list[SimilarChunk]:
        """
        Similarity search restricted to files matching any of the glob patterns.

        Empty ``file_patterns`` behaves like search_similar_chunks.
        """
        validate_embedding(query_embedding)

        if not file_patterns:
            return await self.search_similar_chunks(repo_id, query_embedding, top_k, min_similarity)

        like_patterns = [glob_to_like_pattern(p) for p in file_patterns]

        rows = await self.store.fetch(
            _SELECT_SIMILAR + "AND file_path LIKE ANY($5::text[])\nORDER BY embedding <=> $2\nLIMIT $4",
            repo_id,
            _to_vector(query_embedding),
            min_similarity,
            top_k,
            like_patterns,
        )
        return [_row_to_similar_chunk(row) for row in rows]

    # ============================================================
    # Utility Functions
    # ============================================================

    async def count_chunks_with_embeddings(self, repo_id: str) -> EmbeddingCount:
        """Count chunks with embeddings for a repository (indexing progress)."""
        row = await self.store.fetchrow(
            """
            SELECT
                COUNT(*) AS total,
                COUNT(embedding) AS with_embedding
            FROM code_chunks
            WHERE repo_id = $1
            """,
            repo_id,
        )
        if row is None:
            return EmbeddingCount(total=0, with_embedding=0)
        return EmbeddingCount(total=int(row["total"] or 0), with_embedding=int(row["with_embedding"] or 0))

    async def clear_repository_embeddings(self, repo_id: str) -> int:
        """
        Clear all embeddings for a repository.

        Returns:
            Number of rows cleared
        """
        status = await self.store.execute(
            """
            UPDATE code_chunks
            SET embedding = NULL
            WHERE repo_id = $1
              AND embedding IS NOT NULL
            """,
            repo_id,
        )
        cleared = _affected_rows(status)
        logger.info(f"Cleared {cleared} embeddings for repo {repo_id}")
        return cleared


def _affected_rows(status: str) -> int:
    """Parse the row count from an asyncpg status string ("UPDATE 3")."""
    try:
        return int(status.rsplit(" ", 1)[-1])
    except (AttributeError, ValueError):
        return 0


__all__ = [
    "CUID_PATTERN",
    "DEFAULT_MIN_SIMILARITY",
    "DEFAULT_TOP_K",
    "SCHEMA_SQL",
    "EmbeddingBatchItem",
    "EmbeddingCount",
    "PgVectorStore",
    "SimilarChunk",
    "glob_to_like_pattern",
    "new_chunk_id",
    "validate_cuid",
]
