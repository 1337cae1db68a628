"""Embedding indexing pipeline."""

from codegraph_rca.common.utils import batched
from codegraph_rca.indexing.pipeline import (
    MAX_CHARS_PER_CHUNK,
    EmbeddingIndexer,
    EmbeddingPlan,
    StoredChunk,
    truncate_to_token_limit,
)

__all__ = [
    "MAX_CHARS_PER_CHUNK",
    "EmbeddingIndexer",
    "EmbeddingPlan",
    "StoredChunk",
    "batched",
    "truncate_to_token_limit",
]
