"""Cross-cutting utilities: errors, logging, shared types."""

from codegraph_rca.common.exceptions import (
    ChunkingError,
    CodegraphRcaError,
    DatabaseError,
    InfrastructureError,
    InvalidEmbeddingError,
    InvalidIdentifierError,
    ValidationError,
)
from codegraph_rca.common.observability import get_logger
from codegraph_rca.common.types import (
    EMBEDDING_DIMENSIONS,
    EmbeddingVector,
    is_valid_embedding,
    validate_embedding,
)

__all__ = [
    "CodegraphRcaError",
    "InfrastructureError",
    "DatabaseError",
    "ValidationError",
    "InvalidEmbeddingError",
    "InvalidIdentifierError",
    "ChunkingError",
    "get_logger",
    "EMBEDDING_DIMENSIONS",
    "EmbeddingVector",
    "is_valid_embedding",
    "validate_embedding",
]
