"""
Codegraph RCA Exception Hierarchy

표준화된 예외 계층으로 일관된 에러 처리를 제공합니다.

사용 가이드:
    1. 복구 가능한 에러 (cache, heuristic chunking) → 로그 후 계속
    2. 데이터 무결성 위반 (embedding 차원, chunk ID 형식) → 즉시 raise
    3. 외부 에러 (Postgres 연결, 스키마 스크립트) → DatabaseError 로 래핑

예시:
    try:
        await store.execute(query)
    except asyncpg.PostgresError as e:
        raise DatabaseError("Vector update failed") from e
"""

from typing import Any


class CodegraphRcaError(Exception):
    """Base exception for all codegraph-rca errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """
        Initialize error.

        Args:
            message: Human-readable error message
            details: Optional additional details for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (details: {self.details})"
        return self.message


# ============================================================
# Infrastructure Errors
# ============================================================


class InfrastructureError(CodegraphRcaError):
    """Infrastructure failures. The embedding cache never raises; it degrades to misses."""

    pass


class DatabaseError(InfrastructureError):
    """Database operation failures."""

    pass


# ============================================================
# Validation Errors
# ============================================================


class ValidationError(CodegraphRcaError):
    """Input validation failures."""

    pass


class InvalidEmbeddingError(ValidationError):
    """Embedding vector does not have the expected dimensions."""

    def __init__(self, expected: int, actual: int):
        super().__init__(
            f"Invalid embedding dimensions: expected {expected}, got {actual}",
            details={"expected": expected, "actual": actual},
        )


class InvalidIdentifierError(ValidationError):
    """Identifier does not match the expected CUID shape."""

    def __init__(self, field_name: str, value: str):
        super().__init__(
            f"Invalid {field_name}: must be a valid CUID",
            details={"field": field_name, "value": value[:64]},
        )


# ============================================================
# Indexing Errors
# ============================================================


class ChunkingError(CodegraphRcaError):
    """Heuristic chunking failures (always recovered via fallback)."""

    pass
