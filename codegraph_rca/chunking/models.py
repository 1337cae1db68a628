"""
Chunk Data Models

A chunk is a contiguous line range of a source file treated as one semantic
unit for embedding.
"""

from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, ConfigDict

from codegraph_rca.chunking.constants import CHUNK_DEFAULTS

ChunkType = Literal["function", "class", "module", "block"]


class CodeChunk(BaseModel):
    """
    Chunk produced by the chunker, ready for embedding.

    Line numbers are 1-based and inclusive. ``content_hash`` is the SHA-256 of
    ``content`` and doubles as the embedding cache key.
    """

    model_config = ConfigDict(frozen=True)

    file_path: str
    start_line: int
    end_line: int
    content: str
    content_hash: str
    language: str | None
    chunk_type: ChunkType

    @property
    def line_count(self) -> int:
        return self.end_line - self.start_line + 1


@dataclass(frozen=True, slots=True)
class ChunkOptions:
    """Chunk size bounds."""

    max_lines: int = CHUNK_DEFAULTS["max_lines"]
    max_bytes: int = CHUNK_DEFAULTS["max_bytes"]
    min_lines: int = CHUNK_DEFAULTS["min_lines"]

    def __post_init__(self) -> None:
        if self.max_lines < 1 or self.max_bytes < 1:
            raise ValueError("max_lines and max_bytes must be positive")
        if self.min_lines < 0:
            raise ValueError("min_lines must be >= 0")


@dataclass(slots=True)
class RawChunk:
    """Internal chunk representation before hashing."""

    start_line: int
    end_line: int
    content: str
    chunk_type: ChunkType

    @property
    def line_count(self) -> int:
        return self.end_line - self.start_line + 1

    @property
    def byte_size(self) -> int:
        return len(self.content.encode("utf-8"))


__all__ = ["ChunkType", "CodeChunk", "ChunkOptions", "RawChunk"]
