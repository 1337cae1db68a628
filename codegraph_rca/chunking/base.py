"""
Chunking Strategy Base

Template shared by all strategies:

    whole file fits?  → single "module" chunk
    find_boundaries   → construct line ranges (strategy specific)
    assemble          → fill gaps between constructs so the file is covered
    enforce limits    → split oversized chunks
    merge             → fold undersized chunks
    validate          → coverage / overlap check

Any failure inside the template raises ChunkingError; the caller recovers with
the line-based fallback strategy.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from codegraph_rca.chunking.boundary import ChunkBoundaryValidator
from codegraph_rca.chunking.models import ChunkOptions, ChunkType, RawChunk
from codegraph_rca.chunking.postprocess import (
    enforce_size_limits,
    exceeds_limits,
    merge_small_chunks,
)
from codegraph_rca.common.exceptions import ChunkingError


@dataclass(frozen=True, slots=True)
class Boundary:
    """Construct line range (0-based, inclusive)."""

    start: int
    end: int
    chunk_type: ChunkType


def _is_blank(lines: list[str]) -> bool:
    return all(not line.strip() for line in lines)


def assemble_chunks(lines: list[str], boundaries: list[Boundary]) -> list[RawChunk]:
    """
    Turn construct boundaries into chunks covering every line.

    Non-blank text between constructs becomes a "block" chunk. Blank-only gaps
    are absorbed by the following construct (or by the last chunk at EOF).
    """
    chunks: list[RawChunk] = []
    cursor = 0

    for boundary in boundaries:
        if boundary.start < cursor or boundary.end < boundary.start:
            raise ChunkingError(
                "Overlapping construct boundaries",
                {"start": boundary.start, "end": boundary.end, "cursor": cursor},
            )

        start = boundary.start
        if start > cursor:
            gap = lines[cursor:start]
            if _is_blank(gap):
                start = cursor
            else:
                chunks.append(
                    RawChunk(
                        start_line=cursor + 1,
                        end_line=start,
                        content="\n".join(gap),
                        chunk_type="block",
                    )
                )

        chunks.append(
            RawChunk(
                start_line=start + 1,
                end_line=boundary.end + 1,
                content="\n".join(lines[start : boundary.end + 1]),
                chunk_type=boundary.chunk_type,
            )
        )
        cursor = boundary.end + 1

    if cursor < len(lines):
        tail = lines[cursor:]
        if chunks and _is_blank(tail):
            last = chunks[-1]
            chunks[-1] = RawChunk(
                start_line=last.start_line,
                end_line=len(lines),
                content=last.content + "\n" + "\n".join(tail),
                chunk_type=last.chunk_type,
            )
        else:
            chunks.append(
                RawChunk(
                    start_line=cursor + 1,
                    end_line=len(lines),
                    content="\n".join(tail),
                    chunk_type="block",
                )
            )

    return chunks


class ChunkingStrategy(ABC):
    """Base class for language chunking strategies."""

    name: str = "base"

    def __init__(self) -> None:
        self._validator = ChunkBoundaryValidator()

    def chunk(self, content: str, options: ChunkOptions) -> list[RawChunk]:
        """
        Chunk file content.

        Raises:
            ChunkingError: No boundaries detected or boundaries failed validation
        """
        lines = content.split("\n")

        if not exceeds_limits(len(lines), len(content.encode("utf-8")), options):
            return [RawChunk(start_line=1, end_line=len(lines), content=content, chunk_type="module")]

        raw = self.split(lines, options)
        if not raw:
            raise ChunkingError(f"{self.name}: no boundaries detected")

        raw = enforce_size_limits(raw, options)
        raw = merge_small_chunks(raw, options)
        self._validator.validate(raw, len(lines))
        return raw

    def split(self, lines: list[str], options: ChunkOptions) -> list[RawChunk]:
        boundaries = self.find_boundaries(lines)
        if not boundaries:
            return []
        return assemble_chunks(lines, boundaries)

    @abstractmethod
    def find_boundaries(self, lines: list[str]) -> list[Boundary]:
        """Detect top-level construct ranges."""
        ...


__all__ = ["Boundary", "ChunkingStrategy", "assemble_chunks"]
