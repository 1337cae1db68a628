"""
Line-based fallback chunking.

Used for languages without a heuristic strategy and whenever a heuristic
strategy fails. Cuts before a line that would push the chunk over a limit,
preferring the most recent blank line once the chunk holds min_lines.
"""

from codegraph_rca.chunking.base import Boundary, ChunkingStrategy
from codegraph_rca.chunking.models import ChunkOptions, RawChunk
from codegraph_rca.chunking.postprocess import exceeds_limits, joined_size


def _last_blank_cut(lines: list[str], min_lines: int) -> int | None:
    """Cut position after the last blank line leaving at least min_lines before it."""
    for index in range(len(lines) - 1, -1, -1):
        if index + 1 < max(min_lines, 1):
            break
        if not lines[index].strip():
            return index + 1
    return None


def split_into_chunks(lines: list[str], options: ChunkOptions, start_line: int = 1) -> list[RawChunk]:
    """
    Split lines into "block" chunks within max_lines / max_bytes.

    Args:
        lines: Source lines
        options: Size bounds
        start_line: 1-based line number of lines[0]
    """
    chunks: list[RawChunk] = []
    current: list[str] = []
    current_start = start_line

    def emit(count: int) -> None:
        nonlocal current, current_start
        piece = current[:count]
        chunks.append(
            RawChunk(
                start_line=current_start,
                end_line=current_start + len(piece) - 1,
                content="\n".join(piece),
                chunk_type="block",
            )
        )
        current = current[count:]
        current_start += count

    for line in lines:
        if current and exceeds_limits(len(current) + 1, joined_size(current + [line]), options):
            cut = _last_blank_cut(current, options.min_lines)
            emit(cut if cut is not None and cut < len(current) else len(current))
            # Carried-over lines may still leave no room for this one
            if current and exceeds_limits(len(current) + 1, joined_size(current + [line]), options):
                emit(len(current))
        current.append(line)

    if current:
        emit(len(current))

    return chunks


class FallbackStrategy(ChunkingStrategy):
    """Line-based strategy for unsupported languages."""

    name = "fallback"

    def split(self, lines: list[str], options: ChunkOptions) -> list[RawChunk]:
        return split_into_chunks(lines, options)

    def find_boundaries(self, lines: list[str]) -> list[Boundary]:
        return []


__all__ = ["FallbackStrategy", "split_into_chunks"]
