"""
Chunk post-processing

Shared passes applied after boundary detection:
1. enforce_size_limits: split oversized chunks so every chunk respects
   max_lines and max_bytes
2. merge_small_chunks: fold undersized chunks into adjacent ones when the
   merged result still fits
3. to_code_chunks: attach file metadata and content hashes
"""

from codegraph_rca.chunking.hashing import generate_content_hash
from codegraph_rca.chunking.models import ChunkOptions, CodeChunk, RawChunk


def joined_size(lines: list[str]) -> int:
    """UTF-8 byte size of ``"\\n".join(lines)`` without building the string."""
    if not lines:
        return 0
    return sum(len(line.encode("utf-8")) for line in lines) + len(lines) - 1


def exceeds_limits(line_count: int, byte_size: int, options: ChunkOptions) -> bool:
    return line_count > options.max_lines or byte_size > options.max_bytes


def enforce_size_limits(chunks: list[RawChunk], options: ChunkOptions) -> list[RawChunk]:
    """
    Split chunks that exceed max_lines or max_bytes into consecutive "block" pieces.

    A single line longer than max_bytes cannot be split further and becomes a
    chunk of its own.
    """
    result: list[RawChunk] = []

    for chunk in chunks:
        if not exceeds_limits(chunk.line_count, chunk.byte_size, options):
            result.append(chunk)
            continue

        lines = chunk.content.split("\n")
        current: list[str] = []
        current_bytes = 0
        current_start = chunk.start_line

        for line in lines:
            line_bytes = len(line.encode("utf-8"))
            if current and exceeds_limits(len(current) + 1, current_bytes + 1 + line_bytes, options):
                result.append(
                    RawChunk(
                        start_line=current_start,
                        end_line=current_start + len(current) - 1,
                        content="\n".join(current),
                        chunk_type="block",
                    )
                )
                current_start += len(current)
                current = []
                current_bytes = 0

            current_bytes += line_bytes + (1 if current else 0)
            current.append(line)

        if current:
            result.append(
                RawChunk(
                    start_line=current_start,
                    end_line=current_start + len(current) - 1,
                    content="\n".join(current),
                    chunk_type="block",
                )
            )

    return result


def _merge_pair(first: RawChunk, second: RawChunk) -> RawChunk:
    merged_type = first.chunk_type if first.chunk_type == second.chunk_type else "block"
    return RawChunk(
        start_line=first.start_line,
        end_line=second.end_line,
        content=first.content + "\n" + second.content,
        chunk_type=merged_type,
    )


def _can_merge(first: RawChunk, second: RawChunk, options: ChunkOptions) -> bool:
    if second.start_line != first.end_line + 1:
        return False
    line_count = second.end_line - first.start_line + 1
    byte_size = first.byte_size + 1 + second.byte_size
    return not exceeds_limits(line_count, byte_size, options)


def merge_small_chunks(chunks: list[RawChunk], options: ChunkOptions) -> list[RawChunk]:
    """
    Merge chunks smaller than min_lines with their neighbours.

    Forward pass: an undersized chunk absorbs the next one while the result
    fits. A trailing undersized chunk is then folded into its predecessor when
    that fits. Merging chunks of different types yields a "block".
    """
    if len(chunks) <= 1:
        return list(chunks)

    merged: list[RawChunk] = []
    current = chunks[0]

    for chunk in chunks[1:]:
        if current.line_count < options.min_lines and _can_merge(current, chunk, options):
            current = _merge_pair(current, chunk)
        else:
            merged.append(current)
            current = chunk
    merged.append(current)

    if len(merged) >= 2 and merged[-1].line_count < options.min_lines:
        if _can_merge(merged[-2], merged[-1], options):
            tail = merged.pop()
            merged[-1] = _merge_pair(merged[-1], tail)

    return merged


def to_code_chunks(chunks: list[RawChunk], file_path: str, language: str | None) -> list[CodeChunk]:
    return [
        CodeChunk(
            file_path=file_path,
            start_line=chunk.start_line,
            end_line=chunk.end_line,
            content=chunk.content,
            content_hash=generate_content_hash(chunk.content),
            language=language,
            chunk_type=chunk.chunk_type,
        )
        for chunk in chunks
    ]


__all__ = [
    "joined_size",
    "exceeds_limits",
    "enforce_size_limits",
    "merge_small_chunks",
    "to_code_chunks",
]
