"""
Chunk Boundary Validator

Validates chunk boundaries produced by a strategy:
1. start_line <= end_line for every chunk
2. No overlaps between consecutive chunks
3. No gaps: chunks tile the file from line 1 to the last line
"""

from codegraph_rca.chunking.models import RawChunk
from codegraph_rca.common.exceptions import ChunkingError


class BoundaryValidationError(ChunkingError):
    """Raised when chunk boundaries are invalid"""

    pass


class ChunkBoundaryValidator:
    """
    Validates chunk boundaries for consistency.

    Usage:
        validator = ChunkBoundaryValidator()
        validator.validate(chunks, total_lines=len(lines))
    """

    def validate(self, chunks: list[RawChunk], total_lines: int) -> None:
        """
        Validate chunk boundaries.

        Args:
            chunks: Chunks in file order
            total_lines: Number of lines in the source file

        Raises:
            BoundaryValidationError: If validation fails
        """
        if not chunks:
            raise BoundaryValidationError("No chunks produced", {"total_lines": total_lines})

        expected_start = 1
        for chunk in chunks:
            if chunk.start_line > chunk.end_line:
                raise BoundaryValidationError(
                    f"Invalid line range: start_line ({chunk.start_line}) > end_line ({chunk.end_line})"
                )

            if chunk.start_line < expected_start:
                raise BoundaryValidationError(
                    f"Chunk overlap detected at line {chunk.start_line} (expected start {expected_start})",
                    {"start_line": chunk.start_line, "end_line": chunk.end_line},
                )

            if chunk.start_line > expected_start:
                raise BoundaryValidationError(
                    f"Gap detected: lines {expected_start}-{chunk.start_line - 1} not covered",
                    {"gap_size": chunk.start_line - expected_start},
                )

            if chunk.content.count("\n") + 1 != chunk.line_count:
                raise BoundaryValidationError(
                    f"Content does not match line range {chunk.start_line}-{chunk.end_line}"
                )

            expected_start = chunk.end_line + 1

        if expected_start != total_lines + 1:
            raise BoundaryValidationError(
                f"Chunks end at line {expected_start - 1}, file has {total_lines} lines"
            )


__all__ = ["BoundaryValidationError", "ChunkBoundaryValidator"]
