"""
Tests for ChunkBoundaryValidator and boundary assembly
"""

import pytest

from codegraph_rca.chunking import BoundaryValidationError, ChunkBoundaryValidator, ChunkOptions
from codegraph_rca.chunking.base import Boundary, assemble_chunks
from codegraph_rca.chunking.models import RawChunk
from codegraph_rca.common.exceptions import ChunkingError


def _raw(start: int, end: int) -> RawChunk:
    content = "\n".join("x" for _ in range(start, end + 1))
    return RawChunk(start_line=start, end_line=end, content=content, chunk_type="block")


class TestChunkBoundaryValidator:
    """Coverage and overlap checks"""

    @pytest.fixture
    def validator(self):
        return ChunkBoundaryValidator()

    def test_valid_tiling(self, validator):
        validator.validate([_raw(1, 3), _raw(4, 10)], total_lines=10)

    def test_empty_chunks(self, validator):
        with pytest.raises(BoundaryValidationError):
            validator.validate([], total_lines=5)

    def test_gap(self, validator):
        with pytest.raises(BoundaryValidationError, match="Gap"):
            validator.validate([_raw(1, 3), _raw(5, 10)], total_lines=10)

    def test_overlap(self, validator):
        with pytest.raises(BoundaryValidationError, match="overlap"):
            validator.validate([_raw(1, 5), _raw(4, 10)], total_lines=10)

    def test_inverted_range(self, validator):
        chunk = RawChunk(start_line=3, end_line=1, content="x", chunk_type="block")
        with pytest.raises(BoundaryValidationError):
            validator.validate([_raw(1, 2), chunk], total_lines=3)

    def test_incomplete_coverage(self, validator):
        with pytest.raises(BoundaryValidationError):
            validator.validate([_raw(1, 3)], total_lines=10)

    def test_content_mismatch(self, validator):
        chunk = RawChunk(start_line=1, end_line=3, content="only one line", chunk_type="block")
        with pytest.raises(BoundaryValidationError, match="Content"):
            validator.validate([chunk], total_lines=3)

    def test_is_chunking_error(self):
        assert issubclass(BoundaryValidationError, ChunkingError)


class TestAssembleChunks:
    """Gaps between constructs"""

    LINES = ["import x", "", "def a():", "    pass", "", "", "def b():", "    pass", "print(1)", ""]

    def test_blank_gap_absorbed_by_next_construct(self):
        chunks = assemble_chunks(
            self.LINES,
            [Boundary(2, 3, "function"), Boundary(6, 7, "function")],
        )

        spans = [(c.start_line, c.end_line, c.chunk_type) for c in chunks]
        assert spans == [
            (1, 2, "block"),
            (3, 4, "function"),
            (5, 8, "function"),
            (9, 10, "block"),
        ]
        assert "\n".join(c.content for c in chunks) == "\n".join(self.LINES)

    def test_blank_tail_absorbed_by_last_chunk(self):
        lines = ["def a():", "    pass", "", ""]
        chunks = assemble_chunks(lines, [Boundary(0, 1, "function")])

        assert [(c.start_line, c.end_line) for c in chunks] == [(1, 4)]
        assert chunks[0].content == "def a():\n    pass\n\n"

    def test_overlapping_boundaries_rejected(self):
        with pytest.raises(ChunkingError):
            assemble_chunks(self.LINES, [Boundary(2, 5, "function"), Boundary(4, 7, "function")])


class TestChunkOptions:
    def test_defaults(self):
        options = ChunkOptions()
        assert (options.max_lines, options.max_bytes, options.min_lines) == (500, 10240, 10)

    @pytest.mark.parametrize(
        "kwargs",
        [{"max_lines": 0}, {"max_bytes": 0}, {"min_lines": -1}],
    )
    def test_invalid_options(self, kwargs):
        with pytest.raises(ValueError):
            ChunkOptions(**kwargs)
