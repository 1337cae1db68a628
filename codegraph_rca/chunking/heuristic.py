"""
Python / Go heuristic chunking

Python: top-level ``def`` / ``async def`` / ``class`` extended by indentation.
Multi-line signatures and triple-quoted strings are skipped when measuring
indentation, and decorators travel with their function.

Go: top-level ``func`` (with or without receiver) and ``type X struct`` /
``type X interface`` extended by brace matching. Doc comments travel with
their declaration.
"""

import re

from codegraph_rca.chunking.base import Boundary, ChunkingStrategy
from codegraph_rca.chunking.scanner import GO_PROFILE, BraceScanner
from codegraph_rca.common.exceptions import ChunkingError

PYTHON_PATTERNS = {
    "function": re.compile(r"^(async\s+)?def\s+\w+\s*\("),
    "class": re.compile(r"^class\s+\w+"),
}

GO_PATTERNS = {
    "function": re.compile(r"^func\s+(\([^)]*\)\s*)?\w+\s*[\[(]"),
    "class": re.compile(r"^type\s+\w+(\[[^\]]*\])?\s+(struct|interface)\s*\{"),
}

_TRIPLE_QUOTES = ('"""', "'''")

_STRING_LITERAL = re.compile(r"'(?:\\.|[^'\\])*'|\"(?:\\.|[^\"\\])*\"")


# ============================================================
# Python
# ============================================================


def _indent_of(line: str) -> int:
    return len(line) - len(line.lstrip())


def _triple_quote_state(line: str, state: str | None) -> str | None:
    """Track whether we are inside a triple-quoted string after ``line``."""
    position = 0
    while True:
        if state is None:
            found = [(line.find(q, position), q) for q in _TRIPLE_QUOTES]
            found = [(pos, q) for pos, q in found if pos != -1]
            if not found:
                return None
            pos, state = min(found)
            position = pos + 3
        else:
            pos = line.find(state, position)
            if pos == -1:
                return state
            state = None
            position = pos + 3


def _bracket_delta(line: str) -> int:
    """Net open brackets on ``line``, ignoring string literals and comments."""
    code = _STRING_LITERAL.sub("", line).split("#", 1)[0]
    return sum(code.count(c) for c in "([{") - sum(code.count(c) for c in ")]}")


def find_python_block_end(lines: list[str], start_index: int) -> int:
    """
    Find the last line of a top-level def/class starting at ``start_index``.

    Trailing blank lines and column-0 comments are left outside the block.
    """
    header_end = start_index
    depth = _bracket_delta(lines[start_index])
    while depth > 0 and header_end + 1 < len(lines):
        header_end += 1
        depth += _bracket_delta(lines[header_end])

    state: str | None = None
    end = len(lines) - 1
    for index in range(header_end + 1, len(lines)):
        line = lines[index]
        if state is not None:
            state = _triple_quote_state(line, state)
            continue

        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        if _indent_of(line) == 0:
            end = index - 1
            break
        state = _triple_quote_state(line, None)

    while end > header_end:
        line = lines[end]
        if not line.strip() or line.startswith("#"):
            end -= 1
        else:
            break
    return end


def _python_leading(lines: list[str], index: int, floor: int) -> int:
    start = index
    while start - 1 >= floor and lines[start - 1].startswith(("@", "#")):
        start -= 1
    return start


def find_python_boundaries(lines: list[str]) -> list[Boundary]:
    boundaries: list[Boundary] = []
    cursor = 0
    index = 0
    state: str | None = None

    while index < len(lines):
        line = lines[index]
        if state is not None:
            state = _triple_quote_state(line, state)
            index += 1
            continue

        chunk_type = None
        if PYTHON_PATTERNS["function"].search(line):
            chunk_type = "function"
        elif PYTHON_PATTERNS["class"].search(line):
            chunk_type = "class"

        if chunk_type is None:
            state = _triple_quote_state(line, None)
            index += 1
            continue

        start = _python_leading(lines, index, cursor)
        end = find_python_block_end(lines, index)
        boundaries.append(Boundary(start=start, end=end, chunk_type=chunk_type))
        index = end + 1
        cursor = index

    return boundaries


# ============================================================
# Go
# ============================================================


def _go_construct_type(line: str):
    if GO_PATTERNS["function"].search(line):
        return "function"
    if GO_PATTERNS["class"].search(line):
        return "class"
    return None


def find_go_block_end(lines: list[str], start_index: int) -> int:
    scanner = BraceScanner(GO_PROFILE)
    for index in range(start_index, len(lines)):
        line = lines[index]
        if index > start_index and not scanner.found_open and scanner.in_code and _go_construct_type(line):
            return index - 1
        if scanner.feed(line) is not None:
            return index
    return len(lines) - 1


def find_go_boundaries(lines: list[str]) -> list[Boundary]:
    boundaries: list[Boundary] = []
    cursor = 0
    index = 0

    while index < len(lines):
        chunk_type = _go_construct_type(lines[index])
        if chunk_type is None:
            index += 1
            continue

        start = index
        while start - 1 >= cursor and lines[start - 1].startswith("//"):
            start -= 1
        end = find_go_block_end(lines, index)
        boundaries.append(Boundary(start=start, end=end, chunk_type=chunk_type))
        index = end + 1
        cursor = index

    return boundaries


_FINDERS = {
    "python": find_python_boundaries,
    "go": find_go_boundaries,
}


class PyGoHeuristicStrategy(ChunkingStrategy):
    """Heuristic strategy for Python and Go."""

    name = "py_go_heuristic"

    def __init__(self, language: str):
        super().__init__()
        if language not in _FINDERS:
            raise ChunkingError(f"Unsupported heuristic language: {language}")
        self.language = language

    def find_boundaries(self, lines: list[str]) -> list[Boundary]:
        return _FINDERS[self.language](lines)


__all__ = [
    "PYTHON_PATTERNS",
    "GO_PATTERNS",
    "PyGoHeuristicStrategy",
    "find_python_block_end",
    "find_python_boundaries",
    "find_go_boundaries",
]
