"""
TypeScript / JavaScript heuristic chunking

Regex-detected top-level constructs (functions, arrow-function consts,
classes, interfaces, type aliases, enums, default exports) with brace
matching for their extent. Leading JSDoc/line comments and decorators are
attached to the construct they precede.
"""

import re

from codegraph_rca.chunking.base import Boundary, ChunkingStrategy
from codegraph_rca.chunking.models import ChunkType
from codegraph_rca.chunking.scanner import JS_PROFILE, BraceScanner

TS_PATTERNS = {
    "function_decl": re.compile(r"^(export\s+)?(async\s+)?function\s+\w+\s*[<(]"),
    "arrow_function": re.compile(r"^(export\s+)?(const|let|var)\s+\w+\s*[=:][^=]*=>"),
    "class_decl": re.compile(r"^(export\s+)?(abstract\s+)?class\s+\w+"),
    "interface_decl": re.compile(r"^(export\s+)?interface\s+\w+"),
    "type_decl": re.compile(r"^(export\s+)?type\s+\w+\s*[<=]"),
    "enum_decl": re.compile(r"^(export\s+)?(const\s+)?enum\s+\w+"),
    "export_default": re.compile(r"^export\s+default\s+(function|class|async\s+function)"),
}

_LEADING_TRIVIA = ("//", "/*", "*", "*/")


def is_construct_start(line: str) -> bool:
    """Check a top-level (unindented) line against the construct patterns."""
    if not line or line[0].isspace():
        return False
    return any(pattern.search(line) for pattern in TS_PATTERNS.values())


def get_chunk_type(line: str) -> ChunkType:
    if TS_PATTERNS["class_decl"].search(line) or TS_PATTERNS["interface_decl"].search(line):
        return "class"
    if TS_PATTERNS["type_decl"].search(line):
        return "class" if "{" in line else "block"
    if TS_PATTERNS["export_default"].search(line):
        return "class" if "class" in line else "function"
    if TS_PATTERNS["function_decl"].search(line) or TS_PATTERNS["arrow_function"].search(line):
        return "function"
    return "block"


def find_construct_end(lines: list[str], start_index: int) -> int:
    """
    Find the last line of the construct starting at ``start_index``.

    Ends at the matching closing brace, at a ';' before any brace was opened,
    or just before the next construct when no brace was ever opened.
    """
    scanner = BraceScanner(JS_PROFILE)

    for index in range(start_index, len(lines)):
        line = lines[index]
        if (
            index > start_index
            and not scanner.found_open
            and scanner.in_code
            and is_construct_start(line)
        ):
            return index - 1
        if scanner.feed(line) is not None:
            return index

    return len(lines) - 1


def attach_leading_trivia(lines: list[str], index: int, floor: int) -> int:
    """Extend a construct start upward over contiguous comment/decorator lines."""
    start = index
    while start - 1 >= floor:
        previous = lines[start - 1]
        stripped = previous.strip()
        if stripped.startswith(_LEADING_TRIVIA) or (previous.startswith("@") and stripped):
            start -= 1
        else:
            break
    return start


class TsJsHeuristicStrategy(ChunkingStrategy):
    """Heuristic strategy for TypeScript and JavaScript."""

    name = "ts_js_heuristic"

    def find_boundaries(self, lines: list[str]) -> list[Boundary]:
        boundaries: list[Boundary] = []
        cursor = 0
        index = 0

        while index < len(lines):
            line = lines[index]
            if not is_construct_start(line):
                index += 1
                continue

            start = attach_leading_trivia(lines, index, cursor)
            end = find_construct_end(lines, index)
            boundaries.append(Boundary(start=start, end=end, chunk_type=get_chunk_type(line.strip())))

            index = end + 1
            cursor = index

        return boundaries


__all__ = [
    "TS_PATTERNS",
    "TsJsHeuristicStrategy",
    "is_construct_start",
    "get_chunk_type",
    "find_construct_end",
    "attach_leading_trivia",
]
