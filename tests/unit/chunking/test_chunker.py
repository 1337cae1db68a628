"""
Tests for chunk_code / chunk_files entry points
"""

import pytest

from codegraph_rca.chunking import (
    ChunkingStrategy,
    ChunkOptions,
    FallbackStrategy,
    PyGoHeuristicStrategy,
    TsJsHeuristicStrategy,
    chunk_code,
    chunk_files,
    generate_content_hash,
    get_strategy,
    register_strategy,
)
from codegraph_rca.chunking import chunker


class ExplodingStrategy(ChunkingStrategy):
    """Always fails during boundary detection"""

    name = "exploding"

    def find_boundaries(self, lines):
        raise RuntimeError("boom")


@pytest.fixture
def custom_language():
    """Registers a throwaway strategy slot and removes it afterwards"""
    yield "zig"
    chunker._STRATEGIES.pop("zig", None)


def _assert_covers(chunks, content):
    assert chunks[0].start_line == 1
    assert chunks[-1].end_line == len(content.split("\n"))
    for previous, current in zip(chunks, chunks[1:]):
        assert current.start_line == previous.end_line + 1
    assert "\n".join(c.content for c in chunks) == content


class TestStrategyRegistry:
    def test_builtin_strategies(self):
        assert isinstance(get_strategy("typescript"), TsJsHeuristicStrategy)
        assert get_strategy("typescript") is get_strategy("javascript")
        assert isinstance(get_strategy("python"), PyGoHeuristicStrategy)
        assert isinstance(get_strategy("go"), PyGoHeuristicStrategy)

    def test_unknown_language_falls_back(self):
        assert isinstance(get_strategy("rust"), FallbackStrategy)
        assert isinstance(get_strategy(None), FallbackStrategy)

    def test_register_strategy(self, custom_language):
        strategy = TsJsHeuristicStrategy()
        register_strategy(custom_language, strategy)
        assert get_strategy(custom_language) is strategy


class TestChunkCode:
    """Single-file chunking"""

    def test_small_file_one_module_chunk(self):
        content = "export const x = 1;\n"
        chunks = chunk_code(content, "src/x.ts")

        assert len(chunks) == 1
        chunk = chunks[0]
        assert chunk.chunk_type == "module"
        assert chunk.language == "typescript"
        assert chunk.file_path == "src/x.ts"
        assert (chunk.start_line, chunk.end_line) == (1, 2)
        assert chunk.content_hash == generate_content_hash(content)

    def test_explicit_language_overrides_extension(self):
        chunks = chunk_code("def f():\n    pass", "script.txt", language="python")
        assert chunks[0].language == "python"

    def test_unknown_extension_uses_line_fallback(self):
        content = "\n".join(f"fn f{i}() {{}}" for i in range(30))
        chunks = chunk_code(content, "src/lib.rs", options=ChunkOptions(max_lines=10))

        assert [(c.start_line, c.end_line) for c in chunks] == [(1, 10), (11, 20), (21, 30)]
        assert all(c.chunk_type == "block" for c in chunks)
        assert all(c.language == "rust" for c in chunks)

    def test_no_constructs_falls_back(self):
        """A TS file without top-level constructs is still fully chunked"""
        content = "\n".join(f"doSomething({i});" for i in range(30))
        chunks = chunk_code(content, "src/script.ts", options=ChunkOptions(max_lines=10))

        assert len(chunks) == 3
        assert all(c.chunk_type == "block" for c in chunks)
        assert all(c.language == "typescript" for c in chunks)
        _assert_covers(chunks, content)

    def test_strategy_exception_falls_back(self, custom_language):
        register_strategy(custom_language, ExplodingStrategy())
        content = "\n".join(f"const a{i} = {i};" for i in range(25))

        chunks = chunk_code(content, "main.zig", language=custom_language, options=ChunkOptions(max_lines=10))

        assert [(c.start_line, c.end_line) for c in chunks] == [(1, 10), (11, 20), (21, 25)]
        _assert_covers(chunks, content)

    def test_utf8_bytes_counted(self):
        content = "\n".join(["// 한글 주석"] * 4)
        chunks = chunk_code(content, "a.js", options=ChunkOptions(max_bytes=40, min_lines=0))

        assert all(len(c.content.encode("utf-8")) <= 40 for c in chunks)
        _assert_covers(chunks, content)

    def test_trailing_newline_preserved(self):
        content = "\n".join(f"line {i}" for i in range(25)) + "\n"
        chunks = chunk_code(content, "notes.rs", options=ChunkOptions(max_lines=10, min_lines=0))

        _assert_covers(chunks, content)
        assert chunks[-1].content.endswith("\n")


class TestChunkFiles:
    """Parallel multi-file chunking"""

    def test_filters_and_preserves_order(self):
        files = [
            ("src/a.ts", "export function a() {\n  return 1;\n}"),
            ("node_modules/pkg/index.js", "module.exports = {};"),
            ("README.md", "# readme"),
            ("svc/b.py", "def b():\n    return 2"),
        ]

        results = chunk_files(files, max_workers=2)

        assert list(results) == ["src/a.ts", "svc/b.py"]
        assert results["src/a.ts"][0].language == "typescript"
        assert results["svc/b.py"][0].language == "python"

    def test_shared_options(self):
        content = "\n".join(f"x{i}" for i in range(20))
        results = chunk_files([("a.rs", content), ("b.rs", content)], ChunkOptions(max_lines=5, min_lines=0))

        assert all(len(chunks) == 4 for chunks in results.values())

    def test_empty_input(self):
        assert chunk_files([]) == {}
