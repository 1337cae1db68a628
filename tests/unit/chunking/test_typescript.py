"""
Tests for TypeScript / JavaScript heuristic chunking
"""

import pytest

from codegraph_rca.chunking import ChunkOptions, TsJsHeuristicStrategy, chunk_code
from codegraph_rca.chunking.base import Boundary
from codegraph_rca.chunking.typescript import (
    attach_leading_trivia,
    find_construct_end,
    get_chunk_type,
    is_construct_start,
)

SAMPLE_TS = "\n".join(
    [
        'import { a } from "./a";',
        "",
        "/**",
        " * Adds numbers.",
        " */",
        "export function add(x: number, y: number): number {",
        '  const s = "}";',
        "  return x + y;",
        "}",
        "",
        "export const double = (n: number) => n * 2;",
        "",
        "@Component()",
        "export class Widget {",
        "  render() {",
        '    return `${"{"}`;',
        "  }",
        "}",
    ]
)


def _generated_functions(count: int, body_lines: int) -> str:
    lines = []
    for n in range(count):
        lines.append(f"export function fn{n}() {{")
        lines.extend(f"  const v{k} = {k};" for k in range(body_lines))
        lines.append("}")
    return "\n".join(lines)


def _component(name: str, body_lines: int) -> str:
    lines = [f"export const {name} = ({{ title }}: Props) => {{"]
    lines.extend(f"  const v{k} = title.length + {k};" for k in range(body_lines))
    lines.append("};")
    return "\n".join(lines)


class TestConstructDetection:
    """Top-level pattern matching"""

    @pytest.mark.parametrize(
        "line",
        [
            "function foo() {",
            "export async function load<T>(id: string) {",
            "export const handler = async (req) => {",
            "const add = (a, b) => a + b;",
            "export default class App {",
            "export abstract class Base {",
            "interface Props {",
            "export type Result<T> = {",
            "export const enum Color {",
        ],
    )
    def test_construct_start(self, line):
        assert is_construct_start(line)

    @pytest.mark.parametrize(
        "line",
        [
            "  function inner() {",
            "const x = 1;",
            "import { a } from './a';",
            "// function commented() {",
            "",
        ],
    )
    def test_not_construct_start(self, line):
        assert not is_construct_start(line)

    @pytest.mark.parametrize(
        "line,expected",
        [
            ("class A {", "class"),
            ("export interface B {", "class"),
            ("type T = string;", "block"),
            ("type P = {", "class"),
            ("function f() {", "function"),
            ("export default function App() {", "function"),
            ("export default class Page {", "class"),
            ("const f = () => {", "function"),
            ("enum Color {", "block"),
        ],
    )
    def test_chunk_type(self, line, expected):
        assert get_chunk_type(line) == expected


class TestConstructEnd:
    """Construct extent"""

    def test_arrow_without_braces_ends_at_semicolon(self):
        lines = ["const f = (x) => x * 2;", "const g = 1;"]
        assert find_construct_end(lines, 0) == 0

    def test_braceless_construct_stops_before_next_construct(self):
        lines = [
            "export const f = (x) =>",
            "  x * 2",
            "export function g() {",
            "}",
        ]
        assert find_construct_end(lines, 0) == 1

    def test_type_alias_union_over_lines(self):
        lines = [
            "type Status =",
            '  | "ok"',
            '  | "error";',
            "const x = 1;",
        ]
        assert find_construct_end(lines, 0) == 2

    def test_inline_object_type_parameter(self):
        lines = ["export function f(opts: { a: string }) {", "  return opts.a;", "}"]
        assert find_construct_end(lines, 0) == 2

    def test_destructured_component(self):
        lines = _component("Card", body_lines=2).split("\n") + ["export const x = 1;"]
        assert find_construct_end(lines, 0) == 3


class TestLeadingTrivia:
    """JSDoc, comments and decorators travel with their construct"""

    def test_jsdoc_attached(self):
        lines = ["const x = 1;", "/**", " * Doc.", " */", "function f() {}"]
        assert attach_leading_trivia(lines, 4, 0) == 1

    def test_decorators_attached(self):
        lines = ["", "@Injectable()", "@Other()", "export class S {}"]
        assert attach_leading_trivia(lines, 3, 0) == 1

    def test_floor_respected(self):
        lines = ["// a", "// b", "function f() {}"]
        assert attach_leading_trivia(lines, 2, 1) == 1


class TestTsJsHeuristicStrategy:
    """Boundary detection and chunking"""

    def test_find_boundaries(self):
        strategy = TsJsHeuristicStrategy()
        boundaries = strategy.find_boundaries(SAMPLE_TS.split("\n"))

        assert boundaries == [
            Boundary(start=2, end=8, chunk_type="function"),
            Boundary(start=10, end=10, chunk_type="function"),
            Boundary(start=12, end=17, chunk_type="class"),
        ]

    def test_string_literal_brace_does_not_end_function(self):
        """`"}"` inside a function must not close it early"""
        strategy = TsJsHeuristicStrategy()
        raw = strategy.chunk(SAMPLE_TS, ChunkOptions(max_lines=10, min_lines=0))

        spans = [(c.start_line, c.end_line, c.chunk_type) for c in raw]
        assert spans == [
            (1, 2, "block"),
            (3, 9, "function"),
            (10, 11, "function"),
            (12, 18, "class"),
        ]
        assert raw[1].content.endswith("  return x + y;\n}")

    def test_small_file_single_module_chunk(self):
        strategy = TsJsHeuristicStrategy()
        raw = strategy.chunk(SAMPLE_TS, ChunkOptions())

        assert len(raw) == 1
        assert raw[0].chunk_type == "module"
        assert raw[0].content == SAMPLE_TS

    def test_large_file_respects_max_lines(self):
        """600 lines, 20 functions of 30 lines each, max_lines=50"""
        content = _generated_functions(count=20, body_lines=28)
        assert len(content.split("\n")) == 600

        chunks = chunk_code(content, "src/big.ts", options=ChunkOptions(max_lines=50))

        assert len(chunks) == 20
        assert all(c.chunk_type == "function" for c in chunks)
        assert all(c.line_count <= 50 for c in chunks)
        assert chunks[0].start_line == 1
        assert chunks[-1].end_line == 600
        assert "\n".join(c.content for c in chunks) == content

    def test_oversized_function_split_into_blocks(self):
        content = _generated_functions(count=1, body_lines=118)

        chunks = chunk_code(content, "src/huge.ts", options=ChunkOptions(max_lines=50))

        assert [(c.start_line, c.end_line) for c in chunks] == [(1, 50), (51, 100), (101, 120)]
        assert all(c.chunk_type == "block" for c in chunks)

    def test_destructured_components_chunked_as_functions(self):
        """React-style `({ title }: Props) => {` components keep their body"""
        content = "\n".join([_component("Card", body_lines=30), _component("Panel", body_lines=30)])

        chunks = chunk_code(content, "src/cards.tsx", options=ChunkOptions(max_lines=40, min_lines=3))

        assert [(c.start_line, c.end_line, c.chunk_type) for c in chunks] == [
            (1, 32, "function"),
            (33, 64, "function"),
        ]
        assert chunks[0].content.endswith("};")
