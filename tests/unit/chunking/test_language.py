"""
Tests for language detection and index filtering
"""

import pytest

from codegraph_rca.chunking import detect_language, should_index_file


class TestDetectLanguage:
    """Extension → language mapping"""

    @pytest.mark.parametrize(
        "path,expected",
        [
            ("src/app.ts", "typescript"),
            ("src/App.tsx", "typescript"),
            ("lib/index.js", "javascript"),
            ("lib/esm.mjs", "javascript"),
            ("service/main.py", "python"),
            ("cmd/server/main.go", "go"),
            ("src/lib.rs", "rust"),
            ("Main.java", "java"),
            (".ts", "typescript"),
        ],
    )
    def test_known_extensions(self, path, expected):
        assert detect_language(path) == expected

    def test_unknown_extension(self):
        assert detect_language("README.md") is None

    def test_no_extension(self):
        assert detect_language("Makefile") is None


class TestShouldIndexFile:
    """Path exclusion rules"""

    def test_source_file_indexed(self):
        assert should_index_file("src/services/user.ts")

    @pytest.mark.parametrize(
        "path",
        [
            "node_modules/express/index.js",
            "packages/web/node_modules/react/index.js",
            "dist/bundle.js",
            "build/out.js",
            ".next/server/page.js",
            "public/vendor.min.js",
            "types/global.d.ts",
        ],
    )
    def test_excluded_paths(self, path):
        assert not should_index_file(path)

    def test_unknown_language_not_indexed(self):
        assert not should_index_file("docs/guide.md")

    def test_windows_separators_normalized(self):
        assert not should_index_file("web\\node_modules\\lib\\a.js")
        assert should_index_file("src\\handlers\\user.ts")
