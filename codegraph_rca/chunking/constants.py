"""
Code Chunking Constants
"""

import re

# Default chunking limits
CHUNK_DEFAULTS = {
    "max_lines": 500,
    "max_bytes": 10 * 1024,  # 10KB
    "min_lines": 10,
}

# Language detection mapping from file extension
EXTENSION_TO_LANGUAGE: dict[str, str] = {
    ".ts": "typescript",
    ".tsx": "typescript",
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".py": "python",
    ".go": "go",
    ".rs": "rust",
    ".java": "java",
}

# Languages with brace-matching heuristic chunking
TS_LANGUAGES = frozenset({"typescript", "javascript"})

# Languages with indentation/keyword heuristic chunking
HEURISTIC_LANGUAGES = frozenset({"python", "go"})

# Excluded path patterns for indexing
EXCLUDED_PATH_PATTERNS = (
    re.compile(r"node_modules"),
    re.compile(r"\.git/"),
    re.compile(r"dist/"),
    re.compile(r"build/"),
    re.compile(r"\.next/"),
    re.compile(r"\.min\."),
    re.compile(r"package-lock\.json$"),
    re.compile(r"pnpm-lock\.yaml$"),
    re.compile(r"yarn\.lock$"),
    re.compile(r"\.d\.ts$"),
)
