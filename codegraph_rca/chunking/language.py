"""Language detection and indexing filters."""

from codegraph_rca.chunking.constants import EXCLUDED_PATH_PATTERNS, EXTENSION_TO_LANGUAGE


def detect_language(file_path: str) -> str | None:
    """
    Detect programming language from file extension.

    Args:
        file_path: Path or bare extension (e.g. "src/app.ts" or ".ts")

    Returns:
        Language name, or None for unknown extensions
    """
    last_dot = file_path.rfind(".")
    if last_dot == -1:
        return None
    return EXTENSION_TO_LANGUAGE.get(file_path[last_dot:])


def should_index_file(path: str) -> bool:
    """Check if a file should be indexed based on path patterns and extension."""
    normalized = path.replace("\\", "/")
    if any(pattern.search(normalized) for pattern in EXCLUDED_PATH_PATTERNS):
        return False
    return detect_language(normalized) is not None
