"""
Code Chunker

Entry points for splitting source files into embedding-sized chunks.

Strategy selection by language:
- typescript / javascript → TsJsHeuristicStrategy (brace matching)
- python / go             → PyGoHeuristicStrategy (indentation / braces)
- anything else           → FallbackStrategy (line based)

Heuristic failures never reach the caller: the file is re-chunked with the
fallback strategy and a warning is logged.
"""

from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor

from codegraph_rca.chunking.base import ChunkingStrategy
from codegraph_rca.chunking.constants import HEURISTIC_LANGUAGES, TS_LANGUAGES
from codegraph_rca.chunking.fallback import FallbackStrategy
from codegraph_rca.chunking.heuristic import PyGoHeuristicStrategy
from codegraph_rca.chunking.language import detect_language, should_index_file
from codegraph_rca.chunking.models import ChunkOptions, CodeChunk
from codegraph_rca.chunking.postprocess import to_code_chunks
from codegraph_rca.chunking.typescript import TsJsHeuristicStrategy
from codegraph_rca.common.logging_config import BatchLogger
from codegraph_rca.common.observability import get_logger

logger = get_logger(__name__)

DEFAULT_MAX_WORKERS = 4

# ============================================================
# Strategy Registry
# ============================================================

_FALLBACK = FallbackStrategy()
_STRATEGIES: dict[str, ChunkingStrategy] = {}


def register_strategy(language: str, strategy: ChunkingStrategy) -> None:
    """Register (or replace) the strategy used for a language."""
    _STRATEGIES[language] = strategy


def get_strategy(language: str | None) -> ChunkingStrategy:
    """Return the strategy for a language, falling back to line-based chunking."""
    if language is None:
        return _FALLBACK
    return _STRATEGIES.get(language, _FALLBACK)


_ts_js = TsJsHeuristicStrategy()
for _language in TS_LANGUAGES:
    register_strategy(_language, _ts_js)
for _language in HEURISTIC_LANGUAGES:
    register_strategy(_language, PyGoHeuristicStrategy(_language))


# ============================================================
# Chunking
# ============================================================


def chunk_code(
    content: str,
    file_path: str,
    language: str | None = None,
    options: ChunkOptions | None = None,
) -> list[CodeChunk]:
    """
    Chunk source code into semantic units.

    Args:
        content: File content
        file_path: Repository-relative path (used for language detection)
        language: Explicit language (auto-detected when omitted)
        options: Size bounds (defaults: 500 lines / 10KB / min 10 lines)

    Returns:
        Chunks covering every line of the file, in order
    """
    options = options or ChunkOptions()
    language = language or detect_language(file_path)
    strategy = get_strategy(language)

    try:
        raw = strategy.chunk(content, options)
    except Exception as e:
        if strategy is _FALLBACK:
            raise
        logger.warning(
            "heuristic_chunking_failed",
            file_path=file_path,
            strategy=strategy.name,
            error=str(e),
        )
        raw = _FALLBACK.chunk(content, options)

    return to_code_chunks(raw, file_path, language)


def _chunk_one(item: tuple[str, str], options: ChunkOptions) -> tuple[str, list[CodeChunk]]:
    path, content = item
    return path, chunk_code(content, path, options=options)


def chunk_files(
    files: Iterable[tuple[str, str]],
    options: ChunkOptions | None = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> dict[str, list[CodeChunk]]:
    """
    Chunk many files in parallel on a thread pool.

    Args:
        files: (path, content) pairs
        options: Size bounds shared by every file
        max_workers: Thread pool size

    Returns:
        Chunks keyed by path, in input order. Files rejected by
        should_index_file are skipped.
    """
    options = options or ChunkOptions()
    indexable = [(path, content) for path, content in files if should_index_file(path)]
    results: dict[str, list[CodeChunk]] = {}

    with BatchLogger(logger, "chunk_files") as batch:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            for path, chunks in executor.map(lambda item: _chunk_one(item, options), indexable):
                results[path] = chunks
                batch.record(file_path=path, chunks=len(chunks))

    return results


__all__ = [
    "DEFAULT_MAX_WORKERS",
    "chunk_code",
    "chunk_files",
    "get_strategy",
    "register_strategy",
]
