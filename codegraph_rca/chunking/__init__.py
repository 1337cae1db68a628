"""
Code Chunking

Heuristic, language-aware splitting of source files into chunks for
embedding. No AST parser: regex boundary detection plus brace / indentation
tracking, with a line-based fallback.
"""

from codegraph_rca.chunking.base import ChunkingStrategy
from codegraph_rca.chunking.boundary import BoundaryValidationError, ChunkBoundaryValidator
from codegraph_rca.chunking.chunker import chunk_code, chunk_files, get_strategy, register_strategy
from codegraph_rca.chunking.fallback import FallbackStrategy
from codegraph_rca.chunking.hashing import generate_content_hash
from codegraph_rca.chunking.heuristic import PyGoHeuristicStrategy
from codegraph_rca.chunking.language import detect_language, should_index_file
from codegraph_rca.chunking.models import ChunkOptions, ChunkType, CodeChunk
from codegraph_rca.chunking.typescript import TsJsHeuristicStrategy

__all__ = [
    "ChunkOptions",
    "ChunkType",
    "CodeChunk",
    "ChunkingStrategy",
    "TsJsHeuristicStrategy",
    "PyGoHeuristicStrategy",
    "FallbackStrategy",
    "ChunkBoundaryValidator",
    "BoundaryValidationError",
    "chunk_code",
    "chunk_files",
    "get_strategy",
    "register_strategy",
    "detect_language",
    "should_index_file",
    "generate_content_hash",
]
