"""
RCA Scoring

Correlation scoring for mapping alerts to code changes: a weighted
combination of temporal, semantic and path-based signals.

All functions are pure and never raise; every score is clamped to [0, 1]
and defaults to 0 for empty inputs.
"""

import math
import re
from collections.abc import Iterable, Sequence
from datetime import datetime, timezone

from codegraph_rca.rca.constants import (
    GENERIC_FUNCTION_NAMES,
    MAX_ENDPOINTS_IN_QUERY,
    MAX_ERROR_PATTERNS_IN_QUERY,
    MAX_FUNCTION_NAMES_PER_ERROR,
    MAX_SEARCH_QUERY_LENGTH,
    MIN_ERROR_MESSAGE_LENGTH,
    NON_FILE_PATH_MARKERS,
    PATH_FILENAME_MATCH_CREDIT,
    SEMANTIC_PARTIAL_MATCH_PENALTY,
    TEMPORAL_HALF_LIFE_DAYS,
)
from codegraph_rca.rca.models import (
    DEFAULT_WEIGHTS,
    CorrelationSignals,
    CorrelationWeights,
    Endpoint,
    ErrorPattern,
    SimilarityChunk,
)

SECONDS_PER_DAY = 24 * 60 * 60

STACK_PATH_PATTERNS = (
    re.compile(r"at\s+\S+\s+\(([^:)]+):\d+:\d+\)"),  # at fn (path:line:col)
    re.compile(r"at\s+([^:(\s]+):\d+:\d+"),  # at path:line:col
    re.compile(r"(?:File|Source):\s*([^\s:]+)", re.IGNORECASE),  # File: path
    re.compile(r"([a-zA-Z0-9_\-./]+\.[a-z]{2,4}):\d+"),  # path.ext:line
    re.compile(r'File "([^"]+)", line \d+'),  # Python traceback
)

FUNCTION_NAME_PATTERN = re.compile(r"at\s+([a-zA-Z_$][a-zA-Z0-9_$]*(?:\.[a-zA-Z_$][a-zA-Z0-9_$]*)*)")

_PLACEHOLDER = re.compile(r"<[^>]+>")
_LONG_NUMBER = re.compile(r"\d{10,}")
_WHITESPACE = re.compile(r"\s+")
_ENDPOINT_SEPARATORS = re.compile(r"[/\-_.]")


def clamp_score(value: float) -> float:
    """Clamp to [0, 1]; NaN becomes 0."""
    if value != value:  # NaN
        return 0.0
    return max(0.0, min(1.0, float(value)))


def normalize_path(path: str) -> str:
    """Normalize a file path for comparison."""
    if path.startswith("./"):
        path = path[2:]
    if path.startswith("/"):
        path = path[1:]
    return path.replace("\\", "/").lower()


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# ============================================================
# Temporal Scoring
# ============================================================


def calculate_temporal_score(
    change_time: datetime,
    alert_time: datetime,
    half_life: float = TEMPORAL_HALF_LIFE_DAYS,
) -> float:
    """
    Temporal score using exponential decay: exp(-days_ago / half_life).

    Args:
        change_time: When the change occurred
        alert_time: When the alert triggered
        half_life: Decay constant in days

    Returns:
        1.0 for a change at alert time, 0 for changes after the alert
    """
    diff_seconds = (as_utc(alert_time) - as_utc(change_time)).total_seconds()
    if diff_seconds < 0:
        return 0.0

    if half_life <= 0:
        return 1.0 if diff_seconds == 0 else 0.0

    days_ago = diff_seconds / SECONDS_PER_DAY
    return clamp_score(math.exp(-days_ago / half_life))


# ============================================================
# Semantic Scoring
# ============================================================


def calculate_semantic_score(files_changed: Sequence[str], relevant_chunks: Iterable[SimilarityChunk]) -> float:
    """
    Semantic score from changed files vs. vector search hits.

    Exact path match uses the best chunk similarity for that file; otherwise a
    suffix match in either direction counts with a penalty. The result is the
    maximum across changed files.
    """
    similarity_by_path: dict[str, float] = {}
    for chunk in relevant_chunks:
        path = normalize_path(chunk.file_path)
        similarity_by_path[path] = max(similarity_by_path.get(path, 0.0), clamp_score(chunk.similarity))

    if not files_changed or not similarity_by_path:
        return 0.0

    best = 0.0
    for file_path in files_changed:
        normalized = normalize_path(file_path)

        exact = similarity_by_path.get(normalized)
        if exact is not None:
            best = max(best, exact)
            continue

        for chunk_path, similarity in similarity_by_path.items():
            if normalized.endswith(chunk_path) or chunk_path.endswith(normalized):
                best = max(best, similarity * SEMANTIC_PARTIAL_MATCH_PENALTY)

    return clamp_score(best)


# ============================================================
# Path Match Scoring
# ============================================================


def is_valid_file_path(path: str) -> bool:
    """Check if a stack frame location looks like a repository file."""
    if "." not in path:
        return False
    return not any(marker in path for marker in NON_FILE_PATH_MARKERS)


def extract_paths_from_stack_traces(stack_traces: Iterable[str | None]) -> set[str]:
    """
    Extract normalized file paths from stack traces.

    Recognized forms:
        at functionName (path/to/file.ts:123:45)
        at path/to/file.ts:123:45
        File: path/to/file.ts
        path/to/file.ts:123
        File "path/to/file.py", line 12
    """
    paths: set[str] = set()
    for stack in stack_traces:
        if not stack:
            continue
        for pattern in STACK_PATH_PATTERNS:
            for match in pattern.finditer(stack):
                path = match.group(1)
                if path and is_valid_file_path(path):
                    paths.add(normalize_path(path))
    return paths


def _file_name(path: str) -> str:
    return path.rsplit("/", 1)[-1]


def calculate_path_match_score(files_changed: Sequence[str], stack_trace_paths: set[str]) -> float:
    """
    Path match score: share of stack trace paths touched by the change.

    Exact path match earns a full point, file-name-only match partial credit.
    """
    if not files_changed or not stack_trace_paths:
        return 0.0

    normalized_changes = {normalize_path(p) for p in files_changed}
    changed_names = {_file_name(p) for p in normalized_changes}

    points = 0.0
    for trace_path in stack_trace_paths:
        if trace_path in normalized_changes:
            points += 1
            continue
        trace_name = _file_name(trace_path)
        if trace_name and trace_name in changed_names:
            points += PATH_FILENAME_MATCH_CREDIT

    return clamp_score(min(points / len(stack_trace_paths), 1.0))


# ============================================================
# Combined Scoring
# ============================================================


def calculate_combined_score(
    signals: CorrelationSignals,
    weights: CorrelationWeights = DEFAULT_WEIGHTS,
) -> float:
    """Weighted linear sum of the signals (weights are not renormalized)."""
    return clamp_score(
        signals.temporal * weights.temporal
        + signals.semantic * weights.semantic
        + signals.path_match * weights.path_match
    )


# ============================================================
# Query Building
# ============================================================


def extract_function_names(stack_trace: str) -> list[str]:
    names = []
    for match in FUNCTION_NAME_PATTERN.finditer(stack_trace):
        name = match.group(1)
        if len(name) > 2 and name not in GENERIC_FUNCTION_NAMES:
            names.append(name)
    return names


def build_search_query(
    error_patterns: Sequence[ErrorPattern],
    endpoints: Sequence[Endpoint],
    max_length: int = MAX_SEARCH_QUERY_LENGTH,
) -> str:
    """
    Build a semantic search query from error patterns and affected endpoints.

    Args:
        error_patterns: Error patterns, most impactful first
        endpoints: Affected endpoints, most impactful first
        max_length: Maximum query length in characters

    Returns:
        Space-joined, deduplicated search terms
    """
    parts: list[str] = []

    for error in error_patterns[:MAX_ERROR_PATTERNS_IN_QUERY]:
        cleaned = _PLACEHOLDER.sub("", error.message)
        cleaned = _LONG_NUMBER.sub("", cleaned)
        cleaned = _WHITESPACE.sub(" ", cleaned).strip()
        if len(cleaned) > MIN_ERROR_MESSAGE_LENGTH:
            parts.append(cleaned)

        if error.stack_trace:
            parts.extend(extract_function_names(error.stack_trace)[:MAX_FUNCTION_NAMES_PER_ERROR])

    for endpoint in endpoints[:MAX_ENDPOINTS_IN_QUERY]:
        parts.extend(term for term in _ENDPOINT_SEPARATORS.split(endpoint.name) if len(term) > 2)

    query = " ".join(dict.fromkeys(parts))
    return query[: max(max_length, 0)]


__all__ = [
    "STACK_PATH_PATTERNS",
    "as_utc",
    "clamp_score",
    "normalize_path",
    "calculate_temporal_score",
    "calculate_semantic_score",
    "is_valid_file_path",
    "extract_paths_from_stack_traces",
    "calculate_path_match_score",
    "calculate_combined_score",
    "extract_function_names",
    "build_search_query",
]
