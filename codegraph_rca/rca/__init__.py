"""Root cause analysis: alert → code change correlation."""

from codegraph_rca.rca.constants import (
    MIN_CORRELATION_SCORE,
    PATH_FILENAME_MATCH_CREDIT,
    SEMANTIC_PARTIAL_MATCH_PENALTY,
    TEMPORAL_HALF_LIFE_DAYS,
)
from codegraph_rca.rca.correlator import CodeChangeCorrelator, rank_candidates, score_candidate
from codegraph_rca.rca.models import (
    DEFAULT_WEIGHTS,
    Candidate,
    CorrelationReport,
    CorrelationSignals,
    CorrelationWeights,
    Endpoint,
    ErrorPattern,
    RelevantCodeChunk,
    ScoredCandidate,
)
from codegraph_rca.rca.scoring import (
    build_search_query,
    calculate_combined_score,
    calculate_path_match_score,
    calculate_semantic_score,
    calculate_temporal_score,
    extract_paths_from_stack_traces,
)

__all__ = [
    "MIN_CORRELATION_SCORE",
    "PATH_FILENAME_MATCH_CREDIT",
    "SEMANTIC_PARTIAL_MATCH_PENALTY",
    "TEMPORAL_HALF_LIFE_DAYS",
    "CodeChangeCorrelator",
    "rank_candidates",
    "score_candidate",
    "DEFAULT_WEIGHTS",
    "Candidate",
    "CorrelationReport",
    "CorrelationSignals",
    "CorrelationWeights",
    "Endpoint",
    "ErrorPattern",
    "RelevantCodeChunk",
    "ScoredCandidate",
    "build_search_query",
    "calculate_combined_score",
    "calculate_path_match_score",
    "calculate_semantic_score",
    "calculate_temporal_score",
    "extract_paths_from_stack_traces",
]
