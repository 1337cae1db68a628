"""
Code Change Correlator

Correlates an alert with recent code changes using:
- Temporal proximity (exponential decay)
- Semantic similarity (vector search over indexed chunks)
- File path matching (stack traces → changed files)

The embedding model is injected as an async callable; this module decides
what to search for, never how to embed it.
"""

from collections.abc import Awaitable, Callable, Sequence
from datetime import datetime, timedelta

from codegraph_rca.common.observability import get_logger
from codegraph_rca.common.types import validate_embedding
from codegraph_rca.config import CorrelationConfig, get_settings
from codegraph_rca.rca.constants import (
    MAX_CHUNK_CONTENT_LENGTH,
    MIN_CORRELATION_SCORE,
    TEMPORAL_HALF_LIFE_DAYS,
)
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
    SimilarityChunk,
)
from codegraph_rca.rca.scoring import (
    as_utc,
    build_search_query,
    calculate_combined_score,
    calculate_path_match_score,
    calculate_semantic_score,
    calculate_temporal_score,
    extract_paths_from_stack_traces,
)
from codegraph_rca.storage.vector_store import PgVectorStore

logger = get_logger(__name__)

EmbedQuery = Callable[[str], Awaitable[Sequence[float]]]


# ============================================================
# Candidate Scoring
# ============================================================


def score_candidate(
    candidate: Candidate,
    alert_time: datetime,
    relevant_chunks: Sequence[SimilarityChunk],
    stack_trace_paths: set[str],
    weights: CorrelationWeights = DEFAULT_WEIGHTS,
    half_life: float = TEMPORAL_HALF_LIFE_DAYS,
) -> ScoredCandidate:
    signals = CorrelationSignals(
        temporal=calculate_temporal_score(candidate.timestamp, alert_time, half_life),
        semantic=calculate_semantic_score(candidate.files_changed, relevant_chunks),
        path_match=calculate_path_match_score(candidate.files_changed, stack_trace_paths),
    )
    return ScoredCandidate(
        candidate=candidate,
        signals=signals,
        score=calculate_combined_score(signals, weights),
    )


def rank_candidates(
    candidates: Sequence[Candidate],
    alert_time: datetime,
    relevant_chunks: Sequence[SimilarityChunk],
    stack_trace_paths: set[str],
    weights: CorrelationWeights = DEFAULT_WEIGHTS,
    half_life: float = TEMPORAL_HALF_LIFE_DAYS,
    min_score: float = MIN_CORRELATION_SCORE,
    limit: int | None = None,
) -> list[ScoredCandidate]:
    """
    Score candidates, drop those below ``min_score`` and sort by score (desc).

    Ties keep input order.
    """
    scored = [
        score_candidate(candidate, alert_time, relevant_chunks, stack_trace_paths, weights, half_life)
        for candidate in candidates
    ]
    kept = sorted((s for s in scored if s.score >= min_score), key=lambda s: s.score, reverse=True)
    return kept if limit is None else kept[:limit]


# ============================================================
# Correlator
# ============================================================


class CodeChangeCorrelator:
    """
    Alert → code change correlation.

    Usage:
        correlator = CodeChangeCorrelator(vector_store, embed_query=provider.embed)
        report = await correlator.correlate(
            repo_id, alert_time, error_patterns, endpoints, commits, pull_requests
        )

    Tunables come from ``get_settings().correlation`` unless a config is passed.
    """

    def __init__(
        self,
        vector_store: PgVectorStore,
        embed_query: EmbedQuery,
        weights: CorrelationWeights | None = None,
        config: CorrelationConfig | None = None,
    ):
        self.vector_store = vector_store
        self.embed_query = embed_query
        self.config = config or get_settings().correlation
        self.weights = weights or CorrelationWeights(
            temporal=self.config.weight_temporal,
            semantic=self.config.weight_semantic,
            path_match=self.config.weight_path_match,
        )

    async def correlate(
        self,
        repo_id: str,
        alert_time: datetime,
        error_patterns: Sequence[ErrorPattern],
        endpoints: Sequence[Endpoint],
        commits: Sequence[Candidate],
        pull_requests: Sequence[Candidate],
        lookback_days: int | None = None,
    ) -> CorrelationReport:
        """
        Rank commits and PRs inside the lookback window by correlation score.

        A failing vector search is logged and correlation continues without
        semantic evidence.
        """
        lookback_days = lookback_days if lookback_days is not None else self.config.lookback_days
        alert_time = as_utc(alert_time)
        cutoff = alert_time - timedelta(days=lookback_days)

        logger.info(f"Starting correlation for repo {repo_id} (lookback {lookback_days} days)")

        search_query = build_search_query(error_patterns, endpoints)
        relevant_chunks = await self._search(repo_id, search_query)

        stack_trace_paths = extract_paths_from_stack_traces(e.stack_trace for e in error_patterns)
        logger.debug(f"Extracted {len(stack_trace_paths)} paths from stack traces")

        recent_commits = [c for c in commits if cutoff <= as_utc(c.timestamp) <= alert_time]
        recent_prs = [p for p in pull_requests if cutoff <= as_utc(p.timestamp) <= alert_time]

        rank = dict(
            alert_time=alert_time,
            relevant_chunks=relevant_chunks,
            stack_trace_paths=stack_trace_paths,
            weights=self.weights,
            half_life=self.config.temporal_half_life_days,
            min_score=self.config.min_correlation_score,
        )
        suspected_commits = rank_candidates(recent_commits, limit=self.config.max_suspected_commits, **rank)
        suspected_prs = rank_candidates(recent_prs, limit=self.config.max_suspected_prs, **rank)

        logger.info(
            f"Correlation complete: {len(suspected_commits)}/{len(recent_commits)} commits, "
            f"{len(suspected_prs)}/{len(recent_prs)} PRs"
        )

        return CorrelationReport(
            suspected_commits=suspected_commits,
            suspected_prs=suspected_prs,
            relevant_code_chunks=relevant_chunks,
            search_query=search_query,
            commits_analyzed=len(recent_commits),
            prs_analyzed=len(recent_prs),
        )

    async def _search(self, repo_id: str, search_query: str) -> list[RelevantCodeChunk]:
        if not search_query.strip():
            return []

        try:
            query_embedding = validate_embedding(await self.embed_query(search_query))
            results = await self.vector_store.search_similar_chunks(
                repo_id,
                query_embedding,
                top_k=self.config.max_relevant_chunks,
                min_similarity=self.config.min_chunk_similarity,
            )
        except Exception as e:
            logger.warning(f"Vector search failed, continuing without semantic signal: {e}")
            return []

        logger.debug(f"Found {len(results)} relevant code chunks")
        return [
            RelevantCodeChunk(
                file_path=r.file_path,
                content=r.content[:MAX_CHUNK_CONTENT_LENGTH],
                start_line=r.start_line,
                end_line=r.end_line,
                similarity=r.similarity,
            )
            for r in results
        ]


__all__ = ["CodeChangeCorrelator", "EmbedQuery", "rank_candidates", "score_candidate"]
