"""
RCA Models

Signals, weights, candidates and correlation results.
"""

from datetime import datetime
from typing import Literal, Protocol

from pydantic import BaseModel, ConfigDict, Field, model_validator

from codegraph_rca.rca.constants import (
    DEFAULT_WEIGHT_PATH_MATCH,
    DEFAULT_WEIGHT_SEMANTIC,
    DEFAULT_WEIGHT_TEMPORAL,
    WEIGHT_SUM_TOLERANCE,
)

CandidateKind = Literal["commit", "pull_request"]


class SimilarityChunk(Protocol):
    """Anything carrying a file path and a similarity score."""

    file_path: str
    similarity: float


class CorrelationSignals(BaseModel):
    """Individual correlation signal scores, each in [0, 1]."""

    model_config = ConfigDict(frozen=True)

    temporal: float = 0.0
    semantic: float = 0.0
    path_match: float = 0.0


class CorrelationWeights(BaseModel):
    """Signal weights. Must sum to 1.0."""

    model_config = ConfigDict(frozen=True)

    temporal: float = Field(default=DEFAULT_WEIGHT_TEMPORAL, ge=0.0, le=1.0)
    semantic: float = Field(default=DEFAULT_WEIGHT_SEMANTIC, ge=0.0, le=1.0)
    path_match: float = Field(default=DEFAULT_WEIGHT_PATH_MATCH, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def _check_sum(self) -> "CorrelationWeights":
        total = self.temporal + self.semantic + self.path_match
        if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
            raise ValueError(f"correlation weights must sum to 1.0, got {total}")
        return self


DEFAULT_WEIGHTS = CorrelationWeights()


class ErrorPattern(BaseModel):
    message: str
    stack_trace: str | None = None


class Endpoint(BaseModel):
    name: str


class Candidate(BaseModel):
    """Commit or merged PR to score against an alert."""

    id: str
    timestamp: datetime
    files_changed: list[str] = Field(default_factory=list)
    kind: CandidateKind = "commit"
    title: str = ""


class ScoredCandidate(BaseModel):
    candidate: Candidate
    signals: CorrelationSignals
    score: float


class RelevantCodeChunk(BaseModel):
    """Search hit included in a correlation report (content truncated)."""

    file_path: str
    content: str
    start_line: int
    end_line: int
    similarity: float


class CorrelationReport(BaseModel):
    suspected_commits: list[ScoredCandidate] = Field(default_factory=list)
    suspected_prs: list[ScoredCandidate] = Field(default_factory=list)
    relevant_code_chunks: list[RelevantCodeChunk] = Field(default_factory=list)
    search_query: str = ""
    commits_analyzed: int = 0
    prs_analyzed: int = 0


__all__ = [
    "CandidateKind",
    "SimilarityChunk",
    "CorrelationSignals",
    "CorrelationWeights",
    "DEFAULT_WEIGHTS",
    "ErrorPattern",
    "Endpoint",
    "Candidate",
    "ScoredCandidate",
    "RelevantCodeChunk",
    "CorrelationReport",
]
