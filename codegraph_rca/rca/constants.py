"""
RCA (Root Cause Analysis) Constants

Configuration constants for the code correlation scoring algorithm.
"""

# ============================================================
# Signal Weights
# ============================================================

# temporal: recency of the change (exponential decay)
# semantic: vector similarity between error context and changed code
# path_match: stack trace paths matching changed files
DEFAULT_WEIGHT_TEMPORAL = 0.3
DEFAULT_WEIGHT_SEMANTIC = 0.4
DEFAULT_WEIGHT_PATH_MATCH = 0.3

WEIGHT_SUM_TOLERANCE = 1e-6

# ============================================================
# Temporal Scoring
# ============================================================

# 0 days → 1.0, 3 days → 0.37, 7 days → 0.10, 14 days → 0.01
TEMPORAL_HALF_LIFE_DAYS = 3.0

DEFAULT_LOOKBACK_DAYS = 7

# ============================================================
# Tunable Match Factors
# ============================================================

# Multiplier for a suffix-only path match in semantic scoring
SEMANTIC_PARTIAL_MATCH_PENALTY = 0.9

# Points for a stack trace path whose file name (not full path) was changed
PATH_FILENAME_MATCH_CREDIT = 0.5

# ============================================================
# Result Filtering
# ============================================================

MIN_CORRELATION_SCORE = 0.2

MIN_CHUNK_SIMILARITY = 0.4

MAX_SUSPECTED_COMMITS = 10

MAX_SUSPECTED_PRS = 5

MAX_RELEVANT_CHUNKS = 20

MAX_CHUNK_CONTENT_LENGTH = 500

# ============================================================
# Query Building
# ============================================================

MAX_SEARCH_QUERY_LENGTH = 2000

MAX_ERROR_PATTERNS_IN_QUERY = 3

MAX_FUNCTION_NAMES_PER_ERROR = 3

MAX_ENDPOINTS_IN_QUERY = 5

MIN_ERROR_MESSAGE_LENGTH = 10

GENERIC_FUNCTION_NAMES = frozenset({"Object", "Array", "Function", "Promise", "async", "Module"})

# Substrings marking stack frames that never point at repository files
NON_FILE_PATH_MARKERS = ("node_modules", "<anonymous>", "internal/", "native ", "node:")
