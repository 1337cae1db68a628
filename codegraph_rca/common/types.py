"""
Shared types for embedding vectors.

Embeddings are produced by text-embedding-3-small and always carry exactly
1536 dimensions. Anything else is rejected, never truncated or padded.

Providers may hand back plain lists or numpy arrays (float32 included);
both are accepted and normalised to ``list[float]``.
"""

import numbers
from collections.abc import Sequence
from typing import Any

import numpy as np

from codegraph_rca.common.exceptions import InvalidEmbeddingError

EmbeddingVector = list[float]

EMBEDDING_DIMENSIONS = 1536


def to_embedding_array(vector: Any) -> np.ndarray | None:
    """
    Coerce ``vector`` to a float64 array of shape (1536,).

    Returns:
        The array, or None if ``vector`` is not a valid embedding
        (wrong shape, bools, strings, NaN/inf)
    """
    if isinstance(vector, np.ndarray):
        if vector.dtype.kind not in "iuf":
            return None
        array = vector.astype(np.float64, copy=False)
    elif isinstance(vector, Sequence) and not isinstance(vector, (str, bytes)):
        if len(vector) != EMBEDDING_DIMENSIONS:
            return None
        for value in vector:
            if isinstance(value, (bool, np.bool_)) or not isinstance(value, numbers.Real):
                return None
        array = np.asarray(vector, dtype=np.float64)
    else:
        return None

    if array.shape != (EMBEDDING_DIMENSIONS,) or not np.isfinite(array).all():
        return None
    return array


def _length(vector: Any) -> int:
    if isinstance(vector, np.ndarray):
        return vector.shape[0] if vector.ndim else -1
    if isinstance(vector, Sequence) and not isinstance(vector, (str, bytes)):
        return len(vector)
    return -1


def is_valid_embedding(vector: Any) -> bool:
    """Return True if ``vector`` is a sequence or array of exactly 1536 finite numbers."""
    return to_embedding_array(vector) is not None


def validate_embedding(vector: Any) -> EmbeddingVector:
    """
    Raise if ``vector`` is not a valid embedding.

    Returns:
        The embedding as a plain ``list[float]``

    Raises:
        InvalidEmbeddingError: wrong length or non-numeric values
    """
    array = to_embedding_array(vector)
    if array is None:
        raise InvalidEmbeddingError(expected=EMBEDDING_DIMENSIONS, actual=_length(vector))
    return array.tolist()
