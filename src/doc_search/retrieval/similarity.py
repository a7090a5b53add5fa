"""
Vector math for semantic ranking.

Degenerate inputs (empty, all-zero, or mismatched lengths) score 0.0
so documents whose embedding failed rank last instead of breaking the sort.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np


def vector_norm(v: Sequence[float] | np.ndarray) -> float:
    """Euclidean norm of *v*; 0.0 for an empty vector."""
    arr = np.asarray(v, dtype=np.float64)
    if arr.size == 0:
        return 0.0
    return float(np.linalg.norm(arr))


def cosine_similarity(a: Sequence[float] | np.ndarray, b: Sequence[float] | np.ndarray) -> float:
    """
    Cosine similarity between two vectors, in [-1, 1].

    Returns 0.0 when either vector is empty or zero-norm, or when the
    lengths differ. Never raises and never returns NaN.
    """
    # np.asarray copies lists and only views arrays; nothing is written back.
    va = np.asarray(a, dtype=np.float64).ravel()
    vb = np.asarray(b, dtype=np.float64).ravel()

    if va.size == 0 or vb.size == 0 or va.size != vb.size:
        return 0.0

    norm_a = float(np.linalg.norm(va))
    norm_b = float(np.linalg.norm(vb))
    if norm_a == 0.0 or norm_b == 0.0 or not np.isfinite(norm_a * norm_b):
        return 0.0

    score = float(np.dot(va, vb) / (norm_a * norm_b))
    if not np.isfinite(score):
        return 0.0
    # Rounding can push identical vectors a hair past 1.0
    return max(-1.0, min(1.0, score))
