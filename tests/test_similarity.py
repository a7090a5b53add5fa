"""
Unit Tests for Vector Math

cosine_similarity must stay total: degenerate inputs score 0 instead of
raising or producing NaN, so ranking never crashes on embedding-less docs.
"""

import math

import numpy as np
import pytest

from doc_search.retrieval.similarity import cosine_similarity, vector_norm


# ---------------------------------------------------------------------------
# REGULAR VECTORS
# ---------------------------------------------------------------------------


class TestCosineSimilarity:
    """Test cosine similarity on well-formed vectors."""

    @pytest.mark.parametrize(
        "a,b",
        [
            ([1.0, 2.0, 3.0], [4.0, 5.0, 6.0]),
            ([0.3, -0.7], [-1.0, 0.25]),
            ([1.0, 0.0, 0.0, 2.0], [0.5, 0.5, 0.5, 0.5]),
        ],
    )
    def test_symmetric(self, a, b):
        """cos(a, b) == cos(b, a)."""
        assert cosine_similarity(a, b) == pytest.approx(cosine_similarity(b, a))

    def test_self_similarity_is_one(self):
        """A nonzero vector is perfectly similar to itself."""
        a = np.array([0.1, 0.2, 0.3, 0.4], dtype=np.float32)
        assert cosine_similarity(a, a) == pytest.approx(1.0)

    def test_orthogonal_vectors_score_zero(self):
        assert cosine_similarity([1, 0, 0], [0, 1, 0]) == pytest.approx(0.0)

    def test_opposite_vectors_score_minus_one(self):
        assert cosine_similarity([1, 2], [-1, -2]) == pytest.approx(-1.0)

    def test_result_in_range(self):
        rng = np.random.default_rng(7)
        for _ in range(20):
            a = rng.normal(size=8)
            b = rng.normal(size=8)
            assert -1.0 <= cosine_similarity(a, b) <= 1.0

    def test_known_value(self):
        """[0.9, 0.1, 0] vs [1, 0, 0] = 0.9 / sqrt(0.82)."""
        expected = 0.9 / math.sqrt(0.82)
        assert cosine_similarity([0.9, 0.1, 0.0], [1.0, 0.0, 0.0]) == pytest.approx(expected)

    def test_does_not_mutate_inputs(self):
        a = np.array([3.0, 4.0])
        b = [1.0, 0.0]
        cosine_similarity(a, b)
        assert a.tolist() == [3.0, 4.0]
        assert b == [1.0, 0.0]


# ---------------------------------------------------------------------------
# DEGENERATE VECTORS
# ---------------------------------------------------------------------------


class TestDegenerateVectors:
    """Empty, zero and mismatched vectors all score exactly 0."""

    @pytest.mark.parametrize(
        "a,b",
        [
            ([], [1.0, 2.0]),
            ([1.0, 2.0], []),
            ([], []),
            ([0.0, 0.0, 0.0], [1.0, 2.0, 3.0]),
            ([1.0, 2.0, 3.0], [0.0, 0.0, 0.0]),
            ([1.0, 2.0], [1.0, 2.0, 3.0]),
            (np.zeros(0, dtype=np.float32), np.array([0.5], dtype=np.float32)),
        ],
    )
    def test_scores_zero(self, a, b):
        result = cosine_similarity(a, b)
        assert result == 0
        assert not math.isnan(result)


# ---------------------------------------------------------------------------
# NORM
# ---------------------------------------------------------------------------


class TestVectorNorm:
    def test_norm(self):
        assert vector_norm([3.0, 4.0]) == pytest.approx(5.0)

    def test_empty_norm_is_zero(self):
        assert vector_norm([]) == 0.0
