import math

import pytest

from research_notes.errors import DimensionMismatch
from research_notes.search.similarity import cosine_similarity


def test_identical_direction_scores_one():
    assert cosine_similarity([1.0, 2.0, 3.0], [2.0, 4.0, 6.0]) == pytest.approx(1.0)


def test_orthogonal_scores_zero():
    assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)


def test_opposite_scores_minus_one():
    assert cosine_similarity([1.0, 0.0], [-1.0, 0.0]) == pytest.approx(-1.0)


def test_known_value():
    # [1,0] vs [0.6,0.8] -> 0.6
    assert cosine_similarity([1.0, 0.0], [0.6, 0.8]) == pytest.approx(0.6)


def test_symmetric():
    a, b = [0.3, -1.2, 4.0], [2.0, 0.5, -0.1]
    assert cosine_similarity(a, b) == pytest.approx(cosine_similarity(b, a))


def test_zero_magnitude_returns_zero():
    assert cosine_similarity([0.0, 0.0], [1.0, 1.0]) == 0.0
    assert cosine_similarity([1.0, 1.0], [0.0, 0.0]) == 0.0
    assert not math.isnan(cosine_similarity([0.0], [0.0]))


def test_dimension_mismatch_raises():
    with pytest.raises(DimensionMismatch) as exc:
        cosine_similarity([1.0, 2.0], [1.0, 2.0, 3.0])
    assert exc.value.left == 2
    assert exc.value.right == 3


def test_dimension_mismatch_is_a_value_error():
    with pytest.raises(ValueError):
        cosine_similarity([1.0], [])


def test_accepts_ints_and_tuples():
    assert cosine_similarity((1, 0), (1, 0)) == pytest.approx(1.0)


def test_large_magnitude_vectors_do_not_overflow():
    big = [1e200, 1e200]
    assert cosine_similarity(big, big) == pytest.approx(1.0)
    assert cosine_similarity([1e200, 0.0], [1e200, 1e200]) == pytest.approx(math.sqrt(0.5))


def test_tiny_magnitude_vectors_do_not_underflow():
    tiny = [1e-200, 2e-200]
    assert cosine_similarity(tiny, [1.0, 2.0]) == pytest.approx(1.0)


def test_returns_python_float():
    assert type(cosine_similarity([1, 2], [3, 4])) is float
