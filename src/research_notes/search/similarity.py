from __future__ import annotations

from typing import Sequence

import numpy as np

from research_notes.errors import DimensionMismatch


def _scaled(v: np.ndarray) -> np.ndarray:
    """Divide by the largest absolute component so squares cannot overflow."""
    peak = np.max(np.abs(v)) if v.size else 0.0
    return v / peak if peak else v


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine of the angle between two vectors of equal length.

    Raises DimensionMismatch when the lengths differ. Returns 0.0 when either
    vector has zero magnitude, so an empty direction never yields NaN.
    The result is not clamped to [-1, 1].
    """
    if len(a) != len(b):
        raise DimensionMismatch(len(a), len(b))

    a = _scaled(np.asarray(a, dtype=float))
    b = _scaled(np.asarray(b, dtype=float))
    norm_a = np.linalg.norm(a)
    norm_b = np.linalg.norm(b)
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return float(np.dot(a, b) / (norm_a * norm_b))
