"""
Tiny ASCII chart of a readiness series for console output.
"""
import warnings

import numpy as np

from readiness_engine.config import MIN_PLOT_SPAN, PLOT_HEIGHT, PLOT_WIDTH
from readiness_engine.errors import DegenerateInputFailure, NumericalDegeneracyWarning


def sample_columns(n_points: int, width: int) -> np.ndarray:
    """At most ``width`` indices into a series of n_points, both ends included."""
    width = min(width, n_points)
    idx = np.clip(np.rint(np.linspace(0, n_points - 1, width)).astype(int), 0, n_points - 1)
    idx[0] = 0
    idx[-1] = n_points - 1
    return np.unique(idx)


def normalize(values) -> np.ndarray:
    """Scale to [0, 1]; a flat series gets a minimum span instead of a zero division."""
    values = np.asarray(values, dtype=float)
    pmin, pmax = float(np.min(values)), float(np.max(values))
    span = pmax - pmin
    if span < MIN_PLOT_SPAN:
        warnings.warn(
            f"Readiness span {span:.3e} below {MIN_PLOT_SPAN:.3e}; using minimum span",
            NumericalDegeneracyWarning,
            stacklevel=2,
        )
        span = MIN_PLOT_SPAN
    return (values - pmin) / span


def ascii_plot(readiness, width: int = PLOT_WIDTH, height: int = PLOT_HEIGHT) -> str:
    """
    Render readiness P(t) as ``height`` text rows.

    Raises:
        DegenerateInputFailure: empty or non-finite series
    """
    P = np.asarray(readiness, dtype=float).ravel()
    if P.size == 0:
        raise DegenerateInputFailure("Cannot plot an empty readiness series")
    if not np.all(np.isfinite(P)):
        raise DegenerateInputFailure("Readiness series contains non-finite values")
    if width < 1 or height < 1:
        raise DegenerateInputFailure(f"Plot area {width}x{height} has no extent")

    idx = sample_columns(P.size, width)
    if idx.size < 2:
        return "•"

    norm = normalize(P)
    n_cols = idx.size
    canvas = np.full((height, n_cols), " ", dtype="<U1")

    for j, k in enumerate(idx):
        row = int(np.clip(np.rint((height - 1) * (1.0 - norm[k])), 0, height - 1))
        canvas[row, j] = "•"

    def top_mark(col):
        rows = np.flatnonzero(canvas[:, col] != " ")
        return int(rows[0]) if rows.size else height - 1

    for j in range(n_cols - 1):
        r1, r2 = top_mark(j), top_mark(j + 1)
        if r1 == r2:
            canvas[r1, j + 1] = "─"
        elif r1 < r2:
            canvas[r1:r2 + 1, j + 1] = "╲"
        else:
            canvas[r2:r1 + 1, j + 1] = "╱"

    return "\n".join("".join(row) for row in canvas)
