"""
Fixed-step quadrature over a window of a pure function of time.

Shared by the bedtime kernel (look-back memory integral) and the weekly
averages of the stationary surrogate, so both carry the same discretisation
error characteristics. Functions are evaluated once on the whole node array.
"""
from typing import Callable, Tuple

import numpy as np

from readiness_engine.errors import DegenerateInputFailure


RULES = ("right", "closed")


def fixed_step_nodes(start: float, stop: float, n_intervals: int, rule: str = "closed") -> np.ndarray:
    """
    Equally spaced nodes on [start, stop].

    Args:
        start, stop: Window bounds (stop > start)
        n_intervals: Number of equal subintervals
        rule: 'closed' → n+1 nodes including both ends;
              'right'  → n right endpoints (start excluded)
    """
    if rule not in RULES:
        raise ValueError(f"Unknown quadrature rule {rule!r}; expected one of {RULES}")
    if n_intervals < 1:
        raise DegenerateInputFailure(f"Quadrature needs at least one subinterval, got {n_intervals}")
    width = stop - start
    if not np.isfinite(width) or width <= 0:
        raise DegenerateInputFailure(f"Quadrature window [{start}, {stop}] has no extent")

    k = np.arange(n_intervals + 1, dtype=float)
    nodes = start + k * (width / n_intervals)
    if rule == "right":
        return nodes[1:]
    return nodes


def fixed_step_rule(start: float, stop: float, n_intervals: int,
                    rule: str = "right") -> Tuple[np.ndarray, np.ndarray]:
    """
    Nodes and weights of the fixed-step rule.

    'right' is the right-endpoint Riemann sum (every weight = step);
    'closed' is the trapezoid rule on the closed grid.
    """
    nodes = fixed_step_nodes(start, stop, n_intervals, rule)
    delta = (stop - start) / n_intervals
    weights = np.full(nodes.shape, delta)
    if rule == "closed":
        weights[0] *= 0.5
        weights[-1] *= 0.5
    return nodes, weights


def fixed_step_integral(fn: Callable, start: float, stop: float, n_intervals: int,
                        rule: str = "right") -> float:
    """Integral of fn over [start, stop] with n_intervals equal steps."""
    nodes, weights = fixed_step_rule(start, stop, n_intervals, rule)
    values = np.broadcast_to(np.asarray(fn(nodes), dtype=float), nodes.shape)
    return float(np.dot(values, weights))


def fixed_step_mean(fn: Callable, start: float, stop: float, n_intervals: int,
                    rule: str = "closed") -> float:
    """Arithmetic mean of fn sampled on the fixed-step nodes."""
    nodes = fixed_step_nodes(start, stop, n_intervals, rule)
    values = np.broadcast_to(np.asarray(fn(nodes), dtype=float), nodes.shape)
    return float(values.mean())


def steps_for(width: float, step: float) -> int:
    """Number of subintervals of size ~step covering width (at least one)."""
    if not np.isfinite(step) or step <= 0:
        raise DegenerateInputFailure(f"Quadrature step must be positive, got {step}")
    if not np.isfinite(width) or width <= 0:
        raise DegenerateInputFailure(f"Quadrature window width must be positive, got {width}")
    return max(1, int(round(width / step)))
