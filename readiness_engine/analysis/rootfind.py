"""
Generic multidimensional root finding and finite-difference Jacobians.

One solver serves both steady-state problems: the cheap algebraic
surrogate field (equilibrium) and the expensive simulation-derived weekly
return map (periodic fixed point). Only the cost of the supplied function
differs.

Convergence is judged on the residual, not on the solver's own flag: a
result is accepted only if every component of F(x*) is within ``ftol``.
Anything else raises RootFindingFailure with the last iterate attached.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np
from scipy.optimize import root

from readiness_engine.config import MAX_ROOT_EVALUATIONS, ROOT_XTOL
from readiness_engine.errors import RootFindingFailure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RootSolution:
    """Converged root with its residual and cost."""
    x: np.ndarray
    residual: np.ndarray
    n_evaluations: int
    n_jacobians: int
    message: str

    @property
    def max_residual(self) -> float:
        return float(np.max(np.abs(self.residual)))


def forward_difference_jacobian(fun: Callable, x, epsilon: float,
                                f0: Optional[np.ndarray] = None) -> np.ndarray:
    """
    J[:, j] = (f(x + ε·e_j) − f(x)) / ε

    Same ε on every coordinate; each column costs one evaluation of fun.
    """
    x = np.asarray(x, dtype=float)
    f0 = np.asarray(fun(x), dtype=float) if f0 is None else np.asarray(f0, dtype=float)
    J = np.empty((f0.size, x.size), dtype=float)
    for j in range(x.size):
        xp = x.copy()
        xp[j] += epsilon
        J[:, j] = (np.asarray(fun(xp), dtype=float) - f0) / epsilon
    return J


def central_difference_jacobian(fun: Callable, x, step: float) -> np.ndarray:
    """
    J[:, j] = (f(x + h·e_j) − f(x − h·e_j)) / 2h

    Truncation error O(h²); cancellation error O(machine eps / h).
    """
    x = np.asarray(x, dtype=float)
    columns = []
    for j in range(x.size):
        xp = x.copy()
        xm = x.copy()
        xp[j] += step
        xm[j] -= step
        columns.append((np.asarray(fun(xp), dtype=float) - np.asarray(fun(xm), dtype=float)) / (2.0 * step))
    return np.column_stack(columns)


def solve_root(
    fun: Callable,
    x0,
    jac: Optional[Callable] = None,
    ftol: float = 1e-10,
    xtol: float = ROOT_XTOL,
    max_evaluations: int = MAX_ROOT_EVALUATIONS,
    label: str = "root",
) -> RootSolution:
    """
    Solve F(x) = 0 with MINPACK's hybrid Powell/Newton method.

    Args:
        fun: Vector function F
        x0: Starting point (warm-start seed)
        jac: Optional callable returning dF/dx; finite differences otherwise
        ftol: Required max |F(x*)| per component
        xtol: Relative step tolerance handed to the solver
        max_evaluations: Budget for calls to fun
        label: Name used in logs and failure messages

    Raises:
        RootFindingFailure: residual above ftol, non-finite result or budget exhausted
    """
    x0 = np.array(x0, dtype=float)
    calls = {"fun": 0, "jac": 0}
    last = {"x": x0.copy(), "f": None}

    def counted_fun(x):
        calls["fun"] += 1
        f = np.asarray(fun(x), dtype=float)
        last["x"] = np.array(x, dtype=float)
        last["f"] = f
        return f

    counted_jac = None
    if jac is not None:
        def counted_jac(x):
            calls["jac"] += 1
            return np.asarray(jac(x), dtype=float)

    sol = root(counted_fun, x0, jac=counted_jac, method="hybr",
               options={"xtol": xtol, "maxfev": max_evaluations})

    x = np.asarray(sol.x, dtype=float)
    residual = np.asarray(sol.fun, dtype=float)
    logger.debug("%s: %s (nfev=%d, njev=%d)", label, sol.message, calls["fun"], calls["jac"])

    if not (np.all(np.isfinite(x)) and np.all(np.isfinite(residual))):
        bad_x = last["x"] if last["f"] is not None else x0
        bad_f = last["f"] if last["f"] is not None else np.full_like(x0, np.nan)
        raise RootFindingFailure(label, "solver produced a non-finite iterate",
                                 bad_x, bad_f, calls["fun"])

    if np.max(np.abs(residual)) > ftol:
        raise RootFindingFailure(label, f"did not converge: {sol.message}",
                                 x, residual, calls["fun"])

    return RootSolution(x=x, residual=residual, n_evaluations=calls["fun"],
                        n_jacobians=calls["jac"], message=str(sol.message))
