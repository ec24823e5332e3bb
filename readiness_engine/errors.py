# readiness_engine/errors.py
from typing import Optional

import numpy as np


class ReadinessModelError(Exception):
    """Base class for failures raised by the readiness model."""
    pass


class IntegrationFailure(ReadinessModelError):
    """Raised when the ODE solver fails, diverges, or exhausts its step budget."""

    def __init__(self, message: str, t: Optional[float] = None, n_steps: int = 0):
        super().__init__(message)
        self.t = t
        self.n_steps = n_steps


class RootFindingFailure(ReadinessModelError):
    """Raised when an equilibrium or fixed-point solve does not converge.

    Carries the last iterate and its residual so the caller can inspect
    where the solver stalled or re-seed from there.
    """

    def __init__(self, label: str, message: str, last_iterate, residual,
                 n_evaluations: int = 0):
        self.label = label
        self.last_iterate = np.asarray(last_iterate, dtype=float)
        self.residual = np.asarray(residual, dtype=float)
        self.n_evaluations = n_evaluations
        max_res = float(np.max(np.abs(self.residual))) if self.residual.size else float("nan")
        super().__init__(
            f"{label}: {message} (max |residual| = {max_res:.3e} "
            f"after {n_evaluations} evaluations)"
        )


class DegenerateInputFailure(ReadinessModelError, ValueError):
    """Raised for inputs with no extent: zero-length windows, empty series, zero steps."""
    pass


class NumericalDegeneracyWarning(RuntimeWarning):
    """Issued when a minimum span is substituted to avoid a division by zero."""
    pass
