"""Scalar root finding used by the implicit skin friction laws."""

from __future__ import annotations

import logging
import math
import warnings
from dataclasses import dataclass
from typing import Callable

import numpy as np
from scipy import optimize

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


@dataclass
class RootSolution:
    """Outcome of a Newton-Raphson solve."""

    root: float
    converged: bool
    iterations: int
    initial_guess: float

    def value_or_guess(self) -> float:
        """The root when converged, otherwise the starting estimate."""
        return self.root if self.converged else self.initial_guess


def newton_solve(
    func: Callable[[float], float],
    fprime: Callable[[float], float],
    x0: float,
    tol: float = 1e-15,
    maxiter: int = 100,
) -> RootSolution:
    """
    Solve ``func(x) = 0`` with Newton-Raphson and an analytic derivative.

    Never raises on failure: a zero derivative, a non-finite iterate or an
    exhausted iteration cap return ``converged=False``.
    """

    with warnings.catch_warnings(), np.errstate(all="ignore"):
        warnings.simplefilter("ignore", RuntimeWarning)
        root, result = optimize.newton(
            func,
            x0,
            fprime=fprime,
            tol=tol,
            maxiter=maxiter,
            full_output=True,
            disp=False,
        )

    root = float(root)
    converged = bool(result.converged) and math.isfinite(root)
    if not converged:
        logger.debug("Newton solve from x0=%g stopped after %d iterations (%s)",
                     x0, result.iterations, result.flag)
    return RootSolution(
        root=root,
        converged=converged,
        iterations=int(result.iterations),
        initial_guess=x0,
    )
