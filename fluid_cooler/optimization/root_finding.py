"""
Bracketed scalar root solve used for UA back-solving.

Wraps ``scipy.optimize.brentq`` with the three-way status the sizing code
needs: a converged root, the last estimate after the iteration limit ran
out, or no sign change across the bracket.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, Sequence

from scipy.optimize import brentq

from fluid_cooler.core.enums import SolverStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RootResult:
    status: SolverStatus
    root: float
    iterations: int = 0

    @property
    def converged(self) -> bool:
        return self.status == SolverStatus.CONVERGED


def solve_root(
    accuracy: float,
    max_iterations: int,
    residual: Callable[..., float],
    lower: float,
    upper: float,
    args: Sequence[Any] = (),
) -> RootResult:
    """
    Find x in [lower, upper] with |residual(x, *args)| <= accuracy.

    Args:
        accuracy: Absolute tolerance on the residual
        max_iterations: Iteration limit handed to Brent's method
        residual: Scalar function f(x, *args)
        lower: Lower bracket end
        upper: Upper bracket end
        args: Extra positional arguments for ``residual``

    Returns:
        RootResult. For NO_BRACKET the root is the bracket end with the
        smaller |residual|; for ITERATION_LIMIT_EXCEEDED it is the last
        estimate.
    """
    args = tuple(args)
    f_lower = residual(lower, *args)
    f_upper = residual(upper, *args)

    if f_lower == 0.0:
        return RootResult(SolverStatus.CONVERGED, lower)
    if f_upper == 0.0:
        return RootResult(SolverStatus.CONVERGED, upper)

    if not (math.isfinite(f_lower) and math.isfinite(f_upper)) or (f_lower > 0) == (f_upper > 0):
        best = lower if abs(f_lower) <= abs(f_upper) else upper
        logger.debug(
            f"No sign change: f({lower:.6g})={f_lower:.6g}, f({upper:.6g})={f_upper:.6g}"
        )
        return RootResult(SolverStatus.NO_BRACKET, best)

    root, info = brentq(
        residual, lower, upper,
        args=args,
        maxiter=max_iterations,
        full_output=True,
        disp=False,
    )

    if info.converged and abs(residual(root, *args)) <= accuracy:
        return RootResult(SolverStatus.CONVERGED, root, info.iterations)

    logger.debug(
        f"Root solve stopped after {info.iterations} iterations at x={root:.6g} "
        f"(flag: {info.flag})"
    )
    return RootResult(SolverStatus.ITERATION_LIMIT_EXCEEDED, root, info.iterations)
