# linearSolver.py
import logging
import warnings
from typing import Iterable, Tuple

import numpy as np
from numba import njit

from .exceptions import PressureNotConvergedWarning

logger = logging.getLogger(__name__)


# Sides of the channel whose pressure neighbour does not enter the Laplacian:
# walls and the inlet carry a prescribed normal velocity.
CHANNEL_CLOSED_SIDES = ("south", "north", "west")


def pressure_coefficients(
        Nx: int,
        Ny: int,
        closed_sides: Iterable[str] = CHANNEL_CLOSED_SIDES,
        ) -> np.ndarray:
    """
    Coefficient gamma = 1/n for the pressure equation, n being the number
    of faces of a cell that couple to a neighbouring pressure.

    A face on a closed side has a fixed normal velocity, so the pressure
    behind it drops out of the stencil. Open sides (the outlet) keep the
    ghost pressure as a neighbour. Ghost cells carry 1/4 and are never used.
    """
    closed = set(closed_sides)
    unknown = closed - {"south", "north", "west", "east"}
    if unknown:
        raise ValueError(f"unknown sides: {sorted(unknown)}")

    gamma = np.full((Nx + 2, Ny + 2), 0.25)
    for i in range(1, Nx + 1):
        for j in range(1, Ny + 1):
            n = 4
            if i == 1 and "west" in closed:
                n -= 1
            if i == Nx and "east" in closed:
                n -= 1
            if j == 1 and "south" in closed:
                n -= 1
            if j == Ny and "north" in closed:
                n -= 1
            gamma[i, j] = 1.0 / n

    return gamma


def pressure_source(
        ut: np.ndarray,
        vt: np.ndarray,
        h: float,
        dt: float,
        ) -> np.ndarray:
    """
    S = h/dt * (ut_e - ut_w + vt_n - vt_s) on the pressure layout.

    Only the interior of the returned (Nx+2, Ny+2) array is filled.
    """
    Nx = ut.shape[0] - 1
    Ny = vt.shape[1] - 1
    if ut.shape != (Nx + 1, Ny + 2) or vt.shape != (Nx + 2, Ny + 1):
        raise ValueError(
            f"inconsistent staggered shapes: ut {ut.shape}, vt {vt.shape}"
        )

    S = np.zeros((Nx + 2, Ny + 2))
    S[1:-1, 1:-1] = h / dt * (
        ut[1:, 1:-1] - ut[:-1, 1:-1]
        + vt[1:-1, 1:] - vt[1:-1, :-1]
    )
    return S


@njit
def sor_sweep(
        p: np.ndarray,
        gamma: np.ndarray,
        S: np.ndarray,
        beta: float,
        ) -> None:
    """
    One in-place SOR sweep over the interior cells.

    Cells are visited with i outer and j inner, each update seeing the
    already updated west and south neighbours (Gauss-Seidel ordering).
    Compiled with numba; the loop order is the same as in plain Python.
    """
    Nx = p.shape[0] - 2
    Ny = p.shape[1] - 2

    for i in range(1, Nx + 1):
        for j in range(1, Ny + 1):
            delta = p[i + 1, j] + p[i - 1, j] + p[i, j + 1] + p[i, j - 1]
            p[i, j] = beta * gamma[i, j] * (delta - S[i, j]) + (1.0 - beta) * p[i, j]


def poisson_residual(
        p: np.ndarray,
        gamma: np.ndarray,
        S: np.ndarray,
        ) -> float:
    """Mean of |p - gamma*(neighbours - S)| over the interior cells."""
    delta = p[2:, 1:-1] + p[:-2, 1:-1] + p[1:-1, 2:] + p[1:-1, :-2]
    res = np.abs(p[1:-1, 1:-1] - gamma[1:-1, 1:-1] * (delta - S[1:-1, 1:-1]))
    return float(res.mean())


def solve_pressure(
        p: np.ndarray,
        gamma: np.ndarray,
        S: np.ndarray,
        beta: float = 1.9,
        tolerance: float = 1e-6,
        maxiter: int = 10000,
        ) -> Tuple[int, float]:
    """
    Iterate SOR sweeps on `p` (in place, warm-started from its current
    values) until the mean residual drops to `tolerance`.

    Returns the number of sweeps performed and the final residual. Hitting
    `maxiter` is not fatal: a PressureNotConvergedWarning is issued and the
    last iterate is left in `p`.
    """
    if p.shape != gamma.shape or p.shape != S.shape:
        raise ValueError(
            f"shape mismatch: p {p.shape}, gamma {gamma.shape}, S {S.shape}"
        )
    if not 0.0 < beta < 2.0:
        raise ValueError(f"SOR factor must lie in (0, 2), got {beta}")
    if maxiter < 1:
        raise ValueError(f"maxiter must be >= 1, got {maxiter}")

    res = np.inf
    for iteration in range(1, maxiter + 1):
        sor_sweep(p, gamma, S, float(beta))

        res = poisson_residual(p, gamma, S)
        if res <= tolerance:
            logger.debug("Poisson solver converged in %d iterations (res=%.3e)", iteration, res)
            return iteration, res

    message = (
        f"Maximum number of iterations reached ({maxiter}), "
        f"residual {res:.3e} > tolerance {tolerance:.3e}"
    )
    logger.warning(message)
    warnings.warn(message, PressureNotConvergedWarning, stacklevel=2)
    return maxiter, res
