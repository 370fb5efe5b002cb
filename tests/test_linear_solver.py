import numpy as np
import pytest

from projectionpy import PressureNotConvergedWarning
from projectionpy.linearSolver import (
    poisson_residual,
    pressure_coefficients,
    pressure_source,
    solve_pressure,
    sor_sweep,
)


def channel_gamma_by_hand(Nx, Ny):
    """Coefficient map written out cell class by cell class."""
    gamma = np.full((Nx + 2, Ny + 2), 1.0 / 4.0)
    gamma[1, :] = 1.0 / 3.0
    gamma[:, 1] = 1.0 / 3.0
    gamma[-2, :] = 1.0 / 3.0
    gamma[:, -2] = 1.0 / 3.0
    gamma[1, 1] = gamma[1, -2] = gamma[-2, 1] = gamma[-2, -2] = 1.0 / 2.0

    # Inlet behaves like a wall, outlet like an internal column
    gamma[1, :] = 1.0 / 3.0
    gamma[Nx, :] = 1.0 / 4.0
    gamma[1, 1] = gamma[1, Ny] = 1.0 / 2.0
    gamma[Nx, 1] = gamma[Nx, Ny] = 1.0 / 3.0
    return gamma


@pytest.mark.parametrize("Nx, Ny", [(8, 8), (16, 4), (128, 16)])
def test_gamma_matches_channel_map(Nx, Ny):
    gamma = pressure_coefficients(Nx, Ny)
    expected = channel_gamma_by_hand(Nx, Ny)
    assert np.allclose(gamma[1:-1, 1:-1], expected[1:-1, 1:-1])


def test_gamma_for_closed_box():
    gamma = pressure_coefficients(4, 4, closed_sides=("south", "north", "west", "east"))
    assert gamma[1, 1] == pytest.approx(0.5)
    assert gamma[2, 1] == pytest.approx(1.0 / 3.0)
    assert gamma[2, 2] == pytest.approx(0.25)
    assert gamma[4, 4] == pytest.approx(0.5)


def test_gamma_rejects_unknown_side():
    with pytest.raises(ValueError, match="unknown"):
        pressure_coefficients(4, 4, closed_sides=("top",))


def test_pressure_source_is_scaled_divergence(rng):
    Nx, Ny = 5, 3
    ut = rng.normal(size=(Nx + 1, Ny + 2))
    vt = rng.normal(size=(Nx + 2, Ny + 1))
    h, dt = 0.2, 0.05

    S = pressure_source(ut, vt, h, dt)
    assert S.shape == (Nx + 2, Ny + 2)
    for i in range(1, Nx + 1):
        for j in range(1, Ny + 1):
            expected = h / dt * (ut[i, j] - ut[i - 1, j] + vt[i, j] - vt[i, j - 1])
            assert S[i, j] == pytest.approx(expected)
    assert np.all(S[0, :] == 0.0)
    assert np.all(S[:, -1] == 0.0)


def test_pressure_source_rejects_mismatched_shapes():
    with pytest.raises(ValueError, match="inconsistent"):
        pressure_source(np.zeros((5, 6)), np.zeros((5, 5)), 0.1, 0.1)


def test_sweep_uses_updated_neighbours():
    # A single sweep on a 2 x 1 interior with beta = 1 is plain Gauss-Seidel
    p = np.zeros((4, 3))
    gamma = np.full((4, 3), 0.5)
    S = np.zeros((4, 3))
    S[1, 1] = -2.0
    sor_sweep(p, gamma, S, beta=1.0)
    assert p[1, 1] == pytest.approx(1.0)
    # The second cell already sees the new value of the first
    assert p[2, 1] == pytest.approx(0.5)


def test_zero_source_converges_immediately():
    p = np.zeros((6, 6))
    gamma = pressure_coefficients(4, 4)
    iterations, residual = solve_pressure(p, gamma, np.zeros_like(p))
    assert iterations == 1
    assert residual == 0.0
    assert np.all(p == 0.0)


def synthetic_source(rng, Nx, Ny, h=0.125, dt=0.2):
    ut = rng.normal(size=(Nx + 1, Ny + 2))
    vt = rng.normal(size=(Nx + 2, Ny + 1))
    return pressure_source(ut, vt, h, dt)


def test_converged_pressure_satisfies_fixed_point(rng):
    Nx, Ny = 8, 4
    gamma = pressure_coefficients(Nx, Ny)
    S = synthetic_source(rng, Nx, Ny)
    p = np.zeros_like(S)

    iterations, residual = solve_pressure(p, gamma, S, beta=1.7, tolerance=1e-10)
    assert 1 <= iterations < 10000
    assert residual <= 1e-10
    assert poisson_residual(p, gamma, S) == pytest.approx(residual)
    # Ghost layer untouched
    assert np.all(p[0, :] == 0.0)
    assert np.all(p[-1, :] == 0.0)
    assert np.all(p[:, 0] == 0.0)
    assert np.all(p[:, -1] == 0.0)


@pytest.mark.parametrize("beta", [0.8, 1.0, 1.6])
def test_residual_non_increasing_after_transient(rng, beta):
    Nx, Ny = 8, 4
    gamma = pressure_coefficients(Nx, Ny)
    S = synthetic_source(rng, Nx, Ny)
    p = np.zeros_like(S)

    residuals = []
    for _ in range(200):
        sor_sweep(p, gamma, S, beta)
        residuals.append(poisson_residual(p, gamma, S))

    tail = np.array(residuals[100:])
    assert np.all(tail[1:] <= tail[:-1] * (1.0 + 1e-9))
    assert residuals[-1] < residuals[0]


def test_warm_start_needs_fewer_iterations(rng):
    Nx, Ny = 8, 8
    gamma = pressure_coefficients(Nx, Ny)
    S = synthetic_source(rng, Nx, Ny)

    p = np.zeros_like(S)
    cold, _ = solve_pressure(p, gamma, S, tolerance=1e-8)

    # Slightly perturbed source, as between two consecutive time steps
    S2 = S + 1e-3 * synthetic_source(rng, Nx, Ny)
    warm, _ = solve_pressure(p.copy(), gamma, S2, tolerance=1e-8)
    cold2, _ = solve_pressure(np.zeros_like(S), gamma, S2, tolerance=1e-8)

    assert warm < cold2
    assert cold2 == pytest.approx(cold, rel=0.5)


def test_iteration_cap_warns_and_keeps_iterate(rng):
    Nx, Ny = 8, 4
    gamma = pressure_coefficients(Nx, Ny)
    S = synthetic_source(rng, Nx, Ny)
    p = np.zeros_like(S)

    with pytest.warns(PressureNotConvergedWarning, match="Maximum number of iterations"):
        iterations, residual = solve_pressure(p, gamma, S, tolerance=1e-12, maxiter=3)

    assert iterations == 3
    assert residual > 1e-12
    assert np.any(p != 0.0)


@pytest.mark.parametrize("beta", [0.0, 2.0, -0.5])
def test_beta_outside_stable_range_rejected(beta):
    p = np.zeros((4, 4))
    with pytest.raises(ValueError, match="SOR factor"):
        solve_pressure(p, np.full_like(p, 0.25), np.zeros_like(p), beta=beta)


def test_shape_mismatch_rejected():
    with pytest.raises(ValueError, match="shape mismatch"):
        solve_pressure(np.zeros((4, 4)), np.zeros((4, 5)), np.zeros((4, 4)))


def test_compiled_sweep_matches_python_loop(rng):
    Nx, Ny = 8, 4
    gamma = pressure_coefficients(Nx, Ny)
    S = synthetic_source(rng, Nx, Ny)
    p_compiled = rng.normal(size=S.shape)
    p_python = p_compiled.copy()

    for _ in range(5):
        sor_sweep(p_compiled, gamma, S, 1.9)
        sor_sweep.py_func(p_python, gamma, S, 1.9)

    assert np.allclose(p_compiled, p_python, rtol=1e-12, atol=1e-12)
