# projection.py
import logging
from typing import List, Optional, Tuple

import numpy as np

from .boundaryConditions import ChannelBoundaries
from .config import SimulationConfig
from .linearSolver import pressure_coefficients, pressure_source, solve_pressure
from .postProcess import interpolate_pressure, interpolate_u, interpolate_v
from .variable import variable

logger = logging.getLogger(__name__)


class FluidProperties:
    """Container for constant-property, incompressible fluid data."""

    def __init__(self, nu: float, u_inlet: float, Lref: float) -> None:
        self.nu = nu
        self.u_inlet = u_inlet
        self.Lref = Lref

    @property
    def Re(self) -> float:
        """Re = uin*L/nu."""
        return self.u_inlet * self.Lref / self.nu


# ---------------------------------------------------------------------------
# Projection solver for the 2D channel
# ---------------------------------------------------------------------------

class ProjectionChannelFlow:
    """
    Explicit projection method for 2D incompressible flow in a channel,
    discretised with finite volumes on a staggered grid.

    Responsibilities:
    - Owns grid, fluid properties and boundary conditions.
    - Owns fields (u, v, p), the predicted velocities (ut, vt) and the
      pressure coefficients gamma.
    - Performs prediction, pressure projection (SOR) and correction once
      per time step.
    """

    def __init__(self, config: Optional[SimulationConfig] = None) -> None:

        if config is None:
            config = SimulationConfig()
        self.config = config

        # Grid, fluid and boundaries
        self.grid = config.grid()
        self.fluid = FluidProperties(config.nu, config.u_inlet, config.L)
        self.boundaries = ChannelBoundaries.from_config(config)

        self.dt = config.time_step()
        self.nsteps = config.number_of_steps()

        Nx = self.grid.Nx
        Ny = self.grid.Ny

        # Primary fields, inlet velocity everywhere as initial condition
        self.u = variable("u", Nx + 1, Ny + 2, config.u_inlet)
        self.v = variable("v", Nx + 2, Ny + 1)
        self.p = variable("p", Nx + 2, Ny + 2)

        # Predicted velocities
        self.ut = self.u.copy("ut")
        self.vt = self.v.copy("vt")

        self.gamma = pressure_coefficients(Nx, Ny)

        self.time = 0.0
        self.step_count = 0
        self.poisson_iterations: List[int] = []
        self.poisson_residual = 0.0

    # ------------------------------------------------------------------
    # Boundary conditions
    # ------------------------------------------------------------------
    def set_boundary_conditions(self) -> None:
        self.boundaries.apply(self.u, self.v)

    def set_predicted_boundary_conditions(self) -> None:
        self.boundaries.apply_predicted(self.ut, self.vt, self.u, self.v)

    # ------------------------------------------------------------------
    # Prediction: temporary velocity without the pressure gradient
    # ------------------------------------------------------------------
    def predict_u(self) -> None:
        """Explicit x-momentum update on the interior u-faces."""
        u = self.u.field
        v = self.v.field
        h = self.grid.h
        nu = self.fluid.nu
        dt = self.dt

        # Slices over i = 1..Nx-1, j = 1..Ny; every term reads level n only
        uP = u[1:-1, 1:-1]
        uE = u[2:, 1:-1]
        uW = u[:-2, 1:-1]
        uN = u[1:-1, 2:]
        uS = u[1:-1, :-2]

        ue = 0.5 * (uE + uP)
        uw = 0.5 * (uP + uW)
        un = 0.5 * (uN + uP)
        us = 0.5 * (uP + uS)
        vn = 0.5 * (v[2:-1, 1:] + v[1:-2, 1:])
        vs = 0.5 * (v[2:-1, :-1] + v[1:-2, :-1])

        A = (ue ** 2 - uw ** 2 + un * vn - us * vs) / h
        D = (nu / h ** 2) * (uE + uW + uN + uS - 4.0 * uP)

        self.ut[1:-1, 1:-1] = uP + dt * (-A + D)

    def predict_v(self) -> None:
        """Explicit y-momentum update on the interior v-faces."""
        u = self.u.field
        v = self.v.field
        h = self.grid.h
        nu = self.fluid.nu
        dt = self.dt

        # Slices over i = 1..Nx, j = 1..Ny-1
        vP = v[1:-1, 1:-1]
        vE = v[2:, 1:-1]
        vW = v[:-2, 1:-1]
        vN = v[1:-1, 2:]
        vS = v[1:-1, :-2]

        vn = 0.5 * (vN + vP)
        vs = 0.5 * (vP + vS)
        ve = 0.5 * (vE + vP)
        vw = 0.5 * (vP + vW)
        ue = 0.5 * (u[1:, 2:-1] + u[1:, 1:-2])
        uw = 0.5 * (u[:-1, 2:-1] + u[:-1, 1:-2])

        A = (ve * ue - vw * uw + vn ** 2 - vs ** 2) / h
        D = (nu / h ** 2) * (vE + vW + vN + vS - 4.0 * vP)

        self.vt[1:-1, 1:-1] = vP + dt * (-A + D)

    # ------------------------------------------------------------------
    # Projection: pressure that makes the corrected velocity solenoidal
    # ------------------------------------------------------------------
    def solve_pressure(self) -> int:
        """Warm-started SOR solve; returns the number of sweeps used."""
        S = pressure_source(self.ut.field, self.vt.field, self.grid.h, self.dt)
        iterations, residual = solve_pressure(
            self.p.field,
            self.gamma,
            S,
            beta=self.config.beta,
            tolerance=self.config.tolerance,
            maxiter=self.config.maxiter,
        )
        self.poisson_residual = residual
        return iterations

    # ------------------------------------------------------------------
    # Correction steps
    # ------------------------------------------------------------------
    def correct_u(self) -> None:
        p = self.p.field
        factor = self.dt / self.grid.h

        self.u[1:-1, 1:-1] = self.ut[1:-1, 1:-1] - factor * (p[2:-1, 1:-1] - p[1:-2, 1:-1])

        # Outlet face, driven by the ghost pressure behind it
        self.u[-1, :] = self.ut[-1, :] - factor * (p[-1, :] - p[-2, :])

    def correct_v(self) -> None:
        p = self.p.field
        factor = self.dt / self.grid.h

        self.v[1:-1, 1:-1] = self.vt[1:-1, 1:-1] - factor * (p[1:-1, 2:-1] - p[1:-1, 1:-2])

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------
    def divergence(self) -> np.ndarray:
        """Discrete divergence of (u, v) in every interior cell."""
        u = self.u.field
        v = self.v.field
        h = self.grid.h
        return (u[1:, 1:-1] - u[:-1, 1:-1]) / h + (v[1:-1, 1:] - v[1:-1, :-1]) / h

    # ------------------------------------------------------------------
    # Time loop
    # ------------------------------------------------------------------
    def iterate(self) -> int:
        """Advance one time step; returns the Poisson iteration count."""
        self.time += self.dt
        self.step_count += 1

        self.set_boundary_conditions()

        self.predict_u()
        self.predict_v()
        self.set_predicted_boundary_conditions()

        iterations = self.solve_pressure()

        self.correct_u()
        self.correct_v()

        self.poisson_iterations.append(iterations)
        logger.debug(
            "step %d: time = %f, Poisson iterations = %d, residual = %.3e",
            self.step_count, self.time, iterations, self.poisson_residual,
        )
        return iterations

    def run(self, nsteps: Optional[int] = None) -> List[int]:
        """
        Advance `nsteps` time steps (the whole simulated time by default)
        and return the Poisson iteration count of each step.
        """
        if nsteps is None:
            nsteps = self.nsteps

        logger.info("Time step = %f - Re = %f", self.dt, self.fluid.Re)

        every = self.config.progress_every
        iterations = []
        for _ in range(nsteps):
            it = self.iterate()
            iterations.append(it)

            if self.step_count % every == 0:
                logger.info("time = %f - Poisson iterations = %d", self.time, it)

        return iterations

    def nodal_fields(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        (up, vp, pp) interpolated on the (Nx+1, Ny+1) grid nodes.

        Works on copies: wall ghosts are mirrored from the final interior,
        while the inlet and outlet columns stay as the corrector left them.
        The solver state is not modified.
        """
        u = self.u.field.copy()
        v = self.v.field.copy()
        self.boundaries.apply_walls(u, v)
        # Zero-gradient outflow for v replaces the east wall mirror
        v[-1, :] = v[-2, :]

        up = interpolate_u(u)
        vp = interpolate_v(v)
        pp = interpolate_pressure(self.p.field)
        return up, vp, pp
