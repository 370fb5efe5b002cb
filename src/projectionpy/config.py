# config.py
import math
from dataclasses import dataclass

from .exceptions import ConfigurationError
from .grid import Grid2D


@dataclass(frozen=True)
class SimulationConfig:
    """
    Run parameters for the channel flow, fixed at start-up.

    Defaults reproduce the reference case: an 8 x 1 channel refined to
    level 7 (128 x 16 cells), nu = 1e-2, inlet velocity 0.1 and 20 s of
    simulated time.
    """
    # Geometry
    L: float = 1.0          # reference length for Re [m]
    Lx: float = 8.0         # channel length [m]
    Ly: float = 1.0         # channel height [m]
    level: int = 7          # Nx = 2**level

    # Fluid
    nu: float = 1.0e-2      # kinematic viscosity [m2/s]

    # Boundary conditions
    u_inlet: float = 0.1
    u_south: float = 0.0
    u_north: float = 0.0
    v_west: float = 0.0
    v_east: float = 0.0

    # Time
    tau: float = 20.0       # total simulated time [s]
    sigma: float = 0.5      # safety factor on the stability limit

    # Poisson solver
    beta: float = 1.9
    tolerance: float = 1.0e-6
    maxiter: int = 10000

    # Reporting
    progress_every: int = 20

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if self.L <= 0.0:
            raise ConfigurationError(f"reference length must be positive (got {self.L})")
        if self.nu <= 0.0:
            raise ConfigurationError(f"viscosity must be positive (got {self.nu})")
        if self.tau <= 0.0:
            raise ConfigurationError(f"simulated time must be positive (got {self.tau})")
        if not 0.0 < self.sigma <= 1.0:
            raise ConfigurationError(f"sigma must lie in (0, 1] (got {self.sigma})")
        if not 0.0 < self.beta < 2.0:
            raise ConfigurationError(f"SOR factor beta must lie in (0, 2) (got {self.beta})")
        if self.tolerance <= 0.0:
            raise ConfigurationError(f"tolerance must be positive (got {self.tolerance})")
        if self.maxiter < 1:
            raise ConfigurationError(f"maxiter must be >= 1 (got {self.maxiter})")
        if self.progress_every < 1:
            raise ConfigurationError(
                f"progress_every must be >= 1 (got {self.progress_every})"
            )
        values = (self.u_inlet, self.u_south, self.u_north, self.v_west, self.v_east)
        if not all(math.isfinite(value) for value in values):
            raise ConfigurationError("boundary velocities must be finite")
        # Geometry checks live with the grid
        self.grid()

    def grid(self) -> Grid2D:
        return Grid2D.from_level(self.Lx, self.Ly, self.level)

    @property
    def reynolds(self) -> float:
        """Re = uin*L/nu, based on the inlet velocity."""
        return self.u_inlet * self.L / self.nu

    def time_step(self) -> float:
        """
        dt = sigma * min(h^2/(4 nu), 4 nu/uin^2).

        The first limit is the explicit diffusion limit, the second the
        cell-Reynolds (convective) limit; the latter is absent for uin = 0.
        """
        h = self.grid().h
        dt_diff = h * h / (4.0 * self.nu)
        if self.u_inlet == 0.0:
            dt_conv = math.inf
        else:
            dt_conv = 4.0 * self.nu / self.u_inlet ** 2
        return self.sigma * min(dt_diff, dt_conv)

    def number_of_steps(self) -> int:
        return int(self.tau / self.time_step())
