# grid.py
from dataclasses import dataclass

import numpy as np

from .exceptions import ConfigurationError


@dataclass(frozen=True)
class Grid2D:
    """
    Uniform 2D grid with square cells.

    Nx, Ny count the *pressure* control volumes. On the staggered layout
    u lives on (Nx+1, Ny+2) and v on (Nx+2, Ny+1) arrays, each carrying one
    ghost layer normal to the walls.
    """
    Lx: float
    Ly: float
    Nx: int
    Ny: int

    def __post_init__(self) -> None:
        if self.Lx <= 0.0 or self.Ly <= 0.0:
            raise ConfigurationError(
                f"domain extents must be positive (Lx={self.Lx}, Ly={self.Ly})"
            )
        if self.Nx < 2 or self.Ny < 2:
            raise ConfigurationError(
                f"at least 2 cells are needed in each direction (Nx={self.Nx}, Ny={self.Ny})"
            )
        if not np.isclose(self.Lx / self.Nx, self.Ly / self.Ny, rtol=1e-12, atol=0.0):
            raise ConfigurationError(
                f"cells must be square: hx={self.Lx / self.Nx}, hy={self.Ly / self.Ny}"
            )

    @classmethod
    def from_level(cls, Lx: float, Ly: float, level: int) -> "Grid2D":
        """Nx = 2**level cells along the channel, Ny follows from h = hx = hy."""
        if level < 0:
            raise ConfigurationError(f"refinement level must be >= 0 (got {level})")
        if Lx <= 0.0 or Ly <= 0.0:
            raise ConfigurationError(
                f"domain extents must be positive (Lx={Lx}, Ly={Ly})"
            )

        Nx = 2 ** level
        h = Lx / Nx
        ny = Ly / h
        Ny = int(round(ny))
        if not np.isclose(ny, Ny, rtol=1e-12, atol=1e-9):
            raise ConfigurationError(
                f"Ly={Ly} is not a whole number of cells of size h={h}"
            )
        return cls(Lx, Ly, Nx, Ny)

    @property
    def h(self) -> float:
        return self.Lx / self.Nx

    @property
    def x(self) -> np.ndarray:
        """Node coordinates along the channel."""
        return np.linspace(0.0, self.Lx, self.Nx + 1)

    @property
    def y(self) -> np.ndarray:
        return np.linspace(0.0, self.Ly, self.Ny + 1)
