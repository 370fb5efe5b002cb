# postProcess.py
import logging

import matplotlib.pyplot as plt
import numpy as np

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Interpolation of the staggered fields on the grid nodes
# ---------------------------------------------------------------------------

def interpolate_u(u: np.ndarray) -> np.ndarray:
    """u (Nx+1, Ny+2) -> nodes (Nx+1, Ny+1), averaging in y."""
    return 0.5 * (u[:, 1:] + u[:, :-1])


def interpolate_v(v: np.ndarray) -> np.ndarray:
    """v (Nx+2, Ny+1) -> nodes (Nx+1, Ny+1), averaging in x."""
    return 0.5 * (v[1:, :] + v[:-1, :])


def interpolate_pressure(p: np.ndarray) -> np.ndarray:
    """p (Nx+2, Ny+2) -> nodes (Nx+1, Ny+1), averaging the four surrounding cells."""
    return 0.25 * (p[:-1, :-1] + p[1:, :-1] + p[:-1, 1:] + p[1:, 1:])


# ---------------------------------------------------------------------------
# Post-processing / plotting
# ---------------------------------------------------------------------------

class PostProcessor:
    """
    Handles all visualization for a projection channel-flow simulation.

    It takes a ProjectionChannelFlow instance and provides contour plots of
    the node-interpolated u, v and p.
    """

    def __init__(self, solver) -> None:
        self.solver = solver

    def _mesh(self):
        X, Y = np.meshgrid(self.solver.grid.x, self.solver.grid.y, indexing="ij")
        return X, Y

    def _contour(self, ax, field: np.ndarray, title: str, label: str):
        X, Y = self._mesh()
        cs = ax.contourf(X, Y, field, levels=50, cmap="jet")
        plt.colorbar(cs, ax=ax, label=label)
        ax.set_title(title)
        ax.set_xlabel("x (m)")
        ax.set_ylabel("y (m)")
        ax.set_aspect("equal")
        return cs

    def _finish(self, fig, filename, show: bool) -> None:
        if filename is not None:
            fig.savefig(filename, facecolor="w")
            logger.info("Figure written to %s", filename)

        if show:
            plt.show()
        else:
            plt.close(fig)

    def _single(self, index: int, title: str, label: str, filename, show: bool) -> plt.Figure:
        fields = self.solver.nodal_fields()
        fig, ax = plt.subplots()
        self._contour(ax, fields[index], title, label)
        fig.tight_layout()
        self._finish(fig, filename, show)
        return fig

    def contour_u(self, filename: str = None, show: bool = True) -> plt.Figure:
        return self._single(0, "u.x", "u (m/s)", filename, show)

    def contour_v(self, filename: str = None, show: bool = True) -> plt.Figure:
        return self._single(1, "u.y", "v (m/s)", filename, show)

    def contour_p(self, filename: str = None, show: bool = True) -> plt.Figure:
        return self._single(2, "p", "p (m2/s2)", filename, show)

    def plot_all(self, filename: str = None, show: bool = True) -> plt.Figure:
        """u, v and p stacked in a 3x1 figure, optionally saved to `filename`."""
        up, vp, pp = self.solver.nodal_fields()

        fig, axes = plt.subplots(3, 1, figsize=(18, 12))
        self._contour(axes[0], up, "u.x", "u (m/s)")
        self._contour(axes[1], vp, "u.y", "v (m/s)")
        self._contour(axes[2], pp, "p", "p (m2/s2)")
        fig.tight_layout()
        self._finish(fig, filename, show)
        return fig
