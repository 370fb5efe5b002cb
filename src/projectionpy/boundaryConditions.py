# boundaryConditions.py


def mirror(wall, interior):
    """Ghost value whose average with `interior` equals `wall`."""
    return 2.0 * wall - interior


class ChannelBoundaries:
    """
    Boundary conditions for the channel: no-slip (or moving) walls on the
    south and north sides, a uniform inlet on the west side and a
    zero-gradient outlet on the east side.

    Works on anything indexable like a (nx, ny) numpy array, so both raw
    arrays and `variable` fields can be passed in. Fields are modified in
    place.
    """

    def __init__(
        self,
        u_inlet: float,
        u_south: float = 0.0,
        u_north: float = 0.0,
        v_west: float = 0.0,
        v_east: float = 0.0,
    ) -> None:
        self.u_inlet = u_inlet
        self.u_south = u_south
        self.u_north = u_north
        self.v_west = v_west
        self.v_east = v_east

    @classmethod
    def from_config(cls, config) -> "ChannelBoundaries":
        return cls(
            u_inlet=config.u_inlet,
            u_south=config.u_south,
            u_north=config.u_north,
            v_west=config.v_west,
            v_east=config.v_east,
        )

    # ------------------------------------------------------------------
    # Individual sides
    # ------------------------------------------------------------------
    def apply_walls(self, u, v) -> None:
        """Tangential velocities through mirrored ghost values."""
        u[:, 0] = mirror(self.u_south, u[:, 1])      # south wall
        u[:, -1] = mirror(self.u_north, u[:, -2])    # north wall
        v[0, :] = mirror(self.v_west, v[1, :])       # west wall
        v[-1, :] = mirror(self.v_east, v[-2, :])     # east wall

    def apply_inlet(self, u) -> None:
        u[0, :] = self.u_inlet

    def apply_outlet(self, u, v) -> None:
        u[-1, :] = u[-2, :]
        v[-1, :] = v[-2, :]

    # ------------------------------------------------------------------
    # Full sets
    # ------------------------------------------------------------------
    def apply(self, u, v) -> None:
        """Enforce all boundary conditions on the velocity at time level n."""
        self.apply_walls(u, v)
        self.apply_inlet(u)
        # Outflow wins over the east wall mirror
        self.apply_outlet(u, v)

    def apply_predicted(self, ut, vt, u, v) -> None:
        """
        Boundary values of the predicted velocity.

        The predictor only touches interior locations. Wall ghosts are
        mirrored from the predicted interior, while the inlet and outlet
        columns are taken over from the current (u, v).
        """
        self.apply_walls(ut, vt)
        ut[0, :] = u[0, :]
        ut[-1, :] = u[-1, :]
        vt[-1, :] = v[-1, :]
