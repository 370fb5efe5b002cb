# __main__.py
import argparse
import logging
import sys

from .config import SimulationConfig
from .exceptions import ConfigurationError
from .postProcess import PostProcessor
from .projection import ProjectionChannelFlow


def build_parser() -> argparse.ArgumentParser:
    defaults = SimulationConfig()
    parser = argparse.ArgumentParser(
        prog="projectionpy",
        description="2D incompressible channel flow, staggered FVM with SOR pressure projection",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    geometry = parser.add_argument_group("geometry")
    geometry.add_argument("--Lx", type=float, default=defaults.Lx, help="channel length [m]")
    geometry.add_argument("--Ly", type=float, default=defaults.Ly, help="channel height [m]")
    geometry.add_argument("--L", type=float, default=defaults.L, help="reference length for Re [m]")
    geometry.add_argument("--level", type=int, default=defaults.level, help="refinement level, Nx = 2**level")

    flow = parser.add_argument_group("flow")
    flow.add_argument("--nu", type=float, default=defaults.nu, help="kinematic viscosity [m2/s]")
    flow.add_argument("--u-inlet", type=float, default=defaults.u_inlet, help="inlet velocity [m/s]")
    flow.add_argument("--u-south", type=float, default=defaults.u_south, help="south wall velocity [m/s]")
    flow.add_argument("--u-north", type=float, default=defaults.u_north, help="north wall velocity [m/s]")
    flow.add_argument("--v-west", type=float, default=defaults.v_west, help="west wall tangential velocity [m/s]")
    flow.add_argument("--v-east", type=float, default=defaults.v_east, help="east wall tangential velocity [m/s]")

    time = parser.add_argument_group("time")
    time.add_argument("--tau", type=float, default=defaults.tau, help="total simulated time [s]")
    time.add_argument("--sigma", type=float, default=defaults.sigma, help="safety factor on the stable time step")
    time.add_argument("--steps", type=int, default=None, help="number of steps (overrides tau/dt)")

    poisson = parser.add_argument_group("Poisson solver")
    poisson.add_argument("--beta", type=float, default=defaults.beta, help="SOR relaxation factor")
    poisson.add_argument("--tolerance", type=float, default=defaults.tolerance, help="SOR residual tolerance")
    poisson.add_argument("--maxiter", type=int, default=defaults.maxiter, help="SOR iteration cap")

    output = parser.add_argument_group("output")
    output.add_argument("--progress-every", type=int, default=defaults.progress_every,
                        help="report every N time steps")
    output.add_argument("--save", metavar="FILE", default=None, help="write the u/v/p figure to FILE")
    output.add_argument("--no-plot", action="store_true", help="do not open the plot window")
    output.add_argument("-v", "--verbose", action="store_true", help="log every time step")

    return parser


def config_from_args(args: argparse.Namespace) -> SimulationConfig:
    return SimulationConfig(
        L=args.L,
        Lx=args.Lx,
        Ly=args.Ly,
        level=args.level,
        nu=args.nu,
        u_inlet=args.u_inlet,
        u_south=args.u_south,
        u_north=args.u_north,
        v_west=args.v_west,
        v_east=args.v_east,
        tau=args.tau,
        sigma=args.sigma,
        beta=args.beta,
        tolerance=args.tolerance,
        maxiter=args.maxiter,
        progress_every=args.progress_every,
    )


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(levelname)s] %(name)s: %(message)s",
    )

    try:
        config = config_from_args(args)
    except ConfigurationError as exc:
        parser.error(str(exc))

    solver = ProjectionChannelFlow(config)
    solver.run(args.steps)

    if args.save is not None or not args.no_plot:
        PostProcessor(solver).plot_all(filename=args.save, show=not args.no_plot)

    return 0


if __name__ == "__main__":
    sys.exit(main())
