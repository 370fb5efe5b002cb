"""Shared fixtures for the PROJECTIONpy tests."""

import os

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from projectionpy import SimulationConfig


@pytest.fixture(scope="function")
def rng() -> np.random.Generator:
    """Deterministic numpy RNG, seed overridable through TEST_RNG_SEED."""
    seed = int(os.environ.get("TEST_RNG_SEED", "0"))
    return np.random.default_rng(seed)


@pytest.fixture
def small_config() -> SimulationConfig:
    """Unit square channel with 8 x 8 cells, Re = 10."""
    return SimulationConfig(
        L=1.0,
        Lx=1.0,
        Ly=1.0,
        level=3,
        nu=0.01,
        u_inlet=0.1,
        tau=10.0,
    )
