"""
Shared fixtures: seeded generators and small hand-built grids.
"""

import numpy as np
import pytest

from co2twin.grid import Category, Cell


def _make_cell(x, y, category, emission):
    return Cell(x=x, y=y, category=Category(category), base_emission=emission, emission=emission)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def make_cell():
    return _make_cell


@pytest.fixture
def small_grid():
    """2x2 grid, one cell per category."""
    return (
        _make_cell(0, 0, "industrial", 60.0),
        _make_cell(1, 0, "commercial", 40.0),
        _make_cell(0, 1, "transport", 20.0),
        _make_cell(1, 1, "residential", 10.0),
    )
