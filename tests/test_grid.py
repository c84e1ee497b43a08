import numpy as np
import pytest

from co2twin import config
from co2twin.grid import (Category, Cell, FactorSet, build_grid, cell_bounds, compute_cell_emission,
                          draw_base_emission, emission_color, emission_matrix, emission_multipliers,
                          grid_frame, recompute_grid)


def test_residential_all_zero_factors_reduces_to_constants():
    # 1 * 0.5 * 1 * 0.4 * 0.7 * 0.5 * 0.8 * 1.2
    got = compute_cell_emission(Category.RESIDENTIAL, FactorSet.zeros(), base=10.0)
    assert got == pytest.approx(10.0 * 0.0672)


def test_all_zero_factors_constant_product_per_category():
    zeros = FactorSet.zeros()
    assert np.prod(emission_multipliers("industrial", zeros)) == pytest.approx(
        1 * 0.5 * 1 * 0.4 * 0.5 * 0.5 * 0.8 * 1.2)
    assert np.prod(emission_multipliers("transport", zeros)) == pytest.approx(
        1 * 0.5 * 1 * 0.4 * 0.7 * 0.5 * 0.6 * 1.2)


def test_industrial_full_scenario_applies_each_multiplier_once():
    factors = FactorSet(green=0, building=100, water=0, vehicles=100, industrial=100,
                        energy=100, congestion=0, public_transport=0)
    cell = Cell(x=0, y=0, category=Category.INDUSTRIAL, base_emission=50.0, emission=50.0)
    (out,) = recompute_grid((cell,), factors)
    expected = 50.0 * 1 * 1.5 * 1 * 1.4 * 1.75 * 1.5 * 0.8 * 1.2
    assert out.emission == pytest.approx(expected)
    assert out.base_emission == 50.0


@pytest.mark.parametrize("value", [-1000, -250, -1, 0, 100, 101, 400, 1e6])
@pytest.mark.parametrize("category", list(Category))
def test_emission_never_negative(category, value, rng):
    for name in FactorSet.names():
        factors = FactorSet().with_value(name, value)
        assert compute_cell_emission(category, factors, rng=rng) >= 0
    uniform = FactorSet(**{n: value for n in FactorSet.names()})
    assert compute_cell_emission(category, uniform, rng=rng) >= 0


def test_random_factor_sets_never_negative(rng):
    for _ in range(200):
        vals = rng.uniform(-500, 500, size=8)
        factors = FactorSet(*vals)
        cat = list(Category)[int(rng.integers(4))]
        assert compute_cell_emission(cat, factors, rng=rng) >= 0


@pytest.mark.parametrize("category", list(Category))
def test_base_emission_within_category_range(category, rng):
    lo, hi = config.BASE_EMISSION_RANGES[category.value]
    draws = [draw_base_emission(category, rng) for _ in range(300)]
    assert min(draws) >= lo
    assert max(draws) <= hi


def test_build_grid_row_major(rng):
    cells = build_grid(rng, size=12)
    assert len(cells) == 144
    assert cells[13].cell_id == (1, 1)
    assert cells[11].cell_id == (11, 0)
    assert all(c.emission == c.base_emission for c in cells)
    assert all(c.interventions == () for c in cells)


def test_recompute_fixed_base_is_deterministic(rng):
    cells = build_grid(rng, size=4)
    a = recompute_grid(cells, FactorSet())
    b = recompute_grid(cells, FactorSet())
    assert [c.emission for c in a] == [c.emission for c in b]


def test_recompute_redraw_base_changes_values(rng):
    cells = build_grid(rng, size=4)
    a = recompute_grid(cells, FactorSet(), rng=rng, redraw_base=True)
    assert any(x.base_emission != y.base_emission for x, y in zip(a, cells))
    for c in a:
        lo, hi = config.BASE_EMISSION_RANGES[c.category.value]
        assert lo <= c.base_emission <= hi


def test_unknown_factor_rejected():
    with pytest.raises(KeyError):
        FactorSet().with_value("humidity", 10)


def test_emission_matrix_layout(small_grid):
    m = emission_matrix(small_grid, size=2)
    assert m.shape == (2, 2)
    assert m[0, 1] == 40.0
    assert m[1, 0] == 20.0


@pytest.mark.parametrize("value,color", [(0, "#22c55e"), (49.9, "#22c55e"), (50, "#eab308"),
                                         (150, "#ea580c"), (250, "#dc2626"), (900, "#dc2626")])
def test_emission_color_bins(value, color):
    assert emission_color(value) == color


def test_cell_bounds_tile_the_box():
    s, w, n, e = cell_bounds(0, 0)
    assert n == pytest.approx(config.GRID_TOP_LEFT[0])
    assert w == pytest.approx(config.GRID_TOP_LEFT[1])
    s, w, n, e = cell_bounds(11, 11)
    assert s == pytest.approx(config.GRID_BOTTOM_RIGHT[0])
    assert e == pytest.approx(config.GRID_BOTTOM_RIGHT[1])


def test_grid_frame_columns(small_grid):
    g = grid_frame(small_grid, current={(0, 0): 39.0}, size=2)
    assert len(g) == 4
    assert g.crs.to_epsg() == 4326
    row = g.set_index("cell_id").loc["0-0"]
    assert row["current_emission"] == 39.0
    assert row["category"] == "industrial"
