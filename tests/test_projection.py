import numpy as np
import pytest

from co2twin.projection import (GrowthRates, ProjectionPoint, projection_frame, run_projection,
                                sector_shares, summarize_projection)


def test_zero_growth_has_no_drift(rng):
    points = run_projection(100.0, GrowthRates(), 3, rng=rng, start_year=2025)
    assert [p.year for p in points] == [2026, 2027, 2028]
    for p in points:
        assert p.emission == pytest.approx(100.0)


def test_seeded_runs_reproducible():
    growth = GrowthRates(population=2, vehicle=3, industrial=4, residential=1, commercial=1.5)
    a = run_projection(500.0, growth, 10, rng=np.random.default_rng(7), start_year=2030)
    b = run_projection(500.0, growth, 10, rng=np.random.default_rng(7), start_year=2030)
    assert a == b


def test_different_seeds_differ():
    growth = GrowthRates(industrial=5)
    a = run_projection(500.0, growth, 2, rng=np.random.default_rng(1))
    b = run_projection(500.0, growth, 2, rng=np.random.default_rng(2))
    assert a != b


def test_year_offsets_follow_current_year():
    import datetime
    points = run_projection(10.0, GrowthRates(), 2)
    this_year = datetime.date.today().year
    assert [p.year for p in points] == [this_year + 1, this_year + 2]


def test_positive_growth_compounds(rng):
    growth = GrowthRates(industrial=10)
    points = run_projection(100.0, growth, 5, rng=rng, start_year=2000)
    means = [p.emission for p in points]
    assert means == sorted(means)
    # mean of 1 + 0.1 * (1 + U[-0.6, 0.6]) is 1.1 per year
    assert means[-1] == pytest.approx(100.0 * 1.1 ** 5, rel=0.02)


def test_each_year_uses_trial_count():
    calls = []

    class CountingRng:
        def __init__(self):
            self._rng = np.random.default_rng(0)

        def uniform(self, low, high, size):
            calls.append(size)
            return self._rng.uniform(low, high, size=size)

    run_projection(1.0, GrowthRates(vehicle=1), 4, rng=CountingRng(), start_year=2000)
    assert calls == [(500, 5)] * 4


@pytest.mark.parametrize("years", [0, -3])
def test_non_positive_horizon_rejected(years):
    with pytest.raises(ValueError):
        run_projection(100.0, GrowthRates(), years)


def test_summary_empty():
    s = summarize_projection([], 100.0, GrowthRates())
    assert s.final_year_emission == 0
    assert s.highest_contributing_sector == "N/A"
    assert s.confidence_score == 0


def test_summary_values():
    points = [ProjectionPoint(2026, 110.0), ProjectionPoint(2027, 120.0)]
    growth = GrowthRates(population=1, vehicle=8, industrial=3, residential=2, commercial=2)
    s = summarize_projection(points, 100.0, growth)
    assert s.final_year_emission == 120.0
    assert s.average_growth_rate == pytest.approx(10.0)
    assert s.highest_contributing_sector == "Transport"
    # 100 - 2 * (8 - 1)
    assert s.confidence_score == pytest.approx(86.0)


def test_summary_ties_prefer_industrial():
    growth = GrowthRates(vehicle=4, industrial=4, residential=4, commercial=4)
    s = summarize_projection([ProjectionPoint(2026, 1.0)], 1.0, growth)
    assert s.highest_contributing_sector == "Industrial"


def test_confidence_clamped():
    s = summarize_projection([ProjectionPoint(2026, 1.0)], 1.0, GrowthRates(industrial=80))
    assert s.confidence_score == 0
    s = summarize_projection([ProjectionPoint(2026, 1.0)], 0.0, GrowthRates())
    assert s.confidence_score == 100
    assert s.average_growth_rate == 0


def test_sector_shares_zero_growth_equal_split():
    df = sector_shares(400.0, GrowthRates())
    assert df["emission"].tolist() == pytest.approx([100.0] * 4)


def test_sector_shares_symmetric_sectors_equal_split():
    df = sector_shares(400.0, GrowthRates(vehicle=5, industrial=5, residential=5, commercial=5))
    assert df["sector"].tolist() == ["Industrial", "Residential", "Commercial", "Transport"]
    assert df["emission"].tolist() == pytest.approx([100.0] * 4)


def test_sector_shares_population_redistribution():
    df = sector_shares(450.0, GrowthRates(population=2, vehicle=1, industrial=1, residential=1, commercial=1))
    # total weighted growth 4 + 1 = 5; population adds 1/5 split 20/30/30/20
    expected = [450 * (0.2 + 0.2 * 0.2), 450 * (0.2 + 0.2 * 0.3),
                450 * (0.2 + 0.2 * 0.3), 450 * (0.2 + 0.2 * 0.2)]
    assert df["emission"].tolist() == pytest.approx(expected)
    assert df["emission"].sum() == pytest.approx(450.0)


def test_projection_frame_columns():
    df = projection_frame([ProjectionPoint(2026, 1.5)])
    assert list(df.columns) == ["year", "emission"]
    assert df.iloc[0]["emission"] == 1.5
