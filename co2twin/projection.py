"""Monte Carlo projection of total emissions under uncertain growth rates."""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass
from typing import NamedTuple

import numpy as np
import pandas as pd

from co2twin import config

log = logging.getLogger(__name__)

SECTORS = ("Industrial", "Residential", "Commercial", "Transport")
# share of population growth attributed to each sector, in SECTORS order
POPULATION_SPLIT = (0.2, 0.3, 0.3, 0.2)


@dataclass(frozen=True)
class GrowthRates:
    """Yearly growth percentages."""

    population: float = 0.0
    vehicle: float = 0.0
    industrial: float = 0.0
    residential: float = 0.0
    commercial: float = 0.0

    def as_tuple(self):
        return tuple(getattr(self, name) for name in config.GROWTH_ORDER)


class ProjectionPoint(NamedTuple):
    year: int
    emission: float


@dataclass(frozen=True)
class ProjectionSummary:
    final_year_emission: float
    average_growth_rate: float
    highest_contributing_sector: str
    confidence_score: float


def run_projection(start_emission: float, growth: GrowthRates, years: int, rng=None,
                   start_year: int | None = None, trials: int = config.TRIALS_PER_YEAR):
    """
    Yearly means of `trials` randomized runs. Each run starts from the previous
    year's mean (or `start_emission`) and is multiplied by
    1 + rate/100 * (1 + U[-w, w]) for every growth factor, population first.
    """
    if years <= 0:
        raise ValueError(f"years must be positive, got {years}")
    rng = rng if rng is not None else np.random.default_rng()
    if start_year is None:
        start_year = datetime.date.today().year

    rates = np.asarray(growth.as_tuple(), dtype=float) / 100
    widths = np.asarray([config.GROWTH_NOISE[n] for n in config.GROWTH_ORDER])

    points = []
    base = float(start_emission)
    for offset in range(1, years + 1):
        noise = rng.uniform(-1.0, 1.0, size=(trials, len(widths))) * widths
        multipliers = 1 + rates * (1 + noise)
        runs = np.full(trials, base)
        for j in range(len(widths)):
            runs *= multipliers[:, j]
        base = float(runs.mean())
        points.append(ProjectionPoint(start_year + offset, base))

    log.info("projected %d years from %.1f -> %.1f", years, start_emission, base)
    return points


def projection_frame(points) -> pd.DataFrame:
    return pd.DataFrame(points, columns=["year", "emission"])


def summarize_projection(points, start_emission: float, growth: GrowthRates) -> ProjectionSummary:
    if not points:
        return ProjectionSummary(0.0, 0.0, "N/A", 0.0)

    final = points[-1].emission
    if start_emission:
        total_growth = (final - start_emission) / start_emission * 100
        avg_rate = total_growth / len(points)
    else:
        avg_rate = 0.0

    sectors = list(zip(SECTORS, (growth.industrial, growth.residential,
                                 growth.commercial, growth.vehicle)))
    top = sectors[0]
    for s in sectors[1:]:
        if s[1] > top[1]:
            top = s

    factors = [growth.industrial, growth.residential, growth.commercial,
               growth.vehicle, growth.population]
    spread = max(factors) - min(factors)
    confidence = max(0.0, min(100.0, 100 - spread * 2))

    return ProjectionSummary(final, avg_rate, top[0], confidence)


def sector_shares(final_emission: float, growth: GrowthRates) -> pd.DataFrame:
    """Split the final emission across sectors in proportion to growth inputs."""
    direct = np.array([growth.industrial, growth.residential,
                       growth.commercial, growth.vehicle], dtype=float)
    population = growth.population * 0.5
    total = direct.sum() + population

    if total == 0:
        weights = np.full(len(SECTORS), 0.25)
    else:
        weights = direct / total + (population / total) * np.array(POPULATION_SPLIT)
        weights = weights / weights.sum()

    return pd.DataFrame({
        "sector": SECTORS,
        "emission": final_emission * weights,
        "color": [config.SECTOR_COLORS[s] for s in SECTORS],
    })
