"""
Single owned snapshot of the dashboard state.

Every operation returns a new TwinState; callers swap the whole snapshot.
Randomness always comes from the generator passed in.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional

from co2twin import config
from co2twin.geocode import Location
from co2twin.grid import FactorSet, build_grid, recompute_grid
from co2twin.interventions import place_intervention, recommend, remove_intervention
from co2twin.kpi import KPIs, baseline_kpis, compute_kpis
from co2twin.projection import GrowthRates, run_projection


@dataclass(frozen=True)
class TwinState:
    cells: tuple
    factors: FactorSet = field(default_factory=FactorSet)
    scenario: str = "Default Scenario"
    location: Optional[Location] = None
    growth: GrowthRates = field(default_factory=GrowthRates)
    years: int = config.DEFAULT_YEARS
    projection: tuple = ()
    projection_start: float = 0.0
    recommendations: tuple = ()
    redraw_base: bool = config.REDRAW_BASE_ON_RECOMPUTE

    @classmethod
    def new(cls, rng=None, size: int = config.GRID_SIZE, **kw) -> "TwinState":
        return cls(cells=build_grid(rng, size), **kw)

    # factors / simulation
    def _recomputed(self, factors, rng):
        return recompute_grid(self.cells, factors, rng, redraw_base=self.redraw_base)

    def with_factor(self, name: str, value: float, rng=None) -> "TwinState":
        factors = self.factors.with_value(name, value)
        return replace(self, factors=factors, cells=self._recomputed(factors, rng))

    def reset_factors(self, rng=None) -> "TwinState":
        factors = FactorSet()
        return replace(self, factors=factors, cells=self._recomputed(factors, rng))

    def run_simulation(self, rng=None) -> "TwinState":
        cells = self._recomputed(self.factors, rng)
        return replace(self, cells=cells, recommendations=tuple(recommend(cells)))

    def save_scenario(self, label: str = "Custom Scenario") -> "TwinState":
        return replace(self, scenario=label)

    # interventions
    def place(self, cell_id, intervention_id: str) -> "TwinState":
        return replace(self, cells=place_intervention(self.cells, cell_id, intervention_id))

    def remove(self, cell_id, intervention_id: str) -> "TwinState":
        return replace(self, cells=remove_intervention(self.cells, cell_id, intervention_id))

    # prediction
    def with_growth(self, growth: GrowthRates) -> "TwinState":
        return replace(self, growth=growth)

    def with_years(self, years: int) -> "TwinState":
        if not config.MIN_YEARS <= int(years) <= config.MAX_YEARS:
            return self
        return replace(self, years=int(years))

    def with_location(self, location: Location) -> "TwinState":
        return replace(self, location=location)

    def predict(self, rng=None, start_year=None) -> "TwinState":
        if self.location is None:
            raise ValueError("Please select a location first")
        if self.years <= 0:
            raise ValueError("Prediction years must be greater than 0")
        start = self.kpis.total_emissions
        points = run_projection(start, self.growth, self.years, rng=rng, start_year=start_year)
        return replace(self, projection=tuple(points), projection_start=start)

    # derived
    @property
    def kpis(self) -> KPIs:
        return compute_kpis(self.cells)

    @property
    def baseline(self) -> KPIs:
        return baseline_kpis(self.cells)

    def cell(self, cell_id):
        cell_id = tuple(cell_id)
        for c in self.cells:
            if c.cell_id == cell_id:
                return c
        return None
