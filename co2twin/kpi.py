from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from co2twin import config
from co2twin.grid import Category
from co2twin.interventions import CATALOG, current_emission, placements


@dataclass(frozen=True)
class KPIs:
    total_emissions: float
    emission_reduction: float  # % vs baseline
    intervention_efficiency: float  # mean captured efficiency
    cost_effectiveness: float  # cost per ton reduced
    projected_savings: float  # tons reduced
    hotspot_count: int
    intervention_count: int = 0
    total_cost: float = 0.0


def compute_kpis(cells, catalog=None, threshold: float = config.HOTSPOT_THRESHOLD) -> KPIs:
    """
    Totals after interventions. Guards: zero baseline -> 0 % reduction,
    no interventions -> 0 efficiency, nothing reduced -> 0 cost-effectiveness.
    """
    catalog = CATALOG if catalog is None else catalog
    baseline = sum(c.emission for c in cells)
    current = {c.cell_id: current_emission(c) for c in cells}
    total = sum(current.values())
    reduction = baseline - total

    placed = placements(cells)
    count = len(placed)
    cost = float(sum(catalog[p.intervention_id].cost for p in placed if p.intervention_id in catalog))

    return KPIs(
        total_emissions=total,
        emission_reduction=(reduction / baseline) * 100 if baseline > 0 else 0.0,
        intervention_efficiency=sum(p.efficiency for p in placed) / count if count else 0.0,
        cost_effectiveness=cost / reduction if reduction > 0 else 0.0,
        projected_savings=reduction,
        hotspot_count=sum(1 for v in current.values() if v > threshold),
        intervention_count=count,
        total_cost=cost,
    )


def baseline_kpis(cells, threshold: float = config.HOTSPOT_THRESHOLD) -> KPIs:
    return KPIs(
        total_emissions=sum(c.emission for c in cells),
        emission_reduction=0.0,
        intervention_efficiency=0.0,
        cost_effectiveness=0.0,
        projected_savings=0.0,
        hotspot_count=sum(1 for c in cells if c.emission > threshold),
    )


def percent_change(current: float, baseline: float) -> float:
    if not baseline:
        return 0.0
    return abs((current - baseline) / baseline) * 100


def historical_series(baseline: float, current: float, n_placed: int) -> pd.DataFrame:
    # illustrative back-cast ending at the current total
    return pd.DataFrame({
        "year": [2020, 2021, 2022, 2023, 2024],
        "emissions": [baseline * 0.95, baseline * 0.98, baseline * 1.02, baseline, current],
        "interventions": [0, 2, 5, 8, n_placed],
    })


def emissions_by_category(cells) -> pd.DataFrame:
    rows = []
    for cat in Category:
        sel = [c for c in cells if Category(c.category) is cat]
        rows.append({
            "type": cat.value.title(),
            "baseline": sum(c.emission for c in sel),
            "current": sum(current_emission(c) for c in sel),
            "cells": len(sel),
        })
    return pd.DataFrame(rows)
