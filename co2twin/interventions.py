"""Intervention catalog, placements on grid cells, and simple recommendations."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import NamedTuple

from co2twin.grid import Category

log = logging.getLogger(__name__)


class InterventionKind(str, Enum):
    CAPTURE_UNIT = "capture_unit"
    VERTICAL_GARDEN = "vertical_garden"
    SOLAR_PANEL = "solar_panel"


@dataclass(frozen=True)
class InterventionType:
    id: str
    name: str
    kind: InterventionKind
    efficiency: float  # % emission reduction
    cost: float
    description: str
    icon: str
    suitable_for: frozenset


class Placement(NamedTuple):
    cell_id: tuple
    intervention_id: str
    efficiency: float  # copied from the catalog when placed


@dataclass(frozen=True)
class Recommendation:
    intervention: str
    explanation: str
    reduction_percent: float
    cell_id: tuple
    category: Category
    emission: float


class UnsuitableInterventionError(ValueError):
    pass


def _catalog(*items):
    return {i.id: i for i in items}


CATALOG = _catalog(
    InterventionType(
        id="capture_unit_1",
        name="Industrial CO₂ Capture Unit",
        kind=InterventionKind.CAPTURE_UNIT,
        efficiency=35,
        cost=50000,
        description="High-capacity capture system for industrial emissions",
        icon="🏭",
        suitable_for=frozenset({Category.INDUSTRIAL, Category.COMMERCIAL}),
    ),
    InterventionType(
        id="capture_unit_2",
        name="Compact Capture System",
        kind=InterventionKind.CAPTURE_UNIT,
        efficiency=20,
        cost=25000,
        description="Smaller capture unit for moderate emission sources",
        icon="⚙️",
        suitable_for=frozenset({Category.COMMERCIAL, Category.TRANSPORT}),
    ),
    InterventionType(
        id="vertical_garden_1",
        name="Vertical Garden Wall",
        kind=InterventionKind.VERTICAL_GARDEN,
        efficiency=15,
        cost=8000,
        description="Living wall system that absorbs CO₂ naturally",
        icon="🌿",
        suitable_for=frozenset({Category.RESIDENTIAL, Category.COMMERCIAL}),
    ),
    InterventionType(
        id="vertical_garden_2",
        name="Rooftop Garden System",
        kind=InterventionKind.VERTICAL_GARDEN,
        efficiency=25,
        cost=15000,
        description="Extensive rooftop vegetation for CO₂ absorption",
        icon="🌱",
        suitable_for=frozenset({Category.RESIDENTIAL, Category.COMMERCIAL, Category.INDUSTRIAL}),
    ),
    InterventionType(
        id="solar_panel_1",
        name="Solar Panel Array",
        kind=InterventionKind.SOLAR_PANEL,
        efficiency=12,
        cost=12000,
        description="Reduces emissions by replacing grid electricity",
        icon="☀️",
        suitable_for=frozenset({Category.RESIDENTIAL, Category.COMMERCIAL, Category.INDUSTRIAL}),
    ),
)

# category -> (intervention, explanation, reduction %)
_RECOMMENDATIONS = {
    Category.INDUSTRIAL: (
        "Industrial CO₂ Capture Unit",
        "This area has high industrial emissions. A high-capacity capture unit will "
        "significantly reduce CO₂ output from manufacturing processes.",
        35,
    ),
    Category.COMMERCIAL: (
        "Rooftop Garden + Solar",
        "Commercial buildings in this zone can benefit from combined rooftop vegetation "
        "and solar panels, reducing both direct emissions and energy consumption.",
        25,
    ),
    Category.TRANSPORT: (
        "Compact Roadside Capture",
        "High traffic emissions detected. A compact capture system placed near this "
        "transport corridor will capture vehicle emissions effectively.",
        20,
    ),
    Category.RESIDENTIAL: (
        "Vertical Garden Wall",
        "Residential areas benefit from natural CO₂ absorption. A vertical garden wall "
        "provides both aesthetic value and emission reduction.",
        15,
    ),
}


def is_suitable(intervention: InterventionType, category) -> bool:
    return Category(category) in intervention.suitable_for


def _find_cell(cells, cell_id):
    cell_id = tuple(cell_id)
    for i, c in enumerate(cells):
        if c.cell_id == cell_id:
            return i
    raise KeyError(f"No cell {cell_id} in grid")


def place_intervention(cells, cell_id, intervention_id: str, catalog=None):
    """Return new cells with the intervention appended to the target cell."""
    catalog = CATALOG if catalog is None else catalog
    if intervention_id not in catalog:
        raise KeyError(f"Unknown intervention: {intervention_id}")
    itype = catalog[intervention_id]
    i = _find_cell(cells, cell_id)
    cell = cells[i]
    if not is_suitable(itype, cell.category):
        raise UnsuitableInterventionError(
            f"{itype.name} is not suitable for {Category(cell.category).value} cells"
        )
    p = Placement(cell.cell_id, itype.id, float(itype.efficiency))
    log.info("placed %s on cell %s", itype.id, cell.cell_id)
    cells = list(cells)
    cells[i] = replace(cell, interventions=cell.interventions + (p,))
    return tuple(cells)


def remove_intervention(cells, cell_id, intervention_id: str):
    """Drop every placement of `intervention_id` from the cell."""
    try:
        i = _find_cell(cells, cell_id)
    except KeyError:
        return tuple(cells)
    cell = cells[i]
    kept = tuple(p for p in cell.interventions if p.intervention_id != intervention_id)
    if len(kept) == len(cell.interventions):
        return tuple(cells)
    cells = list(cells)
    cells[i] = replace(cell, interventions=kept)
    return tuple(cells)


def placements(cells):
    return [p for c in cells for p in c.interventions]


def current_emission(cell) -> float:
    reduction = sum(cell.emission * (p.efficiency / 100) for p in cell.interventions)
    return max(0.0, cell.emission - reduction)


def recommend(cells, limit: int = 4):
    ranked = sorted((c for c in cells if c.emission > 0), key=lambda c: c.emission, reverse=True)
    recs = []
    for c in ranked[:limit]:
        name, why, pct = _RECOMMENDATIONS[Category(c.category)]
        recs.append(Recommendation(name, why, pct, c.cell_id, Category(c.category), c.emission))
    return recs
