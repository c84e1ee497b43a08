"""Synthetic city grid and the per-cell emission model."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from enum import Enum

import geopandas as gpd
import numpy as np
from shapely.geometry import box

from co2twin import config

log = logging.getLogger(__name__)


class Category(str, Enum):
    RESIDENTIAL = "residential"
    INDUSTRIAL = "industrial"
    COMMERCIAL = "commercial"
    TRANSPORT = "transport"


@dataclass(frozen=True)
class FactorSet:
    """Eight urban-condition percentages (expected 0–100, not enforced)."""

    green: float = config.DEFAULT_FACTORS["green"]
    building: float = config.DEFAULT_FACTORS["building"]
    water: float = config.DEFAULT_FACTORS["water"]
    vehicles: float = config.DEFAULT_FACTORS["vehicles"]
    industrial: float = config.DEFAULT_FACTORS["industrial"]
    energy: float = config.DEFAULT_FACTORS["energy"]
    congestion: float = config.DEFAULT_FACTORS["congestion"]
    public_transport: float = config.DEFAULT_FACTORS["public_transport"]

    @classmethod
    def names(cls):
        return [f.name for f in fields(cls)]

    @classmethod
    def zeros(cls):
        return cls(**{n: 0.0 for n in cls.names()})

    def with_value(self, name: str, value: float) -> "FactorSet":
        if name not in self.names():
            raise KeyError(f"Unknown factor: {name}")
        return replace(self, **{name: float(value)})


@dataclass(frozen=True)
class Cell:
    x: int
    y: int
    category: Category
    base_emission: float
    emission: float
    interventions: tuple = ()  # Placement records, in placement order

    @property
    def cell_id(self):
        return (self.x, self.y)


def _rng(rng):
    return rng if rng is not None else np.random.default_rng()


def draw_base_emission(category, rng=None) -> float:
    lo, hi = config.BASE_EMISSION_RANGES[Category(category).value]
    return float(_rng(rng).uniform(lo, hi))


def emission_multipliers(category, factors: FactorSet):
    """The eight factor multipliers, in application order."""
    category = Category(category)
    f = factors
    if category is Category.INDUSTRIAL:
        industrial = 0.5 + f.industrial / 80
    else:
        industrial = 0.7 + f.industrial / 200
    if category is Category.TRANSPORT:
        congestion = 0.6 + f.congestion / 100
    else:
        congestion = 0.8 + f.congestion / 200
    return [
        1 - f.green / 200,
        0.5 + f.building / 100,
        1 - f.water / 300,
        0.4 + f.vehicles / 100,
        industrial,
        0.5 + f.energy / 100,
        congestion,
        1.2 - f.public_transport / 150,
    ]


def compute_cell_emission(category, factors: FactorSet, rng=None, base=None) -> float:
    """
    Emission for one cell: a category base times the eight factor multipliers,
    floored at zero. The base is drawn from the category range unless given.
    """
    emission = draw_base_emission(category, rng) if base is None else float(base)
    for m in emission_multipliers(category, factors):
        emission *= m
    return max(0.0, emission)


def build_grid(rng=None, size: int = config.GRID_SIZE):
    """Row-major size*size cells with random categories and raw base emissions."""
    rng = _rng(rng)
    categories = list(Category)
    cells = []
    for i in range(size * size):
        x, y = i % size, i // size
        category = categories[int(rng.integers(len(categories)))]
        base = draw_base_emission(category, rng)
        cells.append(Cell(x=x, y=y, category=category, base_emission=base, emission=base))
    log.debug("built %dx%d grid", size, size)
    return tuple(cells)


def recompute_grid(cells, factors: FactorSet, rng=None, redraw_base: bool = False):
    """New cells with emission recomputed per cell; interventions are kept."""
    rng = _rng(rng) if redraw_base else rng
    out = []
    for c in cells:
        base = draw_base_emission(c.category, rng) if redraw_base else c.base_emission
        out.append(replace(c, base_emission=base,
                           emission=compute_cell_emission(c.category, factors, base=base)))
    return tuple(out)


def emission_matrix(cells, size: int = config.GRID_SIZE) -> np.ndarray:
    m = np.zeros((size, size))
    for c in cells:
        if c.y < size and c.x < size:
            m[c.y, c.x] = c.emission
    return m


def emission_color(value) -> str:
    v = float(value)
    for lower, color, _ in config.EMISSION_BINS:
        if v >= lower:
            return color
    return config.EMISSION_BINS[-1][1]


def cell_bounds(x: int, y: int, size: int = config.GRID_SIZE):
    """(south, west, north, east) of a cell; row 0 is the northern edge."""
    top, left = config.GRID_TOP_LEFT
    bottom, right = config.GRID_BOTTOM_RIGHT
    lat_step = (top - bottom) / size
    lon_step = (right - left) / size
    north = top - y * lat_step
    south = top - (y + 1) * lat_step
    west = left + x * lon_step
    east = left + (x + 1) * lon_step
    return south, west, north, east


def grid_center():
    top, left = config.GRID_TOP_LEFT
    bottom, right = config.GRID_BOTTOM_RIGHT
    return [(top + bottom) / 2, (left + right) / 2]


def grid_frame(cells, current=None, size: int = config.GRID_SIZE) -> gpd.GeoDataFrame:
    """
    GeoDataFrame (EPSG:4326) with one box per cell for map layers.
    `current` maps cell_id -> post-intervention emission; defaults to emission.
    """
    rows = []
    for c in cells:
        s, w, n, e = cell_bounds(c.x, c.y, size)
        cur = current.get(c.cell_id, c.emission) if current else c.emission
        rows.append({
            "cell_id": f"{c.x}-{c.y}",
            "x": c.x,
            "y": c.y,
            "category": Category(c.category).value,
            "emission": round(c.emission, 2),
            "current_emission": round(cur, 2),
            "interventions": len(c.interventions),
            "color": emission_color(c.emission),
            "geometry": box(w, s, e, n),
        })
    return gpd.GeoDataFrame(rows, geometry="geometry", crs=4326)
