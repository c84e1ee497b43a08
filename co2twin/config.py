import os

# Grid: fixed 12x12 box over Pune (lat, lon)
GRID_SIZE = 12
GRID_TOP_LEFT = (18.5600, 73.8000)
GRID_BOTTOM_RIGHT = (18.5000, 73.9000)
MAP_ZOOM = 13

# U[lo, hi] base emission per category (tons CO2 / year)
BASE_EMISSION_RANGES = {
    "industrial": (30.0, 90.0),
    "commercial": (20.0, 60.0),
    "transport": (15.0, 50.0),
    "residential": (5.0, 30.0),
}

DEFAULT_FACTORS = {
    "green": 30.0,
    "building": 60.0,
    "water": 15.0,
    "vehicles": 70.0,
    "industrial": 50.0,
    "energy": 65.0,
    "congestion": 55.0,
    "public_transport": 40.0,
}

FACTOR_LABELS = {
    "green": "Green Areas",
    "building": "Building Density",
    "water": "Water Bodies",
    "vehicles": "Vehicles",
    "industrial": "Industrial Activity",
    "energy": "Energy Consumption",
    "congestion": "Traffic Congestion",
    "public_transport": "Public Transport",
}
FACTOR_MIN, FACTOR_MAX, FACTOR_STEP = 0, 100, 5

HOTSPOT_THRESHOLD = 30.0

# Monte Carlo projection
TRIALS_PER_YEAR = 500
GROWTH_ORDER = ("population", "vehicle", "industrial", "residential", "commercial")
GROWTH_NOISE = {
    "population": 0.5,
    "vehicle": 0.4,
    "industrial": 0.6,
    "residential": 0.3,
    "commercial": 0.3,
}
GROWTH_MAX = {
    "population": 10.0,
    "vehicle": 15.0,
    "industrial": 20.0,
    "residential": 10.0,
    "commercial": 10.0,
}
GROWTH_STEP = 0.1
MIN_YEARS, MAX_YEARS, DEFAULT_YEARS = 1, 20, 5

# (lower bound, colour, legend label), highest first
EMISSION_BINS = [
    (250.0, "#dc2626", "≥250 (Very High)"),
    (150.0, "#ea580c", "150-250 (High)"),
    (50.0, "#eab308", "50-150 (Medium)"),
    (float("-inf"), "#22c55e", "<50 (Low)"),
]

SECTOR_COLORS = {
    "Industrial": "#ef4444",
    "Residential": "#22c55e",
    "Commercial": "#3b82f6",
    "Transport": "#f59e0b",
}


def _env_float(name, default):
    raw = os.environ.get(name, "")
    try:
        return float(raw) if raw else default
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


def _env_int(name, default):
    raw = os.environ.get(name, "").strip()
    try:
        return int(raw) if raw else default
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def _env_flag(name, default=False):
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "on")


RECOMPUTE_DELAY_S = _env_float("CO2TWIN_RECOMPUTE_DELAY", 1.0)
REDRAW_BASE_ON_RECOMPUTE = _env_flag("CO2TWIN_REDRAW_BASE")

NOMINATIM_USER_AGENT = os.environ.get("CO2TWIN_USER_AGENT", "co2-capture-digital-twin/1.0")
GEOCODE_TIMEOUT = None  # wait for Nominatim; a failure is reported, never retried

SEED = _env_int("CO2TWIN_SEED", None)
