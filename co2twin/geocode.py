from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from geopy.exc import GeopyError
from geopy.geocoders import Nominatim

from co2twin import config

log = logging.getLogger(__name__)


class GeocodeError(RuntimeError):
    pass


class LocationNotFoundError(GeocodeError):
    pass


@dataclass(frozen=True)
class Location:
    lat: float
    lon: float
    name: str


def make_geocoder(user_agent: str = config.NOMINATIM_USER_AGENT):
    return Nominatim(user_agent=user_agent, timeout=config.GEOCODE_TIMEOUT)


def search_location(query: str, geocoder=None) -> Location:
    """
    One Nominatim lookup, first result only. No retry: any failure raises
    GeocodeError (LocationNotFoundError when nothing matched).
    """
    q = (query or "").strip()
    if not q:
        raise GeocodeError("Please enter a location to search")

    geocoder = geocoder if geocoder is not None else make_geocoder()
    try:
        loc = geocoder.geocode(q, exactly_one=True)
    except GeopyError as e:
        log.warning("geocoding %r failed: %s", q, e)
        raise GeocodeError("Failed to search location. Please try again.") from e

    if loc is None:
        raise LocationNotFoundError("Location not found. Please try a different search term.")

    try:
        lat, lon = float(loc.latitude), float(loc.longitude)
    except (TypeError, ValueError) as e:
        raise GeocodeError("Invalid coordinates received from geocoder") from e
    if not (math.isfinite(lat) and math.isfinite(lon)):
        raise GeocodeError("Invalid coordinates received from geocoder")

    name = getattr(loc, "address", None) or q
    log.info("resolved %r -> (%.4f, %.4f)", q, lat, lon)
    return Location(lat, lon, name)
