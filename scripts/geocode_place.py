#!/usr/bin/env python3
import argparse
import logging
import sys
from pathlib import Path

import geopandas as gpd
from shapely.geometry import Point

from co2twin import config
from co2twin.geocode import GeocodeError, make_geocoder, search_location


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("query", help="Free-text place name, e.g. 'Shivajinagar, Pune'")
    ap.add_argument("--user_agent", default=config.NOMINATIM_USER_AGENT)
    ap.add_argument("--out", default="", help="Optional GeoJSON to write the point to")
    args = ap.parse_args()

    logging.basicConfig(level=logging.INFO, format="[%(name)s] %(message)s")

    try:
        loc = search_location(args.query, geocoder=make_geocoder(args.user_agent))
    except GeocodeError as e:
        print(f"[geo] {e}", file=sys.stderr)
        sys.exit(1)

    print(f"[geo] {loc.name}")
    print(f"[geo] lat={loc.lat:.6f} lon={loc.lon:.6f}")

    if args.out:
        gdf = gpd.GeoDataFrame({"name": [loc.name]}, geometry=[Point(loc.lon, loc.lat)], crs=4326)
        out = Path(args.out); out.parent.mkdir(parents=True, exist_ok=True)
        gdf.to_file(out, driver="GeoJSON")
        print(f"Wrote {out}")


if __name__ == "__main__":
    main()
