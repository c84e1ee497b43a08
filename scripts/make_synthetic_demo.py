#!/usr/bin/env python3
# Generate the synthetic 12x12 city grid (with factor-adjusted emissions) for quick sanity checks.
import argparse
import logging
from pathlib import Path

import numpy as np

from co2twin import config
from co2twin.grid import FactorSet, build_grid, grid_frame, recompute_grid
from co2twin.kpi import baseline_kpis


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--seed", type=int, default=42)
    ap.add_argument("--size", type=int, default=config.GRID_SIZE)
    ap.add_argument("--raw", action="store_true", help="Keep raw base emissions (skip default factors)")
    ap.add_argument("--out", default="data/processed/grid_demo.geojson")
    args = ap.parse_args()

    logging.basicConfig(level=logging.INFO, format="[%(name)s] %(message)s")
    if args.size <= 0:
        raise SystemExit("--size must be positive.")

    rng = np.random.default_rng(args.seed)
    cells = build_grid(rng, args.size)
    if not args.raw:
        cells = recompute_grid(cells, FactorSet())

    g = grid_frame(cells, size=args.size)
    out = Path(args.out)
    out.parent.mkdir(parents=True, exist_ok=True)
    g.to_file(out, driver="GeoJSON")

    k = baseline_kpis(cells)
    print(f"[grid] {len(g)} cells, total {k.total_emissions:.1f} t, {k.hotspot_count} hotspots")
    print(f"Wrote {out}")


if __name__ == "__main__":
    main()
