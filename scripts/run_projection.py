#!/usr/bin/env python3
import argparse
import logging
from pathlib import Path

import numpy as np

from co2twin import config
from co2twin.projection import (GrowthRates, projection_frame, run_projection,
                                sector_shares, summarize_projection)


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--start", type=float, required=True, help="Starting total emission (tons/year)")
    ap.add_argument("--years", type=int, default=config.DEFAULT_YEARS)
    for name in config.GROWTH_ORDER:
        ap.add_argument(f"--{name}", type=float, default=0.0, help=f"{name} growth %% per year")
    ap.add_argument("--seed", type=int, default=None)
    ap.add_argument("--out", default="data/processed/projection.csv")
    args = ap.parse_args()

    logging.basicConfig(level=logging.INFO, format="[%(name)s] %(message)s")

    if args.years <= 0:
        raise SystemExit("Prediction years must be greater than 0")
    if args.start < 0:
        raise SystemExit("--start must be non-negative")

    growth = GrowthRates(**{n: getattr(args, n) for n in config.GROWTH_ORDER})
    points = run_projection(args.start, growth, args.years, rng=np.random.default_rng(args.seed))

    df = projection_frame(points)
    out = Path(args.out)
    out.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(out, index=False)

    s = summarize_projection(points, args.start, growth)
    print(f"[proj] final {s.final_year_emission:.1f} t, avg growth {s.average_growth_rate:.2f}%/yr")
    print(f"[proj] top sector: {s.highest_contributing_sector}, confidence {s.confidence_score:.0f}%")
    for _, r in sector_shares(s.final_year_emission, growth).iterrows():
        print(f"[proj]   {r['sector']:<12} {r['emission']:.1f} t")
    print(f"Wrote {out}")


if __name__ == "__main__":
    main()
