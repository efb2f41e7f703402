#!/usr/bin/env python3
"""
Load historical results and run electoral forecasts.

Usage:
    python run.py load results.csv          # Load (replace years in file)
    python run.py load results.csv --append # Load without deleting existing years
    python run.py validate                  # Check historical data
    python run.py validate "Deputado Federal"
    python run.py forecast 2026             # National forecast
    python run.py forecast 2026 --state SP --position "Deputado Federal"
    python run.py forecast 2026 --iterations 2000 --seed 7
"""

import sys
from pathlib import Path

# Add project to path
sys.path.insert(0, str(Path(__file__).parent))

import numpy as np

from app.errors import InsufficientHistoricalDataError
from app.repositories import HistoryRepository, ResultRepository, connect
from app.services.forecast import ForecastService, default_parameters
from etl import load_history, read_history_file, validate_history
from settings import DB_PATH
from settings.logging import setup_logging

logger = setup_logging(level="INFO", to_file=True)


def _option(args: list[str], name: str) -> str | None:
    if name in args:
        i = args.index(name)
        if i + 1 < len(args):
            return args[i + 1]
    return None


def run_load(path: str, append: bool) -> None:
    conn = connect(DB_PATH)
    df = read_history_file(path)
    load_history(conn, df, replace=not append)
    conn.close()


def run_validation(position: str | None = None) -> bool:
    conn = connect(DB_PATH, read_only=True)
    result = validate_history(conn, position)
    conn.close()

    status = "OK" if result["valid"] else "ISSUES"
    print("\n" + "=" * 60)
    print(f"HISTORICAL DATA VALIDATION [{status}]")
    print("=" * 60)
    print(f"  Position: {position or 'all'}")
    print(f"  Rows: {result['stats']['rows']:,}")
    print(f"  Years: {result['stats']['years']}")
    print(f"  Parties: {result['stats']['parties']}")
    print(f"  Regions: {result['stats']['regions']}")
    for issue in result["issues"]:
        print(f"  ! {issue}")
    print("=" * 60 + "\n")
    return result["valid"]


def run_forecast(target_year: int, state: str | None, position: str | None, iterations: int | None, seed: int | None):
    conn = connect(DB_PATH)
    params = default_parameters()
    if iterations:
        params.monte_carlo_iterations = iterations

    service = ForecastService(
        history=HistoryRepository(conn),
        results=ResultRepository(conn),
        rng=np.random.default_rng(seed) if seed is not None else None,
    )
    run = service.create_run(f"cli-{target_year}", target_year, state, position, params)
    try:
        service.run(run)
    except InsufficientHistoricalDataError as e:
        logger.error("{}", e.message)
        conn.close()
        return False
    conn.close()

    print("\n" + "=" * 60)
    print(f"FORECAST {target_year} ({state or 'national'}, {position or 'all positions'})")
    print("=" * 60)
    for r in run.party_results[:10]:
        print(
            f"  {r.entity_name:<12} {r.predicted_vote_share:6.2f}%  "
            f"[{r.vote_share_lower:6.2f} - {r.vote_share_upper:6.2f}]  {r.trend_direction.value}"
        )
    if run.swing_regions:
        print("\n  Swing regions:")
        for s in run.swing_regions[:5]:
            print(f"  {s.region_name:<20} margin {s.margin_percent:5.2f}%  {s.leading_entity} vs {s.challenging_entity}")
    print("=" * 60 + "\n")
    return True


def main():
    args = sys.argv[1:]
    if not args:
        print(__doc__)
        sys.exit(1)

    command, rest = args[0], args[1:]

    if command == "load" and rest:
        run_load(rest[0], append="--append" in rest)
        return

    if command == "validate":
        ok = run_validation(rest[0] if rest else None)
        sys.exit(0 if ok else 1)

    if command == "forecast" and rest and rest[0].isdigit():
        iterations = _option(rest, "--iterations")
        seed = _option(rest, "--seed")
        ok = run_forecast(
            int(rest[0]),
            state=_option(rest, "--state"),
            position=_option(rest, "--position"),
            iterations=int(iterations) if iterations else None,
            seed=int(seed) if seed else None,
        )
        sys.exit(0 if ok else 1)

    print(__doc__)
    sys.exit(1)


if __name__ == "__main__":
    main()
