"""CLI entrypoint: fetch focos for a date range and print a pivot summary."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from focos.config import settings as focos_settings
from focos.models import SATELLITE_CODES, FetchQuery, default_query
from focos.orchestrator import FetchOrchestrator, FetchStatus
from focos.pivot import AGGREGATORS, DEFAULT_PIVOT_SETTINGS, PivotSettings, pivot_dataset

LOGGER = logging.getLogger("fetch_focos")


def run_fetch(query: FetchQuery, as_json: bool = False, aggregator: str | None = None) -> int:
    """Fetch one query and write either the records or their pivot to stdout."""
    LOGGER.info("Fetching focos", extra={"query": query.to_dict()})
    state = FetchOrchestrator().fetch(query)
    if state.status is FetchStatus.ERROR:
        LOGGER.error("%s", state.error)
        return 1

    if as_json:
        for record in state.dataset:
            sys.stdout.write(json.dumps(record, default=str, ensure_ascii=False) + "\n")
        return 0

    pivot_settings = DEFAULT_PIVOT_SETTINGS
    if aggregator:
        pivot_settings = PivotSettings(aggregator_name=aggregator)
    table = pivot_dataset(state.dataset, pivot_settings)
    sys.stdout.write(f"{len(state.dataset)} focos\n")
    if not table.empty:
        sys.stdout.write(table.to_string() + "\n")
    return 0


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fetch BDQueimadas focos and summarize them.")
    parser.add_argument("--start", type=str, default=None, help="Start date YYYY-MM-DD (default: two days ago).")
    parser.add_argument("--end", type=str, default=None, help="End date YYYY-MM-DD (default: yesterday).")
    parser.add_argument(
        "--satellite",
        type=str,
        default=None,
        choices=SATELLITE_CODES,
        help="Satellite code, or ALL_SATELLITES (defaults to FOCOS_DEFAULT_SATELLITE).",
    )
    parser.add_argument(
        "--aggregator",
        type=str,
        default=None,
        choices=tuple(AGGREGATORS),
        help="Pivot aggregator over frp (default: Average).",
    )
    parser.add_argument("--json", action="store_true", help="Print normalized records as JSON lines.")
    return parser.parse_args(argv)


def build_query(args: argparse.Namespace) -> FetchQuery:
    defaults = default_query(satellite=args.satellite or focos_settings.default_satellite)
    return FetchQuery.from_strings(
        args.start or defaults.start_date,
        args.end or defaults.end_date,
        defaults.satellite,
    )


def main(argv: Optional[List[str]] = None) -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    args = parse_args(argv)
    try:
        query = build_query(args)
    except ValueError as exc:
        LOGGER.error("Invalid query: %s", exc)
        raise SystemExit(2)
    raise SystemExit(run_fetch(query, as_json=args.json, aggregator=args.aggregator))


if __name__ == "__main__":
    main(sys.argv[1:])
