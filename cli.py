"""Command line entry point: match locations to regions and write results JSON.

Usage:
    region-matcher regions.json locations.json results.json
    region-matcher regions.json locations.json results.json --allow-unclosed --workers 4
"""
from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from region import match_locations_to_regions
from storage import load_locations, load_regions, write_results
from validation import ClosurePolicy, ValidationError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="region-matcher",
        description="Assign named locations to every region whose polygons contain them.",
    )
    parser.add_argument("regions", help="Regions JSON file")
    parser.add_argument("locations", help="Locations JSON file")
    parser.add_argument("results", help="Output file for the match results")
    parser.add_argument(
        "--allow-unclosed",
        action="store_true",
        help="Warn about polygons whose first and last points differ instead of failing",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Spread regions over this many worker processes",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: INFO)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run the matcher and return the process exit code."""

    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s - %(levelname)s - %(message)s',
    )

    closure = ClosurePolicy.WARN if args.allow_unclosed else ClosurePolicy.ERROR

    try:
        regions = load_regions(args.regions, closure=closure)
        locations = load_locations(args.locations)
        results = match_locations_to_regions(locations, regions, workers=args.workers)
        write_results(results, args.results)
    except (FileNotFoundError, ValidationError, OSError) as exc:
        logger.error("Error: %s", exc)
        return 1

    logger.info("Matching complete. Results written to %s", args.results)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
