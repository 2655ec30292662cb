"""CLI for exploring an incident dataset with the same filters as the dashboard."""
from __future__ import annotations
import argparse
import datetime as dt
import logging
import os
import sys

from dotenv import load_dotenv

from incident_explorer.errors import LoadFailure
from incident_explorer.filters.state_machine import FilterStateMachine
from incident_explorer.pipeline import load_dataset, set_up_logger
from incident_explorer.tasks.aggregation import LOCATION_TOP_N, LocationAggregator


def _date(value: str) -> dt.date:
    return dt.date.fromisoformat(value)


def main(argv=None) -> int:
    """CLI entry point for filtering a dataset.

    Prints the matching reports, then the neighbor set of a selected entity
    or the top locations. Exits with code 1 if the dataset cannot be loaded.
    """
    load_dotenv()
    parser = argparse.ArgumentParser(description="Filter incident reports by entity, location or time range")
    parser.add_argument("dataset", nargs="?", default=os.getenv("DATASET_PATH", "dataset.txt"),
                        help="Path or URL of the dataset text")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--entity", help="Canonical person or organization name")
    group.add_argument("--location", help="Cleaned location name")
    group.add_argument("--start", type=_date, help="Range start (YYYY-MM-DD), requires --end")
    parser.add_argument("--end", type=_date, help="Range end (YYYY-MM-DD)")
    parser.add_argument("--limit", type=int, default=20, help="Maximum reports to print")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)
    if (args.start is None) != (args.end is None):
        parser.error("--start and --end must be given together")

    set_up_logger(logging.DEBUG if args.verbose else logging.INFO)
    try:
        dataset = load_dataset(args.dataset)
    except LoadFailure as exc:
        print(f"Failed to load data: {exc}", file=sys.stderr)
        return 1

    machine = FilterStateMachine(dataset.reports, dataset.network)
    if args.entity:
        result = machine.select_entity(args.entity)
    elif args.location:
        result = machine.select_location(args.location)
    elif args.start:
        result = machine.select_time_range(args.start, args.end)
    else:
        result = machine.result

    print(f"{result.report_count} report(s)")
    for report in result.reports[: args.limit]:
        date = report.date.isoformat() if report.date else "No Date"
        print(f"[{report.id}] {date}")
        print(report.description[:500])
        print("-" * 60)
    if result.entity_highlight is not None:
        print("Linked entities:")
        for name in sorted(result.entity_highlight - {args.entity}):
            print(f"  {name}")
    elif not args.start:
        print("Top locations:")
        for bucket in LocationAggregator.top(dataset.location_counts, LOCATION_TOP_N):
            marker = "*" if result.location_highlight == bucket.location else " "
            print(f" {marker}{bucket.location}: {bucket.count}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
