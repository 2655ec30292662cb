"""Print the dataset processing DAG and check the Prefect flow imports.

Usage:
    python print_flow.py            # static description only
    python print_flow.py --check    # also import the flow module (needs Prefect)
"""
from __future__ import annotations

import argparse
import importlib
import sys

from incident_explorer.flows.flow_description import TASKS, describe_flow

FLOW_MODULE = "incident_explorer.flows.dataset_flow"


def check_flow() -> str:
    """Import the flow module and confirm every described task exists on it."""
    module = importlib.import_module(FLOW_MODULE)
    missing = [name for name in TASKS if not hasattr(module, name)]
    if missing:
        return f"[warn] Flow module lacks described tasks: {', '.join(missing)}"
    return f"[prefect] Flow '{module.dataset_processing_flow.name}' import verified (no execution performed)."


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Describe the dataset processing flow")
    parser.add_argument("--check", action="store_true", help="Import the Prefect flow as well")
    args = parser.parse_args(argv)

    print(describe_flow())
    if not args.check:
        return 0
    try:
        print("\n" + check_flow())
    except ImportError as exc:
        print(f"\n[warn] Flow import failed: {exc}")
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
