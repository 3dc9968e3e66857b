"""
Counter reconciliation script.

Repairs county counters that drifted from the sum of their subdivisions
(a failed write between the two rows) and stale population densities.

Usage:
    python scripts/reconcile_counters.py [--dry-run]
"""
import os
import sys
import argparse

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from synthstats.config import configure_logging
from synthstats.services.reconciler import CounterReconciler


def main():
    parser = argparse.ArgumentParser(description="Reconcile SynthStats counters")
    parser.add_argument("--dry-run", action="store_true", help="Report drift without writing")
    args = parser.parse_args()

    configure_logging()
    result = CounterReconciler().reconcile(dry_run=args.dry_run)

    if result.consistent:
        print("All counters consistent.")
        return

    print(f"{len(result.drifts)} drifted rows ({result.repaired} repaired):")
    for drift in result.drifts:
        status = "repaired" if drift.repaired else "not repaired"
        print(f"  {drift.table} {drift.key}: {drift.actual} -> {drift.expected} [{status}]")

    if not args.dry_run and result.repaired < len(result.drifts):
        sys.exit(1)


if __name__ == "__main__":
    main()
