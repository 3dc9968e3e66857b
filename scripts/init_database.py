"""
Database initialization script.

This script creates the tables, loads the reference geography and disease
mapping CSVs, and seeds zeroed population and disease counters.
Run this once before wiring the interceptors into the record store.
"""
import os
import sys
from pathlib import Path
import logging

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from synthstats.config import settings, configure_logging, ensure_directories
from synthstats.database import SessionLocal, init_db
from synthstats.models import (
    County, CountySubdivision, Disease,
    CountyStats, SubdivisionStats, CountyFacts, SubdivisionFacts,
)
from synthstats.services.reference_loader import (
    load_reference_data, COUNTIES_CSV, SUBDIVISIONS_CSV, DISEASES_CSV,
)

# Setup logging
configure_logging()
logger = logging.getLogger(__name__)


def clear_existing(db):
    """Delete counters first, then reference data."""
    for model in (SubdivisionFacts, CountyFacts, SubdivisionStats, CountyStats,
                  Disease, CountySubdivision, County):
        db.query(model).delete()


def main():
    """Main initialization function."""
    print("=" * 60)
    print("SynthStats - Database Initialization")
    print("=" * 60)

    data_dir = Path(settings.REFERENCE_DATA_DIR)

    # Verify reference files exist
    print("\nChecking reference data...")
    files_ok = True
    for name in (COUNTIES_CSV, SUBDIVISIONS_CSV, DISEASES_CSV):
        path = data_dir / name
        if path.exists():
            print(f"  OK       {path}")
        else:
            print(f"  MISSING  {path}")
            files_ok = False

    if not files_ok:
        print("\nSome reference files are missing. Please check REFERENCE_DATA_DIR in the .env file.")
        sys.exit(1)

    # Initialize database tables
    print("\nInitializing database...")
    ensure_directories()
    init_db()
    print(f"  Database ready at: {settings.database_url}")

    db = SessionLocal()

    try:
        existing = db.query(County).count()
        if existing > 0:
            print(f"\nDatabase already contains {existing} counties.")
            response = input("   Clear all counters and reload reference data? (y/N): ").strip().lower()
            if response == 'y':
                clear_existing(db)
                db.commit()
                print("   Cleared all existing data")
            else:
                print("   Keeping existing data. Exiting.")
                return

        print("\nLoading reference data...")
        print("-" * 40)
        counts = load_reference_data(db, data_dir)
        db.commit()

        print("\n" + "=" * 60)
        print("Database initialization complete!")
        print("-" * 40)
        for name, count in counts.items():
            print(f"  {name}: {count:,}")
        print("=" * 60)

    except Exception as e:
        logger.error(f"Error during initialization: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
