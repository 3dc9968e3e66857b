"""
Reference data loader - load counties, county subdivisions and the disease
mapping from CSV, and seed zeroed counter rows for every geography.

Expected CSV columns:
    counties.csv:             county_fp, state_fp, name, square_miles
    county_subdivisions.csv:  cousub_fp, county_fp, state_fp, name, square_miles
    diseases.csv:             disease_fp, name, code_snomed
"""
from sqlalchemy.orm import Session
from synthstats.models.geography import County, CountySubdivision
from synthstats.models.disease import Disease
from synthstats.models.stats import CountyStats, SubdivisionStats
from synthstats.models.facts import CountyFacts, SubdivisionFacts
from pathlib import Path
from typing import Dict
import logging
import pandas as pd

logger = logging.getLogger(__name__)

COUNTIES_CSV = "counties.csv"
SUBDIVISIONS_CSV = "county_subdivisions.csv"
DISEASES_CSV = "diseases.csv"

# Census keys are zero padded; read every key column as text
KEY_DTYPES = {
    "county_fp": str,
    "cousub_fp": str,
    "state_fp": str,
    "disease_fp": str,
    "code_snomed": str,
}


def clean_string(value) -> str:
    """Clean string values."""
    if pd.isna(value):
        return None
    return str(value).strip()


def clean_float(value) -> float:
    """Clean float values."""
    if pd.isna(value):
        return 0.0
    try:
        return float(value)
    except (ValueError, TypeError):
        return 0.0


def read_reference_csv(path: Path, required: list) -> pd.DataFrame:
    """Read a reference CSV and check that the required columns are present."""
    df = pd.read_csv(path, dtype=KEY_DTYPES)
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValueError(f"{path.name} is missing columns: {', '.join(missing)}")
    return df


def load_counties(db: Session, df: pd.DataFrame) -> int:
    records = [
        County(
            county_fp=clean_string(row["county_fp"]),
            state_fp=clean_string(row["state_fp"]),
            name=clean_string(row["name"]),
            square_miles=clean_float(row["square_miles"]),
        )
        for _, row in df.iterrows()
    ]
    db.add_all(records)
    return len(records)


def load_subdivisions(db: Session, df: pd.DataFrame) -> int:
    records = [
        CountySubdivision(
            cousub_fp=clean_string(row["cousub_fp"]),
            county_fp=clean_string(row["county_fp"]),
            state_fp=clean_string(row["state_fp"]),
            name=clean_string(row["name"]),
            square_miles=clean_float(row["square_miles"]),
        )
        for _, row in df.iterrows()
    ]
    db.add_all(records)
    return len(records)


def load_diseases(db: Session, df: pd.DataFrame) -> int:
    records = [
        Disease(
            disease_fp=clean_string(row["disease_fp"]),
            name=clean_string(row["name"]),
            code_snomed=clean_string(row["code_snomed"]),
        )
        for _, row in df.iterrows()
    ]
    db.add_all(records)
    return len(records)


def seed_counters(db: Session) -> Dict[str, int]:
    """Create a zeroed counter row for every geography and geography x disease."""
    county_fps = [c for (c,) in db.query(County.county_fp).all()]
    cousub_fps = [c for (c,) in db.query(CountySubdivision.cousub_fp).all()]
    disease_fps = [d for (d,) in db.query(Disease.disease_fp).all()]

    db.add_all(CountyStats(county_fp=c, population=0, population_male=0,
                           population_female=0, population_per_sq_mile=0.0) for c in county_fps)
    db.add_all(SubdivisionStats(cousub_fp=c, population=0, population_male=0,
                                population_female=0, population_per_sq_mile=0.0) for c in cousub_fps)
    db.add_all(CountyFacts(county_fp=c, disease_fp=d, population=0, population_male=0,
                           population_female=0) for c in county_fps for d in disease_fps)
    db.add_all(SubdivisionFacts(cousub_fp=c, disease_fp=d, population=0, population_male=0,
                                population_female=0) for c in cousub_fps for d in disease_fps)

    return {
        "county_stats": len(county_fps),
        "subdivision_stats": len(cousub_fps),
        "county_facts": len(county_fps) * len(disease_fps),
        "subdivision_facts": len(cousub_fps) * len(disease_fps),
    }


def load_reference_data(db: Session, data_dir: Path) -> Dict[str, int]:
    """
    Load all reference CSVs from data_dir and seed the counters.

    Runs in the caller's transaction; nothing is committed here.
    """
    data_dir = Path(data_dir)
    counties = read_reference_csv(data_dir / COUNTIES_CSV, ["county_fp", "state_fp", "name", "square_miles"])
    subdivisions = read_reference_csv(
        data_dir / SUBDIVISIONS_CSV, ["cousub_fp", "county_fp", "state_fp", "name", "square_miles"]
    )
    diseases = read_reference_csv(data_dir / DISEASES_CSV, ["disease_fp", "name", "code_snomed"])

    # Parents first so foreign keys hold at every flush
    counts = {"counties": load_counties(db, counties)}
    db.flush()
    counts["county_subdivisions"] = load_subdivisions(db, subdivisions)
    counts["diseases"] = load_diseases(db, diseases)
    db.flush()
    counts.update(seed_counters(db))

    for name, count in counts.items():
        logger.info(f"  {name}: {count:,} rows")
    return counts
