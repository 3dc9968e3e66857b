"""Tests for loading the reference CSVs."""

import pytest
from sqlalchemy.orm import sessionmaker

from synthstats.models import County, CountySubdivision, Disease, CountyFacts, SubdivisionStats
from synthstats.services.reference_loader import (
    COUNTIES_CSV, DISEASES_CSV, SUBDIVISIONS_CSV, load_reference_data, read_reference_csv,
)


@pytest.fixture
def data_dir(tmp_path):
    (tmp_path / COUNTIES_CSV).write_text(
        "county_fp,state_fp,name,square_miles\n"
        "025,25,Suffolk,58.15\n"
        "017,25,Middlesex,\n"
    )
    (tmp_path / SUBDIVISIONS_CSV).write_text(
        "cousub_fp,county_fp,state_fp,name,square_miles\n"
        "07000,025,25,Boston,48.34\n"
        "04615,017,25, Bedford ,13.72\n"
    )
    (tmp_path / DISEASES_CSV).write_text(
        "disease_fp,name,code_snomed\n"
        "1,Diabetes,44054006\n"
        "2,Hypertension,38341003\n"
    )
    return tmp_path


@pytest.fixture
def empty_db(engine):
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    with factory() as db:
        yield db


def test_loads_reference_data_and_seeds_counters(empty_db, data_dir) -> None:
    counts = load_reference_data(empty_db, data_dir)
    empty_db.commit()

    assert counts["counties"] == 2
    assert counts["county_subdivisions"] == 2
    assert counts["diseases"] == 2
    assert counts["county_facts"] == 4
    assert counts["subdivision_facts"] == 4

    suffolk = empty_db.get(County, "025")
    assert suffolk.name == "Suffolk"
    assert empty_db.get(County, "017").square_miles == 0.0

    bedford = empty_db.get(CountySubdivision, "04615")
    assert bedford.name == "Bedford"
    assert bedford.county_fp == "017"

    assert empty_db.get(Disease, "1").code_snomed == "44054006"
    assert empty_db.get(SubdivisionStats, "07000").population == 0
    assert empty_db.get(CountyFacts, ("017", "2")).population == 0


def test_missing_column_is_rejected(tmp_path) -> None:
    path = tmp_path / DISEASES_CSV
    path.write_text("disease_fp,name\n1,Diabetes\n")

    with pytest.raises(ValueError, match="code_snomed"):
        read_reference_csv(path, ["disease_fp", "name", "code_snomed"])
