"""
Pytest configuration and shared fixtures.

Every test gets its own in-memory SQLite database seeded with two counties,
their subdivisions and two tracked diseases.
"""

import pytest
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from synthstats.database import Base, build_engine, init_db
from synthstats.models import (
    County, CountySubdivision, Disease,
    CountyStats, SubdivisionStats, CountyFacts, SubdivisionFacts,
)
from synthstats.schemas.resources import Patient, Condition
from synthstats.services.counter_ledger import CounterLedger
from synthstats.services.disease_catalog import DiseaseCatalog
from synthstats.services.geography_resolver import GeographyResolver
from synthstats.services.reference_loader import seed_counters
from synthstats.services.subject_lookup import InMemorySubjectLookup

SNOMED = "http://snomed.info/sct"

DIABETES_SNOMED = "44054006"
HYPERTENSION_SNOMED = "38341003"
UNTRACKED_SNOMED = "00000000"
DIABETES_FP = "1"
HYPERTENSION_FP = "2"

SUFFOLK_FP = "025"
MIDDLESEX_FP = "017"
BOSTON_FP = "07000"
CHELSEA_FP = "13205"
BEDFORD_FP = "04615"
UNDEFINED_FP = "00000"


@pytest.fixture
def engine():
    test_engine = build_engine("sqlite://", poolclass=StaticPool)
    init_db(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    with factory() as db:
        db.add_all([
            County(county_fp=SUFFOLK_FP, state_fp="25", name="Suffolk", square_miles=200.0),
            County(county_fp=MIDDLESEX_FP, state_fp="25", name="Middlesex", square_miles=800.0),
        ])
        db.flush()
        db.add_all([
            CountySubdivision(cousub_fp=BOSTON_FP, county_fp=SUFFOLK_FP, state_fp="25",
                              name="Boston", square_miles=100.0),
            CountySubdivision(cousub_fp=CHELSEA_FP, county_fp=SUFFOLK_FP, state_fp="25",
                              name="Chelsea", square_miles=2.5),
            CountySubdivision(cousub_fp=BEDFORD_FP, county_fp=MIDDLESEX_FP, state_fp="25",
                              name="Bedford", square_miles=25.0),
            CountySubdivision(cousub_fp=UNDEFINED_FP, county_fp=SUFFOLK_FP, state_fp="25",
                              name="County subdivisions not defined", square_miles=1.0),
            Disease(disease_fp=DIABETES_FP, name="Diabetes", code_snomed=DIABETES_SNOMED),
            Disease(disease_fp=HYPERTENSION_FP, name="Hypertension", code_snomed=HYPERTENSION_SNOMED),
        ])
        db.flush()
        seed_counters(db)
        db.commit()
    return factory


@pytest.fixture
def ledger(session_factory):
    return CounterLedger(session_factory)


@pytest.fixture
def resolver(session_factory):
    with session_factory() as db:
        return GeographyResolver.from_session(db, undefined_key=UNDEFINED_FP)


@pytest.fixture
def catalog(session_factory):
    with session_factory() as db:
        return DiseaseCatalog.from_session(db, code_system=SNOMED)


@pytest.fixture
def subjects():
    return InMemorySubjectLookup()


@pytest.fixture
def read_stats(session_factory):
    """Return a function reading a population counter row as a dict."""
    def _read(level: str, key: str) -> dict:
        model = CountyStats if level == "county" else SubdivisionStats
        with session_factory() as db:
            row = db.get(model, key)
            return {
                "population": row.population,
                "male": row.population_male,
                "female": row.population_female,
                "density": row.population_per_sq_mile,
            }
    return _read


@pytest.fixture
def read_facts(session_factory):
    """Return a function reading a disease counter row as a dict."""
    def _read(level: str, key: str, disease_fp: str) -> dict:
        model = CountyFacts if level == "county" else SubdivisionFacts
        with session_factory() as db:
            row = db.get(model, (key, disease_fp))
            return {
                "population": row.population,
                "male": row.population_male,
                "female": row.population_female,
            }
    return _read


def make_patient(city="Boston", gender="male", patient_id="p1") -> Patient:
    address = [{"line": ["1 Main St"], "city": city, "state": "MA"}] if city is not None else []
    return Patient.model_validate({
        "resourceType": "Patient",
        "id": patient_id,
        "gender": gender,
        "address": address,
    })


def make_condition(code=DIABETES_SNOMED, patient_id="p1", condition_id="c1", **abatement) -> Condition:
    payload = {
        "resourceType": "Condition",
        "id": condition_id,
        "code": {"coding": [{"system": SNOMED, "code": code}]},
    }
    if patient_id is not None:
        payload["subject"] = {"reference": f"Patient/{patient_id}"}
    payload.update(abatement)
    return Condition.model_validate(payload)
