"""Tests for the counter ledger."""

from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy import update
from sqlalchemy.orm import sessionmaker

from synthstats.database import build_engine, init_db
from synthstats.exceptions import CounterStoreError, InvalidDeltaError, UnknownCounterKeyError
from synthstats.models import SubdivisionStats
from synthstats.services.counter_ledger import CounterLedger, SexDelta
from synthstats.utils.constants import Sex

from conftest import (
    BOSTON_FP, CHELSEA_FP, SUFFOLK_FP, DIABETES_FP, HYPERTENSION_FP,
)


class TestPopulationDelta:

    def test_increment_updates_subdivision_and_county(self, ledger, read_stats) -> None:
        ledger.apply_population_delta(BOSTON_FP, SUFFOLK_FP, SexDelta.increment(Sex.MALE))

        boston = read_stats("subdivision", BOSTON_FP)
        assert (boston["population"], boston["male"], boston["female"]) == (1, 1, 0)
        assert boston["density"] == pytest.approx(1 / 100)

        suffolk = read_stats("county", SUFFOLK_FP)
        assert (suffolk["population"], suffolk["male"], suffolk["female"]) == (1, 1, 0)
        assert suffolk["density"] == pytest.approx(1 / 200)

    def test_density_uses_post_update_total(self, ledger, read_stats) -> None:
        for _ in range(3):
            ledger.apply_population_delta(CHELSEA_FP, SUFFOLK_FP, SexDelta.increment(Sex.FEMALE))
        ledger.apply_population_delta(CHELSEA_FP, SUFFOLK_FP, SexDelta.decrement(Sex.FEMALE))

        chelsea = read_stats("subdivision", CHELSEA_FP)
        assert chelsea["population"] == 2
        assert chelsea["female"] == 2
        assert chelsea["density"] == pytest.approx(2 / 2.5)

    def test_total_is_sum_of_sex_buckets(self, ledger, read_stats) -> None:
        ledger.apply_population_delta(BOSTON_FP, SUFFOLK_FP, SexDelta.increment(Sex.MALE))
        ledger.apply_population_delta(BOSTON_FP, SUFFOLK_FP, SexDelta.increment(Sex.FEMALE))
        ledger.apply_population_delta(BOSTON_FP, SUFFOLK_FP, SexDelta.increment(Sex.FEMALE))

        for level, key in (("subdivision", BOSTON_FP), ("county", SUFFOLK_FP)):
            row = read_stats(level, key)
            assert row["population"] == row["male"] + row["female"] == 3

    def test_unknown_subdivision_raises(self, ledger) -> None:
        with pytest.raises(UnknownCounterKeyError) as exc:
            ledger.apply_population_delta("99999", SUFFOLK_FP, SexDelta.increment(Sex.MALE))
        assert exc.value.key == {"cousub_fp": "99999"}

    def test_unknown_county_rolls_back_subdivision(self, ledger, read_stats) -> None:
        with pytest.raises(UnknownCounterKeyError):
            ledger.apply_population_delta(BOSTON_FP, "999", SexDelta.increment(Sex.MALE))

        assert read_stats("subdivision", BOSTON_FP)["population"] == 0

    @pytest.mark.parametrize("delta", [SexDelta(Sex.MALE, 2), SexDelta(Sex.MALE, 0), SexDelta("male", 1)])
    def test_rejects_invalid_delta(self, ledger, read_stats, delta) -> None:
        with pytest.raises(InvalidDeltaError):
            ledger.apply_population_delta(BOSTON_FP, SUFFOLK_FP, delta)
        assert read_stats("subdivision", BOSTON_FP)["population"] == 0


class TestDiseaseCaseDelta:

    def test_increment_updates_both_levels(self, ledger, read_facts) -> None:
        ledger.apply_disease_case_delta(BOSTON_FP, SUFFOLK_FP, DIABETES_FP, SexDelta.increment(Sex.FEMALE))

        assert read_facts("subdivision", BOSTON_FP, DIABETES_FP) == {"population": 1, "male": 0, "female": 1}
        assert read_facts("county", SUFFOLK_FP, DIABETES_FP) == {"population": 1, "male": 0, "female": 1}
        assert read_facts("subdivision", BOSTON_FP, HYPERTENSION_FP)["population"] == 0

    def test_decrement(self, ledger, read_facts) -> None:
        ledger.apply_disease_case_delta(BOSTON_FP, SUFFOLK_FP, DIABETES_FP, SexDelta.increment(Sex.MALE))
        ledger.apply_disease_case_delta(BOSTON_FP, SUFFOLK_FP, DIABETES_FP, SexDelta.decrement(Sex.MALE))

        assert read_facts("subdivision", BOSTON_FP, DIABETES_FP) == {"population": 0, "male": 0, "female": 0}
        assert read_facts("county", SUFFOLK_FP, DIABETES_FP) == {"population": 0, "male": 0, "female": 0}

    def test_unknown_disease_raises(self, ledger, read_facts) -> None:
        with pytest.raises(UnknownCounterKeyError) as exc:
            ledger.apply_disease_case_delta(BOSTON_FP, SUFFOLK_FP, "999", SexDelta.increment(Sex.MALE))
        assert exc.value.key["disease_fp"] == "999"


class TestStoreFailure:

    def test_database_error_is_wrapped(self, session_factory) -> None:
        def broken_factory():
            db = session_factory()
            db.execute = _raise_operational_error
            return db

        ledger = CounterLedger(broken_factory)
        with pytest.raises(CounterStoreError):
            ledger.apply_population_delta(BOSTON_FP, SUFFOLK_FP, SexDelta.increment(Sex.MALE))


def _raise_operational_error(*args, **kwargs):
    from sqlalchemy.exc import OperationalError
    raise OperationalError("UPDATE subdivision_stats", {}, Exception("database is locked"))


def test_concurrent_deltas_are_not_lost(tmp_path) -> None:
    """Interleaved increments against one row from several threads all land."""
    engine = build_engine(f"sqlite:///{tmp_path / 'ledger.db'}", connect_args={"timeout": 30})
    init_db(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    from synthstats.models import County, CountySubdivision, CountyStats
    with factory() as db:
        db.add(County(county_fp=SUFFOLK_FP, state_fp="25", name="Suffolk", square_miles=200.0))
        db.flush()
        db.add(CountySubdivision(cousub_fp=BOSTON_FP, county_fp=SUFFOLK_FP, state_fp="25",
                                 name="Boston", square_miles=100.0))
        db.flush()
        db.add_all([
            CountyStats(county_fp=SUFFOLK_FP, population=0, population_male=0,
                        population_female=0, population_per_sq_mile=0.0),
            SubdivisionStats(cousub_fp=BOSTON_FP, population=0, population_male=0,
                             population_female=0, population_per_sq_mile=0.0),
        ])
        db.commit()

    ledger = CounterLedger(factory)

    def work(i):
        sex = Sex.MALE if i % 2 else Sex.FEMALE
        ledger.apply_population_delta(BOSTON_FP, SUFFOLK_FP, SexDelta.increment(sex))

    try:
        with ThreadPoolExecutor(max_workers=4) as pool:
            list(pool.map(work, range(40)))

        with factory() as db:
            boston = db.get(SubdivisionStats, BOSTON_FP)
            suffolk = db.get(CountyStats, SUFFOLK_FP)
            assert boston.population == suffolk.population == 40
            assert boston.population_male == boston.population_female == 20
            assert boston.population_per_sq_mile == pytest.approx(0.4)
    finally:
        engine.dispose()


def test_additive_with_direct_writes(ledger, session_factory, read_stats) -> None:
    """The ledger adds to whatever the row holds instead of overwriting it."""
    with session_factory() as db:
        db.execute(
            update(SubdivisionStats)
            .where(SubdivisionStats.cousub_fp == BOSTON_FP)
            .values(population=10, population_male=10)
        )
        db.commit()

    ledger.apply_population_delta(BOSTON_FP, SUFFOLK_FP, SexDelta.increment(Sex.MALE))

    boston = read_stats("subdivision", BOSTON_FP)
    assert boston["population"] == 11
    assert boston["male"] == 11
    assert boston["density"] == pytest.approx(11 / 100)
