"""
Counter ledger - apply signed population and disease case deltas.

Every row change is a single UPDATE statement computed by the database from
the row's current values, so concurrent deltas against the same row are
serialized by the store and no stale in-memory copy is ever written back.
The subdivision row and its county row are written in one transaction.
"""
from sqlalchemy import update, select, case, cast, Float
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from synthstats.database import SessionLocal
from synthstats.exceptions import CounterStoreError, InvalidDeltaError, UnknownCounterKeyError
from synthstats.models.geography import County, CountySubdivision
from synthstats.models.stats import CountyStats, SubdivisionStats
from synthstats.models.facts import CountyFacts, SubdivisionFacts
from synthstats.utils.constants import Sex
from typing import NamedTuple
import logging

logger = logging.getLogger(__name__)


class SexDelta(NamedTuple):
    """A +1 / -1 change to the total and to one sex bucket."""
    sex: Sex
    sign: int

    @classmethod
    def increment(cls, sex: Sex) -> "SexDelta":
        return cls(sex, 1)

    @classmethod
    def decrement(cls, sex: Sex) -> "SexDelta":
        return cls(sex, -1)


def _validate(delta: SexDelta):
    if delta.sign not in (1, -1):
        raise InvalidDeltaError(f"Counter delta must be +1 or -1, got {delta.sign}")
    if not isinstance(delta.sex, Sex):
        raise InvalidDeltaError(f"Counter delta needs a Sex, got {delta.sex!r}")


class CounterLedger:
    """Owns every mutation of the population and disease case counters."""

    def __init__(self, session_factory: sessionmaker = SessionLocal):
        self.session_factory = session_factory

    def apply_population_delta(self, cousub_fp: str, county_fp: str, delta: SexDelta):
        """
        Adjust population, the matching sex bucket and the density of the
        subdivision and its county.

        Raises:
            UnknownCounterKeyError: no counter row for one of the keys
            CounterStoreError: the database rejected or failed the update
        """
        _validate(delta)
        self._run(
            lambda db: (
                self._update_population(
                    db, SubdivisionStats, SubdivisionStats.cousub_fp,
                    CountySubdivision, CountySubdivision.cousub_fp, cousub_fp, delta
                ),
                self._update_population(
                    db, CountyStats, CountyStats.county_fp,
                    County, County.county_fp, county_fp, delta
                ),
            )
        )
        logger.debug(
            f"Population {delta.sign:+d} {delta.sex.value} applied to "
            f"subdivision {cousub_fp} / county {county_fp}"
        )

    def apply_disease_case_delta(self, cousub_fp: str, county_fp: str, disease_fp: str, delta: SexDelta):
        """
        Adjust the case total and matching sex bucket for a disease in the
        subdivision and its county.

        Raises:
            UnknownCounterKeyError: no counter row for one of the keys
            CounterStoreError: the database rejected or failed the update
        """
        _validate(delta)
        self._run(
            lambda db: (
                self._update_cases(
                    db, SubdivisionFacts, SubdivisionFacts.cousub_fp, cousub_fp, disease_fp, delta
                ),
                self._update_cases(
                    db, CountyFacts, CountyFacts.county_fp, county_fp, disease_fp, delta
                ),
            )
        )
        logger.debug(
            f"Disease {disease_fp} cases {delta.sign:+d} {delta.sex.value} applied to "
            f"subdivision {cousub_fp} / county {county_fp}"
        )

    def _run(self, work):
        """Run work inside one transaction, translating store failures."""
        with self.session_factory() as db:
            try:
                with db.begin():
                    work(db)
            except SQLAlchemyError as e:
                raise CounterStoreError(f"Counter update failed: {e}") from e

    @staticmethod
    def _update_population(db: Session, counter_model, counter_key, geo_model, geo_key, key: str, delta: SexDelta):
        area = select(geo_model.square_miles).where(geo_key == key).scalar_subquery()
        sex_column = getattr(counter_model, f"population_{delta.sex.value}")
        new_total = counter_model.population + delta.sign

        # SET expressions see the pre-update row, so density uses the new total
        stmt = (
            update(counter_model)
            .where(counter_key == key)
            .values({
                counter_model.population: new_total,
                sex_column: sex_column + delta.sign,
                counter_model.population_per_sq_mile: case(
                    (area > 0, cast(new_total, Float) / area),
                    else_=0.0
                ),
            })
            .execution_options(synchronize_session=False)
        )
        result = db.execute(stmt)
        if result.rowcount != 1:
            raise UnknownCounterKeyError(counter_model.__tablename__, {counter_key.key: key})

    @staticmethod
    def _update_cases(db: Session, counter_model, counter_key, key: str, disease_fp: str, delta: SexDelta):
        sex_column = getattr(counter_model, f"population_{delta.sex.value}")
        stmt = (
            update(counter_model)
            .where(counter_key == key, counter_model.disease_fp == disease_fp)
            .values({
                counter_model.population: counter_model.population + delta.sign,
                sex_column: sex_column + delta.sign,
            })
            .execution_options(synchronize_session=False)
        )
        result = db.execute(stmt)
        if result.rowcount != 1:
            raise UnknownCounterKeyError(
                counter_model.__tablename__,
                {counter_key.key: key, "disease_fp": disease_fp}
            )
