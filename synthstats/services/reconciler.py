"""
Counter reconciler - repair county counters that drifted from the sum of
their subdivisions, and subdivision densities that drifted from
population / area.

A delta is always written to a subdivision and its county together, so
after any partial failure the subdivision rows are the reference. Repairs
are conditional on the row still holding the values that were read; a row
that moved in between is reported as unrepaired and picked up next run.
"""
from dataclasses import dataclass, field
from sqlalchemy import func, update, and_
from sqlalchemy.orm import Session, sessionmaker
from synthstats.database import SessionLocal
from synthstats.models.geography import County, CountySubdivision
from synthstats.models.stats import CountyStats, SubdivisionStats
from synthstats.models.facts import CountyFacts, SubdivisionFacts
from typing import Dict, List, Tuple
import logging
import math

logger = logging.getLogger(__name__)

COUNT_COLUMNS = ("population", "population_male", "population_female")


@dataclass
class DriftReport:
    """One counter row whose stored values disagree with the expected ones."""
    table: str
    key: Dict[str, str]
    expected: Dict[str, float]
    actual: Dict[str, float]
    repaired: bool = False


@dataclass
class ReconciliationResult:
    drifts: List[DriftReport] = field(default_factory=list)
    dry_run: bool = False

    @property
    def repaired(self) -> int:
        return sum(1 for d in self.drifts if d.repaired)

    @property
    def consistent(self) -> bool:
        return not self.drifts


def _density(population: int, square_miles: float) -> float:
    return population / square_miles if square_miles and square_miles > 0 else 0.0


class CounterReconciler:
    """Recompute derived and rolled-up counters from subdivision rows."""

    def __init__(self, session_factory: sessionmaker = SessionLocal):
        self.session_factory = session_factory

    def reconcile(self, dry_run: bool = False) -> ReconciliationResult:
        """Check every county and subdivision counter, repairing unless dry_run."""
        result = ReconciliationResult(dry_run=dry_run)
        with self.session_factory() as db:
            with db.begin():
                result.drifts.extend(self._subdivision_density(db, dry_run))
                result.drifts.extend(self._county_population(db, dry_run))
                result.drifts.extend(self._county_facts(db, dry_run))

        logger.info(
            f"Reconciliation {'(dry run) ' if dry_run else ''}found {len(result.drifts)} "
            f"drifted rows, repaired {result.repaired}"
        )
        return result

    def _subdivision_density(self, db: Session, dry_run: bool) -> List[DriftReport]:
        drifts = []
        rows = db.query(SubdivisionStats, CountySubdivision.square_miles).join(
            CountySubdivision, CountySubdivision.cousub_fp == SubdivisionStats.cousub_fp
        ).all()

        for stats, square_miles in rows:
            expected = _density(stats.population, square_miles)
            if math.isclose(stats.population_per_sq_mile, expected, rel_tol=1e-9, abs_tol=1e-9):
                continue
            report = DriftReport(
                table=SubdivisionStats.__tablename__,
                key={"cousub_fp": stats.cousub_fp},
                expected={"population_per_sq_mile": expected},
                actual={"population_per_sq_mile": stats.population_per_sq_mile},
            )
            if not dry_run:
                report.repaired = self._write(
                    db, SubdivisionStats,
                    [SubdivisionStats.cousub_fp == stats.cousub_fp,
                     SubdivisionStats.population == stats.population],
                    {"population_per_sq_mile": expected}
                )
            drifts.append(report)
        return drifts

    def _county_population(self, db: Session, dry_run: bool) -> List[DriftReport]:
        sums = db.query(
            County.county_fp,
            County.square_miles,
            func.coalesce(func.sum(SubdivisionStats.population), 0).label('population'),
            func.coalesce(func.sum(SubdivisionStats.population_male), 0).label('population_male'),
            func.coalesce(func.sum(SubdivisionStats.population_female), 0).label('population_female'),
        ).outerjoin(
            CountySubdivision, CountySubdivision.county_fp == County.county_fp
        ).outerjoin(
            SubdivisionStats, SubdivisionStats.cousub_fp == CountySubdivision.cousub_fp
        ).group_by(County.county_fp, County.square_miles).all()

        current = {row.county_fp: row for row in db.query(CountyStats).all()}

        drifts = []
        for s in sums:
            stats = current.get(s.county_fp)
            if stats is None:
                continue
            expected = {c: int(getattr(s, c)) for c in COUNT_COLUMNS}
            expected["population_per_sq_mile"] = _density(expected["population"], s.square_miles)
            actual = {c: getattr(stats, c) for c in expected}

            if all(
                math.isclose(actual[c], expected[c], rel_tol=1e-9, abs_tol=1e-9) for c in expected
            ):
                continue

            report = DriftReport(
                table=CountyStats.__tablename__,
                key={"county_fp": s.county_fp},
                expected=expected,
                actual=actual,
            )
            if not dry_run:
                report.repaired = self._write(
                    db, CountyStats,
                    [CountyStats.county_fp == s.county_fp]
                    + [getattr(CountyStats, c) == actual[c] for c in COUNT_COLUMNS],
                    expected
                )
            drifts.append(report)
        return drifts

    def _county_facts(self, db: Session, dry_run: bool) -> List[DriftReport]:
        sums = db.query(
            CountySubdivision.county_fp,
            SubdivisionFacts.disease_fp,
            func.sum(SubdivisionFacts.population).label('population'),
            func.sum(SubdivisionFacts.population_male).label('population_male'),
            func.sum(SubdivisionFacts.population_female).label('population_female'),
        ).join(
            CountySubdivision, CountySubdivision.cousub_fp == SubdivisionFacts.cousub_fp
        ).group_by(CountySubdivision.county_fp, SubdivisionFacts.disease_fp).all()

        expected_by_key: Dict[Tuple[str, str], Dict[str, int]] = {
            (s.county_fp, s.disease_fp): {c: int(getattr(s, c) or 0) for c in COUNT_COLUMNS}
            for s in sums
        }

        drifts = []
        for facts in db.query(CountyFacts).all():
            expected = expected_by_key.get(
                (facts.county_fp, facts.disease_fp), {c: 0 for c in COUNT_COLUMNS}
            )
            actual = {c: getattr(facts, c) for c in COUNT_COLUMNS}
            if actual == expected:
                continue

            report = DriftReport(
                table=CountyFacts.__tablename__,
                key={"county_fp": facts.county_fp, "disease_fp": facts.disease_fp},
                expected=expected,
                actual=actual,
            )
            if not dry_run:
                report.repaired = self._write(
                    db, CountyFacts,
                    [CountyFacts.county_fp == facts.county_fp,
                     CountyFacts.disease_fp == facts.disease_fp]
                    + [getattr(CountyFacts, c) == actual[c] for c in COUNT_COLUMNS],
                    expected
                )
            drifts.append(report)
        return drifts

    @staticmethod
    def _write(db: Session, model, conditions: list, values: Dict[str, float]) -> bool:
        stmt = (
            update(model)
            .where(and_(*conditions))
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        repaired = db.execute(stmt).rowcount == 1
        if not repaired:
            logger.warning(f"{model.__tablename__} row changed during reconciliation, left for next run")
        return repaired
