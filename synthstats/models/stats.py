"""
Population counter SQLAlchemy models.
One row per county and per county subdivision.
"""
from sqlalchemy import Column, String, BigInteger, Float, ForeignKey
from synthstats.database import Base


class PopulationCounterMixin:
    """Columns shared by both population counter tables."""

    population = Column(BigInteger, default=0, nullable=False)
    population_male = Column(BigInteger, default=0, nullable=False)
    population_female = Column(BigInteger, default=0, nullable=False)

    # Derived: population / square_miles of the owning geography
    population_per_sq_mile = Column(Float, default=0.0, nullable=False)


class CountyStats(PopulationCounterMixin, Base):
    """Running population counters for a county."""
    __tablename__ = "county_stats"

    county_fp = Column(String(3), ForeignKey("counties.county_fp"), primary_key=True)

    def __repr__(self):
        return f"<CountyStats(county_fp={self.county_fp}, population={self.population})>"


class SubdivisionStats(PopulationCounterMixin, Base):
    """Running population counters for a county subdivision."""
    __tablename__ = "subdivision_stats"

    cousub_fp = Column(String(5), ForeignKey("county_subdivisions.cousub_fp"), primary_key=True)

    def __repr__(self):
        return f"<SubdivisionStats(cousub_fp={self.cousub_fp}, population={self.population})>"
