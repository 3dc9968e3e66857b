"""
Disease case counter SQLAlchemy models.
One row per (geography, disease) pair.
"""
from sqlalchemy import Column, String, BigInteger, ForeignKey
from synthstats.database import Base


class DiseaseCaseCounterMixin:
    """Columns shared by both disease case counter tables."""

    population = Column(BigInteger, default=0, nullable=False)
    population_male = Column(BigInteger, default=0, nullable=False)
    population_female = Column(BigInteger, default=0, nullable=False)


class CountyFacts(DiseaseCaseCounterMixin, Base):
    """Active case counts of a disease within a county."""
    __tablename__ = "county_facts"

    county_fp = Column(String(3), ForeignKey("counties.county_fp"), primary_key=True)
    disease_fp = Column(String(10), ForeignKey("diseases.disease_fp"), primary_key=True)

    def __repr__(self):
        return f"<CountyFacts(county_fp={self.county_fp}, disease_fp={self.disease_fp}, population={self.population})>"


class SubdivisionFacts(DiseaseCaseCounterMixin, Base):
    """Active case counts of a disease within a county subdivision."""
    __tablename__ = "subdivision_facts"

    cousub_fp = Column(String(5), ForeignKey("county_subdivisions.cousub_fp"), primary_key=True)
    disease_fp = Column(String(10), ForeignKey("diseases.disease_fp"), primary_key=True)

    def __repr__(self):
        return f"<SubdivisionFacts(cousub_fp={self.cousub_fp}, disease_fp={self.disease_fp}, population={self.population})>"
