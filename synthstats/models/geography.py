"""
Reference geography SQLAlchemy models.
Counties and county subdivisions (towns) loaded from census TIGER extracts.
"""
from sqlalchemy import Column, String, Float, ForeignKey, Index
from synthstats.database import Base


class County(Base):
    """
    County (region) reference table.

    Immutable once loaded. Area is used to derive population density.
    """
    __tablename__ = "counties"

    county_fp = Column(String(3), primary_key=True)
    state_fp = Column(String(2), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    square_miles = Column(Float, nullable=False)

    def __repr__(self):
        return f"<County(county_fp={self.county_fp}, name={self.name})>"


class CountySubdivision(Base):
    """
    County subdivision (town) reference table.

    Patients are matched to a subdivision by the exact city name
    of their first address.
    """
    __tablename__ = "county_subdivisions"

    cousub_fp = Column(String(5), primary_key=True)
    county_fp = Column(String(3), ForeignKey("counties.county_fp"), nullable=False, index=True)
    state_fp = Column(String(2), nullable=False)
    name = Column(String(100), nullable=False)
    square_miles = Column(Float, nullable=False)

    __table_args__ = (
        Index('idx_cousub_name', 'name'),
    )

    def __repr__(self):
        return f"<CountySubdivision(cousub_fp={self.cousub_fp}, county_fp={self.county_fp}, name={self.name})>"
