"""
Disease mapping SQLAlchemy model.
"""
from sqlalchemy import Column, String
from synthstats.database import Base


class Disease(Base):
    """Maps a SNOMED CT condition code to the internal disease key."""
    __tablename__ = "diseases"

    disease_fp = Column(String(10), primary_key=True)
    name = Column(String(100), nullable=False)
    code_snomed = Column(String(20), nullable=False, unique=True, index=True)

    def __repr__(self):
        return f"<Disease(disease_fp={self.disease_fp}, code_snomed={self.code_snomed})>"
