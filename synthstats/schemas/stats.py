"""
Statistics Pydantic schemas for response validation.
"""
from pydantic import BaseModel
from typing import List, Optional


class PopulationStatsResponse(BaseModel):
    """Population counters for a single county or subdivision."""
    key: str
    name: str
    county_fp: str
    state_fp: Optional[str] = None
    square_miles: float
    population: int
    population_male: int
    population_female: int
    population_per_sq_mile: float


class DiseaseFactsRecord(BaseModel):
    """Case counters for one disease within a geography."""
    disease_fp: str
    disease_name: str
    population: int
    population_male: int
    population_female: int


class DiseaseFactsResponse(BaseModel):
    """Case counters for every tracked disease within a geography."""
    key: str
    level: str  # county, subdivision
    diseases: List[DiseaseFactsRecord]
    total_diseases: int


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    database: str
