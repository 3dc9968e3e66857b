"""
Schemas package initialization.
"""
from synthstats.schemas.resources import (
    Address,
    Coding,
    CodeableConcept,
    Reference,
    Patient,
    Condition,
    Resource,
    parse_resource,
)
from synthstats.schemas.stats import (
    PopulationStatsResponse,
    DiseaseFactsRecord,
    DiseaseFactsResponse,
    HealthResponse,
)

__all__ = [
    # Resources
    "Address",
    "Coding",
    "CodeableConcept",
    "Reference",
    "Patient",
    "Condition",
    "Resource",
    "parse_resource",
    # Stats
    "PopulationStatsResponse",
    "DiseaseFactsRecord",
    "DiseaseFactsResponse",
    "HealthResponse",
]
