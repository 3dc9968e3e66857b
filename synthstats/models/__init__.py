"""
Models package initialization.
"""
from synthstats.models.geography import County, CountySubdivision
from synthstats.models.disease import Disease
from synthstats.models.stats import CountyStats, SubdivisionStats
from synthstats.models.facts import CountyFacts, SubdivisionFacts

__all__ = [
    "County",
    "CountySubdivision",
    "Disease",
    "CountyStats",
    "SubdivisionStats",
    "CountyFacts",
    "SubdivisionFacts",
]
