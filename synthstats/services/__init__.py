"""
Services package initialization.
"""
from synthstats.services.geography_resolver import GeographyResolver, GeoKey
from synthstats.services.disease_catalog import DiseaseCatalog
from synthstats.services.staging_cache import ResourceStagingCache
from synthstats.services.counter_ledger import CounterLedger, SexDelta
from synthstats.services.subject_lookup import SubjectLookup, InMemorySubjectLookup
from synthstats.services.stats_service import StatsService
from synthstats.services.reconciler import CounterReconciler, DriftReport, ReconciliationResult

__all__ = [
    "GeographyResolver",
    "GeoKey",
    "DiseaseCatalog",
    "ResourceStagingCache",
    "CounterLedger",
    "SexDelta",
    "SubjectLookup",
    "InMemorySubjectLookup",
    "StatsService",
    "CounterReconciler",
    "DriftReport",
    "ReconciliationResult",
]
