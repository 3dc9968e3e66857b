"""
Interceptor registry - typed registration and dispatch of the statistics
interceptors by (resource type, operation).
"""
from collections import defaultdict
from sqlalchemy.orm import sessionmaker
from synthstats.database import SessionLocal
from synthstats.interceptors.base import HookOutcome, StatsInterceptor
from synthstats.interceptors.condition import (
    ConditionStatsCreateInterceptor,
    ConditionStatsDeleteInterceptor,
    ConditionStatsUpdateInterceptor,
)
from synthstats.interceptors.patient import (
    PatientStatsCreateInterceptor,
    PatientStatsDeleteInterceptor,
    PatientStatsUpdateInterceptor,
)
from synthstats.schemas.resources import Condition, Patient
from synthstats.services.counter_ledger import CounterLedger
from synthstats.services.disease_catalog import DiseaseCatalog
from synthstats.services.geography_resolver import GeographyResolver
from synthstats.services.staging_cache import ResourceStagingCache
from synthstats.services.subject_lookup import SubjectLookup
from synthstats.utils.constants import Operation, ResourceType
from typing import Dict, List, Tuple


class InterceptorRegistry:
    """Routes hook calls to the interceptors registered for a resource type."""

    def __init__(self):
        self._interceptors: Dict[Tuple[ResourceType, Operation], List[StatsInterceptor]] = defaultdict(list)

    def register(self, interceptor: StatsInterceptor) -> None:
        key = (interceptor.resource_type, interceptor.operation)
        self._interceptors[key].append(interceptor)

    def interceptors_for(self, resource_type: ResourceType, operation: Operation) -> List[StatsInterceptor]:
        return list(self._interceptors.get((resource_type, operation), []))

    def before(self, operation: Operation, resource) -> List[HookOutcome]:
        return [i.before(resource) for i in self._route(operation, resource)]

    def after(self, operation: Operation, resource) -> List[HookOutcome]:
        return [i.after(resource) for i in self._route(operation, resource)]

    def on_error(self, operation: Operation, err: Exception, resource) -> None:
        for interceptor in self._route(operation, resource):
            interceptor.on_error(err, resource)

    def _route(self, operation: Operation, resource) -> List[StatsInterceptor]:
        if not isinstance(resource, (Patient, Condition)):
            return []
        return self.interceptors_for(ResourceType(resource.resource_type), operation)


def build_interceptors(
    ledger: CounterLedger,
    resolver: GeographyResolver,
    catalog: DiseaseCatalog,
    subjects: SubjectLookup,
    patient_staging: ResourceStagingCache = None,
    condition_staging: ResourceStagingCache = None
) -> InterceptorRegistry:
    """Create the six statistics interceptors and register them."""
    registry = InterceptorRegistry()
    for interceptor in (
        PatientStatsCreateInterceptor(ledger, resolver),
        PatientStatsUpdateInterceptor(ledger, resolver, staging=patient_staging),
        PatientStatsDeleteInterceptor(ledger, resolver),
        ConditionStatsCreateInterceptor(ledger, resolver, catalog, subjects),
        ConditionStatsUpdateInterceptor(ledger, resolver, catalog, subjects, staging=condition_staging),
        ConditionStatsDeleteInterceptor(ledger, resolver, catalog, subjects),
    ):
        registry.register(interceptor)
    return registry


def build_interceptors_from_database(
    subjects: SubjectLookup,
    session_factory: sessionmaker = SessionLocal
) -> InterceptorRegistry:
    """Load reference data once and wire the interceptors to the counter store."""
    with session_factory() as db:
        resolver = GeographyResolver.from_session(db)
        catalog = DiseaseCatalog.from_session(db)
    return build_interceptors(CounterLedger(session_factory), resolver, catalog, subjects)
