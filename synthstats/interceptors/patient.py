"""
Patient interceptors - keep population counters in step with Patient writes.
"""
from synthstats.interceptors.base import HookOutcome, StatsInterceptor
from synthstats.schemas.resources import Patient
from synthstats.services.counter_ledger import CounterLedger, SexDelta
from synthstats.services.eligibility import classify_subject
from synthstats.services.geography_resolver import GeographyResolver
from synthstats.services.staging_cache import ResourceStagingCache
from synthstats.utils.constants import Operation, ResourceType, SkipReason
import logging

logger = logging.getLogger(__name__)


class PatientStatsInterceptor(StatsInterceptor):
    resource_type = ResourceType.PATIENT

    def __init__(self, ledger: CounterLedger, resolver: GeographyResolver):
        super().__init__(ledger)
        self.resolver = resolver


class _PatientCountInterceptor(PatientStatsInterceptor):
    """Adds (+1) or removes (-1) one patient at its address."""

    sign = 1

    def after(self, resource) -> HookOutcome:
        if not isinstance(resource, Patient):
            return self._skip(SkipReason.WRONG_RESOURCE_TYPE, resource)

        subject = classify_subject(resource)
        if not subject.ok:
            if subject.reason is SkipReason.INVALID_SEX:
                logger.info(f"{self.name}: Invalid gender {resource.gender!r} for patient {resource.id}")
            return self._skip(subject.reason, resource)

        geo = self.resolver.resolve(subject.locality)
        if geo is None:
            logger.info(f"{self.name}: City {subject.locality!r} of patient {resource.id} does not exist")
            return self._skip(SkipReason.UNKNOWN_LOCALITY, resource)

        delta = SexDelta(subject.sex, self.sign)
        return self._apply(
            resource,
            lambda: self.ledger.apply_population_delta(geo.cousub_fp, geo.county_fp, delta)
        )


class PatientStatsCreateInterceptor(_PatientCountInterceptor):
    """Counts a newly created patient."""
    operation = Operation.CREATE
    sign = 1


class PatientStatsDeleteInterceptor(_PatientCountInterceptor):
    """Uncounts a deleted patient."""
    operation = Operation.DELETE
    sign = -1


class PatientStatsUpdateInterceptor(PatientStatsInterceptor):
    """
    Moves a patient between subdivisions when the city of its first
    address changes. A sex change at an unchanged city is not tracked.
    """
    operation = Operation.UPDATE

    def __init__(self, ledger: CounterLedger, resolver: GeographyResolver, staging: ResourceStagingCache = None):
        super().__init__(ledger, resolver)
        self.staging = staging if staging is not None else ResourceStagingCache()

    def before(self, resource) -> HookOutcome:
        if not isinstance(resource, Patient):
            return self._skip(SkipReason.WRONG_RESOURCE_TYPE, resource)
        self.staging.stage(resource.id, resource)
        return HookOutcome.skipped()

    def after(self, resource) -> HookOutcome:
        if not isinstance(resource, Patient):
            return self._skip(SkipReason.WRONG_RESOURCE_TYPE, resource)

        before = self.staging.take_staged(resource.id)
        if before is None:
            logger.warning(f"{self.name}: no cached state for patient {resource.id}, update ignored")
            return HookOutcome.failed(SkipReason.STAGING_MISS)

        old, new = classify_subject(before), classify_subject(resource)
        if not old.ok:
            return self._skip(old.reason, resource)
        if not new.ok:
            return self._skip(new.reason, resource)
        if old.locality == new.locality:
            return self._skip(SkipReason.LOCALITY_UNCHANGED, resource)

        old_geo = self.resolver.resolve(old.locality)
        new_geo = self.resolver.resolve(new.locality)
        if old_geo is None or new_geo is None:
            return self._skip(SkipReason.UNKNOWN_LOCALITY, resource)

        return self._apply(
            resource,
            lambda: self.ledger.apply_population_delta(
                old_geo.cousub_fp, old_geo.county_fp, SexDelta.decrement(old.sex)
            ),
            lambda: self.ledger.apply_population_delta(
                new_geo.cousub_fp, new_geo.county_fp, SexDelta.increment(new.sex)
            ),
        )
