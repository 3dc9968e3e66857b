"""
Condition interceptors - keep disease case counters in step with Condition
writes. Geography comes from the referenced Patient.
"""
from synthstats.exceptions import ResourceNotFoundError
from synthstats.interceptors.base import HookOutcome, StatsInterceptor
from synthstats.schemas.resources import Condition, Patient
from synthstats.services.counter_ledger import CounterLedger, SexDelta
from synthstats.services.disease_catalog import DiseaseCatalog
from synthstats.services.eligibility import classify_observation, classify_subject
from synthstats.services.geography_resolver import GeographyResolver
from synthstats.services.staging_cache import ResourceStagingCache
from synthstats.services.subject_lookup import SubjectLookup
from synthstats.utils.constants import Operation, ResourceType, SkipReason
import logging

logger = logging.getLogger(__name__)


class ConditionStatsInterceptor(StatsInterceptor):
    resource_type = ResourceType.CONDITION

    def __init__(
        self,
        ledger: CounterLedger,
        resolver: GeographyResolver,
        catalog: DiseaseCatalog,
        subjects: SubjectLookup
    ):
        super().__init__(ledger)
        self.resolver = resolver
        self.catalog = catalog
        self.subjects = subjects

    def _count(self, condition: Condition, disease_fp: str, subject_id: str, sign: int) -> HookOutcome:
        """Apply one signed case for the disease at the subject's address."""
        try:
            patient = self.subjects.get(subject_id, ResourceType.PATIENT.value)
        except ResourceNotFoundError:
            logger.info(f"{self.name}: Failed to get patient {subject_id} for condition {condition.id}")
            return self._skip(SkipReason.SUBJECT_NOT_FOUND, condition)
        if not isinstance(patient, Patient):
            return self._skip(SkipReason.SUBJECT_NOT_FOUND, condition)

        subject = classify_subject(patient)
        if not subject.ok:
            return self._skip(SkipReason.INELIGIBLE_SUBJECT, condition)

        geo = self.resolver.resolve(subject.locality)
        if geo is None:
            return self._skip(SkipReason.UNKNOWN_LOCALITY, condition)

        delta = SexDelta(subject.sex, sign)
        return self._apply(
            condition,
            lambda: self.ledger.apply_disease_case_delta(geo.cousub_fp, geo.county_fp, disease_fp, delta)
        )


class _ConditionCountInterceptor(ConditionStatsInterceptor):
    """Adds (+1) or removes (-1) one active case."""

    sign = 1

    def after(self, resource) -> HookOutcome:
        if not isinstance(resource, Condition):
            return self._skip(SkipReason.WRONG_RESOURCE_TYPE, resource)

        observation = classify_observation(resource, self.catalog)
        if not observation.countable:
            if observation.reason is SkipReason.MISSING_SUBJECT:
                logger.info(f"{self.name}: Condition {resource.id} has no subject")
            return self._skip(observation.reason, resource)

        return self._count(resource, observation.disease_fp, observation.subject_id, self.sign)


class ConditionStatsCreateInterceptor(_ConditionCountInterceptor):
    """Counts a newly created active condition."""
    operation = Operation.CREATE
    sign = 1


class ConditionStatsDeleteInterceptor(_ConditionCountInterceptor):
    """Uncounts a deleted condition that was still active."""
    operation = Operation.DELETE
    sign = -1


class ConditionStatsUpdateInterceptor(ConditionStatsInterceptor):
    """
    Removes a case once, when an active condition becomes abated.

    The reverse transition is not re-counted.
    """
    operation = Operation.UPDATE

    def __init__(
        self,
        ledger: CounterLedger,
        resolver: GeographyResolver,
        catalog: DiseaseCatalog,
        subjects: SubjectLookup,
        staging: ResourceStagingCache = None
    ):
        super().__init__(ledger, resolver, catalog, subjects)
        self.staging = staging if staging is not None else ResourceStagingCache()

    def before(self, resource) -> HookOutcome:
        if not isinstance(resource, Condition):
            return self._skip(SkipReason.WRONG_RESOURCE_TYPE, resource)
        self.staging.stage(resource.id, resource)
        return HookOutcome.skipped()

    def after(self, resource) -> HookOutcome:
        if not isinstance(resource, Condition):
            return self._skip(SkipReason.WRONG_RESOURCE_TYPE, resource)

        before = self.staging.take_staged(resource.id)
        if before is None:
            logger.warning(f"{self.name}: no cached state for condition {resource.id}, update ignored")
            return HookOutcome.failed(SkipReason.STAGING_MISS)

        old = classify_observation(before, self.catalog)
        new = classify_observation(resource, self.catalog)
        if not (old.countable and new.abated):
            return self._skip(SkipReason.NO_TRANSITION, resource)
        if not new.subject_id:
            logger.info(f"{self.name}: Condition {resource.id} has no subject")
            return self._skip(SkipReason.MISSING_SUBJECT, resource)

        # The case was counted under the pre-update disease code
        return self._count(resource, old.disease_fp, new.subject_id, -1)
