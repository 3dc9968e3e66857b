"""
Eligibility classifier - decide whether a resource may move the counters.

Pure functions: no I/O, never raise, always return a reason when a
resource is not eligible.
"""
from dataclasses import dataclass
from synthstats.schemas.resources import Condition, Patient
from synthstats.services.disease_catalog import DiseaseCatalog
from synthstats.utils.constants import Sex, SkipReason
from typing import Optional


@dataclass(frozen=True)
class SubjectEligibility:
    """Classification of a Patient resource."""
    ok: bool
    sex: Optional[Sex] = None
    locality: str = ""
    reason: Optional[SkipReason] = None


@dataclass(frozen=True)
class ObservationEligibility:
    """Classification of a Condition resource."""
    countable: bool
    abated: bool = False
    disease_fp: Optional[str] = None
    subject_id: str = ""
    reason: Optional[SkipReason] = None


def patient_locality(patient: Patient) -> str:
    """City of the patient's first address, '' when absent."""
    if not patient.address:
        return ""
    return patient.address[0].city or ""


def classify_subject(patient: Patient) -> SubjectEligibility:
    """A patient is usable when it has an address city and a recognised sex."""
    locality = patient_locality(patient)
    if not locality.strip():
        return SubjectEligibility(ok=False, reason=SkipReason.MISSING_ADDRESS)

    sex = Sex.parse(patient.gender)
    if sex is None:
        return SubjectEligibility(ok=False, locality=locality, reason=SkipReason.INVALID_SEX)

    return SubjectEligibility(ok=True, sex=sex, locality=locality)


def condition_is_abated(condition: Condition) -> bool:
    """Any abatement element, whatever its value, marks the condition resolved."""
    return (
        condition.abatement_date_time is not None
        or condition.abatement_age is not None
        or condition.abatement_boolean is not None
        or condition.abatement_period is not None
        or condition.abatement_range is not None
        or condition.abatement_string != ""
    )


def classify_observation(condition: Condition, catalog: DiseaseCatalog) -> ObservationEligibility:
    """
    A condition is countable when it is still active, references a subject
    and its SNOMED code maps to a tracked disease.
    """
    subject_id = condition.subject.referenced_id if condition.subject else ""
    disease_fp = catalog.disease_for_condition(condition)

    if condition_is_abated(condition):
        return ObservationEligibility(
            countable=False, abated=True, disease_fp=disease_fp,
            subject_id=subject_id, reason=SkipReason.ABATED
        )
    if not subject_id:
        return ObservationEligibility(
            countable=False, disease_fp=disease_fp, reason=SkipReason.MISSING_SUBJECT
        )
    if disease_fp is None:
        return ObservationEligibility(
            countable=False, subject_id=subject_id, reason=SkipReason.UNTRACKED_DISEASE
        )

    return ObservationEligibility(countable=True, disease_fp=disease_fp, subject_id=subject_id)
