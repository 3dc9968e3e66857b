"""
Constants and closed vocabularies shared by the statistics engine.
"""
from enum import Enum
from typing import Optional


class Sex(str, Enum):
    """The two administrative genders tracked by the counters."""
    MALE = "male"
    FEMALE = "female"

    @classmethod
    def parse(cls, value) -> Optional["Sex"]:
        """Exact match only; anything else is unrecognised."""
        try:
            return cls(value)
        except ValueError:
            return None


class ResourceType(str, Enum):
    PATIENT = "Patient"
    CONDITION = "Condition"


class Operation(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class SkipReason(str, Enum):
    """Why a hook left the counters untouched."""
    WRONG_RESOURCE_TYPE = "wrong_resource_type"
    MISSING_ADDRESS = "missing_address"
    INVALID_SEX = "invalid_sex"
    UNKNOWN_LOCALITY = "unknown_locality"
    ABATED = "abated"
    MISSING_SUBJECT = "missing_subject"
    UNTRACKED_DISEASE = "untracked_disease"
    SUBJECT_NOT_FOUND = "subject_not_found"
    INELIGIBLE_SUBJECT = "ineligible_subject"
    LOCALITY_UNCHANGED = "locality_unchanged"
    NO_TRANSITION = "no_transition"
    STAGING_MISS = "staging_miss"
    STORE_FAILURE = "store_failure"
