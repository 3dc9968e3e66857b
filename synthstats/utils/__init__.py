"""
Utils package initialization.
"""
from synthstats.utils.constants import (
    Sex,
    ResourceType,
    Operation,
    SkipReason,
)

__all__ = [
    "Sex",
    "ResourceType",
    "Operation",
    "SkipReason",
]
