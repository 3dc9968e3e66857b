"""
Interceptors package initialization.
"""
from synthstats.interceptors.base import HookOutcome, StatsInterceptor
from synthstats.interceptors.patient import (
    PatientStatsCreateInterceptor,
    PatientStatsUpdateInterceptor,
    PatientStatsDeleteInterceptor,
)
from synthstats.interceptors.condition import (
    ConditionStatsCreateInterceptor,
    ConditionStatsUpdateInterceptor,
    ConditionStatsDeleteInterceptor,
)
from synthstats.interceptors.registry import (
    InterceptorRegistry,
    build_interceptors,
    build_interceptors_from_database,
)

__all__ = [
    "HookOutcome",
    "StatsInterceptor",
    "PatientStatsCreateInterceptor",
    "PatientStatsUpdateInterceptor",
    "PatientStatsDeleteInterceptor",
    "ConditionStatsCreateInterceptor",
    "ConditionStatsUpdateInterceptor",
    "ConditionStatsDeleteInterceptor",
    "InterceptorRegistry",
    "build_interceptors",
    "build_interceptors_from_database",
]
