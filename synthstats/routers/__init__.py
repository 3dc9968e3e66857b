"""
Routers package initialization.
"""
from synthstats.routers import stats

__all__ = [
    "stats",
]
