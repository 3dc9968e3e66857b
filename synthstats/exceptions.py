"""
Exception hierarchy for the statistics engine.
"""


class SynthStatsError(Exception):
    """Base class for all statistics engine errors."""


class CounterStoreError(SynthStatsError):
    """The backing counter store failed (timeout, lost connection, constraint)."""


class UnknownCounterKeyError(SynthStatsError):
    """
    A ledger call referenced a geography or disease with no counter row.

    Upstream lookups validate keys before the ledger is reached, so this
    signals a programming error and is never swallowed.
    """

    def __init__(self, table: str, key: dict):
        self.table = table
        self.key = key
        super().__init__(f"No counter row in {table} for {key}")


class InvalidDeltaError(SynthStatsError, ValueError):
    """A counter delta was not +1 or -1."""


class ResourceNotFoundError(SynthStatsError):
    """The subject lookup service has no resource with the requested id."""

    def __init__(self, resource_type: str, resource_id: str):
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(f"{resource_type}/{resource_id} not found")
