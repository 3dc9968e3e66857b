"""
Shared plumbing for the statistics interceptors.

An interceptor is invoked by the record store around a create, update or
delete: before(resource) ahead of the write, after(resource) once it has
succeeded, on_error(err, resource) if it failed. Every hook returns a
HookOutcome instead of raising, so the caller can see what happened while
the primary write is never affected.
"""
from dataclasses import dataclass
from synthstats.exceptions import CounterStoreError
from synthstats.services.counter_ledger import CounterLedger
from synthstats.utils.constants import Operation, ResourceType, SkipReason
from typing import Callable, ClassVar, Optional
import logging

logger = logging.getLogger(__name__)

APPLIED = "applied"
SKIPPED = "skipped"
FAILED = "failed"


@dataclass(frozen=True)
class HookOutcome:
    """Result of one hook invocation."""
    status: str
    reason: Optional[SkipReason] = None
    error: Optional[Exception] = None
    changes: int = 0

    @classmethod
    def applied(cls, changes: int = 1) -> "HookOutcome":
        return cls(APPLIED, changes=changes)

    @classmethod
    def skipped(cls, reason: Optional[SkipReason] = None) -> "HookOutcome":
        return cls(SKIPPED, reason=reason)

    @classmethod
    def failed(cls, reason: SkipReason, error: Exception = None, changes: int = 0) -> "HookOutcome":
        return cls(FAILED, reason=reason, error=error, changes=changes)

    @property
    def ok(self) -> bool:
        return self.status != FAILED


class StatsInterceptor:
    """Base interceptor: unused hooks are no-ops."""

    resource_type: ClassVar[ResourceType]
    operation: ClassVar[Operation]

    def __init__(self, ledger: CounterLedger):
        self.ledger = ledger

    @property
    def name(self) -> str:
        return type(self).__name__

    def before(self, resource) -> HookOutcome:
        return HookOutcome.skipped()

    def after(self, resource) -> HookOutcome:
        return HookOutcome.skipped()

    def on_error(self, err: Exception, resource) -> None:
        """Failed writes never touched the counters, nothing to undo."""

    def _skip(self, reason: SkipReason, resource) -> HookOutcome:
        if reason is not SkipReason.WRONG_RESOURCE_TYPE:
            logger.debug(f"{self.name}: skipping {_describe(resource)}: {reason.value}")
        return HookOutcome.skipped(reason)

    def _apply(self, resource, *steps: Callable[[], None]) -> HookOutcome:
        """
        Run ledger steps in order, stopping at the first store failure.

        UnknownCounterKeyError propagates to the caller.
        """
        done = 0
        for step in steps:
            try:
                step()
            except CounterStoreError as e:
                logger.exception(
                    f"{self.name}: counter update {done + 1}/{len(steps)} failed for {_describe(resource)}"
                )
                return HookOutcome.failed(SkipReason.STORE_FAILURE, error=e, changes=done)
            done += 1
        return HookOutcome.applied(changes=done)


def _describe(resource) -> str:
    resource_type = getattr(resource, "resource_type", type(resource).__name__)
    return f"{resource_type}/{getattr(resource, 'id', '?')}"
