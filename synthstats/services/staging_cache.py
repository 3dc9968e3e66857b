"""
Resource staging cache - hold the pre-update image of a resource until the
matching After hook consumes it.
"""
from threading import Lock
from synthstats.config import settings
from typing import Any, Dict, List, Optional


class ResourceStagingCache:
    """
    Sharded, lock-protected map of resource id -> staged resource.

    A key always hashes to the same shard, so stage/take_staged on the same
    id are serialized by that shard's lock while ids on other shards proceed
    independently. Entries never expire; every stage() must be matched by
    exactly one take_staged().
    """

    def __init__(self, shards: int = None):
        if shards is None:
            shards = settings.STAGING_SHARDS
        if shards < 1:
            raise ValueError("shards must be >= 1")
        self._locks: List[Lock] = [Lock() for _ in range(shards)]
        self._entries: List[Dict[str, Any]] = [{} for _ in range(shards)]

    def _shard(self, resource_id: str) -> int:
        return hash(resource_id) % len(self._locks)

    def stage(self, resource_id: str, resource: Any) -> None:
        """Store the pre-image, replacing any earlier one for the same id."""
        idx = self._shard(resource_id)
        with self._locks[idx]:
            self._entries[idx][resource_id] = resource

    def take_staged(self, resource_id: str) -> Optional[Any]:
        """Atomically remove and return the staged pre-image, or None."""
        idx = self._shard(resource_id)
        with self._locks[idx]:
            return self._entries[idx].pop(resource_id, None)

    def __contains__(self, resource_id: str) -> bool:
        idx = self._shard(resource_id)
        with self._locks[idx]:
            return resource_id in self._entries[idx]

    def __len__(self) -> int:
        total = 0
        for lock, entries in zip(self._locks, self._entries):
            with lock:
                total += len(entries)
        return total
