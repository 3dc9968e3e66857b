"""
Subject lookup - fetch the Patient a Condition refers to.

Conditions only carry a reference to their subject, so the condition
interceptors resolve geography through the primary record store.
"""
from threading import Lock
from synthstats.exceptions import ResourceNotFoundError
from synthstats.schemas.resources import Patient
from typing import Any, Dict, Protocol, Tuple


class SubjectLookup(Protocol):
    """Read access to the primary clinical record store."""

    def get(self, resource_id: str, resource_type: str) -> Any:
        """Return the resource or raise ResourceNotFoundError."""
        ...


class InMemorySubjectLookup:
    """Dictionary-backed record store for embedding and tests."""

    def __init__(self):
        self._lock = Lock()
        self._resources: Dict[Tuple[str, str], Any] = {}

    def put(self, resource: Patient) -> None:
        with self._lock:
            self._resources[(resource.resource_type, resource.id)] = resource

    def delete(self, resource_id: str, resource_type: str = "Patient") -> None:
        with self._lock:
            self._resources.pop((resource_type, resource_id), None)

    def get(self, resource_id: str, resource_type: str) -> Any:
        with self._lock:
            resource = self._resources.get((resource_type, resource_id))
        if resource is None:
            raise ResourceNotFoundError(resource_type, resource_id)
        return resource
