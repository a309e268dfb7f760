"""Persistence contracts the services depend on (ports)."""
from __future__ import annotations

from typing import Optional, Protocol, TypeVar

T = TypeVar("T")


class RecordRepository(Protocol[T]):
    """Single-row CRUD against a table with a soft-delete flag."""

    def insert(self, record: T) -> T:
        """Persist ``record``, assign its id and return it."""
        ...

    def update(self, record: T) -> None:
        """Write every mutable field by id; StaleRecordError if no active row matches."""
        ...

    def soft_delete(self, record_id: int) -> None:
        """Mark the row inactive; StaleRecordError if no active row matches."""
        ...

    def get_by_id(self, record_id: int) -> Optional[T]:
        ...

    def list_all(self) -> list[T]:
        ...


class LinkedRepository(RecordRepository[T], Protocol[T]):
    def count_active_referrers(self, record_id: int) -> int:
        """Number of active owners whose foreign key points at ``record_id``."""
        ...
