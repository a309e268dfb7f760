"""Error kinds raised by the recordkeeper services and repositories."""

from __future__ import annotations


class RecordkeeperError(Exception):
    """Base class for every error surfaced to callers."""


class ValidationError(RecordkeeperError):
    """A required field is missing/blank or an identifier is not positive."""


class DuplicateKeyError(RecordkeeperError):
    """Another active row already uses the natural key."""

    def __init__(self, entity: str, key: str):
        super().__init__(f"An active {entity} already uses the key {key!r}")
        self.entity = entity
        self.key = key


class NotFoundError(RecordkeeperError):
    """The identifier resolves to no active row."""


class InvalidStateError(RecordkeeperError):
    """The operation does not apply to the current state of the record."""


class PersistenceError(RecordkeeperError):
    """The underlying store refused or did not apply a write."""


class StaleRecordError(NotFoundError, PersistenceError):
    """An update/soft-delete expected to touch one active row touched none."""

    def __init__(self, entity: str, record_id: int | None):
        super().__init__(f"No active {entity} with id {record_id}")
        self.entity = entity
        self.record_id = record_id


class PartialDetachError(PersistenceError):
    """The owner was detached but the linked row could not be soft-deleted.

    The owner no longer references ``linked_id``; the linked row is still
    active and unreferenced by this owner. Nothing was rolled back.
    """

    def __init__(self, owner, linked_id: int, cause: Exception):
        super().__init__(
            f"Detached {type(owner).__name__.lower()} {owner.id} but could not delete "
            f"linked row {linked_id}: {cause}"
        )
        self.owner = owner
        self.linked_id = linked_id
        self.cause = cause
