"""Use cases for the shared linked records (addresses, shipments)."""

from __future__ import annotations

import logging
from typing import Callable, Generic, Optional, TypeVar

from recordkeeper.core.errors import NotFoundError
from recordkeeper.domain.records import Address, Shipment
from recordkeeper.domain.validation import require_positive_id, validate_address, validate_shipment
from recordkeeper.repositories.base import LinkedRepository

logger = logging.getLogger(__name__)

L = TypeVar("L", Address, Shipment)


class LinkedRecordService(Generic[L]):
    """CRUD for a record that several owners may reference by id."""

    entity = "record"

    def __init__(self, repository: LinkedRepository[L], validate: Callable[[L], None]) -> None:
        self.repository = repository
        self.validate = validate

    def insert(self, record: L) -> L:
        self.validate(record)
        self.repository.insert(record)
        logger.info("Created %s %s", self.entity, record.id)
        return record

    def update_linked(self, record: L) -> None:
        """Persist ``record`` by id; every owner pointing at it sees the change."""
        self.validate(record)
        require_positive_id(record.id, f"{self.entity.capitalize()} id")
        self.repository.update(record)
        logger.info("Updated %s %s", self.entity, record.id)

    def delete_linked_unsafe(self, record_id: int) -> None:
        """Soft-delete without looking for active referrers.

        Any owner still pointing at ``record_id`` is left with a dangling
        reference; callers must clear those references themselves.
        """
        require_positive_id(record_id, f"{self.entity.capitalize()} id")
        self.repository.soft_delete(record_id)
        logger.info("Deleted %s %s", self.entity, record_id)

    def get_by_id(self, record_id: int) -> Optional[L]:
        require_positive_id(record_id, f"{self.entity.capitalize()} id")
        return self.repository.get_by_id(record_id)

    def require(self, record_id: int) -> L:
        record = self.get_by_id(record_id)
        if record is None:
            raise NotFoundError(f"{self.entity.capitalize()} {record_id} not found")
        return record

    def list_all(self) -> list[L]:
        return self.repository.list_all()

    def count_referrers(self, record_id: int) -> int:
        require_positive_id(record_id, f"{self.entity.capitalize()} id")
        return self.repository.count_active_referrers(record_id)


class AddressService(LinkedRecordService[Address]):
    entity = "address"

    def __init__(self, repository: LinkedRepository[Address]) -> None:
        super().__init__(repository, validate_address)


class ShipmentService(LinkedRecordService[Shipment]):
    entity = "shipment"

    def __init__(self, repository: LinkedRepository[Shipment]) -> None:
        super().__init__(repository, validate_shipment)
