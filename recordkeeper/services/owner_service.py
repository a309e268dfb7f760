"""
Coordination of owners (people, orders) with the linked records they share.

No transaction spans the steps below: each repository call commits on its
own. Every multi-step operation is ordered so that a failure half-way leaves
at worst an active row nobody references, never an owner pointing at an
inactive row. Retrying a failed operation must start over from fresh reads.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from recordkeeper.core.errors import (
    InvalidStateError,
    NotFoundError,
    PartialDetachError,
    PersistenceError,
    ValidationError,
)
from recordkeeper.domain.records import Address, Order, Person, Shipment, is_persisted
from recordkeeper.domain.validation import require_positive_id, validate_order, validate_person
from recordkeeper.repositories.sql_repository import OrderRepository, PersonRepository
from recordkeeper.services.linked_service import AddressService, LinkedRecordService, ShipmentService
from recordkeeper.services.uniqueness import UniquenessValidator

logger = logging.getLogger(__name__)

O = TypeVar("O", Person, Order)
L = TypeVar("L", Address, Shipment)


@dataclass
class DetachResult(Generic[O]):
    owner: O
    linked_id: int


class OwnerService(Generic[O, L]):
    """Owner CRUD plus the insert-or-reuse and detach-then-delete protocols."""

    entity = "owner"
    link_entity = "link"

    def __init__(self, repository, linked: LinkedRecordService[L], uniqueness: UniquenessValidator) -> None:
        self.repository = repository
        self.linked = linked
        self.uniqueness = uniqueness

    # -------------------------- hooks --------------------------
    def validate(self, owner: O) -> None:
        raise NotImplementedError

    def get_link(self, owner: O) -> Optional[L]:
        raise NotImplementedError

    def set_link(self, owner: O, link: Optional[L]) -> None:
        raise NotImplementedError

    # -------------------------- writes --------------------------
    def insert_owner(self, owner: O) -> O:
        self.validate(owner)
        self.uniqueness.assert_unique(owner.natural_key)

        link = self.get_link(owner)
        if link is not None:
            if is_persisted(link):
                # Reusing a saved link also rewrites its stored fields.
                if self.linked.get_by_id(link.id) != link:
                    logger.warning(
                        "Creating %s %r rewrites shared %s %s",
                        self.entity,
                        owner.natural_key,
                        self.link_entity,
                        link.id,
                    )
                self.linked.update_linked(link)
            else:
                self.linked.insert(link)

        self.repository.insert(owner)
        logger.info("Created %s %s (%s=%s)", self.entity, owner.id, self.link_entity, link.id if link else None)
        return owner

    def update_owner(self, owner: O) -> None:
        require_positive_id(owner.id, f"{self.entity.capitalize()} id")
        self.validate(owner)
        self.uniqueness.assert_unique(owner.natural_key, exclude_id=owner.id)

        link = self.get_link(owner)
        if link is not None:
            if not is_persisted(link):
                raise InvalidStateError(f"The {self.link_entity} must be saved before it can be attached")
            stored_link = self.get_link(self.require(owner.id))
            # Only a newly attached link must be active; a stored dangling one is kept as is.
            if (stored_link is None or stored_link.id != link.id) and self.linked.get_by_id(link.id) is None:
                raise NotFoundError(f"{self.link_entity.capitalize()} {link.id} not found")

        self.repository.update(owner)
        logger.info("Updated %s %s", self.entity, owner.id)

    def delete_owner(self, owner_id: int) -> None:
        """Soft-delete the owner only; its linked record stays for other owners."""
        require_positive_id(owner_id, f"{self.entity.capitalize()} id")
        self.repository.soft_delete(owner_id)
        logger.info("Deleted %s %s", self.entity, owner_id)

    def detach_and_delete_linked(self, owner_id: int, linked_id: int) -> DetachResult[O]:
        """Clear the owner's link, persist that, then soft-delete the linked row.

        The owner update is written before the linked row is touched; if the
        soft-delete then fails, the owner stays detached and the linked row
        stays active (an orphan), reported as PartialDetachError. Other owners
        sharing the row keep their reference, now to an inactive row.
        """
        require_positive_id(owner_id, f"{self.entity.capitalize()} id")
        require_positive_id(linked_id, f"{self.link_entity.capitalize()} id")

        owner = self.require(owner_id)
        link = self.get_link(owner)
        if link is None:
            raise InvalidStateError(f"{self.entity.capitalize()} {owner_id} has no {self.link_entity}")
        if link.id != linked_id:
            raise InvalidStateError(
                f"{self.link_entity.capitalize()} {linked_id} does not belong to {self.entity} {owner_id}"
            )

        self.set_link(owner, None)
        self.repository.update(owner)

        try:
            self.linked.delete_linked_unsafe(linked_id)
        except (PersistenceError, SQLAlchemyError) as exc:
            logger.warning(
                "%s %s detached from %s %s but not deleted: %s",
                self.link_entity.capitalize(),
                linked_id,
                self.entity,
                owner_id,
                exc,
            )
            raise PartialDetachError(owner, linked_id, exc) from exc

        logger.info("Detached and deleted %s %s from %s %s", self.link_entity, linked_id, self.entity, owner_id)
        return DetachResult(owner=owner, linked_id=linked_id)

    # -------------------------- reads --------------------------
    def get_by_id(self, owner_id: int) -> Optional[O]:
        require_positive_id(owner_id, f"{self.entity.capitalize()} id")
        return self.repository.get_by_id(owner_id)

    def require(self, owner_id: int) -> O:
        owner = self.get_by_id(owner_id)
        if owner is None:
            raise NotFoundError(f"{self.entity.capitalize()} {owner_id} not found")
        return owner

    def list_all(self) -> list[O]:
        return self.repository.list_all()


class PersonService(OwnerService[Person, Address]):
    entity = "person"
    link_entity = "address"

    def __init__(self, repository: PersonRepository, addresses: AddressService) -> None:
        super().__init__(repository, addresses, UniquenessValidator("person", repository.find_by_national_id))

    def validate(self, owner: Person) -> None:
        validate_person(owner)

    def get_link(self, owner: Person) -> Optional[Address]:
        return owner.address

    def set_link(self, owner: Person, link: Optional[Address]) -> None:
        owner.address = link

    def find_by_national_id(self, national_id: str) -> Optional[Person]:
        if not (national_id or "").strip():
            raise ValidationError("National id must not be blank")
        return self.repository.find_by_national_id(national_id)

    def search_by_name(self, text: str) -> list[Person]:
        if not (text or "").strip():
            raise ValidationError("Search text must not be blank")
        return self.repository.search_by_name(text)


class OrderService(OwnerService[Order, Shipment]):
    entity = "order"
    link_entity = "shipment"

    def __init__(self, repository: OrderRepository, shipments: ShipmentService) -> None:
        super().__init__(repository, shipments, UniquenessValidator("order", repository.find_by_order_number))

    def validate(self, owner: Order) -> None:
        validate_order(owner)

    def get_link(self, owner: Order) -> Optional[Shipment]:
        return owner.shipment

    def set_link(self, owner: Order, link: Optional[Shipment]) -> None:
        owner.shipment = link

    def find_by_order_number(self, order_number: str) -> Optional[Order]:
        if not (order_number or "").strip():
            raise ValidationError("Order number must not be blank")
        return self.repository.find_by_order_number(order_number)

    def search(self, text: str) -> list[Order]:
        if not (text or "").strip():
            raise ValidationError("Search text must not be blank")
        return self.repository.search(text)
