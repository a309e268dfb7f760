"""Persistence adapters backed by SQLAlchemy, one per record type.

Every public method opens its own session and commits it, so each call is
atomic for a single row and no call spans another. Lookups never return
inactive rows; owner reads hydrate their link whatever its ``active`` flag so
that a dangling reference stays observable.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from sqlalchemy import func, or_, select, true, update
from sqlalchemy.exc import IntegrityError

from recordkeeper.core.errors import PersistenceError, StaleRecordError
from recordkeeper.db.models import AddressRow, OrderRow, PersonRow, ShipmentRow
from recordkeeper.db.session import Database
from recordkeeper.domain.records import Address, Order, Person, Shipment

logger = logging.getLogger(__name__)


def _like_pattern(text: str) -> str:
    return f"%{(text or '').strip().lower()}%"


class _SQLRepository:
    """Shared insert/update/soft-delete plumbing for a single table."""

    entity = "record"
    row_cls: Any = None

    def __init__(self, database: Database) -> None:
        self.database = database

    def _insert_row(self, row) -> int:
        with self.database.session() as session:
            session.add(row)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise PersistenceError(f"Could not insert {self.entity}: {exc.orig}") from exc
            new_id = int(row.id)
        logger.debug("Inserted %s %s", self.entity, new_id)
        return new_id

    def _update_active_row(self, record_id: Optional[int], values: dict) -> None:
        if record_id is None:
            raise StaleRecordError(self.entity, record_id)
        stmt = (
            update(self.row_cls)
            .where(self.row_cls.id == record_id, self.row_cls.active == true())
            .values(**values)
        )
        with self.database.session() as session:
            try:
                result = session.execute(stmt)
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise PersistenceError(f"Could not update {self.entity} {record_id}: {exc.orig}") from exc
        if not result.rowcount:
            raise StaleRecordError(self.entity, record_id)

    def soft_delete(self, record_id: int) -> None:
        self._update_active_row(record_id, {"active": False})
        logger.debug("Soft-deleted %s %s", self.entity, record_id)


# -------------------------- linked records --------------------------
class AddressRepository(_SQLRepository):
    entity = "address"
    row_cls = AddressRow

    @staticmethod
    def to_record(row: AddressRow) -> Address:
        return Address(street=row.street, number=row.number, id=row.id, active=bool(row.active))

    def insert(self, address: Address) -> Address:
        address.id = self._insert_row(AddressRow(street=address.street, number=address.number, active=True))
        address.active = True
        return address

    def update(self, address: Address) -> None:
        self._update_active_row(address.id, {"street": address.street, "number": address.number})

    def get_by_id(self, address_id: int) -> Optional[Address]:
        stmt = select(AddressRow).where(AddressRow.id == address_id, AddressRow.active == true())
        with self.database.session() as session:
            row = session.execute(stmt).scalar_one_or_none()
            return self.to_record(row) if row else None

    def list_all(self) -> list[Address]:
        stmt = select(AddressRow).where(AddressRow.active == true()).order_by(AddressRow.id)
        with self.database.session() as session:
            return [self.to_record(row) for row in session.execute(stmt).scalars()]

    def count_active_referrers(self, address_id: int) -> int:
        stmt = select(func.count(PersonRow.id)).where(
            PersonRow.address_id == address_id, PersonRow.active == true()
        )
        with self.database.session() as session:
            return int(session.execute(stmt).scalar_one())


class ShipmentRepository(_SQLRepository):
    entity = "shipment"
    row_cls = ShipmentRow

    @staticmethod
    def to_record(row: ShipmentRow) -> Shipment:
        return Shipment(
            destination=row.destination,
            ship_date=row.ship_date,
            carrier=row.carrier,
            id=row.id,
            active=bool(row.active),
        )

    def insert(self, shipment: Shipment) -> Shipment:
        row = ShipmentRow(
            destination=shipment.destination,
            ship_date=shipment.ship_date,
            carrier=shipment.carrier,
            active=True,
        )
        shipment.id = self._insert_row(row)
        shipment.active = True
        return shipment

    def update(self, shipment: Shipment) -> None:
        self._update_active_row(
            shipment.id,
            {
                "destination": shipment.destination,
                "ship_date": shipment.ship_date,
                "carrier": shipment.carrier,
            },
        )

    def get_by_id(self, shipment_id: int) -> Optional[Shipment]:
        stmt = select(ShipmentRow).where(ShipmentRow.id == shipment_id, ShipmentRow.active == true())
        with self.database.session() as session:
            row = session.execute(stmt).scalar_one_or_none()
            return self.to_record(row) if row else None

    def list_all(self) -> list[Shipment]:
        stmt = select(ShipmentRow).where(ShipmentRow.active == true()).order_by(ShipmentRow.id)
        with self.database.session() as session:
            return [self.to_record(row) for row in session.execute(stmt).scalars()]

    def count_active_referrers(self, shipment_id: int) -> int:
        stmt = select(func.count(OrderRow.id)).where(
            OrderRow.shipment_id == shipment_id, OrderRow.active == true()
        )
        with self.database.session() as session:
            return int(session.execute(stmt).scalar_one())


# -------------------------- owners --------------------------
class PersonRepository(_SQLRepository):
    entity = "person"
    row_cls = PersonRow

    def _select(self):
        return (
            select(PersonRow, AddressRow)
            .outerjoin(AddressRow, PersonRow.address_id == AddressRow.id)
            .where(PersonRow.active == true())
        )

    @staticmethod
    def to_record(row: PersonRow, address_row: Optional[AddressRow]) -> Person:
        return Person(
            first_name=row.first_name,
            last_name=row.last_name,
            national_id=row.national_id,
            address=AddressRepository.to_record(address_row) if address_row is not None else None,
            id=row.id,
            active=bool(row.active),
        )

    def _fetch(self, stmt) -> list[Person]:
        with self.database.session() as session:
            return [self.to_record(person, address) for person, address in session.execute(stmt).all()]

    def insert(self, person: Person) -> Person:
        row = PersonRow(
            first_name=person.first_name,
            last_name=person.last_name,
            national_id=person.national_id,
            address_id=person.address_id,
            active=True,
        )
        person.id = self._insert_row(row)
        person.active = True
        return person

    def update(self, person: Person) -> None:
        self._update_active_row(
            person.id,
            {
                "first_name": person.first_name,
                "last_name": person.last_name,
                "national_id": person.national_id,
                "address_id": person.address_id,
            },
        )

    def get_by_id(self, person_id: int) -> Optional[Person]:
        found = self._fetch(self._select().where(PersonRow.id == person_id))
        return found[0] if found else None

    def list_all(self) -> list[Person]:
        return self._fetch(self._select().order_by(PersonRow.id))

    def find_by_national_id(self, national_id: str) -> Optional[Person]:
        found = self._fetch(self._select().where(PersonRow.national_id == (national_id or "").strip()))
        return found[0] if found else None

    def search_by_name(self, text: str) -> list[Person]:
        pattern = _like_pattern(text)
        stmt = self._select().where(
            or_(func.lower(PersonRow.first_name).like(pattern), func.lower(PersonRow.last_name).like(pattern))
        )
        return self._fetch(stmt.order_by(PersonRow.id))


class OrderRepository(_SQLRepository):
    entity = "order"
    row_cls = OrderRow

    def _select(self):
        return (
            select(OrderRow, ShipmentRow)
            .outerjoin(ShipmentRow, OrderRow.shipment_id == ShipmentRow.id)
            .where(OrderRow.active == true())
        )

    @staticmethod
    def to_record(row: OrderRow, shipment_row: Optional[ShipmentRow]) -> Order:
        return Order(
            order_number=row.order_number,
            description=row.description,
            quantity=row.quantity,
            unit_price=row.unit_price,
            status=row.status,
            shipment=ShipmentRepository.to_record(shipment_row) if shipment_row is not None else None,
            id=row.id,
            active=bool(row.active),
        )

    def _fetch(self, stmt) -> list[Order]:
        with self.database.session() as session:
            return [self.to_record(order, shipment) for order, shipment in session.execute(stmt).all()]

    def insert(self, order: Order) -> Order:
        row = OrderRow(
            order_number=order.order_number,
            description=order.description,
            quantity=order.quantity,
            unit_price=order.unit_price,
            status=order.status,
            shipment_id=order.shipment_id,
            active=True,
        )
        order.id = self._insert_row(row)
        order.active = True
        return order

    def update(self, order: Order) -> None:
        self._update_active_row(
            order.id,
            {
                "order_number": order.order_number,
                "description": order.description,
                "quantity": order.quantity,
                "unit_price": order.unit_price,
                "status": order.status,
                "shipment_id": order.shipment_id,
            },
        )

    def get_by_id(self, order_id: int) -> Optional[Order]:
        found = self._fetch(self._select().where(OrderRow.id == order_id))
        return found[0] if found else None

    def list_all(self) -> list[Order]:
        return self._fetch(self._select().order_by(OrderRow.id))

    def find_by_order_number(self, order_number: str) -> Optional[Order]:
        found = self._fetch(self._select().where(OrderRow.order_number == (order_number or "").strip()))
        return found[0] if found else None

    def search(self, text: str) -> list[Order]:
        value = (text or "").strip()
        stmt = self._select().where(
            or_(OrderRow.order_number == value, func.lower(OrderRow.description).like(_like_pattern(value)))
        )
        return self._fetch(stmt.order_by(OrderRow.id))
