"""
Entry facade used by the console layer.

Inputs arrive as raw strings/numbers. The facade trims them, rejects
non-positive ids before any service call, and treats a ``None`` or blank edit
argument as "keep the current value", so that field is never part of the
mutation.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional

from recordkeeper.core.errors import InvalidStateError, ValidationError
from recordkeeper.db.session import Database
from recordkeeper.domain.records import DEFAULT_ORDER_STATUS, Address, Order, Person, Shipment
from recordkeeper.domain.validation import require_positive_id
from recordkeeper.repositories.sql_repository import (
    AddressRepository,
    OrderRepository,
    PersonRepository,
    ShipmentRepository,
)
from recordkeeper.services.linked_service import AddressService, ShipmentService
from recordkeeper.services.owner_service import DetachResult, OrderService, PersonService


def _clean(value) -> Optional[str]:
    """Trimmed text, or None when nothing was supplied."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _parse_int(value, label: str) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"{label} must be a whole number") from None


def _parse_decimal(value, label: str) -> Decimal:
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value).strip())
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"{label} must be a number") from None


def _parse_date(value, label: str) -> date:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"{label} must be a date (YYYY-MM-DD)") from None


def _positive(value, label: str) -> int:
    return require_positive_id(_parse_int(value, label), label)


class PeopleRegistry:
    """Person and address use cases."""

    def __init__(self, people: PersonService, addresses: AddressService) -> None:
        self.people = people
        self.addresses = addresses

    # -------------------------- people --------------------------
    def create_person(
        self,
        first_name: str,
        last_name: str,
        national_id: str,
        *,
        street: str | None = None,
        number: str | None = None,
        address_id: int | None = None,
    ) -> Person:
        street, number = _clean(street), _clean(number)
        address: Optional[Address] = None
        if address_id is not None:
            if street or number:
                raise ValidationError("Give either a new address or an existing address id, not both")
            address = self.addresses.require(_positive(address_id, "Address id"))
        elif street or number:
            address = Address(street=street or "", number=number or "")
        person = Person(
            first_name=_clean(first_name) or "",
            last_name=_clean(last_name) or "",
            national_id=_clean(national_id) or "",
            address=address,
        )
        return self.people.insert_owner(person)

    def get_person(self, person_id) -> Person:
        return self.people.require(_positive(person_id, "Person id"))

    def list_people(self) -> list[Person]:
        return self.people.list_all()

    def search_people(self, text: str) -> list[Person]:
        return self.people.search_by_name(_clean(text) or "")

    def find_person_by_national_id(self, national_id: str) -> Optional[Person]:
        return self.people.find_by_national_id(_clean(national_id) or "")

    def edit_person(
        self,
        person_id,
        *,
        first_name: str | None = None,
        last_name: str | None = None,
        national_id: str | None = None,
    ) -> Person:
        person = self.get_person(person_id)
        changes = {
            "first_name": _clean(first_name),
            "last_name": _clean(last_name),
            "national_id": _clean(national_id),
        }
        for field, value in changes.items():
            if value is not None:
                setattr(person, field, value)
        self.people.update_owner(person)
        return person

    def attach_address(self, person_id, address_id) -> Person:
        person = self.get_person(person_id)
        person.address = self.addresses.require(_positive(address_id, "Address id"))
        self.people.update_owner(person)
        return person

    def delete_person(self, person_id) -> None:
        self.people.delete_owner(_positive(person_id, "Person id"))

    def remove_address_from_person(self, person_id) -> DetachResult[Person]:
        person = self.get_person(person_id)
        if person.address is None:
            raise InvalidStateError(f"Person {person.id} has no address")
        return self.people.detach_and_delete_linked(person.id, person.address.id)

    # -------------------------- addresses --------------------------
    def create_address(self, street: str, number: str) -> Address:
        return self.addresses.insert(Address(street=_clean(street) or "", number=_clean(number) or ""))

    def get_address(self, address_id) -> Address:
        return self.addresses.require(_positive(address_id, "Address id"))

    def list_addresses(self) -> list[Address]:
        return self.addresses.list_all()

    def address_referrers(self, address_id) -> int:
        return self.addresses.count_referrers(_positive(address_id, "Address id"))

    def edit_address(self, address_id, *, street: str | None = None, number: str | None = None) -> Address:
        address = self.get_address(address_id)
        return self._apply_address_changes(address, street, number)

    def edit_address_of_person(self, person_id, *, street: str | None = None, number: str | None = None) -> Address:
        person = self.get_person(person_id)
        if person.address is None:
            raise InvalidStateError(f"Person {person.id} has no address")
        return self._apply_address_changes(person.address, street, number)

    def delete_address_unsafe(self, address_id) -> None:
        self.addresses.delete_linked_unsafe(_positive(address_id, "Address id"))

    def _apply_address_changes(self, address: Address, street: str | None, number: str | None) -> Address:
        street, number = _clean(street), _clean(number)
        if street is not None:
            address.street = street
        if number is not None:
            address.number = number
        self.addresses.update_linked(address)
        return address


class OrdersRegistry:
    """Order and shipment use cases."""

    def __init__(self, orders: OrderService, shipments: ShipmentService) -> None:
        self.orders = orders
        self.shipments = shipments

    # -------------------------- orders --------------------------
    def create_order(
        self,
        order_number: str,
        description: str,
        quantity,
        unit_price,
        status: str | None = None,
        *,
        destination: str | None = None,
        ship_date=None,
        carrier: str | None = None,
        shipment_id: int | None = None,
    ) -> Order:
        destination, carrier = _clean(destination), _clean(carrier)
        shipment: Optional[Shipment] = None
        if shipment_id is not None:
            if destination or ship_date or carrier:
                raise ValidationError("Give either a new shipment or an existing shipment id, not both")
            shipment = self.shipments.require(_positive(shipment_id, "Shipment id"))
        elif destination or ship_date or carrier:
            shipment = Shipment(
                destination=destination or "",
                ship_date=_parse_date(ship_date, "Ship date") if ship_date else None,
                carrier=carrier,
            )
        order = Order(
            order_number=_clean(order_number) or "",
            description=_clean(description) or "",
            quantity=_parse_int(quantity, "Quantity"),
            unit_price=_parse_decimal(unit_price, "Unit price"),
            status=(_clean(status) or DEFAULT_ORDER_STATUS).upper(),
            shipment=shipment,
        )
        return self.orders.insert_owner(order)

    def get_order(self, order_id) -> Order:
        return self.orders.require(_positive(order_id, "Order id"))

    def list_orders(self) -> list[Order]:
        return self.orders.list_all()

    def search_orders(self, text: str) -> list[Order]:
        return self.orders.search(_clean(text) or "")

    def find_order_by_number(self, order_number: str) -> Optional[Order]:
        return self.orders.find_by_order_number(_clean(order_number) or "")

    def edit_order(
        self,
        order_id,
        *,
        order_number: str | None = None,
        description: str | None = None,
        quantity=None,
        unit_price=None,
        status: str | None = None,
    ) -> Order:
        order = self.get_order(order_id)
        if _clean(order_number) is not None:
            order.order_number = _clean(order_number)
        if _clean(description) is not None:
            order.description = _clean(description)
        if _clean(quantity) is not None:
            order.quantity = _parse_int(quantity, "Quantity")
        if _clean(unit_price) is not None:
            order.unit_price = _parse_decimal(unit_price, "Unit price")
        if _clean(status) is not None:
            order.status = _clean(status).upper()
        self.orders.update_owner(order)
        return order

    def attach_shipment(self, order_id, shipment_id) -> Order:
        order = self.get_order(order_id)
        order.shipment = self.shipments.require(_positive(shipment_id, "Shipment id"))
        self.orders.update_owner(order)
        return order

    def delete_order(self, order_id) -> None:
        self.orders.delete_owner(_positive(order_id, "Order id"))

    def remove_shipment_from_order(self, order_id) -> DetachResult[Order]:
        order = self.get_order(order_id)
        if order.shipment is None:
            raise InvalidStateError(f"Order {order.id} has no shipment")
        return self.orders.detach_and_delete_linked(order.id, order.shipment.id)

    # -------------------------- shipments --------------------------
    def create_shipment(self, destination: str, ship_date, carrier: str | None = None) -> Shipment:
        shipment = Shipment(
            destination=_clean(destination) or "",
            ship_date=_parse_date(ship_date, "Ship date") if _clean(ship_date) else None,
            carrier=_clean(carrier),
        )
        return self.shipments.insert(shipment)

    def get_shipment(self, shipment_id) -> Shipment:
        return self.shipments.require(_positive(shipment_id, "Shipment id"))

    def list_shipments(self) -> list[Shipment]:
        return self.shipments.list_all()

    def shipment_referrers(self, shipment_id) -> int:
        return self.shipments.count_referrers(_positive(shipment_id, "Shipment id"))

    def edit_shipment(
        self, shipment_id, *, destination: str | None = None, ship_date=None, carrier: str | None = None
    ) -> Shipment:
        shipment = self.get_shipment(shipment_id)
        return self._apply_shipment_changes(shipment, destination, ship_date, carrier)

    def edit_shipment_of_order(
        self, order_id, *, destination: str | None = None, ship_date=None, carrier: str | None = None
    ) -> Shipment:
        order = self.get_order(order_id)
        if order.shipment is None:
            raise InvalidStateError(f"Order {order.id} has no shipment")
        return self._apply_shipment_changes(order.shipment, destination, ship_date, carrier)

    def delete_shipment_unsafe(self, shipment_id) -> None:
        self.shipments.delete_linked_unsafe(_positive(shipment_id, "Shipment id"))

    def _apply_shipment_changes(self, shipment: Shipment, destination, ship_date, carrier) -> Shipment:
        if _clean(destination) is not None:
            shipment.destination = _clean(destination)
        if _clean(ship_date) is not None:
            shipment.ship_date = _parse_date(ship_date, "Ship date")
        if _clean(carrier) is not None:
            shipment.carrier = _clean(carrier)
        self.shipments.update_linked(shipment)
        return shipment


@dataclass
class Registries:
    people: PeopleRegistry
    orders: OrdersRegistry


def build_registries(database: Database) -> Registries:
    """Wire repositories and services around one explicit database handle."""
    addresses = AddressService(AddressRepository(database))
    shipments = ShipmentService(ShipmentRepository(database))
    return Registries(
        people=PeopleRegistry(PersonService(PersonRepository(database), addresses), addresses),
        orders=OrdersRegistry(OrderService(OrderRepository(database), shipments), shipments),
    )
