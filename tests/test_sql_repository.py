"""
Contract tests for the SQL repositories against a temporary SQLite database.
"""
from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from recordkeeper.core.errors import NotFoundError, PersistenceError, StaleRecordError
from recordkeeper.domain.records import Address, Order, Person, Shipment
from recordkeeper.repositories.sql_repository import (
    AddressRepository,
    OrderRepository,
    PersonRepository,
    ShipmentRepository,
)


def test_insert_assigns_id_and_reads_back(database):
    repo = AddressRepository(database)
    address = Address(street="Main St", number="5")
    assert address.id is None

    saved = repo.insert(address)

    assert saved is address
    assert address.id is not None
    assert repo.get_by_id(address.id) == Address(street="Main St", number="5", id=address.id, active=True)


def test_soft_delete_hides_row_and_never_reuses_ids(database):
    repo = AddressRepository(database)
    first = repo.insert(Address(street="A", number="1"))
    repo.soft_delete(first.id)

    assert repo.get_by_id(first.id) is None
    assert repo.list_all() == []

    second = repo.insert(Address(street="B", number="2"))
    assert second.id > first.id


def test_update_and_delete_of_inactive_row_report_stale(database):
    repo = AddressRepository(database)
    address = repo.insert(Address(street="A", number="1"))
    repo.soft_delete(address.id)

    address.street = "Changed"
    with pytest.raises(StaleRecordError) as exc_info:
        repo.update(address)
    assert isinstance(exc_info.value, NotFoundError)
    assert isinstance(exc_info.value, PersistenceError)

    with pytest.raises(StaleRecordError):
        repo.soft_delete(address.id)


def test_update_without_id_is_stale(database):
    with pytest.raises(StaleRecordError):
        ShipmentRepository(database).update(Shipment(destination="X", ship_date=date(2024, 1, 1)))


def test_person_read_hydrates_address(database):
    addresses = AddressRepository(database)
    people = PersonRepository(database)
    address = addresses.insert(Address(street="Main St", number="5"))
    person = people.insert(Person("Ana", "Diaz", "1", address=address))

    loaded = people.get_by_id(person.id)

    assert loaded.address == Address(street="Main St", number="5", id=address.id, active=True)
    assert loaded.address_id == address.id


def test_person_read_keeps_dangling_address_visible(database):
    addresses = AddressRepository(database)
    people = PersonRepository(database)
    address = addresses.insert(Address(street="Main St", number="5"))
    person = people.insert(Person("Ana", "Diaz", "1", address=address))

    addresses.soft_delete(address.id)

    loaded = people.get_by_id(person.id)
    assert loaded.address_id == address.id
    assert loaded.address.active is False


def test_storage_rejects_duplicate_active_national_id(database):
    people = PersonRepository(database)
    first = people.insert(Person("Ana", "Diaz", "1"))

    with pytest.raises(PersistenceError):
        people.insert(Person("Bea", "Diaz", "1"))

    people.soft_delete(first.id)
    again = people.insert(Person("Bea", "Diaz", "1"))
    assert people.find_by_national_id("1").id == again.id


def test_unknown_foreign_key_is_rejected(database):
    people = PersonRepository(database)
    person = people.insert(Person("Ana", "Diaz", "1"))
    person.address = Address(street="Nowhere", number="0", id=999)

    with pytest.raises(PersistenceError):
        people.update(person)


def test_search_by_name_is_case_insensitive_partial(database):
    people = PersonRepository(database)
    people.insert(Person("Ana", "Diaz", "1"))
    people.insert(Person("Bruno", "Andrade", "2"))
    people.insert(Person("Carla", "Suarez", "3"))

    found = people.search_by_name("AN")

    assert [p.national_id for p in found] == ["1", "2"]


def test_order_search_matches_number_or_description(database):
    orders = OrderRepository(database)
    orders.insert(Order("A-1", "Blue boxes", 2, Decimal("9.90")))
    orders.insert(Order("A-2", "Red tape", 1, Decimal("3.00")))
    orders.insert(Order("B-7", "Boxes, large", 5, Decimal("12.50")))

    assert [o.order_number for o in orders.search("a-2")] == []
    assert [o.order_number for o in orders.search("A-2")] == ["A-2"]
    assert [o.order_number for o in orders.search("boxes")] == ["A-1", "B-7"]


def test_order_read_hydrates_shipment_and_money(database):
    shipments = ShipmentRepository(database)
    orders = OrderRepository(database)
    shipment = shipments.insert(Shipment(destination="Port", ship_date=date(2024, 5, 1), carrier="ACME"))
    order = orders.insert(Order("A-1", "Boxes", 3, Decimal("9.90"), shipment=shipment))

    loaded = orders.find_by_order_number("A-1")

    assert loaded.id == order.id
    assert loaded.status == "PENDING"
    assert loaded.unit_price == Decimal("9.90")
    assert loaded.total == Decimal("29.70")
    assert loaded.shipment.ship_date == date(2024, 5, 1)
    assert loaded.shipment.carrier == "ACME"


def test_count_active_referrers_ignores_deleted_owners(database):
    addresses = AddressRepository(database)
    people = PersonRepository(database)
    address = addresses.insert(Address(street="Main St", number="5"))
    people.insert(Person("Ana", "Diaz", "1", address=address))
    bea = people.insert(Person("Bea", "Diaz", "2", address=address))

    assert addresses.count_active_referrers(address.id) == 2
    people.soft_delete(bea.id)
    assert addresses.count_active_referrers(address.id) == 1
