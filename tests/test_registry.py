"""
Facade behaviour: input trimming, id checks and "keep current value" edits.
"""
from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from recordkeeper.core.errors import InvalidStateError, NotFoundError, ValidationError


def test_create_person_with_new_address_trims_input(registries):
    person = registries.people.create_person("  Ana ", "Diaz", " 1 ", street=" Main St ", number="5")

    loaded = registries.people.get_person(person.id)
    assert loaded.first_name == "Ana"
    assert loaded.national_id == "1"
    assert loaded.address.label() == "Main St 5"


def test_create_person_reusing_address_id(registries):
    ana = registries.people.create_person("Ana", "Diaz", "1", street="Main St", number="5")
    bea = registries.people.create_person("Bea", "Diaz", "2", address_id=ana.address.id)

    assert bea.address.id == ana.address.id
    assert registries.people.address_referrers(ana.address.id) == 2


def test_create_person_rejects_address_id_and_fields_together(registries):
    with pytest.raises(ValidationError):
        registries.people.create_person("Ana", "Diaz", "1", street="Main St", address_id=3)


def test_create_person_with_unknown_address_id(registries):
    with pytest.raises(NotFoundError):
        registries.people.create_person("Ana", "Diaz", "1", address_id=99)


@pytest.mark.parametrize("bad_id", [0, -1, "abc", "0"])
def test_non_positive_ids_are_rejected(registries, bad_id):
    with pytest.raises(ValidationError):
        registries.people.get_person(bad_id)
    with pytest.raises(ValidationError):
        registries.orders.delete_order(bad_id)


def test_edit_person_keeps_omitted_and_blank_fields(registries):
    person = registries.people.create_person("Ana", "Diaz", "1")

    registries.people.edit_person(person.id, first_name="  ", last_name="Lopez", national_id=None)

    loaded = registries.people.get_person(person.id)
    assert (loaded.first_name, loaded.last_name, loaded.national_id) == ("Ana", "Lopez", "1")


def test_edit_address_of_person_changes_shared_row(registries):
    ana = registries.people.create_person("Ana", "Diaz", "1", street="Main St", number="5")
    bea = registries.people.create_person("Bea", "Diaz", "2", address_id=ana.address.id)

    registries.people.edit_address_of_person(ana.id, number="9")

    assert registries.people.get_person(bea.id).address.label() == "Main St 9"


def test_edit_address_of_person_without_address(registries):
    person = registries.people.create_person("Ana", "Diaz", "1")

    with pytest.raises(InvalidStateError):
        registries.people.edit_address_of_person(person.id, street="Elm St")


def test_attach_then_remove_address(registries):
    person = registries.people.create_person("Ana", "Diaz", "1")
    address = registries.people.create_address("Main St", "5")

    registries.people.attach_address(person.id, address.id)
    assert registries.people.get_person(person.id).address_id == address.id

    result = registries.people.remove_address_from_person(person.id)
    assert result.linked_id == address.id
    assert registries.people.list_addresses() == []

    with pytest.raises(InvalidStateError):
        registries.people.remove_address_from_person(person.id)


def test_search_people_requires_text(registries):
    registries.people.create_person("Ana", "Diaz", "1")

    assert [p.first_name for p in registries.people.search_people(" dia ")] == ["Ana"]
    with pytest.raises(ValidationError):
        registries.people.search_people("   ")


def test_create_order_parses_raw_input(registries):
    order = registries.orders.create_order(
        "A-1", "Boxes", "3", "9.90", "shipped", destination="Port", ship_date="2024-05-01", carrier="ACME"
    )

    loaded = registries.orders.get_order(order.id)
    assert loaded.quantity == 3
    assert loaded.unit_price == Decimal("9.90")
    assert loaded.status == "SHIPPED"
    assert loaded.shipment.ship_date == date(2024, 5, 1)


def test_create_order_defaults_status(registries):
    order = registries.orders.create_order("A-1", "Boxes", 1, Decimal("2.50"))

    assert order.status == "PENDING"
    assert order.shipment is None


@pytest.mark.parametrize(
    "quantity, price, ship_date",
    [("two", "1.00", None), ("2", "cheap", None), ("2", "1.00", "01/05/2024")],
)
def test_create_order_rejects_unparseable_input(registries, quantity, price, ship_date):
    with pytest.raises(ValidationError):
        registries.orders.create_order("A-1", "Boxes", quantity, price, destination="Port", ship_date=ship_date)


def test_edit_order_only_touches_supplied_fields(registries):
    order = registries.orders.create_order("A-1", "Boxes", 2, "9.90")

    registries.orders.edit_order(order.id, quantity="5", description="")

    loaded = registries.orders.find_order_by_number("A-1")
    assert loaded.quantity == 5
    assert loaded.description == "Boxes"
    assert loaded.unit_price == Decimal("9.90")


def test_shipment_remove_deletes_row_shared_with_other_order(registries):
    first = registries.orders.create_order("A-1", "Boxes", 2, "9.90", destination="Port", ship_date="2024-05-01")
    second = registries.orders.create_order("A-2", "Tape", 1, "3.00", shipment_id=first.shipment.id)

    result = registries.orders.remove_shipment_from_order(first.id)

    assert result.linked_id == first.shipment.id
    assert registries.orders.get_order(first.id).shipment is None
    with pytest.raises(NotFoundError):
        registries.orders.get_shipment(first.shipment.id)
    dangling = registries.orders.get_order(second.id).shipment
    assert dangling.destination == "Port"
    assert dangling.active is False


def test_delete_shipment_unsafe_leaves_order_pointing_at_deleted_row(registries):
    order = registries.orders.create_order("A-1", "Boxes", 2, "9.90", destination="Port", ship_date="2024-05-01")

    registries.orders.delete_shipment_unsafe(order.shipment.id)

    assert registries.orders.get_order(order.id).shipment.active is False
    with pytest.raises(NotFoundError):
        registries.orders.get_shipment(order.shipment.id)


def test_edit_person_whose_address_was_deleted_unsafely(registries):
    person = registries.people.create_person("Ana", "Diaz", "1", street="Main St", number="5")
    registries.people.delete_address_unsafe(person.address.id)

    registries.people.edit_person(person.id, first_name="Anabel")

    loaded = registries.people.get_person(person.id)
    assert loaded.first_name == "Anabel"
    assert loaded.address.active is False
