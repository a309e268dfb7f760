"""Required-field rules for each record type."""
from __future__ import annotations

from decimal import Decimal, InvalidOperation

from recordkeeper.core.errors import ValidationError
from recordkeeper.domain.records import Address, Order, Person, Shipment


def _require_text(value: str | None, label: str) -> None:
    if value is None or not str(value).strip():
        raise ValidationError(f"{label} must not be blank")


def require_positive_id(value: int | None, label: str = "id") -> int:
    """Return ``value`` when it is a positive integer, else raise ValidationError."""
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"{label} must be a positive integer")
    return value


def validate_address(address: Address | None) -> None:
    if address is None:
        raise ValidationError("Address must not be empty")
    _require_text(address.street, "Street")
    _require_text(address.number, "Number")


def validate_person(person: Person | None) -> None:
    if person is None:
        raise ValidationError("Person must not be empty")
    _require_text(person.first_name, "First name")
    _require_text(person.last_name, "Last name")
    _require_text(person.national_id, "National id")


def validate_shipment(shipment: Shipment | None) -> None:
    if shipment is None:
        raise ValidationError("Shipment must not be empty")
    _require_text(shipment.destination, "Destination")
    if shipment.ship_date is None:
        raise ValidationError("Ship date must not be empty")


def validate_order(order: Order | None) -> None:
    if order is None:
        raise ValidationError("Order must not be empty")
    _require_text(order.order_number, "Order number")
    _require_text(order.description, "Description")
    _require_text(order.status, "Status")
    if isinstance(order.quantity, bool) or not isinstance(order.quantity, int) or order.quantity <= 0:
        raise ValidationError("Quantity must be greater than 0")
    try:
        price = Decimal(order.unit_price)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError("Unit price must be a number") from None
    if not price.is_finite() or price <= 0:
        raise ValidationError("Unit price must be greater than 0")
