"""In-memory record values exchanged between repositories and services.

A record with ``id is None`` has not been persisted yet. Owners (``Person``,
``Order``) hold their link as a full linked record so a freshly built link can
travel with its owner until the coordinator inserts it.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional, Protocol

DEFAULT_ORDER_STATUS = "PENDING"


class StoredRecord(Protocol):
    """Id-and-active capability every record exposes."""

    id: Optional[int]
    active: bool


def is_persisted(record: StoredRecord | None) -> bool:
    return record is not None and record.id is not None


@dataclass
class Address:
    street: str
    number: str
    id: Optional[int] = None
    active: bool = True

    def label(self) -> str:
        return f"{self.street} {self.number}"


@dataclass
class Person:
    first_name: str
    last_name: str
    national_id: str
    address: Optional[Address] = None
    id: Optional[int] = None
    active: bool = True

    @property
    def address_id(self) -> Optional[int]:
        return self.address.id if self.address else None

    @property
    def natural_key(self) -> str:
        return self.national_id


@dataclass
class Shipment:
    destination: str
    ship_date: Optional[date]
    carrier: Optional[str] = None
    id: Optional[int] = None
    active: bool = True


@dataclass
class Order:
    order_number: str
    description: str
    quantity: int
    unit_price: Decimal
    status: str = DEFAULT_ORDER_STATUS
    shipment: Optional[Shipment] = None
    id: Optional[int] = None
    active: bool = True

    @property
    def shipment_id(self) -> Optional[int]:
        return self.shipment.id if self.shipment else None

    @property
    def natural_key(self) -> str:
        return self.order_number

    @property
    def total(self) -> Decimal:
        return Decimal(self.quantity) * Decimal(self.unit_price)
