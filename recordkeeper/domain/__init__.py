"""Record values and field rules shared by repositories and services."""

from .records import Address, Order, Person, Shipment, StoredRecord, is_persisted

__all__ = ["Address", "Order", "Person", "Shipment", "StoredRecord", "is_persisted"]
