"""
Persistence adapters.

Services depend on the contracts in ``base`` and receive concrete SQL
repositories built around an explicit ``Database`` handle.
"""

from .base import LinkedRepository, RecordRepository
from .sql_repository import AddressRepository, OrderRepository, PersonRepository, ShipmentRepository

__all__ = [
    "AddressRepository",
    "LinkedRepository",
    "OrderRepository",
    "PersonRepository",
    "RecordRepository",
    "ShipmentRepository",
]
