"""SQLAlchemy tables for the two owner/linked pairs."""
from __future__ import annotations

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    true,
)

from .session import Base


class AddressRow(Base):
    __tablename__ = "addresses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    street = Column(String(255), nullable=False)
    number = Column(String(32), nullable=False)
    active = Column(Boolean, default=True, nullable=False)


class PersonRow(Base):
    __tablename__ = "people"

    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(120), nullable=False)
    last_name = Column(String(120), nullable=False)
    national_id = Column(String(32), nullable=False)
    address_id = Column(Integer, ForeignKey("addresses.id"), nullable=True)
    active = Column(Boolean, default=True, nullable=False)

    __table_args__ = (
        Index(
            "uq_people_national_id_active",
            "national_id",
            unique=True,
            sqlite_where=active == true(),
            postgresql_where=active == true(),
        ),
    )


class ShipmentRow(Base):
    __tablename__ = "shipments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    destination = Column(String(255), nullable=False)
    ship_date = Column(Date, nullable=False)
    carrier = Column(String(120), nullable=True)
    active = Column(Boolean, default=True, nullable=False)


class OrderRow(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_number = Column(String(64), nullable=False)
    description = Column(Text, nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(12, 2), nullable=False)
    status = Column(String(32), default="PENDING", nullable=False)
    shipment_id = Column(Integer, ForeignKey("shipments.id"), nullable=True)
    active = Column(Boolean, default=True, nullable=False)

    __table_args__ = (
        Index(
            "uq_orders_order_number_active",
            "order_number",
            unique=True,
            sqlite_where=active == true(),
            postgresql_where=active == true(),
        ),
    )
