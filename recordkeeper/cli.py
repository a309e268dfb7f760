#!/usr/bin/env python3
"""
Console entry point for recordkeeper.

Usage:
  recordkeeper init-db
  recordkeeper person add --first-name Ana --last-name Diaz --national-id 1 [--street "Main St" --number 5 | --address-id 3]
  recordkeeper person update 4 [--first-name X] [--last-name Y] [--national-id Z]
  recordkeeper person remove-address 4
  recordkeeper order add --order-number A-1 --description Boxes --quantity 2 --unit-price 9.90 [--destination X --ship-date 2024-05-01]
  recordkeeper address delete 3   # unsafe: does not clear references
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError

from recordkeeper.core.config import get_settings
from recordkeeper.core.errors import RecordkeeperError
from recordkeeper.core.logging_setup import configure_logging
from recordkeeper.db.create_tables import create_all
from recordkeeper.db.session import Database
from recordkeeper.domain.records import Address, Order, Person, Shipment
from recordkeeper.services.owner_service import DetachResult
from recordkeeper.services.registry import Registries, build_registries

logger = logging.getLogger(__name__)


# -------------------------- formatting --------------------------
def format_address(address: Address) -> str:
    suffix = "" if address.active else " (deleted)"
    return f"ID: {address.id}, {address.label()}{suffix}"


def format_person(person: Person) -> str:
    line = f"ID: {person.id}, Name: {person.first_name} {person.last_name}, National id: {person.national_id}"
    if person.address is not None:
        line += f"\n   Address: {format_address(person.address)}"
    return line


def format_shipment(shipment: Shipment) -> str:
    suffix = "" if shipment.active else " (deleted)"
    carrier = f", Carrier: {shipment.carrier}" if shipment.carrier else ""
    return f"ID: {shipment.id}, To: {shipment.destination}, Date: {shipment.ship_date}{carrier}{suffix}"


def format_order(order: Order) -> str:
    line = (
        f"ID: {order.id}, Number: {order.order_number}, {order.description}, "
        f"{order.quantity} x {order.unit_price} = {order.total}, Status: {order.status}"
    )
    if order.shipment is not None:
        line += f"\n   Shipment: {format_shipment(order.shipment)}"
    return line


def _print_all(items, formatter: Callable, empty: str) -> None:
    if not items:
        print(empty)
        return
    for item in items:
        print(formatter(item))


def _print_detach(result: DetachResult, link_label: str) -> None:
    print(f"OK: {link_label} {result.linked_id} removed and reference cleared")


# -------------------------- handlers --------------------------
def _person(args: argparse.Namespace, reg: Registries) -> None:
    people = reg.people
    if args.action == "add":
        person = people.create_person(
            args.first_name,
            args.last_name,
            args.national_id,
            street=args.street,
            number=args.number,
            address_id=args.address_id,
        )
        print(f"OK: person created with ID {person.id}")
    elif args.action == "list":
        _print_all(people.list_people(), format_person, "No people found.")
    elif args.action == "search":
        _print_all(people.search_people(args.text), format_person, "No people found.")
    elif args.action == "show":
        if args.national_id:
            found = people.find_person_by_national_id(args.id)
            print(format_person(found) if found else "No people found.")
        else:
            print(format_person(people.get_person(args.id)))
    elif args.action == "update":
        people.edit_person(
            args.id, first_name=args.first_name, last_name=args.last_name, national_id=args.national_id
        )
        print("OK: person updated")
    elif args.action == "delete":
        people.delete_person(args.id)
        print("OK: person deleted")
    elif args.action == "attach-address":
        people.attach_address(args.id, args.address_id)
        print("OK: address attached")
    elif args.action == "remove-address":
        _print_detach(people.remove_address_from_person(args.id), "address")


def _address(args: argparse.Namespace, reg: Registries) -> None:
    people = reg.people
    if args.action == "add":
        address = people.create_address(args.street, args.number)
        print(f"OK: address created with ID {address.id}")
    elif args.action == "list":
        _print_all(people.list_addresses(), format_address, "No addresses found.")
    elif args.action == "show":
        print(format_address(people.get_address(args.id)))
    elif args.action == "update":
        if args.person:
            people.edit_address_of_person(args.id, street=args.street, number=args.number)
        else:
            people.edit_address(args.id, street=args.street, number=args.number)
        print("OK: address updated")
    elif args.action == "delete":
        referrers = people.address_referrers(args.id)
        if referrers:
            sys.stderr.write(
                f"Warning: {referrers} person(s) still reference address {args.id}; "
                "use 'person remove-address' to clear references safely.\n"
            )
        people.delete_address_unsafe(args.id)
        print("OK: address deleted")


def _order(args: argparse.Namespace, reg: Registries) -> None:
    orders = reg.orders
    if args.action == "add":
        order = orders.create_order(
            args.order_number,
            args.description,
            args.quantity,
            args.unit_price,
            args.status,
            destination=args.destination,
            ship_date=args.ship_date,
            carrier=args.carrier,
            shipment_id=args.shipment_id,
        )
        print(f"OK: order created with ID {order.id}")
    elif args.action == "list":
        _print_all(orders.list_orders(), format_order, "No orders found.")
    elif args.action == "search":
        _print_all(orders.search_orders(args.text), format_order, "No orders found.")
    elif args.action == "show":
        if args.number:
            found = orders.find_order_by_number(args.id)
            print(format_order(found) if found else "No orders found.")
        else:
            print(format_order(orders.get_order(args.id)))
    elif args.action == "update":
        orders.edit_order(
            args.id,
            order_number=args.order_number,
            description=args.description,
            quantity=args.quantity,
            unit_price=args.unit_price,
            status=args.status,
        )
        print("OK: order updated")
    elif args.action == "delete":
        orders.delete_order(args.id)
        print("OK: order deleted")
    elif args.action == "attach-shipment":
        orders.attach_shipment(args.id, args.shipment_id)
        print("OK: shipment attached")
    elif args.action == "remove-shipment":
        _print_detach(orders.remove_shipment_from_order(args.id), "shipment")


def _shipment(args: argparse.Namespace, reg: Registries) -> None:
    orders = reg.orders
    if args.action == "add":
        shipment = orders.create_shipment(args.destination, args.ship_date, args.carrier)
        print(f"OK: shipment created with ID {shipment.id}")
    elif args.action == "list":
        _print_all(orders.list_shipments(), format_shipment, "No shipments found.")
    elif args.action == "show":
        print(format_shipment(orders.get_shipment(args.id)))
    elif args.action == "update":
        kwargs = dict(destination=args.destination, ship_date=args.ship_date, carrier=args.carrier)
        if args.order:
            orders.edit_shipment_of_order(args.id, **kwargs)
        else:
            orders.edit_shipment(args.id, **kwargs)
        print("OK: shipment updated")
    elif args.action == "delete":
        referrers = orders.shipment_referrers(args.id)
        if referrers:
            sys.stderr.write(
                f"Warning: {referrers} order(s) still reference shipment {args.id}; "
                "use 'order remove-shipment' to clear references safely.\n"
            )
        orders.delete_shipment_unsafe(args.id)
        print("OK: shipment deleted")


# -------------------------- parser --------------------------
def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="recordkeeper", description="People/addresses and orders/shipments")
    ap.add_argument("--database-url", help="SQLAlchemy URL (default: DATABASE_URL env)")
    sub = ap.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="Create the tables")

    person = sub.add_parser("person", help="Manage people").add_subparsers(dest="action", required=True)
    p = person.add_parser("add")
    p.add_argument("--first-name", required=True)
    p.add_argument("--last-name", required=True)
    p.add_argument("--national-id", required=True)
    p.add_argument("--street")
    p.add_argument("--number")
    p.add_argument("--address-id", type=int)
    person.add_parser("list")
    person.add_parser("search").add_argument("text")
    p = person.add_parser("show")
    p.add_argument("id")
    p.add_argument("--national-id", action="store_true", help="Treat the argument as a national id")
    p = person.add_parser("update", help="Blank/omitted fields keep their current value")
    p.add_argument("id")
    p.add_argument("--first-name")
    p.add_argument("--last-name")
    p.add_argument("--national-id")
    person.add_parser("delete").add_argument("id")
    p = person.add_parser("attach-address")
    p.add_argument("id")
    p.add_argument("address_id")
    person.add_parser("remove-address", help="Clear the person's address, then delete it").add_argument("id")

    address = sub.add_parser("address", help="Manage addresses").add_subparsers(dest="action", required=True)
    p = address.add_parser("add")
    p.add_argument("--street", required=True)
    p.add_argument("--number", required=True)
    address.add_parser("list")
    address.add_parser("show").add_argument("id")
    p = address.add_parser("update", help="Changes are seen by every person sharing the address")
    p.add_argument("id")
    p.add_argument("--person", action="store_true", help="Treat the id as a person id")
    p.add_argument("--street")
    p.add_argument("--number")
    address.add_parser("delete", help="Unsafe: does not clear references").add_argument("id")

    order = sub.add_parser("order", help="Manage orders").add_subparsers(dest="action", required=True)
    p = order.add_parser("add")
    p.add_argument("--order-number", required=True)
    p.add_argument("--description", required=True)
    p.add_argument("--quantity", required=True)
    p.add_argument("--unit-price", required=True)
    p.add_argument("--status")
    p.add_argument("--destination")
    p.add_argument("--ship-date")
    p.add_argument("--carrier")
    p.add_argument("--shipment-id", type=int)
    order.add_parser("list")
    order.add_parser("search").add_argument("text")
    p = order.add_parser("show")
    p.add_argument("id")
    p.add_argument("--number", action="store_true", help="Treat the argument as an order number")
    p = order.add_parser("update", help="Blank/omitted fields keep their current value")
    p.add_argument("id")
    p.add_argument("--order-number")
    p.add_argument("--description")
    p.add_argument("--quantity")
    p.add_argument("--unit-price")
    p.add_argument("--status")
    order.add_parser("delete").add_argument("id")
    p = order.add_parser("attach-shipment")
    p.add_argument("id")
    p.add_argument("shipment_id")
    order.add_parser("remove-shipment", help="Clear the order's shipment, then delete it").add_argument("id")

    shipment = sub.add_parser("shipment", help="Manage shipments").add_subparsers(dest="action", required=True)
    p = shipment.add_parser("add")
    p.add_argument("--destination", required=True)
    p.add_argument("--ship-date", required=True)
    p.add_argument("--carrier")
    shipment.add_parser("list")
    shipment.add_parser("show").add_argument("id")
    p = shipment.add_parser("update", help="Changes are seen by every order sharing the shipment")
    p.add_argument("id")
    p.add_argument("--order", action="store_true", help="Treat the id as an order id")
    p.add_argument("--destination")
    p.add_argument("--ship-date")
    p.add_argument("--carrier")
    shipment.add_parser("delete", help="Unsafe: does not clear references").add_argument("id")
    return ap


HANDLERS = {"person": _person, "address": _address, "order": _order, "shipment": _shipment}


def main(argv: Optional[Sequence[str]] = None, database: Optional[Database] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings.log_level)

    owns_database = database is None
    if database is None and args.database_url:
        database = Database.from_url(args.database_url, echo=settings.sql_echo)
    elif database is None:
        database = Database.from_settings()
    try:
        if args.command == "init-db":
            create_all(database)
            print("Database tables created successfully.")
            return 0
        HANDLERS[args.command](args, build_registries(database))
        return 0
    except RecordkeeperError as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        sys.stderr.write(f"Error: {exc}\n")
        return 1
    except SQLAlchemyError as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        sys.stderr.write(f"Error: Database error: {exc}\n")
        return 1
    finally:
        if owns_database:
            database.dispose()


if __name__ == "__main__":
    try:
        raise SystemExit(main())
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
