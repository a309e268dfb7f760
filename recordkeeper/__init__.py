"""Record keeping for people/addresses and orders/shipments."""

__version__ = "0.1.0"
