"""Database helpers (engine/session handle export)."""

from .session import Base, Database

__all__ = ["Base", "Database"]
