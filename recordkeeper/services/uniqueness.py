"""Natural-key uniqueness among active rows."""

from __future__ import annotations

from typing import Callable, Optional

from recordkeeper.core.errors import DuplicateKeyError
from recordkeeper.domain.records import StoredRecord


class UniquenessValidator:
    """Checks a natural key against the active rows of one record type.

    The check is advisory: nothing locks the key between the lookup and the
    write that follows it. The partial unique index on the table is what
    finally rejects a concurrent duplicate.
    """

    def __init__(self, entity: str, lookup: Callable[[str], Optional[StoredRecord]]) -> None:
        self.entity = entity
        self.lookup = lookup

    def assert_unique(self, natural_key: str, exclude_id: Optional[int] = None) -> None:
        found = self.lookup(natural_key)
        if found is None:
            return
        if exclude_id is None or found.id != exclude_id:
            raise DuplicateKeyError(self.entity, natural_key)
