from __future__ import annotations

import pytest

from recordkeeper.core.errors import DuplicateKeyError
from recordkeeper.domain.records import Person
from recordkeeper.services.uniqueness import UniquenessValidator


def _validator(existing):
    return UniquenessValidator("person", lambda key: existing.get(key))


def test_unused_key_passes():
    _validator({}).assert_unique("1")


def test_used_key_fails_without_exclusion():
    validator = _validator({"1": Person("Ana", "Diaz", "1", id=7)})

    with pytest.raises(DuplicateKeyError) as exc_info:
        validator.assert_unique("1")
    assert exc_info.value.key == "1"
    assert exc_info.value.entity == "person"


def test_own_row_is_excluded():
    validator = _validator({"1": Person("Ana", "Diaz", "1", id=7)})

    validator.assert_unique("1", exclude_id=7)
    with pytest.raises(DuplicateKeyError):
        validator.assert_unique("1", exclude_id=8)
