from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make the recordkeeper package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from recordkeeper.core import config as core_config  # noqa: E402
from recordkeeper.db.session import Database  # noqa: E402
from recordkeeper.services.registry import build_registries  # noqa: E402


@pytest.fixture()
def database(tmp_path, monkeypatch):
    """Temporary SQLite database with the schema created; fully torn down afterwards."""
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    core_config.get_settings.cache_clear()

    db = Database.from_url(f"sqlite:///{db_file}")
    db.drop_all()
    db.create_all()

    yield db

    try:
        db.drop_all()
    finally:
        db.dispose()
        core_config.get_settings.cache_clear()


@pytest.fixture()
def registries(database):
    return build_registries(database)
