from __future__ import annotations

import dataclasses
import sys
from pathlib import Path

import pytest

# Make the chirpy package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from chirpy.core.config import get_settings  # noqa: E402
from chirpy.repositories.json_repository import JSONRepository  # noqa: E402
from chirpy.repositories.json_storage import JSONStorage  # noqa: E402

POLKA_KEY = "f271c81ff7084ee5b99a5091b42d486e"


@pytest.fixture()
def db_path(tmp_path):
    return tmp_path / "database.json"


@pytest.fixture()
def storage(db_path):
    return JSONStorage(db_path)


@pytest.fixture()
def repo(storage):
    return JSONRepository(storage)


@pytest.fixture()
def settings(db_path):
    get_settings.cache_clear()
    yield dataclasses.replace(
        get_settings(),
        database_path=str(db_path),
        reset_database=False,
        jwt_secret="test-secret-0123456789abcdef0123456789",
        polka_key=POLKA_KEY,
        cors_origins=("*",),
    )
    get_settings.cache_clear()
