"""
Shared fixtures.

Every test gets its own sqlite database and upload directory under
``tmp_path``; the API fixtures build the app through ``create_app`` so the
lifespan opens and closes those resources exactly as in production.
"""

from datetime import datetime
from pathlib import Path

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.db.sessions import Database
from app.main import create_app
from app.services.storage_service import StorageService


def make_settings(tmp_path: Path, **overrides) -> Settings:
    values = dict(
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'documents.db'}",
        UPLOAD_DIR=str(tmp_path / "uploads"),
        ENABLE_METRICS=False,
        LOG_LEVEL="WARNING",
    )
    values.update(overrides)
    return Settings(**values)


def parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00")).replace(tzinfo=None)


@pytest.fixture
def settings(tmp_path):
    return make_settings(tmp_path)


@pytest.fixture
def upload_dir(settings) -> Path:
    return Path(settings.UPLOAD_DIR)


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def storage(tmp_path):
    return StorageService(tmp_path / "store")


@pytest_asyncio.fixture
async def db_session(settings):
    database = Database(settings)
    await database.connect()
    async with database.new_session() as session:
        yield session
    await database.disconnect()
