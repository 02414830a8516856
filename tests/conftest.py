"""Shared pytest fixtures."""

from pathlib import Path
from unittest.mock import patch

import pytest
import yaml
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

import quire.db.models  # noqa: F401  register all models on Base
from quire.db.base import Base


@pytest.fixture
def db_url(tmp_path: Path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'quire-test.db'}"


@pytest.fixture
async def engine(db_url):
    """File-backed SQLite engine with the schema created."""
    engine = create_async_engine(db_url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(engine):
    session_maker = async_sessionmaker(engine, expire_on_commit=False)
    async with session_maker() as session:
        yield session


@pytest.fixture
def temp_app_yaml(tmp_path):
    """Create a temporary app.yaml file for testing."""
    config_path = tmp_path / "app.yaml"

    def _create_config(config: dict):
        with open(config_path, "w") as f:
            yaml.safe_dump(config, f)
        return config_path

    return _create_config


@pytest.fixture
def mock_config_path(temp_app_yaml):
    """Fixture that patches get_config_path to return a custom path."""
    patchers = []

    def _mock(config: dict):
        config_path = temp_app_yaml(config)
        patcher = patch("quire.config.get_config_path", return_value=config_path)
        patchers.append(patcher)
        return patcher.start()

    yield _mock
    for patcher in patchers:
        patcher.stop()
