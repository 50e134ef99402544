"""Root pytest configuration for persisted operations tests."""
import pytest
import pytest_asyncio

from persisted_operations.options import PersistedOperationsOptions
from persisted_operations.registry import OperationRegistry

PING = "query { ping }"


@pytest.fixture(autouse=True)
def test_env(monkeypatch):
    """Keep the developer's environment out of option loading."""
    monkeypatch.delenv("PERSISTED_OPERATIONS_DIRECTORY", raising=False)
    monkeypatch.delenv("ALLOW_UNPERSISTED_OPERATIONS", raising=False)
    monkeypatch.delenv("PERSISTED_OPERATIONS_REFRESH_INTERVAL", raising=False)


@pytest.fixture
def operations_dir(tmp_path):
    """Directory holding a single deadbeef.graphql operation."""
    directory = tmp_path / "operations"
    directory.mkdir()
    (directory / "deadbeef.graphql").write_text(PING, encoding="utf-8")
    return directory


@pytest.fixture
def static_options():
    """Options with a static map containing abc123."""
    return PersistedOperationsOptions(persisted_operations={"abc123": PING})


@pytest.fixture
def registry():
    """Registry for tests that never start a directory store."""
    return OperationRegistry()


@pytest_asyncio.fixture
async def scanning_registry():
    """Registry with a fast rescan, closed after the test."""
    registry = OperationRegistry(refresh_interval=0.01)
    yield registry
    await registry.close()
