# =============================================================================
# tests/conftest.py
# Pytest Configuration and Fixtures
# =============================================================================

import pytest
from datetime import datetime, timedelta
from unittest.mock import MagicMock


class StepClock:
    """Deterministic clock that moves forward one minute per call."""

    def __init__(self, start: datetime = datetime(2026, 3, 10, 9, 0, 0)):
        self.current = start

    def __call__(self) -> datetime:
        value = self.current
        self.current = self.current + timedelta(minutes=1)
        return value


# =============================================================================
# STORAGE FIXTURES
# =============================================================================

@pytest.fixture
def database(tmp_path):
    """Fresh SQLite key-value database in a temp directory"""
    from studio_core.offline.local_database import LocalDatabase

    db = LocalDatabase(tmp_path / "studio.db").initialize()
    yield db
    db.close()


@pytest.fixture
def store(database):
    from studio_core.offline.obfuscated_store import ObfuscatedStore

    return ObfuscatedStore(database, prefix="babake_")


@pytest.fixture
def local_source(store):
    from studio_core.offline.data_sources import LocalSource

    return LocalSource(store)


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def repository(local_source, clock):
    """StudioRepository on local storage only, owned by user-1"""
    from studio_core.offline.fallback_repository import FallbackRepository
    from studio_core.offline.repository import StudioRepository

    return StudioRepository(FallbackRepository(local_source), lambda: "user-1", clock=clock)


@pytest.fixture
def context(tmp_path, clock):
    """Full application context without a remote backend or delays"""
    from studio_core.config import StudioConfig
    from studio_core.context import build_context

    config = StudioConfig(
        db_path=tmp_path / "ctx" / "studio.db",
        sync_delay=0,
        snapshot_delay=0,
        pin_clear_delay=0.6,
    )
    ctx = build_context(config, clock=clock)
    yield ctx
    ctx.close()


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================

@pytest.fixture
def sample_client(repository):
    return repository.clients.add({"name": "Mia", "phone": "09123", "address": "Yangon"})


@pytest.fixture
def sample_order(repository, sample_client):
    return repository.add_order(
        {
            "client_id": sample_client.id,
            "description": "Silk blouse",
            "deadline": "2026-03-20",
            "fabric_source": "studio",
            "fabric_cost": 30000,
            "total_amount": 100000,
        },
        initial_deposit=20000,
    )


# =============================================================================
# MOCK FIXTURES
# =============================================================================

@pytest.fixture
def mock_streamlit(monkeypatch):
    """Mock Streamlit for testing"""
    import studio_core.config
    import studio_core.errors.handlers

    mock_st = MagicMock()
    mock_st.session_state = {}
    mock_st.secrets = {}

    monkeypatch.setattr(studio_core.errors.handlers, "st", mock_st)
    monkeypatch.setattr(studio_core.config, "st", mock_st)

    yield mock_st


@pytest.fixture
def mock_supabase():
    """Mock Supabase client"""
    mock_client = MagicMock()
    query = mock_client.table.return_value.select.return_value
    query.order.return_value.range.return_value.execute.return_value.data = []
    query.range.return_value.execute.return_value.data = []
    mock_client.table.return_value.insert.return_value.execute.return_value = MagicMock()
    return mock_client
