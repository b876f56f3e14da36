# =============================================================================
# studio_core/context.py
# Application context: builds and owns every data-layer component
# =============================================================================
"""
StudioContext replaces module-level singletons. Build it once at startup and
pass it (or the parts you need) to collaborators.

Usage:
------
import streamlit as st
from studio_core.context import build_context

@st.cache_resource
def get_context():
    return build_context()

ctx = get_context()
ctx.gate.start()
orders = ctx.repository.orders.list()
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from studio_core.auth import SessionObserver
from studio_core.config import StudioConfig, load_config
from studio_core.data import get_supabase_client
from studio_core.logging import get_logger
from studio_core.models.entities import COLLECTIONS
from studio_core.offline import (
    BackupService,
    CloudSyncService,
    FallbackRepository,
    LocalDatabase,
    LocalSource,
    ObfuscatedStore,
    RemoteSource,
    StudioRepository,
)
from studio_core.offline.sync_engine import LAST_SYNC_KEY
from studio_core.security import SecurityGate
from studio_core.security.pin_gate import PIN_KEY
from studio_core.services import DocumentService, FinanceService
from studio_core.state.preferences import (
    AUTO_SYNC_KEY,
    CURRENCY_KEY,
    LANGUAGE_KEY,
    PROFILE_KEY,
    Preferences,
)

logger = get_logger(__name__)

SETTING_KEYS = (LAST_SYNC_KEY, AUTO_SYNC_KEY, CURRENCY_KEY, PIN_KEY, PROFILE_KEY, LANGUAGE_KEY)


@dataclass
class StudioContext:
    """Every component of the persistence and sync layer, wired together."""
    config: StudioConfig
    database: LocalDatabase
    store: ObfuscatedStore
    local: LocalSource
    remote: RemoteSource
    source: FallbackRepository
    session: SessionObserver
    repository: StudioRepository
    gate: SecurityGate
    backup: BackupService
    sync: CloudSyncService
    preferences: Preferences
    finance: FinanceService
    documents: DocumentService

    def clear_all_data(self) -> None:
        """Remove every collection and stored setting from the local store."""
        for name in COLLECTIONS:
            self.store.remove(name)
        for key in SETTING_KEYS:
            self.store.remove(key)
        self.gate.start()
        logger.warning("All local studio data cleared")

    def close(self) -> None:
        self.database.close()


def build_context(
    config: Optional[StudioConfig] = None,
    supabase_client=None,
    clock: Callable[[], datetime] = datetime.now,
) -> StudioContext:
    """
    Construct the full component graph.

    Args:
        config: Settings; loaded from secrets / environment when omitted
        supabase_client: Pre-built client; created from config when omitted
        clock: Time source for record timestamps
    """
    config = config or load_config()

    database = LocalDatabase(config.db_path).initialize()
    store = ObfuscatedStore(database, prefix=config.storage_prefix)
    local = LocalSource(store)

    client = supabase_client if supabase_client is not None else get_supabase_client(config)
    remote = RemoteSource(client)
    source = FallbackRepository(local, remote, mirrored=config.remote_collections)

    session = SessionObserver(client)
    finance = FinanceService()

    context = StudioContext(
        config=config,
        database=database,
        store=store,
        local=local,
        remote=remote,
        source=source,
        session=session,
        repository=StudioRepository(source, session.current_user_id, clock=clock),
        gate=SecurityGate(store, clear_delay=config.pin_clear_delay),
        backup=BackupService(local),
        sync=CloudSyncService(
            store,
            delay=config.sync_delay,
            snapshot_delay=config.snapshot_delay,
            clock=clock,
        ),
        preferences=Preferences(store),
        finance=finance,
        documents=DocumentService(finance),
    )
    logger.info(
        f"Studio context ready (db={config.db_path}, remote={remote.is_configured()})"
    )
    return context
