# =============================================================================
# studio_core/offline/__init__.py
# Local-first persistence for the studio
# =============================================================================
"""
Local-First Persistence Module

Every record lives in the local obfuscated store. When the hosted backend is
configured, the mirrored collections are also read from and written to it,
and the local store answers whenever the backend cannot.

Architecture:
------------
┌──────────────────────────────────────────────────────────────┐
│                   StudioRepository                           │
│          (Typed CRUD - collaborators use this only)          │
└──────────────────────────────────────────────────────────────┘
                             │
                             ▼
┌──────────────────────────────────────────────────────────────┐
│                  FallbackRepository                          │
│      reads: remote, then local   writes: remote, then local  │
└──────────────────────────────────────────────────────────────┘
              │                                   │
              ▼                                   ▼
   ┌────────────────────┐             ┌────────────────────┐
   │    RemoteSource    │             │    LocalSource     │
   │ (Supabase tables)  │             │ (JSON collections) │
   └────────────────────┘             └────────────────────┘
                                                  │
                                                  ▼
                                      ┌────────────────────┐
                                      │  ObfuscatedStore   │
                                      │  on LocalDatabase  │
                                      │     (SQLite)       │
                                      └────────────────────┘

   BackupService      JSON export / restore of the local collections
   CloudSyncService   simulated cloud backup with status tracking

Usage:
------
from studio_core.context import build_context

ctx = build_context()
clients = ctx.repository.clients.list()
document = ctx.backup.export_all()
"""

from studio_core.offline.local_database import LocalDatabase
from studio_core.offline.obfuscated_store import ObfuscatedStore
from studio_core.offline.data_sources import DataSource, LocalSource, RemoteSource
from studio_core.offline.fallback_repository import FallbackRepository
from studio_core.offline.repository import (
    CollectionRepository,
    MeasurementRepository,
    OrderRepository,
    StudioRepository,
    TemplateRepository,
)
from studio_core.offline.backup import BackupService
from studio_core.offline.sync_engine import CloudSyncService, SnapshotInfo, SyncState

__all__ = [
    # Storage
    "LocalDatabase",
    "ObfuscatedStore",
    # Sources
    "DataSource",
    "LocalSource",
    "RemoteSource",
    "FallbackRepository",
    # Repositories
    "CollectionRepository",
    "MeasurementRepository",
    "OrderRepository",
    "StudioRepository",
    "TemplateRepository",
    # Backup & sync
    "BackupService",
    "CloudSyncService",
    "SnapshotInfo",
    "SyncState",
]
