# =============================================================================
# studio_core/offline/sync_engine.py
# Cloud backup / restore stub with sync status tracking
# =============================================================================
"""
CloudSyncService - simulated cloud backup.

Push records the time of the "backup" and pull only reports success; neither
moves collection contents. Both wait a fixed delay so the UI can show
progress. Real transfer belongs to a future transport, the status tracking
and callbacks here stay the same.
"""

from __future__ import annotations
import time
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Callable, List, Optional

from studio_core.errors import StorageError, handle_error
from studio_core.logging import get_logger
from studio_core.offline.obfuscated_store import ObfuscatedStore
from studio_core.services.base_service import ServiceResult

if TYPE_CHECKING:
    from studio_core.state.preferences import Preferences

logger = get_logger(__name__)

LAST_SYNC_KEY = "last_cloud_sync"
CLOUD_VERSION = "1.0.2-cloud"

PUSH_OK = "Cloud backup successful!"
PUSH_FAILED = "Cloud backup failed. Check connection."
PULL_OK = "Data restored from cloud!"


@dataclass
class SyncState:
    """Current sync state."""
    is_syncing: bool = False
    last_sync: Optional[str] = None
    last_result: Optional[bool] = None


@dataclass
class SnapshotInfo:
    """What the cloud reports about the latest snapshot."""
    last_sync: Optional[str]
    clients: int
    orders: int
    version: str = CLOUD_VERSION


class CloudSyncService:
    """
    Simulated push / pull against the studio's cloud backup.

    Usage:
        sync = CloudSyncService(store)
        result = sync.push()
        st.toast(result.message)
    """

    def __init__(
        self,
        store: ObfuscatedStore,
        delay: float = 1.5,
        snapshot_delay: float = 0.8,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.store = store
        self.delay = delay
        self.snapshot_delay = snapshot_delay
        self._sleep = sleep
        self._clock = clock
        self._state = SyncState(last_sync=self.last_sync())
        self._callbacks: List[Callable[[SyncState], None]] = []

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def is_syncing(self) -> bool:
        return self._state.is_syncing

    def last_sync(self) -> Optional[str]:
        """ISO timestamp of the last successful push, if any."""
        value = self.store.read(LAST_SYNC_KEY)
        return value if isinstance(value, str) else None

    # =========================================================================
    # PUSH / PULL
    # =========================================================================

    def _begin(self) -> None:
        self._state.is_syncing = True
        self._notify_callbacks()

    def _finish(self, success: bool) -> None:
        self._state.is_syncing = False
        self._state.last_result = success
        self._notify_callbacks()

    def push(self) -> ServiceResult:
        """Record a cloud backup at the current time."""
        self._begin()
        success = False
        try:
            timestamp = self._clock().isoformat()
            self.store.write(LAST_SYNC_KEY, timestamp)
            self._sleep(self.delay)
            self._state.last_sync = timestamp
            success = True
            logger.info(f"Cloud backup recorded at {timestamp}")
            return ServiceResult.ok(data=timestamp, message=PUSH_OK)
        except StorageError as e:
            handle_error(e, show_user_message=False)
            return ServiceResult.from_exception(e, message=PUSH_FAILED)
        finally:
            self._finish(success)

    def pull(self) -> ServiceResult:
        """Report a restore from the cloud; local collections are left as they are."""
        self._begin()
        try:
            self._sleep(self.delay)
            logger.info("Cloud restore requested")
            return ServiceResult.ok(message=PULL_OK)
        finally:
            self._finish(True)

    def get_remote_snapshot_info(self) -> SnapshotInfo:
        self._sleep(self.snapshot_delay)
        return SnapshotInfo(
            last_sync=self.last_sync(),
            clients=len(self.store.read_list("clients")),
            orders=len(self.store.read_list("orders")),
        )

    def maybe_auto_sync(self, preferences: Preferences) -> Optional[ServiceResult]:
        """Push when the user turned auto-sync on; otherwise do nothing."""
        if not preferences.auto_sync:
            return None
        return self.push()

    # =========================================================================
    # CALLBACKS
    # =========================================================================

    def register_callback(self, callback: Callable[[SyncState], None]) -> None:
        """Register callback for sync state changes."""
        if callback not in self._callbacks:
            self._callbacks.append(callback)

    def unregister_callback(self, callback: Callable[[SyncState], None]) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def _notify_callbacks(self) -> None:
        for callback in self._callbacks:
            try:
                callback(self._state)
            except Exception as e:
                logger.error(f"Error in sync callback: {e}")
