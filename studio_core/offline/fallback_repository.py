# =============================================================================
# studio_core/offline/fallback_repository.py
# Remote-first, local-always data source
# =============================================================================
"""
FallbackRepository - composes the remote mirror and the local store.

Precedence policy:
- Reads: remote first when it is configured and mirrors the collection; on
  any RemoteMirrorError (or no remote) the local store answers.
- Writes: remote first, best effort (failures are logged, never raised);
  then the local store, unconditionally. Local write failures propagate.
"""

from __future__ import annotations
from typing import Any, Dict, Iterable, List, Optional

from studio_core.errors import RemoteMirrorError, handle_error
from studio_core.logging import get_logger
from studio_core.offline.data_sources import DataSource, LocalSource, RemoteSource

logger = get_logger(__name__)


class FallbackRepository(DataSource):
    """DataSource decorator that tries the remote mirror, then the local store."""

    name = "fallback"

    def __init__(
        self,
        local: LocalSource,
        remote: Optional[RemoteSource] = None,
        mirrored: Iterable[str] = (),
    ):
        self.local = local
        self.remote = remote
        self.mirrored = frozenset(mirrored)

    def uses_remote(self, collection: str) -> bool:
        return (
            self.remote is not None
            and self.remote.is_configured()
            and collection in self.mirrored
        )

    def _mirror(self, operation: str, collection: str, *args: Any) -> Any:
        """Run a remote write; log and swallow mirror failures."""
        try:
            return getattr(self.remote, operation)(collection, *args)
        except RemoteMirrorError as e:
            handle_error(
                e,
                show_user_message=False,
                user_message=f"Remote {operation} failed for {collection}, kept locally: {e.message}",
            )
            return None

    # =========================================================================
    # DATA SOURCE CONTRACT
    # =========================================================================

    def fetch_all(self, collection: str) -> List[Dict[str, Any]]:
        if self.uses_remote(collection):
            try:
                records = self.remote.fetch_all(collection)
                logger.debug(f"Fetched {len(records)} rows from remote: {collection}")
                return records
            except RemoteMirrorError as e:
                logger.warning(f"Remote fetch failed for {collection}, using local: {e}")

        return self.local.fetch_all(collection)

    def insert(self, collection: str, record: Dict[str, Any]) -> None:
        if self.uses_remote(collection):
            self._mirror("insert", collection, record)
        self.local.insert(collection, record)

    def upsert(self, collection: str, record: Dict[str, Any]) -> None:
        if self.uses_remote(collection):
            self._mirror("upsert", collection, record)
        self.local.upsert(collection, record)

    def delete(self, collection: str, record_id: str) -> bool:
        remote_deleted = False
        if self.uses_remote(collection):
            remote_deleted = bool(self._mirror("delete", collection, record_id))
        local_deleted = self.local.delete(collection, record_id)
        return remote_deleted or local_deleted

    def append(self, collection: str, record: Dict[str, Any]) -> None:
        """Insert at the end of the local collection instead of the front."""
        if self.uses_remote(collection):
            self._mirror("insert", collection, record)
        self.local.append(collection, record)
