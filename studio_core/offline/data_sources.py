# =============================================================================
# studio_core/offline/data_sources.py
# Data sources: local obfuscated store and the hosted Supabase mirror
# =============================================================================
"""
Both sources speak the same collection-level contract (stored-form dicts):

    fetch_all(collection)        -> List[dict]
    insert(collection, record)   -> None
    upsert(collection, record)   -> None
    delete(collection, id)       -> bool

LocalSource keeps each collection as one JSON array in the ObfuscatedStore.
RemoteSource talks to one Supabase table per collection and raises
RemoteMirrorError for any failure, so the caller decides how to fall back.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from studio_core.errors import RemoteMirrorError
from studio_core.logging import get_logger
from studio_core.models.entities import ENTITY_TYPES
from studio_core.offline.obfuscated_store import ObfuscatedStore

logger = get_logger(__name__)


class DataSource(ABC):
    """Collection-level storage contract."""

    name: str = "source"

    @abstractmethod
    def fetch_all(self, collection: str) -> List[Dict[str, Any]]:
        ...

    @abstractmethod
    def insert(self, collection: str, record: Dict[str, Any]) -> None:
        ...

    @abstractmethod
    def upsert(self, collection: str, record: Dict[str, Any]) -> None:
        ...

    @abstractmethod
    def delete(self, collection: str, record_id: str) -> bool:
        ...


# =============================================================================
# LOCAL SOURCE
# =============================================================================

class LocalSource(DataSource):
    """Collections stored as JSON arrays in the obfuscated store."""

    name = "local"

    def __init__(self, store: ObfuscatedStore):
        self.store = store

    def fetch_all(self, collection: str) -> List[Dict[str, Any]]:
        return self.store.read_list(collection)

    def insert(self, collection: str, record: Dict[str, Any]) -> None:
        """Prepend record so the newest entry comes first."""
        records = self.store.read_list(collection)
        self.store.write(collection, [record, *records])

    def append(self, collection: str, record: Dict[str, Any]) -> None:
        records = self.store.read_list(collection)
        self.store.write(collection, [*records, record])

    def upsert(self, collection: str, record: Dict[str, Any]) -> None:
        """Replace the record with the same id in place, or prepend it."""
        records = self.store.read_list(collection)
        for index, existing in enumerate(records):
            if isinstance(existing, dict) and existing.get("id") == record.get("id"):
                records[index] = record
                break
        else:
            records.insert(0, record)
        self.store.write(collection, records)

    def delete(self, collection: str, record_id: str) -> bool:
        records = self.store.read_list(collection)
        kept = [r for r in records if not (isinstance(r, dict) and r.get("id") == record_id)]
        if len(kept) == len(records):
            return False
        self.store.write(collection, kept)
        return True

    def replace_all(self, collection: str, records: List[Dict[str, Any]]) -> None:
        self.store.write(collection, list(records))

    def count(self, collection: str) -> int:
        return len(self.store.read_list(collection))

    def clear(self, collection: str) -> None:
        self.store.remove(collection)


# =============================================================================
# REMOTE SOURCE
# =============================================================================

class RemoteSource(DataSource):
    """
    Supabase-backed mirror, one table per collection.

    Usage:
        remote = RemoteSource(get_supabase_client(config))
        if remote.is_configured():
            rows = remote.fetch_all("clients")
    """

    name = "remote"
    BATCH_SIZE = 1000  # Supabase row limit per request

    def __init__(self, client: Optional[Any]):
        self.client = client

    def is_configured(self) -> bool:
        """Check if a Supabase client is available."""
        return self.client is not None

    def _require_client(self, collection: str, operation: str) -> Any:
        if self.client is None:
            raise RemoteMirrorError(
                "Remote backend is not configured",
                collection=collection,
                operation=operation,
            )
        return self.client

    @staticmethod
    def order_column(collection: str) -> Optional[str]:
        entity = ENTITY_TYPES.get(collection)
        return entity.ORDER_BY if entity else "created_at"

    def fetch_all(self, collection: str) -> List[Dict[str, Any]]:
        """
        Fetch ALL rows of a table, newest first (handles the 1000 row limit).

        Raises:
            RemoteMirrorError: On any client or network failure
        """
        client = self._require_client(collection, "select")
        order_by = self.order_column(collection)

        try:
            all_data: List[Dict[str, Any]] = []
            offset = 0

            while True:
                query = client.table(collection).select("*")
                if order_by:
                    query = query.order(order_by, desc=True)
                response = query.range(offset, offset + self.BATCH_SIZE - 1).execute()

                if not response.data:
                    break
                all_data.extend(response.data)
                if len(response.data) < self.BATCH_SIZE:
                    break
                offset += self.BATCH_SIZE

            return all_data

        except RemoteMirrorError:
            raise
        except Exception as e:
            raise RemoteMirrorError(
                f"Error fetching {collection}: {e}",
                collection=collection,
                operation="select",
            ) from e

    def insert(self, collection: str, record: Dict[str, Any]) -> None:
        client = self._require_client(collection, "insert")
        try:
            client.table(collection).insert(record).execute()
        except Exception as e:
            raise RemoteMirrorError(
                f"Error inserting into {collection}: {e}",
                collection=collection,
                operation="insert",
            ) from e

    def upsert(self, collection: str, record: Dict[str, Any]) -> None:
        """Update the row whose id matches record["id"]."""
        client = self._require_client(collection, "update")
        try:
            client.table(collection).update(record).eq("id", record.get("id")).execute()
        except Exception as e:
            raise RemoteMirrorError(
                f"Error updating {collection}: {e}",
                collection=collection,
                operation="update",
            ) from e

    def delete(self, collection: str, record_id: str) -> bool:
        client = self._require_client(collection, "delete")
        try:
            response = client.table(collection).delete().eq("id", record_id).execute()
        except Exception as e:
            raise RemoteMirrorError(
                f"Error deleting from {collection}: {e}",
                collection=collection,
                operation="delete",
            ) from e
        return bool(getattr(response, "data", None))

    def upload_file(self, bucket: str, filename: str, content: bytes) -> Optional[str]:
        """
        Upload a file to Supabase storage.

        Returns:
            Public URL of the uploaded file, or None if the upload failed
        """
        if self.client is None:
            return None
        try:
            storage = self.client.storage.from_(bucket)
            storage.upload(filename, content)
            return storage.get_public_url(filename)
        except Exception as e:
            logger.error(f"Upload to {bucket}/{filename} failed: {e}")
            return None
