# =============================================================================
# studio_core/offline/backup.py
# Whole-store JSON export and restore
# =============================================================================
"""
BackupService - serializes every local collection into one JSON document and
restores collections from such a document.

Document layout (no version, no checksum):

    {
      "templates": [...],
      "transactions": [...],
      "clients": [...],
      "measurements": [...],
      "orders": [...],
      "notes": [...]
    }

Restore overwrites each collection whose key holds a list. Keys that are
missing or hold anything else leave the collection as it is.
"""

from __future__ import annotations
import json
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from studio_core.errors import BackupImportError, StorageError
from studio_core.models.entities import COLLECTIONS
from studio_core.offline.data_sources import LocalSource
from studio_core.services.base_service import BaseService, ServiceResult

BACKUP_PREFIX = "babake_backup_"


class BackupService(BaseService):
    """Export and import of the local collections."""

    def __init__(self, local: LocalSource):
        super().__init__()
        self.local = local

    # =========================================================================
    # EXPORT
    # =========================================================================

    def export_data(self) -> Dict[str, List[Any]]:
        return {name: self.local.fetch_all(name) for name in COLLECTIONS}

    def export_all(self) -> str:
        """Serialize every collection, read from the local store only."""
        return json.dumps(self.export_data(), indent=2, ensure_ascii=False)

    @staticmethod
    def backup_filename(today: Optional[date] = None) -> str:
        today = today or date.today()
        return f"{BACKUP_PREFIX}{today.isoformat()}.json"

    def export_to_file(self, directory: Union[str, Path], today: Optional[date] = None) -> Path:
        """Write the export to a dated file in directory and return its path."""
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / self.backup_filename(today)
        path.write_text(self.export_all(), encoding="utf-8")
        self.logger.info(f"Backup written to {path}")
        return path

    # =========================================================================
    # IMPORT
    # =========================================================================

    @staticmethod
    def parse(document: Union[str, bytes]) -> Dict[str, Any]:
        """
        Parse a backup document.

        Raises:
            BackupImportError: If the text is not JSON or not a JSON object
        """
        try:
            data = json.loads(document)
        except (TypeError, ValueError) as e:
            raise BackupImportError(f"Backup is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise BackupImportError(
                f"Backup must be a JSON object, got {type(data).__name__}"
            )
        return data

    def import_all(self, document: Union[str, bytes]) -> ServiceResult:
        """
        Restore collections from a backup document.

        The document is fully parsed before anything is written, so a
        malformed document leaves every collection untouched.

        Returns:
            ServiceResult whose data lists the restored collections
        """
        with self.log_operation("Restoring backup"):
            try:
                data = self.parse(document)
            except BackupImportError as e:
                return self.failure(e, message="Invalid backup file.")

            restored = []
            try:
                for name in COLLECTIONS:
                    records = data.get(name)
                    if isinstance(records, list):
                        self.local.replace_all(name, records)
                        restored.append(name)
            except StorageError as e:
                return self.failure(e, message="Backup could not be restored.")

            self.logger.info(f"Restored collections: {', '.join(restored) or 'none'}")
            return ServiceResult.ok(
                data=restored,
                message="Data restored successfully.",
                metadata={"skipped": [n for n in COLLECTIONS if n not in restored]},
            )

    def import_from_file(self, path: Union[str, Path]) -> ServiceResult:
        path = Path(path)
        try:
            document = path.read_text(encoding="utf-8")
        except (OSError, UnicodeError) as e:
            error = BackupImportError(f"Could not read backup file: {e}", source=str(path))
            return self.failure(error, message="Invalid backup file.")
        return self.import_all(document)

    # =========================================================================
    # STATISTICS
    # =========================================================================

    def get_data_stats(self) -> Dict[str, int]:
        """Record counts per collection in the local store."""
        return {name: self.local.count(name) for name in COLLECTIONS}
