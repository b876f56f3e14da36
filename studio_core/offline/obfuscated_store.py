# =============================================================================
# studio_core/offline/obfuscated_store.py
# Obfuscated Key-Value Store over the local database
# =============================================================================
"""
ObfuscatedStore - JSON values kept under a namespaced key, lightly scrambled.

Every value is serialized to JSON, percent-encoded, then base64-encoded before
it is written. This keeps data from being readable at a glance in the raw
database file. It is NOT encryption: anyone can reverse it without a key.

Reads never raise. A missing key, a storage error or a value that does not
decode all come back as the caller's default. Writes always raise
StorageError on failure.
"""

from __future__ import annotations
import base64
import binascii
import json
from typing import Any, List, Optional
from urllib.parse import quote, unquote

from studio_core.errors import StorageError
from studio_core.logging import get_logger
from studio_core.offline.local_database import LocalDatabase

logger = get_logger(__name__)

# Characters encodeURIComponent leaves alone besides alphanumerics and "-_.~"
_URI_SAFE = "!*'()"


class ObfuscatedStore:
    """Namespaced JSON storage with a reversible text transform."""

    def __init__(self, database: LocalDatabase, prefix: str = "babake_"):
        self.database = database
        self.prefix = prefix

    # =========================================================================
    # ENCODING
    # =========================================================================

    @staticmethod
    def encode(text: str) -> str:
        """Percent-encode then base64-encode text."""
        escaped = quote(text, safe=_URI_SAFE)
        return base64.b64encode(escaped.encode("ascii")).decode("ascii")

    @staticmethod
    def decode(text: str) -> str:
        """
        Reverse ``encode``.

        Raises:
            ValueError: If text is not valid encoded data
        """
        try:
            escaped = base64.b64decode(text.encode("ascii"), validate=True).decode("ascii")
        except (binascii.Error, UnicodeError) as e:
            raise ValueError(f"Not an encoded value: {e}") from e
        return unquote(escaped, errors="strict")

    def _full_key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    # =========================================================================
    # READ / WRITE
    # =========================================================================

    def write(self, key: str, payload: Any) -> None:
        """
        Serialize and store payload under key.

        Raises:
            StorageError: If the payload cannot be serialized or stored
        """
        try:
            text = json.dumps(payload, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise StorageError(
                f"Could not serialize value: {e}",
                key=key,
                operation="write",
            ) from e

        self.database.set(self._full_key(key), self.encode(text))

    def read(self, key: str, default: Any = None) -> Any:
        """Load the value stored under key, or default when absent or unreadable."""
        raw = self.database.get(self._full_key(key))
        if raw is None:
            return default

        try:
            return json.loads(self.decode(raw))
        except (ValueError, UnicodeError) as e:
            logger.warning(f"Stored value for '{key}' could not be decoded: {e}")
            return default

    def read_list(self, key: str) -> List[Any]:
        """Load a stored collection; anything that is not a list reads as empty."""
        value = self.read(key, default=[])
        if not isinstance(value, list):
            logger.warning(f"Stored value for '{key}' is not a list; treating as empty")
            return []
        return value

    def write_raw(self, key: str, raw: str) -> None:
        """Store already-encoded text as-is."""
        self.database.set(self._full_key(key), raw)

    def read_raw(self, key: str) -> Optional[str]:
        """Return the encoded text stored under key without decoding it."""
        return self.database.get(self._full_key(key))

    def remove(self, key: str) -> bool:
        return self.database.delete(self._full_key(key))

    def exists(self, key: str) -> bool:
        return self.database.get(self._full_key(key)) is not None

    def keys(self) -> List[str]:
        """Names stored in this namespace, without the prefix."""
        return [k[len(self.prefix):] for k in self.database.keys(self.prefix)]
