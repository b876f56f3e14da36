# =============================================================================
# studio_core/config.py
# Configuration for the Studio data layer
# =============================================================================
"""
Configuration is resolved in this order (later wins):

1. Defaults
2. Streamlit secrets (.streamlit/secrets.toml)
3. Environment variables
4. Explicit overrides passed to ``load_config``

Expected secrets.toml format:

    [supabase]
    url = "https://your-project.supabase.co"
    key = "your-anon-key"

    [studio]
    db_path = "local_data/studio.db"
"""

from __future__ import annotations
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import streamlit as st

from studio_core.errors import ConfigurationError
from studio_core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_DB_PATH = Path(__file__).parent.parent / "local_data" / "studio.db"
STORAGE_PREFIX = "babake_"

# Collections that have a table on the hosted backend
DEFAULT_REMOTE_COLLECTIONS = ("clients", "orders", "transactions")

ENV_VARS = {
    "supabase_url": "SUPABASE_URL",
    "supabase_key": "SUPABASE_KEY",
    "db_path": "STUDIO_DB_PATH",
}


@dataclass(frozen=True)
class StudioConfig:
    """Runtime settings for the persistence and sync layer."""
    db_path: Path = DEFAULT_DB_PATH
    storage_prefix: str = STORAGE_PREFIX
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    remote_collections: Tuple[str, ...] = DEFAULT_REMOTE_COLLECTIONS
    sync_delay: float = 1.5
    snapshot_delay: float = 0.8
    pin_clear_delay: float = 0.6

    @property
    def is_placeholder(self) -> bool:
        """True when the backend credentials are missing or placeholders."""
        if not self.supabase_url or not self.supabase_key:
            return True
        return "placeholder" in self.supabase_url or self.supabase_key == "placeholder"

    @property
    def remote_configured(self) -> bool:
        return not self.is_placeholder

    def validate(self) -> StudioConfig:
        if not self.storage_prefix:
            raise ConfigurationError(
                "Storage prefix must not be empty",
                config_key="storage_prefix",
                expected_type="non-empty str",
            )
        for name in ("sync_delay", "snapshot_delay", "pin_clear_delay"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or value < 0:
                raise ConfigurationError(
                    f"{name} must be a non-negative number",
                    config_key=name,
                    expected_type="float >= 0",
                )
        return self


def _load_from_secrets() -> Dict[str, Any]:
    """Read supabase/studio sections from Streamlit secrets, if any."""
    values: Dict[str, Any] = {}
    try:
        if hasattr(st, "secrets") and "supabase" in st.secrets:
            supabase = st.secrets["supabase"]
            values["supabase_url"] = supabase.get("url")
            values["supabase_key"] = supabase.get("key")
        if hasattr(st, "secrets") and "studio" in st.secrets:
            studio = st.secrets["studio"]
            if "db_path" in studio:
                values["db_path"] = studio["db_path"]
    except Exception as e:
        # No secrets file outside a Streamlit deployment
        logger.debug(f"Streamlit secrets not available: {e}")
    return {k: v for k, v in values.items() if v}


def _load_from_env() -> Dict[str, Any]:
    values = {}
    for name, var in ENV_VARS.items():
        value = os.getenv(var)
        if value:
            values[name] = value
    return values


def load_config(**overrides) -> StudioConfig:
    """
    Build the configuration from secrets, environment and overrides.

    Args:
        **overrides: Any StudioConfig field

    Returns:
        Validated StudioConfig
    """
    known = {f.name for f in fields(StudioConfig)}
    unknown = set(overrides) - known
    if unknown:
        raise ConfigurationError(
            f"Unknown configuration keys: {', '.join(sorted(unknown))}",
            config_key=sorted(unknown)[0],
        )

    merged: Dict[str, Any] = {}
    merged.update(_load_from_secrets())
    merged.update(_load_from_env())
    merged.update({k: v for k, v in overrides.items() if v is not None})

    if "db_path" in merged:
        merged["db_path"] = Path(merged["db_path"])
    if "remote_collections" in merged:
        merged["remote_collections"] = tuple(merged["remote_collections"])

    config = replace(StudioConfig(), **merged).validate()
    logger.debug(
        f"Configuration loaded: db={config.db_path}, remote={config.remote_configured}"
    )
    return config
