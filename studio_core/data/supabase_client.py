# =============================================================================
# studio_core/data/supabase_client.py
# Supabase client construction for the remote mirror
# =============================================================================

from __future__ import annotations
from typing import Optional

from supabase import Client, create_client

from studio_core.config import StudioConfig
from studio_core.logging import get_logger

logger = get_logger(__name__)


def get_supabase_client(config: StudioConfig) -> Optional[Client]:
    """
    Create a Supabase client from the configured credentials.

    Expects secrets in .streamlit/secrets.toml (or SUPABASE_URL / SUPABASE_KEY):
        [supabase]
        url = "https://your-project.supabase.co"
        key = "your-anon-key"

    Returns:
        Supabase client instance, or None when credentials are missing,
        placeholders, or the client cannot be created. The studio then runs
        on local storage only.
    """
    if not config.remote_configured:
        logger.info("Supabase credentials not configured; running local-only")
        return None

    try:
        client: Client = create_client(config.supabase_url, config.supabase_key)
        logger.info("Supabase client initialized")
        return client
    except Exception as e:
        logger.error(f"Failed to initialize Supabase client: {e}")
        return None
