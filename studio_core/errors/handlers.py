# =============================================================================
# studio_core/errors/handlers.py
# Error reporting for the Studio data layer
# =============================================================================

from __future__ import annotations
import traceback
from typing import Optional
import streamlit as st

from studio_core.logging import get_logger
from .exceptions import StudioError

logger = get_logger(__name__)


def handle_error(
    error: Exception,
    show_user_message: bool = True,
    user_message: Optional[str] = None,
) -> None:
    """
    Log an error and, from a page, show it to the user.

    Data-layer components pass show_user_message=False and hand the failure
    back as a ServiceResult; pages call this directly to surface it.

    Fatal (non-recoverable) errors tell the user their last change was lost.
    """
    if isinstance(error, StudioError):
        message = user_message or error.message
        code = error.code
        details = error.details
        recoverable = error.recoverable
    else:
        message = user_message or str(error)
        code = "UNKNOWN"
        details = {"traceback": traceback.format_exc()}
        recoverable = True

    logger.error(f"[{code}] {message}", extra={"details": details})

    if show_user_message:
        if recoverable:
            st.error(f"Error: {message}")
        else:
            st.error(f"Critical Error: {message}. Your last change was not saved.")
