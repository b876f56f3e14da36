# =============================================================================
# studio_core/errors/__init__.py
# Centralized Error Handling for the Studio data layer
# =============================================================================

from .exceptions import (
    StudioError,
    StorageError,
    BackupImportError,
    DataValidationError,
    RemoteMirrorError,
    DocumentError,
    ConfigurationError,
)

from .handlers import handle_error

__all__ = [
    # Exceptions
    "StudioError",
    "StorageError",
    "BackupImportError",
    "DataValidationError",
    "RemoteMirrorError",
    "DocumentError",
    "ConfigurationError",
    # Handlers
    "handle_error",
]
