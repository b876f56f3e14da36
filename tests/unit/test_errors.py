# =============================================================================
# tests/unit/test_errors.py
# Unit Tests for the exception hierarchy, handlers and ServiceResult
# =============================================================================

import pytest


class TestExceptions:
    """Test error codes and serialization"""

    @pytest.mark.parametrize("factory, code, recoverable", [
        (lambda E: E.StorageError("x", key="clients", operation="write"), "STORE_001", False),
        (lambda E: E.BackupImportError("x", source="file.json"), "BACKUP_001", True),
        (lambda E: E.DataValidationError("x", field="name"), "DATA_001", True),
        (lambda E: E.RemoteMirrorError("x", collection="orders"), "REMOTE_001", True),
        (lambda E: E.DocumentError("x", document="invoice"), "DOC_001", True),
        (lambda E: E.ConfigurationError("x", config_key="db_path"), "CONFIG_001", False),
    ])
    def test_codes(self, factory, code, recoverable):
        """Each error carries its code and recoverability"""
        import studio_core.errors as errors

        error = factory(errors)
        assert isinstance(error, errors.StudioError)
        assert error.code == code
        assert error.recoverable is recoverable

    def test_to_dict(self):
        """Errors serialize for logging"""
        from studio_core.errors import StorageError

        data = StorageError("disk full", key="orders", operation="write").to_dict()

        assert data == {
            "error_type": "StorageError",
            "code": "STORE_001",
            "message": "disk full",
            "details": {"key": "orders", "operation": "write"},
            "recoverable": False,
        }

    def test_str_includes_code(self):
        """String form starts with the code"""
        from studio_core.errors import DataValidationError

        assert str(DataValidationError("bad", field="phone")).startswith("[DATA_001] bad")


class TestHandlers:
    """Test user-facing error handling"""

    def test_handle_error_shows_message(self, mock_streamlit):
        """Recoverable errors are shown as plain errors"""
        from studio_core.errors import DataValidationError, handle_error

        handle_error(DataValidationError("Phone is required"))
        mock_streamlit.error.assert_called_once_with("Error: Phone is required")

    def test_handle_error_critical(self, mock_streamlit):
        """Fatal storage errors say the change was not saved"""
        from studio_core.errors import StorageError, handle_error

        handle_error(StorageError("Quota exceeded"))
        message = mock_streamlit.error.call_args.args[0]
        assert message.startswith("Critical Error: Quota exceeded")

    def test_handle_error_quiet(self, mock_streamlit):
        """Data-layer callers log without touching the page"""
        from studio_core.errors import RemoteMirrorError, handle_error

        handle_error(RemoteMirrorError("offline"), show_user_message=False)
        mock_streamlit.error.assert_not_called()

    def test_handle_error_plain_exception(self, mock_streamlit):
        """Unknown exceptions are shown with a custom message"""
        from studio_core.errors import handle_error

        handle_error(ValueError("boom"), user_message="Could not load orders")
        mock_streamlit.error.assert_called_once_with("Error: Could not load orders")


class TestServiceResult:
    """Test result containers"""

    def test_ok_is_truthy(self):
        """Successful results are truthy"""
        from studio_core.services.base_service import ServiceResult

        result = ServiceResult.ok([1], message="done")
        assert result
        assert result.data == [1]
        assert result.message == "done"

    def test_from_studio_error(self):
        """Studio errors keep their code and details"""
        from studio_core.errors import BackupImportError
        from studio_core.services.base_service import ServiceResult

        result = ServiceResult.from_exception(BackupImportError("bad json", source="x.json"))

        assert not result
        assert result.error_code == "BACKUP_001"
        assert result.metadata == {"source": "x.json"}
        assert result.message == "bad json"

    def test_base_service_failure(self, mock_streamlit, monkeypatch):
        """BaseService.failure reports the error and wraps it"""
        import studio_core.services.base_service as base_service
        from unittest.mock import MagicMock
        from studio_core.errors import DataValidationError
        from studio_core.services.base_service import BaseService

        handler = MagicMock()
        monkeypatch.setattr(base_service, "handle_error", handler)

        class Echo(BaseService):
            pass

        error = DataValidationError("bad", field="name")
        result = Echo().failure(error, message="Could not save.")

        handler.assert_called_once_with(error, show_user_message=False)
        assert not result.success
        assert result.error_code == "DATA_001"
        assert result.message == "Could not save."
        mock_streamlit.error.assert_not_called()
