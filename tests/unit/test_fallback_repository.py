# =============================================================================
# tests/unit/test_fallback_repository.py
# Unit Tests for the remote mirror and the remote-first fallback
# =============================================================================

from unittest.mock import MagicMock

import pytest


def _remote(configured=True):
    from studio_core.offline.data_sources import RemoteSource

    remote = MagicMock(spec=RemoteSource)
    remote.is_configured.return_value = configured
    return remote


def _response(data):
    response = MagicMock()
    response.data = data
    return response


class TestFallbackReads:
    """Test remote-first reads"""

    def test_remote_answers_mirrored_collection(self, local_source):
        """Configured remote is the source of truth"""
        from studio_core.offline.fallback_repository import FallbackRepository

        remote = _remote()
        remote.fetch_all.return_value = [{"id": "remote"}]
        local_source.insert("clients", {"id": "local"})

        repo = FallbackRepository(local_source, remote, mirrored=["clients"])
        assert repo.fetch_all("clients") == [{"id": "remote"}]

    def test_remote_failure_falls_back_to_local(self, local_source):
        """A failing remote read returns local data"""
        from studio_core.errors import RemoteMirrorError
        from studio_core.offline.fallback_repository import FallbackRepository

        remote = _remote()
        remote.fetch_all.side_effect = RemoteMirrorError("offline", collection="clients")
        local_source.insert("clients", {"id": "local"})

        repo = FallbackRepository(local_source, remote, mirrored=["clients"])
        assert repo.fetch_all("clients") == [{"id": "local"}]

    def test_empty_remote_result_is_used(self, local_source):
        """An empty remote table is still the answer"""
        from studio_core.offline.fallback_repository import FallbackRepository

        remote = _remote()
        remote.fetch_all.return_value = []
        local_source.insert("orders", {"id": "local"})

        repo = FallbackRepository(local_source, remote, mirrored=["orders"])
        assert repo.fetch_all("orders") == []

    def test_unmirrored_collection_stays_local(self, local_source):
        """Collections without a remote table never hit the remote"""
        from studio_core.offline.fallback_repository import FallbackRepository

        remote = _remote()
        repo = FallbackRepository(local_source, remote, mirrored=["clients"])

        repo.fetch_all("notes")
        repo.insert("notes", {"id": "n1"})

        remote.fetch_all.assert_not_called()
        remote.insert.assert_not_called()

    def test_unconfigured_remote_is_skipped(self, local_source):
        """No client means local only"""
        from studio_core.offline.fallback_repository import FallbackRepository

        remote = _remote(configured=False)
        repo = FallbackRepository(local_source, remote, mirrored=["clients"])
        repo.insert("clients", {"id": "c1"})

        assert repo.fetch_all("clients") == [{"id": "c1"}]
        remote.insert.assert_not_called()


class TestFallbackWrites:
    """Test remote best-effort, local-always writes"""

    def test_remote_write_failure_keeps_local_write(self, local_source):
        """Remote errors are swallowed and the local write still happens"""
        from studio_core.errors import RemoteMirrorError
        from studio_core.offline.fallback_repository import FallbackRepository

        remote = _remote()
        remote.insert.side_effect = RemoteMirrorError("offline")
        remote.upsert.side_effect = RemoteMirrorError("offline")

        repo = FallbackRepository(local_source, remote, mirrored=["clients"])
        repo.insert("clients", {"id": "c1", "name": "Mia"})
        repo.upsert("clients", {"id": "c1", "name": "Mia Thu"})

        assert local_source.fetch_all("clients") == [{"id": "c1", "name": "Mia Thu"}]

    def test_remote_write_failure_is_reported(self, local_source, monkeypatch):
        """Swallowed remote errors still go through the shared error handler"""
        import studio_core.offline.fallback_repository as fallback
        from studio_core.errors import RemoteMirrorError
        from studio_core.offline.fallback_repository import FallbackRepository

        handler = MagicMock()
        monkeypatch.setattr(fallback, "handle_error", handler)

        error = RemoteMirrorError("offline", collection="orders", operation="insert")
        remote = _remote()
        remote.insert.side_effect = error

        FallbackRepository(local_source, remote, mirrored=["orders"]).insert("orders", {"id": "o1"})

        handler.assert_called_once()
        assert handler.call_args.args[0] is error
        assert handler.call_args.kwargs["show_user_message"] is False
        assert local_source.count("orders") == 1

    def test_writes_go_to_both(self, local_source):
        """Successful remote writes are mirrored locally"""
        from studio_core.offline.fallback_repository import FallbackRepository

        remote = _remote()
        repo = FallbackRepository(local_source, remote, mirrored=["clients"])
        repo.insert("clients", {"id": "c1"})

        remote.insert.assert_called_once_with("clients", {"id": "c1"})
        assert local_source.count("clients") == 1

    def test_delete_true_if_either_side_deleted(self, local_source):
        """Delete reports a removal on remote or local"""
        from studio_core.offline.fallback_repository import FallbackRepository

        remote = _remote()
        remote.delete.return_value = True
        repo = FallbackRepository(local_source, remote, mirrored=["clients"])

        assert repo.delete("clients", "remote-only") is True

        remote.delete.return_value = False
        local_source.insert("clients", {"id": "c1"})
        assert repo.delete("clients", "c1") is True
        assert repo.delete("clients", "c1") is False

    def test_local_write_failure_propagates(self):
        """Local storage errors are not swallowed"""
        from studio_core.errors import StorageError
        from studio_core.offline.data_sources import LocalSource
        from studio_core.offline.fallback_repository import FallbackRepository

        local = MagicMock(spec=LocalSource)
        local.insert.side_effect = StorageError("disk full")

        repo = FallbackRepository(local, _remote(), mirrored=["clients"])
        with pytest.raises(StorageError):
            repo.insert("clients", {"id": "c1"})

    def test_repository_add_survives_remote_outage(self, local_source, clock):
        """End to end: add succeeds locally while the remote is down"""
        from studio_core.errors import RemoteMirrorError
        from studio_core.offline.fallback_repository import FallbackRepository
        from studio_core.offline.repository import StudioRepository

        remote = _remote()
        remote.insert.side_effect = RemoteMirrorError("offline")
        remote.fetch_all.side_effect = RemoteMirrorError("offline")

        repo = StudioRepository(
            FallbackRepository(local_source, remote, mirrored=["clients"]),
            lambda: "user-1",
            clock=clock,
        )
        client = repo.clients.add({"name": "Mia", "phone": "09123"})

        assert [c.id for c in repo.clients.list()] == [client.id]


class TestRemoteSource:
    """Test the Supabase-backed source"""

    def test_not_configured_without_client(self):
        """No client raises RemoteMirrorError on use"""
        from studio_core.errors import RemoteMirrorError
        from studio_core.offline.data_sources import RemoteSource

        remote = RemoteSource(None)
        assert not remote.is_configured()
        with pytest.raises(RemoteMirrorError):
            remote.fetch_all("clients")

    def test_fetch_all_paginates(self, mock_supabase):
        """Rows are fetched in batches of 1000 until a short page"""
        from studio_core.offline.data_sources import RemoteSource

        query = mock_supabase.table.return_value.select.return_value.order.return_value
        query.range.return_value.execute.side_effect = [
            _response([{"id": str(i)} for i in range(1000)]),
            _response([{"id": "last"}]),
        ]

        rows = RemoteSource(mock_supabase).fetch_all("orders")

        assert len(rows) == 1001
        mock_supabase.table.return_value.select.return_value.order.assert_called_with("created_at", desc=True)
        assert [c.args for c in query.range.call_args_list] == [(0, 999), (1000, 1999)]

    def test_transactions_ordered_by_date(self, mock_supabase):
        """Transactions and notes sort on their date column"""
        from studio_core.offline.data_sources import RemoteSource

        RemoteSource(mock_supabase).fetch_all("transactions")
        mock_supabase.table.return_value.select.return_value.order.assert_called_with("date", desc=True)

    def test_client_errors_are_wrapped(self, mock_supabase):
        """Any client exception becomes RemoteMirrorError"""
        from studio_core.errors import RemoteMirrorError
        from studio_core.offline.data_sources import RemoteSource

        mock_supabase.table.side_effect = ConnectionError("network down")
        remote = RemoteSource(mock_supabase)

        with pytest.raises(RemoteMirrorError) as exc_info:
            remote.insert("clients", {"id": "c1"})
        assert exc_info.value.details == {"collection": "clients", "operation": "insert"}

    def test_upsert_updates_by_id(self, mock_supabase):
        """Updates target the row with the record's id"""
        from studio_core.offline.data_sources import RemoteSource

        RemoteSource(mock_supabase).upsert("clients", {"id": "c1", "name": "Mia"})

        table = mock_supabase.table.return_value
        table.update.assert_called_once_with({"id": "c1", "name": "Mia"})
        table.update.return_value.eq.assert_called_once_with("id", "c1")

    def test_delete_reports_removed_rows(self, mock_supabase):
        """delete is True only when rows came back"""
        from studio_core.offline.data_sources import RemoteSource

        execute = mock_supabase.table.return_value.delete.return_value.eq.return_value.execute
        execute.return_value = _response([{"id": "c1"}])
        assert RemoteSource(mock_supabase).delete("clients", "c1") is True

        execute.return_value = _response([])
        assert RemoteSource(mock_supabase).delete("clients", "c1") is False

    def test_upload_file_returns_public_url(self, mock_supabase):
        """Uploads return the bucket's public URL, None on failure"""
        from studio_core.offline.data_sources import RemoteSource

        bucket = mock_supabase.storage.from_.return_value
        bucket.get_public_url.return_value = "https://cdn/fabric.png"
        remote = RemoteSource(mock_supabase)

        assert remote.upload_file("fabrics", "fabric.png", b"png") == "https://cdn/fabric.png"

        bucket.upload.side_effect = RuntimeError("quota")
        assert remote.upload_file("fabrics", "fabric.png", b"png") is None
