from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

from solsign.database.repositories.liveness_repository import LivenessRepository

REPO_CONN = "solsign.database.repositories.liveness_repository.get_connection"
NOW = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


def _mock_connection(mock_get_conn: MagicMock) -> tuple[MagicMock, MagicMock]:
    """Wire up a mock connection + cursor and return (mock_conn, mock_cursor)."""
    mock_cursor = MagicMock()
    mock_conn = MagicMock()
    mock_conn.cursor.return_value.__enter__ = MagicMock(return_value=mock_cursor)
    mock_conn.cursor.return_value.__exit__ = MagicMock(return_value=False)
    mock_get_conn.return_value.__enter__ = MagicMock(return_value=mock_conn)
    mock_get_conn.return_value.__exit__ = MagicMock(return_value=False)
    return mock_conn, mock_cursor


class TestUpsert:
    @patch(REPO_CONN)
    def test_inserts_or_replaces(self, mock_get_conn: MagicMock) -> None:
        mock_conn, _cursor = _mock_connection(mock_get_conn)

        result = LivenessRepository().upsert("demo-user-1", True, NOW, "snap")

        assert result.verified is True
        assert result.snapshot_hash == "snap"
        sql, params = mock_conn.execute.call_args[0]
        assert "ON CONFLICT (user_id) DO UPDATE" in sql
        assert params == ("demo-user-1", True, NOW, "snap")
        mock_conn.commit.assert_called_once()


class TestFind:
    @patch(REPO_CONN)
    def test_maps_row(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = {
            "user_id": "demo-user-1",
            "verified": False,
            "last_verified_at": NOW,
            "snapshot_hash": None,
        }

        result = LivenessRepository().find("demo-user-1")

        assert result is not None
        assert result.verified is False
        assert result.last_verified_at == NOW

    @patch(REPO_CONN)
    def test_returns_none_when_missing(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = None

        assert LivenessRepository().find("nobody") is None


class TestDelete:
    @patch(REPO_CONN)
    def test_deletes_and_commits(self, mock_get_conn: MagicMock) -> None:
        mock_conn, _cursor = _mock_connection(mock_get_conn)

        LivenessRepository().delete("demo-user-1")

        assert mock_conn.execute.call_args[0][1] == ("demo-user-1",)
        mock_conn.commit.assert_called_once()
