# =============================================================================
# tests/test_supabase_client.py - Persistence Wrapper Tests
# =============================================================================
# The Supabase client itself is mocked; these tests check the row shapes
# written to color_analyses and error_logs.
# =============================================================================

import json
import random
import uuid
from unittest.mock import MagicMock, patch

import pytest

from agents.fallback import FallbackGenerator
from lib.monitoring import ErrorLogger
from lib.supabase_client import SupabaseClient, SupabaseClientError


@pytest.fixture
def mock_client():
    client = MagicMock()
    with patch.object(SupabaseClient, "get_client", return_value=client):
        yield client


def _inserted_row(client):
    return client.table.return_value.insert.call_args.args[0]


class TestInsertAnalysis:
    """Tests for SupabaseClient.insert_analysis."""

    def test_row_has_generated_id(self, mock_client):
        mock_client.table.return_value.insert.return_value.execute.return_value.data = [{"id": "x"}]
        result = FallbackGenerator(random.Random(1)).full_fallback("test")

        SupabaseClient.insert_analysis("user-1", "https://cdn.example.com/a.jpg", result, 1200)

        mock_client.table.assert_called_once_with("color_analyses")
        row = _inserted_row(mock_client)
        assert str(uuid.UUID(row["id"])) == row["id"]
        assert row["user_id"] == "user-1"
        assert row["season"] == result.season.value
        assert len(json.loads(row["free_colors"])) == 3
        assert row["processing_time_ms"] == 1200

    def test_ids_are_unique(self, mock_client):
        mock_client.table.return_value.insert.return_value.execute.return_value.data = [{"id": "x"}]
        result = FallbackGenerator(random.Random(1)).full_fallback("test")

        SupabaseClient.insert_analysis("u", "https://cdn.example.com/a.jpg", result)
        first = _inserted_row(mock_client)["id"]
        SupabaseClient.insert_analysis("u", "https://cdn.example.com/a.jpg", result)

        assert _inserted_row(mock_client)["id"] != first

    def test_empty_response_raises(self, mock_client):
        mock_client.table.return_value.insert.return_value.execute.return_value.data = []
        result = FallbackGenerator(random.Random(1)).full_fallback("test")

        with pytest.raises(SupabaseClientError) as exc_info:
            SupabaseClient.insert_analysis("u", "https://cdn.example.com/a.jpg", result)

        assert exc_info.value.code == "INSERT_NO_DATA"


class TestInsertErrorLog:
    """Tests for SupabaseClient.insert_error_log."""

    def test_row_uses_log_id(self, mock_client):
        mock_client.table.return_value.insert.return_value.execute.return_value.data = []
        error_logger = ErrorLogger()
        error_logger.log_error("Upload Error", "bucket missing")
        entry = error_logger.get_logs()[0]

        SupabaseClient.insert_error_log(entry)

        row = _inserted_row(mock_client)
        assert row["id"] == entry.id
        assert row["error_type"] == "Upload Error"
