"""Tests for shared/database.py."""

import pytest
from unittest.mock import patch, MagicMock

from shared.config import Settings
from shared.database import create_service_client, get_supabase_client, reset_client_cache


class TestSupabaseClient:
    def setup_method(self):
        """Reset cache before each test."""
        reset_client_cache()

    def teardown_method(self):
        reset_client_cache()

    @patch("shared.database.create_client")
    @patch("shared.database.get_settings")
    def test_get_supabase_client_creates_client(self, mock_settings, mock_create):
        """Should create client with service role key."""
        mock_settings.return_value.supabase_url = "https://test.supabase.co"
        mock_settings.return_value.supabase_service_role_key = "test-key"
        mock_create.return_value = MagicMock()

        client = get_supabase_client()

        mock_create.assert_called_once_with("https://test.supabase.co", "test-key")
        assert client is mock_create.return_value

    @patch("shared.database.create_client")
    @patch("shared.database.get_settings")
    def test_get_supabase_client_caches_client(self, mock_settings, mock_create):
        """Should cache the client and not recreate it."""
        mock_settings.return_value.supabase_url = "https://test.supabase.co"
        mock_settings.return_value.supabase_service_role_key = "test-key"
        mock_create.return_value = MagicMock()

        assert get_supabase_client() is get_supabase_client()
        mock_create.assert_called_once()

    @patch("shared.database.get_settings")
    def test_get_supabase_client_raises_without_config(self, mock_settings):
        """Should raise if configuration is missing."""
        mock_settings.return_value.supabase_url = ""
        mock_settings.return_value.supabase_service_role_key = ""

        with pytest.raises(RuntimeError, match="Supabase configuration missing"):
            get_supabase_client()

    @patch("shared.database.create_client")
    @patch("shared.database.get_settings")
    def test_reset_client_cache(self, mock_settings, mock_create):
        mock_settings.return_value.supabase_url = "https://test.supabase.co"
        mock_settings.return_value.supabase_service_role_key = "test-key"
        mock_create.side_effect = [MagicMock(), MagicMock()]

        first = get_supabase_client()
        reset_client_cache()
        second = get_supabase_client()

        assert first is not second
        assert mock_create.call_count == 2


class TestCreateServiceClient:
    @patch("shared.database.create_client")
    def test_uses_service_role_key(self, mock_create):
        settings = Settings(
            _env_file=None,
            supabase_url="https://test.supabase.co",
            supabase_service_role_key="service-key",
        )
        create_service_client(settings)
        mock_create.assert_called_once_with("https://test.supabase.co", "service-key")

    def test_half_configured(self):
        settings = Settings(_env_file=None, supabase_url="https://test.supabase.co")
        with pytest.raises(RuntimeError, match="STORAGE_BACKEND=memory"):
            create_service_client(settings)
