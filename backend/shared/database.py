"""
Supabase client for the Supabase-backed repositories.

The backend only talks to Supabase with the service role: every
authorization decision is made by the workspace layer, not by RLS.
The client is created once per process and reused.
"""

import logging
from typing import Optional
from supabase import create_client, Client

from .config import Settings, get_settings

logger = logging.getLogger(__name__)

_service_client: Optional[Client] = None


def create_service_client(settings: Settings) -> Client:
    """Build a service-role client, refusing to start half-configured."""
    if not settings.supabase_url or not settings.supabase_service_role_key:
        raise RuntimeError(
            "Supabase configuration missing. "
            "Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY, "
            "or use STORAGE_BACKEND=memory."
        )
    logger.info("Connecting to Supabase at %s", settings.supabase_url)
    return create_client(settings.supabase_url, settings.supabase_service_role_key)


def get_supabase_client() -> Client:
    """Process-wide service-role client (used when ``STORAGE_BACKEND=supabase``)."""
    global _service_client
    if _service_client is None:
        _service_client = create_service_client(get_settings())
    return _service_client


def reset_client_cache() -> None:
    """Drop the cached client (tests and configuration reloads)."""
    global _service_client
    _service_client = None
