"""
Base repository classes for data access.

Every module ships two repository flavours behind one protocol:
- an in-memory implementation (development, tests, demo mode)
- a Supabase implementation (production)

The helpers here keep the row mapping and locking conventions in one place.
"""

import threading
from datetime import datetime
from typing import Any, Generic, Optional, TypeVar

from postgrest.exceptions import APIError
from supabase import Client


T = TypeVar("T")

# Postgres SQLSTATE for unique_violation, surfaced by PostgREST as APIError.code
UNIQUE_VIOLATION = "23505"


def is_unique_violation(error: APIError) -> bool:
    return error.code == UNIQUE_VIOLATION


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a timestamp column returned by PostgREST.

    Supabase returns ISO-8601 strings, sometimes with a trailing ``Z``.
    """
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


class BaseRepository(Generic[T]):
    """
    Base class for Supabase repositories.

    Subclasses implement domain-specific data access methods and handle
    dict-to-Pydantic mapping internally.

    Example:
        class SupabaseUserRepository(BaseRepository[User]):
            def get_by_email(self, email: str) -> Optional[User]:
                result = self._db.table("users").select("*").eq("email", email).execute()
                if not result.data:
                    return None
                return self._map_to_user(result.data[0])
    """

    def __init__(self, db: Client) -> None:
        """
        Initialize the repository with a Supabase client.

        Args:
            db: Supabase client instance for database operations.
        """
        self._db = db


class InMemoryRepository(Generic[T]):
    """
    Base class for in-memory repositories.

    Subclasses store records in plain dicts and must hold ``self._lock``
    for every read-modify-write so that conditional updates stay atomic
    when requests run concurrently.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
