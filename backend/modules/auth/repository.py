"""
User repositories.
"""

from typing import Any, Optional

from postgrest.exceptions import APIError

from shared.repository import (
    BaseRepository,
    InMemoryRepository,
    is_unique_violation,
    parse_timestamp,
)

from .models import AuthProvider, User
from .exceptions import EmailInUseError, UserNotFoundError


TABLE = "users"


class InMemoryUserRepository(InMemoryRepository[User]):
    """User storage for development and tests."""

    def __init__(self) -> None:
        super().__init__()
        self._users: dict[str, User] = {}

    def get_by_id(self, user_id: str) -> Optional[User]:
        with self._lock:
            return self._users.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        email = email.lower()
        with self._lock:
            return next((u for u in self._users.values() if u.email == email), None)

    def get_by_emails(self, emails: list[str]) -> list[User]:
        wanted = {e.lower() for e in emails}
        with self._lock:
            return [u for u in self._users.values() if u.email in wanted]

    def get_by_google_id(self, google_id: str) -> Optional[User]:
        with self._lock:
            return next((u for u in self._users.values() if u.google_id == google_id), None)

    def create(self, user: User) -> User:
        with self._lock:
            if any(u.email == user.email for u in self._users.values()):
                raise EmailInUseError(user.email)
            self._users[user.id] = user
        return user

    def update(self, user_id: str, fields: dict[str, Any]) -> User:
        with self._lock:
            current = self._users.get(user_id)
            if current is None:
                raise UserNotFoundError(user_id)
            updated = current.model_copy(update=fields)
            self._users[user_id] = updated
            return updated


class SupabaseUserRepository(BaseRepository[User]):
    """User storage in the ``users`` table."""

    def get_by_id(self, user_id: str) -> Optional[User]:
        result = self._db.table(TABLE).select("*").eq("id", user_id).execute()
        if not result.data:
            return None
        return self._map_to_user(result.data[0])

    def get_by_email(self, email: str) -> Optional[User]:
        result = self._db.table(TABLE).select("*").eq("email", email.lower()).execute()
        if not result.data:
            return None
        return self._map_to_user(result.data[0])

    def get_by_emails(self, emails: list[str]) -> list[User]:
        if not emails:
            return []
        result = (
            self._db.table(TABLE)
            .select("*")
            .in_("email", [e.lower() for e in emails])
            .execute()
        )
        return [self._map_to_user(row) for row in result.data or []]

    def get_by_google_id(self, google_id: str) -> Optional[User]:
        result = self._db.table(TABLE).select("*").eq("google_id", google_id).execute()
        if not result.data:
            return None
        return self._map_to_user(result.data[0])

    def create(self, user: User) -> User:
        try:
            result = self._db.table(TABLE).insert(self._map_to_row(user)).execute()
        except APIError as e:
            if is_unique_violation(e):
                raise EmailInUseError(user.email) from e
            raise
        return self._map_to_user(result.data[0])

    def update(self, user_id: str, fields: dict[str, Any]) -> User:
        row = {
            key: value.value if isinstance(value, AuthProvider) else value
            for key, value in fields.items()
        }
        result = self._db.table(TABLE).update(row).eq("id", user_id).execute()
        if not result.data:
            raise UserNotFoundError(user_id)
        return self._map_to_user(result.data[0])

    def _map_to_row(self, user: User) -> dict[str, Any]:
        return {
            "id": user.id,
            "email": user.email,
            "name": user.name,
            "password_hash": user.password_hash,
            "provider": user.provider.value,
            "google_id": user.google_id,
            "avatar_url": user.avatar_url,
            "contact": user.contact,
            "created_at": user.created_at.isoformat(),
        }

    def _map_to_user(self, data: dict[str, Any]) -> User:
        return User(
            id=str(data["id"]),
            email=data["email"],
            name=data.get("name") or "",
            password_hash=data["password_hash"],
            provider=AuthProvider(data.get("provider") or "local"),
            google_id=data.get("google_id"),
            avatar_url=data.get("avatar_url"),
            contact=data.get("contact"),
            created_at=parse_timestamp(data["created_at"]),
        )
