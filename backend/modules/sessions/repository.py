"""
Refresh token repositories.

Both implementations provide ``revoke_active`` as a single conditional
update so two concurrent redemptions of one token can never both succeed.
"""

import hashlib
import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from shared.repository import BaseRepository, InMemoryRepository, parse_timestamp

from .models import RefreshTokenRecord


TABLE = "refresh_tokens"


def hash_token(raw_token: str) -> str:
    """One-way hash used to store and look up refresh tokens."""
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()


class InMemoryRefreshTokenRepository(InMemoryRepository[RefreshTokenRecord]):
    """Refresh token storage for development and tests."""

    def __init__(self) -> None:
        super().__init__()
        self._records: dict[str, RefreshTokenRecord] = {}

    def create(self, user_id: str, token_hash: str, expires_at: datetime) -> RefreshTokenRecord:
        record = RefreshTokenRecord(
            id=str(uuid.uuid4()),
            user_id=user_id,
            token_hash=token_hash,
            expires_at=expires_at,
            created_at=datetime.now(timezone.utc),
        )
        with self._lock:
            self._records[token_hash] = record
        return record

    def get_by_hash(self, token_hash: str) -> Optional[RefreshTokenRecord]:
        with self._lock:
            return self._records.get(token_hash)

    def revoke_active(self, token_hash: str, now: datetime) -> Optional[RefreshTokenRecord]:
        with self._lock:
            record = self._records.get(token_hash)
            if record is None or not record.is_active(now):
                return None
            revoked = record.model_copy(update={"revoked_at": now})
            self._records[token_hash] = revoked
            return revoked

    def list_for_user(self, user_id: str) -> list[RefreshTokenRecord]:
        with self._lock:
            return [r for r in self._records.values() if r.user_id == user_id]


class SupabaseRefreshTokenRepository(BaseRepository[RefreshTokenRecord]):
    """
    Refresh token storage in the ``refresh_tokens`` table.

    ``revoke_active`` is one PostgREST PATCH with the activity conditions in
    its filter, which Postgres executes as a single UPDATE ... RETURNING.
    """

    def create(self, user_id: str, token_hash: str, expires_at: datetime) -> RefreshTokenRecord:
        result = self._db.table(TABLE).insert({
            "id": str(uuid.uuid4()),
            "user_id": user_id,
            "token_hash": token_hash,
            "expires_at": expires_at.isoformat(),
            "created_at": datetime.now(timezone.utc).isoformat(),
        }).execute()
        return self._map_to_record(result.data[0])

    def get_by_hash(self, token_hash: str) -> Optional[RefreshTokenRecord]:
        result = self._db.table(TABLE).select("*").eq("token_hash", token_hash).execute()
        if not result.data:
            return None
        return self._map_to_record(result.data[0])

    def revoke_active(self, token_hash: str, now: datetime) -> Optional[RefreshTokenRecord]:
        now_iso = now.isoformat()
        result = (
            self._db.table(TABLE)
            .update({"revoked_at": now_iso})
            .eq("token_hash", token_hash)
            .is_("revoked_at", "null")
            .gt("expires_at", now_iso)
            .execute()
        )
        if not result.data:
            return None
        return self._map_to_record(result.data[0])

    def _map_to_record(self, data: dict[str, Any]) -> RefreshTokenRecord:
        return RefreshTokenRecord(
            id=str(data["id"]),
            user_id=str(data["user_id"]),
            token_hash=data["token_hash"],
            expires_at=parse_timestamp(data["expires_at"]),
            revoked_at=parse_timestamp(data.get("revoked_at")),
            created_at=parse_timestamp(data["created_at"]),
        )
