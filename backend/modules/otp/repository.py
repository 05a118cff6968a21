"""
One-time code challenge repositories.
"""

from typing import Any, Optional

from shared.repository import BaseRepository, InMemoryRepository, parse_timestamp

from .models import OtpChallenge


TABLE = "otp_challenges"


class InMemoryOtpChallengeRepository(InMemoryRepository[OtpChallenge]):
    """Challenge storage for development and tests."""

    def __init__(self) -> None:
        super().__init__()
        self._challenges: dict[str, OtpChallenge] = {}

    def get(self, email: str) -> Optional[OtpChallenge]:
        with self._lock:
            return self._challenges.get(email)

    def upsert(self, challenge: OtpChallenge) -> OtpChallenge:
        with self._lock:
            self._challenges[challenge.email] = challenge
        return challenge

    def increment_attempts(self, email: str, expected_attempts: int) -> Optional[OtpChallenge]:
        with self._lock:
            current = self._challenges.get(email)
            if current is None or current.attempts != expected_attempts:
                return None
            updated = current.model_copy(update={"attempts": expected_attempts + 1})
            self._challenges[email] = updated
            return updated

    def consume(self, email: str, code_hash: str) -> bool:
        with self._lock:
            current = self._challenges.get(email)
            if current is None or current.code_hash != code_hash:
                return False
            del self._challenges[email]
            return True

    def delete(self, email: str) -> None:
        with self._lock:
            self._challenges.pop(email, None)


class SupabaseOtpChallengeRepository(BaseRepository[OtpChallenge]):
    """Challenge storage in the ``otp_challenges`` table (primary key ``email``)."""

    def get(self, email: str) -> Optional[OtpChallenge]:
        result = self._db.table(TABLE).select("*").eq("email", email).execute()
        if not result.data:
            return None
        return self._map_to_challenge(result.data[0])

    def upsert(self, challenge: OtpChallenge) -> OtpChallenge:
        result = self._db.table(TABLE).upsert(
            {
                "email": challenge.email,
                "code_hash": challenge.code_hash,
                "expires_at": challenge.expires_at.isoformat(),
                "attempts": challenge.attempts,
                "created_at": challenge.created_at.isoformat(),
                "last_sent_at": challenge.last_sent_at.isoformat(),
            },
            on_conflict="email",
        ).execute()
        return self._map_to_challenge(result.data[0])

    def increment_attempts(self, email: str, expected_attempts: int) -> Optional[OtpChallenge]:
        result = (
            self._db.table(TABLE)
            .update({"attempts": expected_attempts + 1})
            .eq("email", email)
            .eq("attempts", expected_attempts)
            .execute()
        )
        if not result.data:
            return None
        return self._map_to_challenge(result.data[0])

    def consume(self, email: str, code_hash: str) -> bool:
        # One conditional DELETE; only the request that removed the row sees it returned
        result = (
            self._db.table(TABLE)
            .delete()
            .eq("email", email)
            .eq("code_hash", code_hash)
            .execute()
        )
        return bool(result.data)

    def delete(self, email: str) -> None:
        self._db.table(TABLE).delete().eq("email", email).execute()

    def _map_to_challenge(self, data: dict[str, Any]) -> OtpChallenge:
        return OtpChallenge(
            email=data["email"],
            code_hash=data["code_hash"],
            expires_at=parse_timestamp(data["expires_at"]),
            attempts=data.get("attempts", 0),
            created_at=parse_timestamp(data["created_at"]),
            last_sent_at=parse_timestamp(data["last_sent_at"]),
        )
