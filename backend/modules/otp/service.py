"""
One-time code challenge service.

State machine per email:
    NoChallenge -> Pending(attempts=0)
        -> Verified | AttemptsExceeded | Expired -> NoChallenge

Expiry is evaluated against the wall clock when a code is verified;
there is no background eviction.
"""

import asyncio
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import NoReturn, Optional

from shared.config import Settings, get_settings
from shared.hashing import hash_password, verify_password
from shared.redaction import redact_email

from .interfaces import IOtpChallengeRepository, IOtpService, IOtpTransport
from .models import OtpChallenge
from .exceptions import (
    ChallengeExpiredError,
    ChallengeNotFoundError,
    CodeMismatchError,
    TooManyAttemptsError,
)

logger = logging.getLogger(__name__)


def generate_code(length: int = 6) -> str:
    """Uniformly random numeric code of ``length`` digits, zero-padded."""
    return f"{secrets.randbelow(10 ** length):0{length}d}"


def normalize_email(email: str) -> str:
    return email.strip().lower()


class OtpService(IOtpService):
    """
    Issues and verifies one-time login codes.

    At most one live challenge exists per email; every terminal failure
    removes it, so a code can never be verified twice.
    """

    def __init__(
        self,
        repository: IOtpChallengeRepository,
        transport: IOtpTransport,
        settings: Optional[Settings] = None,
    ):
        self._repository = repository
        self._transport = transport
        self._settings = settings or get_settings()

    async def request(self, email: str) -> OtpChallenge:
        """Replace the challenge for an email with a fresh code and send it."""
        email = normalize_email(email)
        code = generate_code(self._settings.otp_code_length)
        code_hash = await asyncio.to_thread(hash_password, code)
        now = datetime.now(timezone.utc)

        existing = self._repository.get(email)
        challenge = self._repository.upsert(
            OtpChallenge(
                email=email,
                code_hash=code_hash,
                expires_at=now + timedelta(minutes=self._settings.otp_ttl_minutes),
                attempts=0,
                created_at=existing.created_at if existing else now,
                last_sent_at=now,
            )
        )

        # The challenge stays stored if delivery fails; the caller may retry.
        await asyncio.to_thread(
            self._transport.send_code,
            email,
            code,
            self._settings.otp_ttl_minutes,
        )
        return challenge

    async def verify(self, email: str, code: str) -> str:
        """Check a code against the live challenge and consume it on success."""
        email = normalize_email(email)
        challenge = self._repository.get(email)
        if challenge is None:
            raise ChallengeNotFoundError(email)

        self._check_usable(email, challenge)

        if not await asyncio.to_thread(verify_password, code, challenge.code_hash):
            self._record_mismatch(email, challenge)

        if not self._repository.consume(email, challenge.code_hash):
            # Consumed by a concurrent verification or replaced by a new request
            raise ChallengeNotFoundError(email)
        return email

    def _check_usable(self, email: str, challenge: OtpChallenge) -> None:
        if challenge.is_expired(datetime.now(timezone.utc)):
            self._repository.delete(email)
            raise ChallengeExpiredError(email)

        if challenge.attempts >= self._settings.otp_max_attempts:
            self._repository.delete(email)
            logger.warning("OTP attempt ceiling reached for %s", redact_email(email))
            raise TooManyAttemptsError(email)

    def _record_mismatch(self, email: str, challenge: OtpChallenge) -> NoReturn:
        """
        Count a wrong code against the challenge it was checked against, then raise.

        A concurrent wrong guess may move the counter first; the increment is
        then retried on the fresh row as long as it is the same challenge.
        """
        for _ in range(self._settings.otp_max_attempts + 1):
            updated = self._repository.increment_attempts(email, challenge.attempts)
            if updated is not None:
                raise CodeMismatchError(email, updated.attempts)

            current = self._repository.get(email)
            if current is None or current.code_hash != challenge.code_hash:
                raise ChallengeNotFoundError(email)
            self._check_usable(email, current)
            challenge = current

        raise ChallengeNotFoundError(email)
