"""
One-time code module interfaces.
"""

from typing import Optional, Protocol, runtime_checkable

from .models import OtpChallenge


@runtime_checkable
class IOtpChallengeRepository(Protocol):
    """Storage contract for challenges (one row per email)."""

    def get(self, email: str) -> Optional[OtpChallenge]:
        ...

    def upsert(self, challenge: OtpChallenge) -> OtpChallenge:
        """Insert or replace the challenge for ``challenge.email``."""
        ...

    def increment_attempts(self, email: str, expected_attempts: int) -> Optional[OtpChallenge]:
        """
        Bump the attempt counter if it still equals ``expected_attempts``.

        Returns:
            The updated challenge, or None if it changed or vanished meanwhile
        """
        ...

    def consume(self, email: str, code_hash: str) -> bool:
        """
        Remove the challenge only if it still carries ``code_hash``.

        Returns:
            True for the single caller that removed it
        """
        ...

    def delete(self, email: str) -> None:
        ...


@runtime_checkable
class IOtpTransport(Protocol):
    """Out-of-band delivery of a code to its owner."""

    def send_code(self, email: str, code: str, ttl_minutes: int) -> None:
        """
        Deliver a code.

        Raises:
            DeliveryUnavailableError: If the code could not be sent
        """
        ...


@runtime_checkable
class IOtpService(Protocol):
    """Interface for one-time code challenges."""

    async def request(self, email: str) -> OtpChallenge:
        """
        Create or replace the challenge for an email and send the code.

        Raises:
            DeliveryUnavailableError: If delivery failed (the challenge is kept)
        """
        ...

    async def verify(self, email: str, code: str) -> str:
        """
        Verify a code and consume the challenge.

        Returns:
            The normalized email the challenge belonged to

        Raises:
            ChallengeNotFoundError, ChallengeExpiredError,
            TooManyAttemptsError, CodeMismatchError
        """
        ...
