"""
Google identity token verification.

Tokens are RS256 JWTs signed with Google's rotating keys; the JWKS is
fetched (and cached) by PyJWT's ``PyJWKClient``.
"""

import logging
from typing import Any, Optional

import jwt

from .exceptions import IdentityTokenInvalidError
from .interfaces import IIdentityTokenVerifier
from .models import VerifiedIdentity

logger = logging.getLogger(__name__)

GOOGLE_JWKS_URL = "https://www.googleapis.com/oauth2/v3/certs"
GOOGLE_ISSUERS = ("accounts.google.com", "https://accounts.google.com")


def _claim_is_true(value: Any) -> bool:
    # Google has sent email_verified both as a boolean and as a string
    return value is True or (isinstance(value, str) and value.lower() == "true")


def identity_from_claims(claims: dict[str, Any]) -> VerifiedIdentity:
    """Build a VerifiedIdentity from decoded claims, rejecting unusable ones."""
    if claims.get("iss") not in GOOGLE_ISSUERS:
        raise IdentityTokenInvalidError()

    subject = claims.get("sub")
    email = claims.get("email")
    if not subject or not email:
        raise IdentityTokenInvalidError()

    if not _claim_is_true(claims.get("email_verified")):
        raise IdentityTokenInvalidError("Google email is not verified")

    return VerifiedIdentity(
        subject=str(subject),
        email=str(email).lower(),
        email_verified=True,
        name=claims.get("name"),
        picture=claims.get("picture"),
    )


class GoogleIdentityTokenVerifier(IIdentityTokenVerifier):
    """Verify Google ID tokens against Google's published signing keys."""

    def __init__(self, jwks_client: Optional[jwt.PyJWKClient] = None):
        self._jwks_client = jwks_client or jwt.PyJWKClient(GOOGLE_JWKS_URL)

    def verify(self, token: str, audience: str) -> VerifiedIdentity:
        if not audience:
            raise IdentityTokenInvalidError("Google login is not configured")

        try:
            signing_key = self._jwks_client.get_signing_key_from_jwt(token)
            claims = jwt.decode(
                token,
                signing_key.key,
                algorithms=["RS256"],
                audience=audience,
                options={"require": ["exp", "iat", "sub", "iss"]},
            )
        except jwt.PyJWTError as e:
            logger.info("Rejected Google identity token: %s", e)
            raise IdentityTokenInvalidError() from e

        return identity_from_claims(claims)
