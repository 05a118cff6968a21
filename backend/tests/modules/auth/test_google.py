import time
import pytest
import jwt
from unittest.mock import MagicMock
from cryptography.hazmat.primitives.asymmetric import rsa

from modules.auth.exceptions import IdentityTokenInvalidError
from modules.auth.google import GoogleIdentityTokenVerifier, identity_from_claims
from tests.conftest import TEST_GOOGLE_CLIENT_ID


def google_claims(**overrides):
    now = int(time.time())
    claims = {
        "iss": "https://accounts.google.com",
        "aud": TEST_GOOGLE_CLIENT_ID,
        "sub": "1234567890",
        "email": "Gina@Example.com",
        "email_verified": True,
        "name": "Gina",
        "picture": "https://img/g.png",
        "iat": now,
        "exp": now + 3600,
    }
    claims.update(overrides)
    return claims


class TestIdentityFromClaims:
    def test_valid_claims(self):
        identity = identity_from_claims(google_claims())
        assert identity.subject == "1234567890"
        assert identity.email == "gina@example.com"
        assert identity.email_verified is True
        assert identity.picture == "https://img/g.png"

    def test_string_email_verified(self):
        assert identity_from_claims(google_claims(email_verified="true")).email_verified

    @pytest.mark.parametrize("value", [False, "false", None])
    def test_unverified_email_rejected(self, value):
        with pytest.raises(IdentityTokenInvalidError):
            identity_from_claims(google_claims(email_verified=value))

    def test_wrong_issuer(self):
        with pytest.raises(IdentityTokenInvalidError):
            identity_from_claims(google_claims(iss="https://evil.example.com"))

    def test_missing_email(self):
        claims = google_claims()
        del claims["email"]
        with pytest.raises(IdentityTokenInvalidError):
            identity_from_claims(claims)


class TestGoogleIdentityTokenVerifier:
    @pytest.fixture(scope="class")
    def private_key(self):
        return rsa.generate_private_key(public_exponent=65537, key_size=2048)

    @pytest.fixture
    def verifier(self, private_key):
        jwks_client = MagicMock()
        jwks_client.get_signing_key_from_jwt.return_value.key = private_key.public_key()
        return GoogleIdentityTokenVerifier(jwks_client=jwks_client)

    def sign(self, private_key, claims):
        return jwt.encode(claims, private_key, algorithm="RS256")

    def test_valid_token(self, verifier, private_key):
        token = self.sign(private_key, google_claims())
        identity = verifier.verify(token, TEST_GOOGLE_CLIENT_ID)
        assert identity.subject == "1234567890"

    def test_wrong_audience(self, verifier, private_key):
        token = self.sign(private_key, google_claims(aud="someone-else"))
        with pytest.raises(IdentityTokenInvalidError):
            verifier.verify(token, TEST_GOOGLE_CLIENT_ID)

    def test_expired(self, verifier, private_key):
        now = int(time.time())
        token = self.sign(private_key, google_claims(iat=now - 7200, exp=now - 3600))
        with pytest.raises(IdentityTokenInvalidError):
            verifier.verify(token, TEST_GOOGLE_CLIENT_ID)

    def test_wrong_signing_key(self, verifier):
        other_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
        token = self.sign(other_key, google_claims())
        with pytest.raises(IdentityTokenInvalidError):
            verifier.verify(token, TEST_GOOGLE_CLIENT_ID)

    def test_key_lookup_failure(self, private_key):
        jwks_client = MagicMock()
        jwks_client.get_signing_key_from_jwt.side_effect = jwt.PyJWKClientError("no key")
        verifier = GoogleIdentityTokenVerifier(jwks_client=jwks_client)

        with pytest.raises(IdentityTokenInvalidError):
            verifier.verify(self.sign(private_key, google_claims()), TEST_GOOGLE_CLIENT_ID)

    def test_missing_audience(self, verifier, private_key):
        with pytest.raises(IdentityTokenInvalidError):
            verifier.verify(self.sign(private_key, google_claims()), "")
