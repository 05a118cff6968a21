import threading
from datetime import datetime, timezone

import pytest
from unittest.mock import patch

from modules.auth.exceptions import (
    DemoDisabledError,
    EmailInUseError,
    IdentityConflictError,
    IdentityTokenInvalidError,
    InvalidCredentialsError,
    InvalidPasswordError,
    UserNotFoundError,
)
from modules.auth.models import (
    AuthProvider,
    DemoAccount,
    DemoProof,
    IdentityTokenProof,
    OtpProof,
    PasswordProof,
    User,
)
from modules.auth.service import validate_password
from modules.otp.exceptions import CodeMismatchError
from modules.sessions.exceptions import RefreshInvalidError
from modules.workspaces.service import DEMO_WORKSPACE_KEY
from shared.hashing import is_unusable_password, make_unusable_password
from tests.conftest import make_user


class TestValidatePassword:
    def test_too_short(self):
        with pytest.raises(InvalidPasswordError) as exc_info:
            validate_password("12345")
        assert exc_info.value.status_code == 400

    def test_too_long_in_bytes(self):
        # 37 two-byte characters is 74 bytes
        with pytest.raises(InvalidPasswordError):
            validate_password("é" * 37)

    def test_boundaries_accepted(self):
        validate_password("123456")
        validate_password("a" * 72)


class TestRegister:
    @pytest.mark.asyncio
    async def test_register_issues_session(self, auth_service, token_service):
        result = await auth_service.register(" New@Example.com ", "New User", "password123")

        assert result.user.email == "new@example.com"
        assert result.user.provider == AuthProvider.LOCAL
        assert result.user.password_hash != "password123"
        assert token_service.verify_access(result.session.access_token) == result.user.id

    @pytest.mark.asyncio
    async def test_duplicate_email(self, auth_service, user_repository):
        make_user(user_repository, "taken@example.com")
        with pytest.raises(EmailInUseError) as exc_info:
            await auth_service.register("TAKEN@example.com", "Someone", "password123")
        assert exc_info.value.status_code == 409

    @pytest.mark.asyncio
    async def test_hashing_runs_in_worker_thread(self, auth_service):
        loop_thread = threading.get_ident()
        hashing_threads = []

        def fake_hash(password, rounds=None):
            hashing_threads.append(threading.get_ident())
            return "$2b$04$fake"

        with patch("modules.auth.service.hash_password", side_effect=fake_hash):
            await auth_service.register("t@example.com", "T", "password123")

        assert len(hashing_threads) == 1
        assert hashing_threads[0] != loop_thread

    @pytest.mark.asyncio
    async def test_short_password(self, auth_service, user_repository):
        with pytest.raises(InvalidPasswordError):
            await auth_service.register("a@example.com", "A", "123")
        assert user_repository.get_by_email("a@example.com") is None


class TestPasswordLogin:
    @pytest.mark.asyncio
    async def test_valid_credentials(self, auth_service, user_repository):
        user = make_user(user_repository, "alice@example.com", password="secret123")

        result = await auth_service.authenticate(
            PasswordProof(email="Alice@Example.com", password="secret123")
        )

        assert result.user.id == user.id

    @pytest.mark.asyncio
    async def test_wrong_password(self, auth_service, user_repository):
        make_user(user_repository, "alice@example.com", password="secret123")
        with pytest.raises(InvalidCredentialsError) as exc_info:
            await auth_service.authenticate(
                PasswordProof(email="alice@example.com", password="wrong")
            )
        assert exc_info.value.message == "Invalid credentials"

    @pytest.mark.asyncio
    async def test_unknown_email_spends_hash_work(self, auth_service):
        """An unknown email still pays for one bcrypt comparison."""
        with patch("modules.auth.service.burn_password_check") as mock_burn:
            with pytest.raises(InvalidCredentialsError) as exc_info:
                await auth_service.authenticate(
                    PasswordProof(email="ghost@example.com", password="whatever")
                )
        mock_burn.assert_called_once_with("whatever")
        assert exc_info.value.message == "Invalid credentials"

    @pytest.mark.asyncio
    async def test_provider_account_cannot_password_login(self, auth_service, identity_verifier):
        identity_verifier.add("tok", "g-1", "gina@example.com")
        await auth_service.authenticate(IdentityTokenProof(token="tok"))

        with pytest.raises(InvalidCredentialsError):
            await auth_service.authenticate(
                PasswordProof(email="gina@example.com", password="anything")
            )


class TestGoogleLogin:
    @pytest.mark.asyncio
    async def test_creates_new_user(self, auth_service, identity_verifier):
        identity_verifier.add(
            "tok", "g-1", "gina@example.com", name="Gina", picture="https://img/g.png"
        )

        result = await auth_service.authenticate(IdentityTokenProof(token="tok"))

        user = result.user
        assert user.provider == AuthProvider.GOOGLE
        assert user.google_id == "g-1"
        assert user.name == "Gina"
        assert user.avatar_url == "https://img/g.png"
        assert is_unusable_password(user.password_hash)

    @pytest.mark.asyncio
    async def test_same_subject_returns_same_user(self, auth_service, identity_verifier):
        identity_verifier.add("tok", "g-1", "gina@example.com")
        first = await auth_service.authenticate(IdentityTokenProof(token="tok"))
        second = await auth_service.authenticate(IdentityTokenProof(token="tok"))
        assert first.user.id == second.user.id

    @pytest.mark.asyncio
    async def test_links_existing_local_account(
        self, auth_service, user_repository, identity_verifier
    ):
        local = make_user(user_repository, "alice@example.com", password="secret123")
        identity_verifier.add("tok", "g-1", "alice@example.com", picture="https://img/a.png")

        result = await auth_service.authenticate(IdentityTokenProof(token="tok"))

        assert result.user.id == local.id
        assert result.user.google_id == "g-1"
        assert result.user.provider == AuthProvider.GOOGLE
        assert result.user.avatar_url == "https://img/a.png"
        # Password still works after linking
        again = await auth_service.authenticate(
            PasswordProof(email="alice@example.com", password="secret123")
        )
        assert again.user.id == local.id

    @pytest.mark.asyncio
    async def test_keeps_existing_avatar(self, auth_service, user_repository, identity_verifier):
        make_user(user_repository, "alice@example.com", avatar_url="https://img/mine.png")
        identity_verifier.add("tok", "g-1", "alice@example.com", picture="https://img/g.png")

        result = await auth_service.authenticate(IdentityTokenProof(token="tok"))

        assert result.user.avatar_url == "https://img/mine.png"

    @pytest.mark.asyncio
    async def test_conflicting_subject(self, auth_service, user_repository, identity_verifier):
        make_user(user_repository, "alice@example.com", google_id="g-original")
        identity_verifier.add("tok", "g-other", "alice@example.com")

        with pytest.raises(IdentityConflictError) as exc_info:
            await auth_service.authenticate(IdentityTokenProof(token="tok"))
        assert exc_info.value.status_code == 409

    @pytest.mark.asyncio
    async def test_invalid_token(self, auth_service):
        with pytest.raises(IdentityTokenInvalidError):
            await auth_service.authenticate(IdentityTokenProof(token="forged"))

    @pytest.mark.asyncio
    async def test_not_configured(self, auth_service, settings, identity_verifier):
        identity_verifier.add("tok", "g-1", "gina@example.com")
        settings.google_client_id = ""
        with pytest.raises(IdentityTokenInvalidError):
            await auth_service.authenticate(IdentityTokenProof(token="tok"))


class TestOtpLogin:
    @pytest.mark.asyncio
    async def test_creates_user(self, auth_service, otp_transport):
        await auth_service.request_otp("Olive@Example.com")
        code = otp_transport.last_code("olive@example.com")

        result = await auth_service.authenticate(OtpProof(email="olive@example.com", code=code))

        assert result.user.email == "olive@example.com"
        assert result.user.name == "olive"
        assert result.user.provider == AuthProvider.OTP
        assert is_unusable_password(result.user.password_hash)

    @pytest.mark.asyncio
    async def test_upgrades_local_account(self, auth_service, user_repository, otp_transport):
        local = make_user(user_repository, "alice@example.com")
        await auth_service.request_otp("alice@example.com")

        result = await auth_service.authenticate(
            OtpProof(email="alice@example.com", code=otp_transport.last_code("alice@example.com"))
        )

        assert result.user.id == local.id
        assert result.user.provider == AuthProvider.OTP

    @pytest.mark.asyncio
    async def test_keeps_google_tag(self, auth_service, user_repository, otp_transport):
        make_user(user_repository, "gina@example.com", provider=AuthProvider.GOOGLE, google_id="g-1")
        await auth_service.request_otp("gina@example.com")

        result = await auth_service.authenticate(
            OtpProof(email="gina@example.com", code=otp_transport.last_code("gina@example.com"))
        )

        assert result.user.provider == AuthProvider.GOOGLE

    @pytest.mark.asyncio
    async def test_wrong_code(self, auth_service, user_repository, otp_transport):
        await auth_service.request_otp("olive@example.com")
        code = otp_transport.last_code("olive@example.com")
        wrong = "111111" if code != "111111" else "222222"
        with pytest.raises(CodeMismatchError):
            await auth_service.authenticate(OtpProof(email="olive@example.com", code=wrong))
        assert user_repository.get_by_email("olive@example.com") is None


class TestConcurrentFirstLogin:
    """Another worker inserts the same account between lookup and insert."""

    def _race(self, user_repository, winner: User):
        real_create = user_repository.create

        def racing_create(user):
            real_create(winner)
            return real_create(user)

        return patch.object(user_repository, "create", side_effect=racing_create)

    def _winner(self, email: str, provider: AuthProvider, **fields) -> User:
        return User(
            id="winner",
            email=email,
            name="Winner",
            password_hash=make_unusable_password(),
            provider=provider,
            created_at=datetime.now(timezone.utc),
            **fields,
        )

    @pytest.mark.asyncio
    async def test_google_login_resolves_to_existing_account(
        self, auth_service, user_repository, identity_verifier
    ):
        identity_verifier.add("tok", "g-1", "gina@example.com")
        winner = self._winner("gina@example.com", AuthProvider.GOOGLE, google_id="g-1")

        with self._race(user_repository, winner):
            result = await auth_service.authenticate(IdentityTokenProof(token="tok"))

        assert result.user.id == "winner"

    @pytest.mark.asyncio
    async def test_otp_login_resolves_to_existing_account(
        self, auth_service, user_repository, otp_transport
    ):
        await auth_service.request_otp("olive@example.com")
        code = otp_transport.last_code("olive@example.com")
        winner = self._winner("olive@example.com", AuthProvider.OTP)

        with self._race(user_repository, winner):
            result = await auth_service.authenticate(
                OtpProof(email="olive@example.com", code=code)
            )

        assert result.user.id == "winner"


class TestDemoLogin:
    @pytest.mark.asyncio
    async def test_disabled(self, auth_service, settings):
        settings.demo_mode = False
        with pytest.raises(DemoDisabledError) as exc_info:
            await auth_service.authenticate(DemoProof(account=DemoAccount.OWNER))
        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    async def test_seeds_accounts_and_workspace(
        self, auth_service, workspace_repository
    ):
        owner = await auth_service.authenticate(DemoProof(account=DemoAccount.OWNER))
        member = await auth_service.authenticate(DemoProof(account=DemoAccount.MEMBER))

        assert owner.user.email == "demo_owner@demo.com"
        assert member.user.email == "demo_member@demo.com"
        assert owner.user.provider == AuthProvider.DEMO

        workspace = workspace_repository.get_workspace_by_key(DEMO_WORKSPACE_KEY)
        assert workspace is not None
        roles = {
            m.user_id: m.role.value for m in workspace_repository.list_memberships(workspace.id)
        }
        assert roles == {owner.user.id: "OWNER", member.user.id: "MEMBER"}

    @pytest.mark.asyncio
    async def test_repeat_login_is_stable(self, auth_service, workspace_repository):
        first = await auth_service.authenticate(DemoProof(account=DemoAccount.OWNER))
        second = await auth_service.authenticate(DemoProof(account=DemoAccount.OWNER))

        assert first.user.id == second.user.id
        workspace = workspace_repository.get_workspace_by_key(DEMO_WORKSPACE_KEY)
        assert len(workspace_repository.list_memberships(workspace.id)) == 2


class TestSessionLifecycle:
    @pytest.mark.asyncio
    async def test_refresh_returns_user(self, auth_service):
        registered = await auth_service.register("a@example.com", "A", "password123")

        refreshed = await auth_service.refresh(registered.session.refresh_token)

        assert refreshed.user.id == registered.user.id
        assert refreshed.session.refresh_token != registered.session.refresh_token

    @pytest.mark.asyncio
    async def test_logout_revokes(self, auth_service):
        registered = await auth_service.register("a@example.com", "A", "password123")
        await auth_service.logout(registered.session.refresh_token)

        with pytest.raises(RefreshInvalidError):
            await auth_service.refresh(registered.session.refresh_token)


class TestProfile:
    @pytest.mark.asyncio
    async def test_get_user_missing(self, auth_service):
        with pytest.raises(UserNotFoundError):
            await auth_service.get_user("missing")

    @pytest.mark.asyncio
    async def test_update_profile_ignores_unknown_fields(self, auth_service, user_repository):
        user = make_user(user_repository, "alice@example.com")

        updated = await auth_service.update_profile(
            user.id, {"name": "  Alice  ", "contact": "@alice", "email": "evil@example.com"}
        )

        assert updated.name == "Alice"
        assert updated.contact == "@alice"
        assert updated.email == "alice@example.com"

    @pytest.mark.asyncio
    async def test_blank_name_is_kept(self, auth_service, user_repository):
        user = make_user(user_repository, "alice@example.com", name="Alice")
        updated = await auth_service.update_profile(user.id, {"name": "   "})
        assert updated.name == "Alice"
