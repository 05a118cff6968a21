"""
Demo account seeding.

Two fixed accounts share a ``DEMO`` workspace. They are created on first
use and repaired (provider tag, memberships) on every demo login.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from shared.hashing import make_unusable_password

from .exceptions import EmailInUseError
from .interfaces import IUserRepository
from .models import AuthProvider, DemoAccount, User

if TYPE_CHECKING:
    from modules.workspaces.interfaces import IWorkspaceService

logger = logging.getLogger(__name__)

DEMO_ACCOUNTS: dict[DemoAccount, tuple[str, str]] = {
    DemoAccount.OWNER: ("demo_owner@demo.com", "Demo Owner"),
    DemoAccount.MEMBER: ("demo_member@demo.com", "Demo Member"),
}


class DemoSeeder:
    """Creates the demo users and, when wired, their shared workspace."""

    def __init__(
        self,
        users: IUserRepository,
        workspaces: "Optional[IWorkspaceService]" = None,
    ):
        self._users = users
        self._workspaces = workspaces

    def ensure_demo_users(self) -> dict[DemoAccount, User]:
        """Return both demo users, creating or re-tagging them as needed."""
        seeded: dict[DemoAccount, User] = {}
        for account, (email, name) in DEMO_ACCOUNTS.items():
            user = self._users.get_by_email(email)
            if user is None:
                user = self._create_demo_user(email, name)
                logger.info("Created demo user %s", account.value)
            elif user.provider != AuthProvider.DEMO:
                user = self._users.update(user.id, {"provider": AuthProvider.DEMO})
            seeded[account] = user
        return seeded

    def _create_demo_user(self, email: str, name: str) -> User:
        try:
            return self._users.create(
                User(
                    id=str(uuid.uuid4()),
                    email=email,
                    name=name,
                    password_hash=make_unusable_password(),
                    provider=AuthProvider.DEMO,
                    created_at=datetime.now(timezone.utc),
                )
            )
        except EmailInUseError:
            # Seeded by a concurrent demo login
            user = self._users.get_by_email(email)
            if user is None:
                raise
            return user

    async def seed(self) -> dict[DemoAccount, User]:
        """Ensure the demo users and the DEMO workspace both exist."""
        seeded = self.ensure_demo_users()
        if self._workspaces is not None:
            await self._workspaces.ensure_demo_workspace(
                owner_id=seeded[DemoAccount.OWNER].id,
                member_id=seeded[DemoAccount.MEMBER].id,
            )
        return seeded
