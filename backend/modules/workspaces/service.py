"""
Workspace service implementation.

Workspace creation, invites, joining and role management. Every
operation that acts on an existing workspace goes through
``WorkspaceAuthorizer`` first.
"""

import logging
import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from shared.config import Settings, get_settings
from modules.auth.interfaces import IUserRepository
from modules.auth.models import UserResponse

from .interfaces import IWorkspaceAuthorizer, IWorkspaceRepository, IWorkspaceService
from .models import (
    MemberWithUser,
    Membership,
    Workspace,
    WorkspaceInvite,
    WorkspaceRole,
    WorkspaceWithRole,
)
from .exceptions import (
    InviteInvalidError,
    MemberNotFoundError,
    OwnerSelfDemotionError,
    WorkspaceKeyTakenError,
    WorkspaceNotFoundError,
)

logger = logging.getLogger(__name__)

INVITE_CODE_ATTEMPTS = 5

DEMO_WORKSPACE_NAME = "Demo Workspace"
DEMO_WORKSPACE_KEY = "DEMO"


def generate_invite_code() -> str:
    """8 lowercase hex characters."""
    return secrets.token_hex(4)


class WorkspaceService(IWorkspaceService):
    """Default workspace service."""

    def __init__(
        self,
        repository: IWorkspaceRepository,
        authorizer: IWorkspaceAuthorizer,
        users: IUserRepository,
        settings: Optional[Settings] = None,
    ):
        self._repository = repository
        self._authorizer = authorizer
        self._users = users
        self._settings = settings or get_settings()

    async def create_workspace(self, user_id: str, name: str, key: str) -> WorkspaceWithRole:
        """Create a workspace; the creator becomes its OWNER."""
        key = key.strip().upper()
        if self._repository.get_workspace_by_key(key) is not None:
            raise WorkspaceKeyTakenError(key)

        workspace = self._repository.create_workspace(
            Workspace(
                id=str(uuid.uuid4()),
                name=name.strip(),
                key=key,
                owner_id=user_id,
                created_at=datetime.now(timezone.utc),
            )
        )
        self._repository.add_membership_if_absent(workspace.id, user_id, WorkspaceRole.OWNER)
        logger.info("Created workspace %s (%s) for user %s", workspace.id, key, user_id)
        return WorkspaceWithRole(workspace=workspace, role=WorkspaceRole.OWNER)

    async def list_workspaces(self, user_id: str) -> list[WorkspaceWithRole]:
        memberships = self._repository.list_memberships_for_user(user_id)
        workspaces = {
            w.id: w
            for w in self._repository.get_workspaces([m.workspace_id for m in memberships])
        }
        return [
            WorkspaceWithRole(workspace=workspaces[m.workspace_id], role=m.role)
            for m in memberships
            if m.workspace_id in workspaces
        ]

    async def get_workspace(self, workspace_id: str) -> Workspace:
        workspace = self._repository.get_workspace(workspace_id)
        if workspace is None:
            raise WorkspaceNotFoundError(workspace_id)
        return workspace

    async def create_invite(self, workspace_id: str, user_id: str) -> WorkspaceInvite:
        """Issue a join code valid for ``invite_ttl_days`` (OWNER or ADMIN)."""
        self._authorizer.authorize(
            workspace_id, user_id, [WorkspaceRole.OWNER, WorkspaceRole.ADMIN]
        )
        await self.get_workspace(workspace_id)

        code = generate_invite_code()
        for _ in range(INVITE_CODE_ATTEMPTS - 1):
            if self._repository.get_invite_by_code(code) is None:
                break
            code = generate_invite_code()

        now = datetime.now(timezone.utc)
        return self._repository.create_invite(
            WorkspaceInvite(
                id=str(uuid.uuid4()),
                workspace_id=workspace_id,
                code=code,
                expires_at=now + timedelta(days=self._settings.invite_ttl_days),
                created_by=user_id,
                created_at=now,
            )
        )

    def invite_link(self, invite: WorkspaceInvite) -> str:
        return f"{self._settings.app_base_url.rstrip('/')}/join?code={invite.code}"

    async def join(self, code: str, user_id: str) -> WorkspaceWithRole:
        """
        Redeem an invite code.

        Joining a workspace the user already belongs to keeps the existing
        role; otherwise the user becomes a MEMBER.
        """
        invite = self._repository.get_invite_by_code(code.strip())
        if invite is None or invite.is_expired(datetime.now(timezone.utc)):
            raise InviteInvalidError()

        workspace = await self.get_workspace(invite.workspace_id)
        membership = self._repository.add_membership_if_absent(
            workspace.id, user_id, WorkspaceRole.MEMBER
        )
        logger.info("User %s joined workspace %s as %s", user_id, workspace.id, membership.role.value)
        return WorkspaceWithRole(workspace=workspace, role=membership.role)

    async def list_members(self, workspace_id: str) -> list[MemberWithUser]:
        memberships = self._repository.list_memberships(workspace_id)
        members = []
        for membership in memberships:
            user = self._users.get_by_id(membership.user_id)
            members.append(
                MemberWithUser(
                    membership=membership,
                    user=UserResponse.from_user(user) if user else None,
                )
            )
        return members

    async def change_role(
        self,
        workspace_id: str,
        actor_id: str,
        membership_id: str,
        role: WorkspaceRole,
    ) -> Membership:
        """Change a member's role (OWNER only; an owner may not demote themself)."""
        self._authorizer.authorize(workspace_id, actor_id, [WorkspaceRole.OWNER])

        membership = self._repository.get_membership_by_id(workspace_id, membership_id)
        if membership is None:
            raise MemberNotFoundError(membership_id)

        if membership.user_id == actor_id and role != WorkspaceRole.OWNER:
            raise OwnerSelfDemotionError()

        updated = self._repository.update_membership_role(membership.id, role)
        logger.info(
            "User %s changed membership %s in workspace %s to %s",
            actor_id,
            membership.id,
            workspace_id,
            role.value,
        )
        return updated

    async def ensure_demo_workspace(self, owner_id: str, member_id: str) -> Workspace:
        """Create the DEMO workspace if needed and pin both demo roles."""
        workspace = self._repository.get_workspace_by_key(DEMO_WORKSPACE_KEY)
        if workspace is None:
            try:
                workspace = self._repository.create_workspace(
                    Workspace(
                        id=str(uuid.uuid4()),
                        name=DEMO_WORKSPACE_NAME,
                        key=DEMO_WORKSPACE_KEY,
                        owner_id=owner_id,
                        created_at=datetime.now(timezone.utc),
                    )
                )
                logger.info("Seeded demo workspace %s", workspace.id)
            except WorkspaceKeyTakenError:
                # Seeded by a concurrent demo login
                workspace = self._repository.get_workspace_by_key(DEMO_WORKSPACE_KEY)
                if workspace is None:
                    raise

        for user_id, role in ((owner_id, WorkspaceRole.OWNER), (member_id, WorkspaceRole.MEMBER)):
            membership = self._repository.add_membership_if_absent(workspace.id, user_id, role)
            if membership.role != role:
                self._repository.update_membership_role(membership.id, role)

        return workspace
