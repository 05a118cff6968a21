"""
Workspace module interfaces.

CRUD handlers outside this module authorize through IWorkspaceAuthorizer
and never read memberships directly.
"""

from typing import Optional, Protocol, runtime_checkable

from .models import (
    MemberWithUser,
    Membership,
    Workspace,
    WorkspaceInvite,
    WorkspaceRole,
    WorkspaceWithRole,
)


@runtime_checkable
class IWorkspaceRepository(Protocol):
    """Storage contract for workspaces, memberships and invites."""

    def create_workspace(self, workspace: Workspace) -> Workspace:
        ...

    def get_workspace(self, workspace_id: str) -> Optional[Workspace]:
        ...

    def get_workspace_by_key(self, key: str) -> Optional[Workspace]:
        ...

    def get_workspaces(self, workspace_ids: list[str]) -> list[Workspace]:
        ...

    def get_membership(self, workspace_id: str, user_id: str) -> Optional[Membership]:
        ...

    def get_membership_by_id(self, workspace_id: str, membership_id: str) -> Optional[Membership]:
        ...

    def list_memberships(self, workspace_id: str) -> list[Membership]:
        """Memberships of a workspace, oldest first."""
        ...

    def list_memberships_for_user(self, user_id: str) -> list[Membership]:
        ...

    def add_membership_if_absent(
        self, workspace_id: str, user_id: str, role: WorkspaceRole
    ) -> Membership:
        """
        Insert a membership unless one exists for the pair.

        Returns:
            The existing membership unchanged, or the new one
        """
        ...

    def update_membership_role(self, membership_id: str, role: WorkspaceRole) -> Membership:
        ...

    def create_invite(self, invite: WorkspaceInvite) -> WorkspaceInvite:
        ...

    def get_invite_by_code(self, code: str) -> Optional[WorkspaceInvite]:
        ...


@runtime_checkable
class IWorkspaceAuthorizer(Protocol):
    """Membership lookup plus the role hierarchy gate."""

    def require_member(self, workspace_id: str, user_id: str) -> WorkspaceRole:
        """
        Raises:
            NotAMemberError: If the user has no membership
        """
        ...

    def require_role(self, role: WorkspaceRole, allowed_roles: list[WorkspaceRole]) -> None:
        """
        Raises:
            InsufficientRoleError: If ``role`` ranks below every allowed role
        """
        ...

    def authorize(
        self,
        workspace_id: str,
        user_id: str,
        allowed_roles: Optional[list[WorkspaceRole]] = None,
    ) -> WorkspaceRole:
        ...


@runtime_checkable
class IWorkspaceService(Protocol):
    """Interface for workspace operations."""

    async def create_workspace(self, user_id: str, name: str, key: str) -> WorkspaceWithRole:
        ...

    async def list_workspaces(self, user_id: str) -> list[WorkspaceWithRole]:
        ...

    async def get_workspace(self, workspace_id: str) -> Workspace:
        ...

    async def create_invite(self, workspace_id: str, user_id: str) -> WorkspaceInvite:
        ...

    async def join(self, code: str, user_id: str) -> WorkspaceWithRole:
        ...

    async def list_members(self, workspace_id: str) -> list[MemberWithUser]:
        ...

    async def change_role(
        self,
        workspace_id: str,
        actor_id: str,
        membership_id: str,
        role: WorkspaceRole,
    ) -> Membership:
        ...

    async def ensure_demo_workspace(self, owner_id: str, member_id: str) -> Workspace:
        ...

    def invite_link(self, invite: WorkspaceInvite) -> str:
        """Shareable URL for an invite."""
        ...
