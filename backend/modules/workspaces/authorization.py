"""
Workspace authorization.

Two-stage gate applied to every workspace-scoped operation: first the
caller must hold a membership, then its role must rank at least as high
as the lowest of the allowed roles.
"""

from typing import Optional

from .interfaces import IWorkspaceAuthorizer, IWorkspaceRepository
from .models import WorkspaceRole
from .exceptions import InsufficientRoleError, NotAMemberError


class WorkspaceAuthorizer(IWorkspaceAuthorizer):
    """Membership lookup plus role hierarchy check."""

    def __init__(self, repository: IWorkspaceRepository):
        self._repository = repository

    def require_member(self, workspace_id: str, user_id: str) -> WorkspaceRole:
        membership = self._repository.get_membership(workspace_id, user_id)
        if membership is None:
            raise NotAMemberError(workspace_id, user_id)
        return membership.role

    def require_role(self, role: WorkspaceRole, allowed_roles: list[WorkspaceRole]) -> None:
        if not allowed_roles:
            return
        minimum = min(allowed_roles, key=lambda r: r.rank)
        if role.rank < minimum.rank:
            raise InsufficientRoleError(role.value, minimum.value)

    def authorize(
        self,
        workspace_id: str,
        user_id: str,
        allowed_roles: Optional[list[WorkspaceRole]] = None,
    ) -> WorkspaceRole:
        """Membership check followed by the role check; returns the caller's role."""
        role = self.require_member(workspace_id, user_id)
        self.require_role(role, allowed_roles or [])
        return role
