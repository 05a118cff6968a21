"""
Workspace role dependency.

``require_workspace_role(*roles)`` reads ``workspace_id`` from the route
path, requires a membership, then requires a role at least as high as the
lowest of ``roles``. With no roles any member passes.

Usage:
    @router.post("/{workspace_id}/issues")
    async def create_issue(
        access: WorkspaceAccess = Depends(
            require_workspace_role(WorkspaceRole.OWNER, WorkspaceRole.ADMIN, WorkspaceRole.MEMBER)
        ),
    ):
        ...
"""

from fastapi import Depends

from modules.workspaces.interfaces import IWorkspaceAuthorizer
from modules.workspaces.models import WorkspaceAccess, WorkspaceRole

from ..dependencies import get_workspace_authorizer
from .auth import get_current_user_id


def require_workspace_role(*roles: WorkspaceRole):
    """Build a dependency that gates a workspace-scoped route."""
    allowed_roles = list(roles)

    async def dependency(
        workspace_id: str,
        user_id: str = Depends(get_current_user_id),
        authorizer: IWorkspaceAuthorizer = Depends(get_workspace_authorizer),
    ) -> WorkspaceAccess:
        role = authorizer.authorize(workspace_id, user_id, allowed_roles)
        return WorkspaceAccess(workspace_id=workspace_id, user_id=user_id, role=role)

    return dependency
