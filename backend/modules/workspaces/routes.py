"""
Workspace API endpoints.

Workspace-scoped routes resolve the caller's role through
``require_workspace_role`` before the handler runs.
"""

from fastapi import APIRouter, Depends

from api.dependencies import get_workspace_service
from api.middleware.auth import get_current_user_id
from api.middleware.workspace import require_workspace_role

from .interfaces import IWorkspaceService
from .models import (
    CreateWorkspaceRequest,
    InviteResponse,
    JoinWorkspaceRequest,
    MemberListResponse,
    MemberResponse,
    MemberRoleResponse,
    UpdateRoleRequest,
    WorkspaceAccess,
    WorkspaceListResponse,
    WorkspaceResponse,
    WorkspaceRoleResponse,
    WorkspaceSummary,
    WorkspaceWithRole,
)

router = APIRouter()


def _role_response(result: WorkspaceWithRole) -> WorkspaceRoleResponse:
    return WorkspaceRoleResponse(
        workspace=WorkspaceSummary.from_workspace(result.workspace),
        role=result.role,
    )


@router.post("", response_model=WorkspaceRoleResponse, status_code=201)
async def create_workspace(
    body: CreateWorkspaceRequest,
    user_id: str = Depends(get_current_user_id),
    service: IWorkspaceService = Depends(get_workspace_service),
) -> WorkspaceRoleResponse:
    """Create a workspace. The caller becomes its OWNER."""
    result = await service.create_workspace(user_id, body.name, body.key)
    return _role_response(result)


@router.get("", response_model=WorkspaceListResponse)
async def list_workspaces(
    user_id: str = Depends(get_current_user_id),
    service: IWorkspaceService = Depends(get_workspace_service),
) -> WorkspaceListResponse:
    """List the caller's workspaces with the role held in each."""
    results = await service.list_workspaces(user_id)
    return WorkspaceListResponse(
        workspaces=[WorkspaceSummary.from_workspace(r.workspace, r.role) for r in results]
    )


@router.post("/join", response_model=WorkspaceRoleResponse)
async def join_workspace(
    body: JoinWorkspaceRequest,
    user_id: str = Depends(get_current_user_id),
    service: IWorkspaceService = Depends(get_workspace_service),
) -> WorkspaceRoleResponse:
    """Redeem an invite code."""
    result = await service.join(body.code, user_id)
    return _role_response(result)


@router.get("/{workspace_id}", response_model=WorkspaceResponse)
async def get_workspace(
    access: WorkspaceAccess = Depends(require_workspace_role()),
    service: IWorkspaceService = Depends(get_workspace_service),
) -> WorkspaceResponse:
    workspace = await service.get_workspace(access.workspace_id)
    return WorkspaceResponse(workspace=WorkspaceSummary.from_workspace(workspace))


@router.post("/{workspace_id}/invite", response_model=InviteResponse)
async def create_invite(
    workspace_id: str,
    user_id: str = Depends(get_current_user_id),
    service: IWorkspaceService = Depends(get_workspace_service),
) -> InviteResponse:
    """Create an invite code (OWNER or ADMIN)."""
    invite = await service.create_invite(workspace_id, user_id)
    return InviteResponse(
        invite_code=invite.code,
        invite_link=service.invite_link(invite),
        expires_at=invite.expires_at,
    )


@router.get("/{workspace_id}/members", response_model=MemberListResponse)
async def list_members(
    access: WorkspaceAccess = Depends(require_workspace_role()),
    service: IWorkspaceService = Depends(get_workspace_service),
) -> MemberListResponse:
    members = await service.list_members(access.workspace_id)
    return MemberListResponse(
        members=[
            MemberResponse(id=m.membership.id, role=m.membership.role, user=m.user)
            for m in members
        ]
    )


@router.patch("/{workspace_id}/members/{membership_id}", response_model=MemberRoleResponse)
async def change_member_role(
    workspace_id: str,
    membership_id: str,
    body: UpdateRoleRequest,
    user_id: str = Depends(get_current_user_id),
    service: IWorkspaceService = Depends(get_workspace_service),
) -> MemberRoleResponse:
    """Change a member's role (OWNER only)."""
    membership = await service.change_role(workspace_id, user_id, membership_id, body.role)
    return MemberRoleResponse(member=MemberResponse(id=membership.id, role=membership.role))
