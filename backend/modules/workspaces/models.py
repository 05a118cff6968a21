"""
Workspace module data models.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from modules.auth.models import UserResponse


class WorkspaceRole(str, Enum):
    """Membership roles, ordered OWNER > ADMIN > MEMBER > VIEWER."""

    OWNER = "OWNER"
    ADMIN = "ADMIN"
    MEMBER = "MEMBER"
    VIEWER = "VIEWER"

    @property
    def rank(self) -> int:
        return ROLE_RANK[self]


ROLE_RANK: dict[WorkspaceRole, int] = {
    WorkspaceRole.OWNER: 4,
    WorkspaceRole.ADMIN: 3,
    WorkspaceRole.MEMBER: 2,
    WorkspaceRole.VIEWER: 1,
}


class Workspace(BaseModel):
    """A tenant. Everything outside auth is scoped to one."""

    id: str
    name: str
    key: str = Field(..., description="Uppercase alphanumeric, 2-10 chars, unique")
    owner_id: str
    created_at: datetime


class Membership(BaseModel):
    """The role a user holds in a workspace. Unique per (workspace, user)."""

    id: str
    workspace_id: str
    user_id: str
    role: WorkspaceRole
    created_at: datetime


class WorkspaceInvite(BaseModel):
    """Redeemable join code. Reusable until it expires."""

    id: str
    workspace_id: str
    code: str = Field(..., description="8 hex characters, unique")
    expires_at: datetime
    created_by: str
    created_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now


class WorkspaceAccess(BaseModel):
    """Result of an authorization check, handed to route handlers."""

    workspace_id: str
    user_id: str
    role: WorkspaceRole


class WorkspaceWithRole(BaseModel):
    workspace: Workspace
    role: WorkspaceRole


class MemberWithUser(BaseModel):
    membership: Membership
    user: Optional[UserResponse] = None


# API bodies


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateWorkspaceRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    key: str = Field(..., pattern=r"^[A-Za-z0-9]{2,10}$")


class JoinWorkspaceRequest(BaseModel):
    code: str = Field(..., min_length=4)


class UpdateRoleRequest(BaseModel):
    role: WorkspaceRole


class WorkspaceSummary(_CamelModel):
    id: str
    name: str
    key: str
    owner_id: str
    role: Optional[WorkspaceRole] = None

    @classmethod
    def from_workspace(
        cls, workspace: Workspace, role: Optional[WorkspaceRole] = None
    ) -> "WorkspaceSummary":
        return cls(
            id=workspace.id,
            name=workspace.name,
            key=workspace.key,
            owner_id=workspace.owner_id,
            role=role,
        )


class WorkspaceRoleResponse(_CamelModel):
    """Returned by create and join."""

    workspace: WorkspaceSummary
    role: WorkspaceRole


class WorkspaceResponse(_CamelModel):
    workspace: WorkspaceSummary


class WorkspaceListResponse(_CamelModel):
    workspaces: list[WorkspaceSummary]


class InviteResponse(_CamelModel):
    invite_code: str
    invite_link: str
    expires_at: datetime


class MemberResponse(_CamelModel):
    id: str
    role: WorkspaceRole
    user: Optional[UserResponse] = None


class MemberListResponse(_CamelModel):
    members: list[MemberResponse]


class MemberRoleResponse(_CamelModel):
    member: MemberResponse
