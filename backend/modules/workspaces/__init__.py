"""
Workspaces module.

Multi-tenant containers, memberships with a four-level role hierarchy,
and invite codes.

Public API:
- IWorkspaceService: Interface for workspace operations
- IWorkspaceAuthorizer: Membership and role gate for workspace-scoped handlers
- WorkspaceRole: OWNER > ADMIN > MEMBER > VIEWER
- Workspace exceptions: NotAMemberError, InsufficientRoleError, etc.
"""

from .interfaces import IWorkspaceService, IWorkspaceAuthorizer, IWorkspaceRepository
from .models import (
    ROLE_RANK,
    Membership,
    MemberWithUser,
    Workspace,
    WorkspaceAccess,
    WorkspaceInvite,
    WorkspaceRole,
    WorkspaceWithRole,
)
from .exceptions import (
    NotAMemberError,
    InsufficientRoleError,
    OwnerSelfDemotionError,
    MemberNotFoundError,
    WorkspaceNotFoundError,
    WorkspaceKeyTakenError,
    InviteInvalidError,
)
from .repository import InMemoryWorkspaceRepository, SupabaseWorkspaceRepository
from .authorization import WorkspaceAuthorizer
from .service import WorkspaceService, generate_invite_code

__all__ = [
    # Interfaces
    "IWorkspaceService",
    "IWorkspaceAuthorizer",
    "IWorkspaceRepository",
    # Models
    "ROLE_RANK",
    "Membership",
    "MemberWithUser",
    "Workspace",
    "WorkspaceAccess",
    "WorkspaceInvite",
    "WorkspaceRole",
    "WorkspaceWithRole",
    # Exceptions
    "NotAMemberError",
    "InsufficientRoleError",
    "OwnerSelfDemotionError",
    "MemberNotFoundError",
    "WorkspaceNotFoundError",
    "WorkspaceKeyTakenError",
    "InviteInvalidError",
    # Implementations
    "InMemoryWorkspaceRepository",
    "SupabaseWorkspaceRepository",
    "WorkspaceAuthorizer",
    "WorkspaceService",
    "generate_invite_code",
]
