"""
Workspace module exceptions.

Authorization failures deliberately carry the same message whether the
caller is not a member or merely lacks the role.
"""

from shared.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)


class NotAMemberError(AuthorizationError):
    """Raised when a user has no membership in the workspace."""

    def __init__(self, workspace_id: str, user_id: str):
        super().__init__(
            "Forbidden",
            code="NOT_A_MEMBER",
            details={"workspace_id": workspace_id, "user_id": user_id},
        )


class InsufficientRoleError(AuthorizationError):
    """Raised when a member's role ranks below the required minimum."""

    def __init__(self, role: str, required_role: str):
        super().__init__(
            "Forbidden",
            code="INSUFFICIENT_ROLE",
            details={"role": role, "required_role": required_role},
        )


class OwnerSelfDemotionError(ValidationError):
    """Raised when an owner tries to change their own role away from OWNER."""

    def __init__(self, message: str = "Owner cannot remove their own role"):
        super().__init__(message, code="OWNER_SELF_DEMOTION")


class MemberNotFoundError(NotFoundError):
    """Raised when a membership ID does not exist in the workspace."""

    def __init__(self, membership_id: str):
        super().__init__(
            "Member not found",
            code="MEMBER_NOT_FOUND",
            details={"membership_id": membership_id},
        )


class WorkspaceNotFoundError(NotFoundError):
    """Raised when a workspace does not exist."""

    def __init__(self, workspace_id: str):
        super().__init__(
            "Workspace not found",
            code="WORKSPACE_NOT_FOUND",
            details={"workspace_id": workspace_id},
        )


class WorkspaceKeyTakenError(ConflictError):
    """Raised when a workspace key is already in use."""

    def __init__(self, key: str):
        super().__init__(
            "Workspace key already in use",
            code="WORKSPACE_KEY_TAKEN",
            details={"key": key},
        )


class InviteInvalidError(ValidationError):
    """Raised when an invite code is unknown or expired."""

    def __init__(self, message: str = "Invite invalid or expired"):
        super().__init__(message, code="INVITE_INVALID")
