"""
Workspace repositories.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from postgrest.exceptions import APIError

from shared.repository import (
    BaseRepository,
    InMemoryRepository,
    is_unique_violation,
    parse_timestamp,
)

from .models import Membership, Workspace, WorkspaceInvite, WorkspaceRole
from .exceptions import MemberNotFoundError, WorkspaceKeyTakenError


WORKSPACES_TABLE = "workspaces"
MEMBERSHIPS_TABLE = "memberships"
INVITES_TABLE = "workspace_invites"


class InMemoryWorkspaceRepository(InMemoryRepository[Workspace]):
    """Workspace storage for development and tests."""

    def __init__(self) -> None:
        super().__init__()
        self._workspaces: dict[str, Workspace] = {}
        self._memberships: dict[str, Membership] = {}
        self._invites: dict[str, WorkspaceInvite] = {}

    def create_workspace(self, workspace: Workspace) -> Workspace:
        with self._lock:
            if any(w.key == workspace.key for w in self._workspaces.values()):
                raise WorkspaceKeyTakenError(workspace.key)
            self._workspaces[workspace.id] = workspace
        return workspace

    def get_workspace(self, workspace_id: str) -> Optional[Workspace]:
        with self._lock:
            return self._workspaces.get(workspace_id)

    def get_workspace_by_key(self, key: str) -> Optional[Workspace]:
        with self._lock:
            return next((w for w in self._workspaces.values() if w.key == key), None)

    def get_workspaces(self, workspace_ids: list[str]) -> list[Workspace]:
        with self._lock:
            return [self._workspaces[i] for i in workspace_ids if i in self._workspaces]

    def get_membership(self, workspace_id: str, user_id: str) -> Optional[Membership]:
        with self._lock:
            return next(
                (
                    m for m in self._memberships.values()
                    if m.workspace_id == workspace_id and m.user_id == user_id
                ),
                None,
            )

    def get_membership_by_id(self, workspace_id: str, membership_id: str) -> Optional[Membership]:
        with self._lock:
            membership = self._memberships.get(membership_id)
        if membership is None or membership.workspace_id != workspace_id:
            return None
        return membership

    def list_memberships(self, workspace_id: str) -> list[Membership]:
        with self._lock:
            members = [m for m in self._memberships.values() if m.workspace_id == workspace_id]
        return sorted(members, key=lambda m: m.created_at)

    def list_memberships_for_user(self, user_id: str) -> list[Membership]:
        with self._lock:
            members = [m for m in self._memberships.values() if m.user_id == user_id]
        return sorted(members, key=lambda m: m.created_at)

    def add_membership_if_absent(
        self, workspace_id: str, user_id: str, role: WorkspaceRole
    ) -> Membership:
        with self._lock:
            existing = self.get_membership(workspace_id, user_id)
            if existing is not None:
                return existing
            membership = Membership(
                id=str(uuid.uuid4()),
                workspace_id=workspace_id,
                user_id=user_id,
                role=role,
                created_at=datetime.now(timezone.utc),
            )
            self._memberships[membership.id] = membership
            return membership

    def update_membership_role(self, membership_id: str, role: WorkspaceRole) -> Membership:
        with self._lock:
            current = self._memberships.get(membership_id)
            if current is None:
                raise MemberNotFoundError(membership_id)
            updated = current.model_copy(update={"role": role})
            self._memberships[membership_id] = updated
            return updated

    def create_invite(self, invite: WorkspaceInvite) -> WorkspaceInvite:
        with self._lock:
            self._invites[invite.code] = invite
        return invite

    def get_invite_by_code(self, code: str) -> Optional[WorkspaceInvite]:
        with self._lock:
            return self._invites.get(code)


class SupabaseWorkspaceRepository(BaseRepository[Workspace]):
    """
    Workspace storage across the ``workspaces``, ``memberships`` and
    ``workspace_invites`` tables.
    """

    def create_workspace(self, workspace: Workspace) -> Workspace:
        try:
            result = self._db.table(WORKSPACES_TABLE).insert({
                "id": workspace.id,
                "name": workspace.name,
                "key": workspace.key,
                "owner_id": workspace.owner_id,
                "created_at": workspace.created_at.isoformat(),
            }).execute()
        except APIError as e:
            if is_unique_violation(e):
                raise WorkspaceKeyTakenError(workspace.key) from e
            raise
        return self._map_to_workspace(result.data[0])

    def get_workspace(self, workspace_id: str) -> Optional[Workspace]:
        result = self._db.table(WORKSPACES_TABLE).select("*").eq("id", workspace_id).execute()
        if not result.data:
            return None
        return self._map_to_workspace(result.data[0])

    def get_workspace_by_key(self, key: str) -> Optional[Workspace]:
        result = self._db.table(WORKSPACES_TABLE).select("*").eq("key", key).execute()
        if not result.data:
            return None
        return self._map_to_workspace(result.data[0])

    def get_workspaces(self, workspace_ids: list[str]) -> list[Workspace]:
        if not workspace_ids:
            return []
        result = (
            self._db.table(WORKSPACES_TABLE)
            .select("*")
            .in_("id", workspace_ids)
            .execute()
        )
        return [self._map_to_workspace(row) for row in result.data or []]

    def get_membership(self, workspace_id: str, user_id: str) -> Optional[Membership]:
        result = (
            self._db.table(MEMBERSHIPS_TABLE)
            .select("*")
            .eq("workspace_id", workspace_id)
            .eq("user_id", user_id)
            .execute()
        )
        if not result.data:
            return None
        return self._map_to_membership(result.data[0])

    def get_membership_by_id(self, workspace_id: str, membership_id: str) -> Optional[Membership]:
        result = (
            self._db.table(MEMBERSHIPS_TABLE)
            .select("*")
            .eq("id", membership_id)
            .eq("workspace_id", workspace_id)
            .execute()
        )
        if not result.data:
            return None
        return self._map_to_membership(result.data[0])

    def list_memberships(self, workspace_id: str) -> list[Membership]:
        result = (
            self._db.table(MEMBERSHIPS_TABLE)
            .select("*")
            .eq("workspace_id", workspace_id)
            .order("created_at")
            .execute()
        )
        return [self._map_to_membership(row) for row in result.data or []]

    def list_memberships_for_user(self, user_id: str) -> list[Membership]:
        result = (
            self._db.table(MEMBERSHIPS_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .order("created_at")
            .execute()
        )
        return [self._map_to_membership(row) for row in result.data or []]

    def add_membership_if_absent(
        self, workspace_id: str, user_id: str, role: WorkspaceRole
    ) -> Membership:
        # ON CONFLICT DO NOTHING; an existing row keeps its role
        result = self._db.table(MEMBERSHIPS_TABLE).upsert(
            {
                "id": str(uuid.uuid4()),
                "workspace_id": workspace_id,
                "user_id": user_id,
                "role": role.value,
                "created_at": datetime.now(timezone.utc).isoformat(),
            },
            on_conflict="workspace_id,user_id",
            ignore_duplicates=True,
        ).execute()
        if result.data:
            return self._map_to_membership(result.data[0])
        return self.get_membership(workspace_id, user_id)

    def update_membership_role(self, membership_id: str, role: WorkspaceRole) -> Membership:
        result = (
            self._db.table(MEMBERSHIPS_TABLE)
            .update({"role": role.value})
            .eq("id", membership_id)
            .execute()
        )
        if not result.data:
            raise MemberNotFoundError(membership_id)
        return self._map_to_membership(result.data[0])

    def create_invite(self, invite: WorkspaceInvite) -> WorkspaceInvite:
        result = self._db.table(INVITES_TABLE).insert({
            "id": invite.id,
            "workspace_id": invite.workspace_id,
            "code": invite.code,
            "expires_at": invite.expires_at.isoformat(),
            "created_by": invite.created_by,
            "created_at": invite.created_at.isoformat(),
        }).execute()
        return self._map_to_invite(result.data[0])

    def get_invite_by_code(self, code: str) -> Optional[WorkspaceInvite]:
        result = self._db.table(INVITES_TABLE).select("*").eq("code", code).execute()
        if not result.data:
            return None
        return self._map_to_invite(result.data[0])

    def _map_to_workspace(self, data: dict[str, Any]) -> Workspace:
        return Workspace(
            id=str(data["id"]),
            name=data["name"],
            key=data["key"],
            owner_id=str(data["owner_id"]),
            created_at=parse_timestamp(data["created_at"]),
        )

    def _map_to_membership(self, data: dict[str, Any]) -> Membership:
        return Membership(
            id=str(data["id"]),
            workspace_id=str(data["workspace_id"]),
            user_id=str(data["user_id"]),
            role=WorkspaceRole(data["role"]),
            created_at=parse_timestamp(data["created_at"]),
        )

    def _map_to_invite(self, data: dict[str, Any]) -> WorkspaceInvite:
        return WorkspaceInvite(
            id=str(data["id"]),
            workspace_id=str(data["workspace_id"]),
            code=data["code"],
            expires_at=parse_timestamp(data["expires_at"]),
            created_by=str(data["created_by"]),
            created_at=parse_timestamp(data["created_at"]),
        )
