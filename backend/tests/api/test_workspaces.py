"""Tests for the workspace endpoints."""

import pytest

from tests.api.conftest import auth_headers, register


@pytest.fixture
def owner(client):
    return auth_headers(register(client, "owner@example.com", name="Owner")["accessToken"])


@pytest.fixture
def outsider(client):
    return auth_headers(register(client, "outsider@example.com", name="Outsider")["accessToken"])


def create_workspace(client, headers, name="Apollo", key="apl"):
    response = client.post("/api/workspaces", headers=headers, json={"name": name, "key": key})
    assert response.status_code == 201, response.text
    return response.json()["workspace"]


class TestWorkspaceEndpoints:
    def test_create(self, client, owner):
        response = client.post("/api/workspaces", headers=owner, json={"name": "Apollo", "key": "apl"})

        assert response.status_code == 201
        data = response.json()
        assert data["role"] == "OWNER"
        assert data["workspace"]["key"] == "APL"
        assert "ownerId" in data["workspace"]

    def test_create_requires_auth(self, client):
        response = client.post("/api/workspaces", json={"name": "Apollo", "key": "APL"})
        assert response.status_code == 401

    @pytest.mark.parametrize("key", ["A", "TOOLONGKEY1", "AB-C"])
    def test_invalid_key(self, client, owner, key):
        response = client.post("/api/workspaces", headers=owner, json={"name": "X", "key": key})
        assert response.status_code == 422

    def test_duplicate_key(self, client, owner, outsider):
        create_workspace(client, owner)
        response = client.post("/api/workspaces", headers=outsider, json={"name": "B", "key": "APL"})
        assert response.status_code == 409

    def test_list(self, client, owner, outsider):
        workspace = create_workspace(client, owner)

        mine = client.get("/api/workspaces", headers=owner).json()["workspaces"]
        theirs = client.get("/api/workspaces", headers=outsider).json()["workspaces"]

        assert [(w["id"], w["role"]) for w in mine] == [(workspace["id"], "OWNER")]
        assert theirs == []

    def test_get_requires_membership(self, client, owner, outsider):
        workspace = create_workspace(client, owner)

        assert client.get(f"/api/workspaces/{workspace['id']}", headers=owner).status_code == 200
        response = client.get(f"/api/workspaces/{workspace['id']}", headers=outsider)
        assert response.status_code == 403
        assert response.json()["detail"] == "Forbidden"


class TestInviteFlow:
    def test_invite_and_join(self, client, owner, outsider, settings):
        workspace = create_workspace(client, owner)

        invite = client.post(f"/api/workspaces/{workspace['id']}/invite", headers=owner)
        assert invite.status_code == 200
        body = invite.json()
        assert len(body["inviteCode"]) == 8
        assert body["inviteLink"] == f"{settings.app_base_url}/join?code={body['inviteCode']}"
        assert "expiresAt" in body

        joined = client.post("/api/workspaces/join", headers=outsider, json={"code": body["inviteCode"]})
        assert joined.status_code == 200
        assert joined.json()["role"] == "MEMBER"
        assert joined.json()["workspace"]["id"] == workspace["id"]

        members = client.get(f"/api/workspaces/{workspace['id']}/members", headers=outsider)
        assert members.status_code == 200
        assert sorted(m["role"] for m in members.json()["members"]) == ["MEMBER", "OWNER"]

    def test_member_cannot_invite(self, client, owner, outsider):
        workspace = create_workspace(client, owner)
        code = client.post(f"/api/workspaces/{workspace['id']}/invite", headers=owner).json()["inviteCode"]
        client.post("/api/workspaces/join", headers=outsider, json={"code": code})

        response = client.post(f"/api/workspaces/{workspace['id']}/invite", headers=outsider)

        assert response.status_code == 403

    def test_bad_code(self, client, outsider):
        response = client.post("/api/workspaces/join", headers=outsider, json={"code": "deadbeef"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Invite invalid or expired"


class TestRoleChanges:
    def _setup(self, client, owner, outsider):
        workspace = create_workspace(client, owner)
        code = client.post(f"/api/workspaces/{workspace['id']}/invite", headers=owner).json()["inviteCode"]
        client.post("/api/workspaces/join", headers=outsider, json={"code": code})
        members = client.get(f"/api/workspaces/{workspace['id']}/members", headers=owner).json()["members"]
        by_role = {m["role"]: m for m in members}
        return workspace, by_role

    def test_owner_promotes_member(self, client, owner, outsider):
        workspace, by_role = self._setup(client, owner, outsider)

        response = client.patch(
            f"/api/workspaces/{workspace['id']}/members/{by_role['MEMBER']['id']}",
            headers=owner,
            json={"role": "ADMIN"},
        )

        assert response.status_code == 200
        assert response.json()["member"]["role"] == "ADMIN"

    def test_member_cannot_change_roles(self, client, owner, outsider):
        workspace, by_role = self._setup(client, owner, outsider)

        response = client.patch(
            f"/api/workspaces/{workspace['id']}/members/{by_role['MEMBER']['id']}",
            headers=outsider,
            json={"role": "OWNER"},
        )

        assert response.status_code == 403

    def test_owner_self_demotion(self, client, owner, outsider):
        workspace, by_role = self._setup(client, owner, outsider)

        response = client.patch(
            f"/api/workspaces/{workspace['id']}/members/{by_role['OWNER']['id']}",
            headers=owner,
            json={"role": "MEMBER"},
        )

        assert response.status_code == 400

    def test_unknown_membership(self, client, owner, outsider):
        workspace, _ = self._setup(client, owner, outsider)

        response = client.patch(
            f"/api/workspaces/{workspace['id']}/members/missing",
            headers=owner,
            json={"role": "ADMIN"},
        )

        assert response.status_code == 404
