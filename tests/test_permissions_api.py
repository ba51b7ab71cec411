from app.models.enums import PermissionLevel, WorkspaceRole

from helpers import auth, grant, make_member, make_team, make_user, make_workspace

def new_project(client, user, workspace_id: int) -> int:
    r = client.post(f"/workspaces/{workspace_id}/projects", json={"name": "p"}, headers=auth(user))
    assert r.status_code == 201, r.text
    return r.json()["id"]

def test_grant_list_and_revoke(client, db_session, workspace, owner):
    project_id = new_project(client, owner, workspace.id)
    u = make_user(db_session, "u@example.com")
    m = make_member(db_session, workspace, u, WorkspaceRole.MEMBER)
    base = f"/workspaces/{workspace.id}/permissions"

    r = client.post(
        base,
        json={"resource": {"type": "Project", "id": project_id}, "level": "EDIT", "member_id": m.id},
        headers=auth(owner),
    )
    assert r.status_code == 201, r.text
    created = r.json()
    assert created["resource_type"] == "Project"
    assert created["resource_id"] == project_id
    assert created["member_id"] == m.id
    assert created["team_id"] is None

    r = client.get(base, params={"resource_type": "Project", "resource_id": project_id}, headers=auth(owner))
    assert r.status_code == 200
    # the owner's creator grant plus the new one
    assert {(g["member_id"], g["level"]) for g in r.json()} >= {(m.id, "EDIT")}
    assert len(r.json()) == 2

    r = client.patch(f"/workspaces/{workspace.id}/projects/{project_id}", json={"name": "q"}, headers=auth(u))
    assert r.status_code == 200

    r = client.delete(f"{base}/{created['id']}", headers=auth(owner))
    assert r.status_code == 200

    r = client.patch(f"/workspaces/{workspace.id}/projects/{project_id}", json={"name": "z"}, headers=auth(u))
    assert r.status_code == 403

def test_duplicate_grants_are_kept_and_max_wins(client, db_session, workspace, owner):
    project_id = new_project(client, owner, workspace.id)
    u = make_user(db_session, "u@example.com")
    make_member(db_session, workspace, u, WorkspaceRole.MEMBER)
    team = make_team(db_session, workspace, "ops", u)
    base = f"/workspaces/{workspace.id}/permissions"

    for level in ("VIEW", "MANAGE"):
        r = client.post(
            base,
            json={"resource": {"type": "Project", "id": project_id}, "level": level, "team_id": team.id},
            headers=auth(owner),
        )
        assert r.status_code == 201

    r = client.get(
        f"/workspaces/{workspace.id}/access",
        params={"resource_type": "Project", "resource_id": project_id, "level": "MANAGE"},
        headers=auth(u),
    )
    assert r.json()["level"] == "MANAGE"

def test_exactly_one_principal_required(client, db_session, workspace, owner):
    project_id = new_project(client, owner, workspace.id)
    team = make_team(db_session, workspace, "ops")
    base = f"/workspaces/{workspace.id}/permissions"
    resource = {"type": "Project", "id": project_id}

    r = client.post(base, json={"resource": resource, "level": "VIEW"}, headers=auth(owner))
    assert r.status_code == 422

    r = client.post(
        base,
        json={"resource": resource, "level": "VIEW", "member_id": 1, "team_id": team.id},
        headers=auth(owner),
    )
    assert r.status_code == 422

def test_unknown_resource_type_is_rejected(client, workspace, owner):
    r = client.post(
        f"/workspaces/{workspace.id}/permissions",
        json={"resource": {"type": "Issue", "id": 1}, "level": "VIEW", "member_id": 1},
        headers=auth(owner),
    )
    assert r.status_code == 422

    r = client.get(
        f"/workspaces/{workspace.id}/permissions",
        params={"resource_type": "Issue", "resource_id": 1},
        headers=auth(owner),
    )
    assert r.status_code == 400

def test_principal_must_belong_to_workspace(client, db_session, workspace, owner):
    project_id = new_project(client, owner, workspace.id)
    other = make_workspace(db_session, "other", owner=owner)
    foreign_team = make_team(db_session, other, "foreign")

    r = client.post(
        f"/workspaces/{workspace.id}/permissions",
        json={"resource": {"type": "Project", "id": project_id}, "level": "VIEW", "team_id": foreign_team.id},
        headers=auth(owner),
    )
    assert r.status_code == 404

def test_managing_grants_needs_manage(client, db_session, workspace, owner):
    project_id = new_project(client, owner, workspace.id)
    u = make_user(db_session, "u@example.com")
    m = make_member(db_session, workspace, u, WorkspaceRole.MEMBER)
    g = grant(db_session, PermissionLevel.EDIT, workspace_member_id=m.id, project_id=project_id)
    base = f"/workspaces/{workspace.id}/permissions"

    r = client.get(base, params={"resource_type": "Project", "resource_id": project_id}, headers=auth(u))
    assert r.status_code == 403

    r = client.post(
        base,
        json={"resource": {"type": "Project", "id": project_id}, "level": "MANAGE", "member_id": m.id},
        headers=auth(u),
    )
    assert r.status_code == 403

    r = client.delete(f"{base}/{g.id}", headers=auth(u))
    assert r.status_code == 403
    assert r.json() == {"error": "you do not have access"}

def test_grant_from_other_workspace_cannot_be_deleted_here(client, db_session, workspace, owner):
    other = make_workspace(db_session, "other", owner=owner)
    project_id = new_project(client, owner, other.id)
    team = make_team(db_session, other, "ops")
    g = grant(db_session, PermissionLevel.VIEW, team_id=team.id, project_id=project_id)

    r = client.delete(f"/workspaces/{workspace.id}/permissions/{g.id}", headers=auth(owner))
    assert r.status_code == 404

def test_missing_and_foreign_grants_look_the_same_to_members(client, db_session, workspace, owner):
    other_owner = make_user(db_session, "other@example.com")
    other = make_workspace(db_session, "other", owner=other_owner)
    foreign_project = new_project(client, other_owner, other.id)
    team = make_team(db_session, other, "ops")
    foreign = grant(db_session, PermissionLevel.VIEW, team_id=team.id, project_id=foreign_project)

    u = make_user(db_session, "u@example.com")
    make_member(db_session, workspace, u, WorkspaceRole.MEMBER)
    base = f"/workspaces/{workspace.id}/permissions"

    existing = client.delete(f"{base}/{foreign.id}", headers=auth(u))
    missing = client.delete(f"{base}/99999", headers=auth(u))
    assert existing.status_code == missing.status_code == 403
    assert existing.json() == missing.json() == {"error": "you do not have access"}

    # owners and admins get the real answer
    assert client.delete(f"{base}/99999", headers=auth(owner)).status_code == 404
