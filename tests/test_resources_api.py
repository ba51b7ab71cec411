import pytest

from app.models.enums import PermissionLevel, WorkspaceRole

from helpers import auth, grant, make_member, make_team, make_user, make_workspace

def create_template(client, user, workspace_id: int, title: str = "inspection") -> int:
    r = client.post(
        f"/workspaces/{workspace_id}/checklist-templates",
        json={"title": title, "items": [{"title": "first step"}, {"title": "second step"}]},
        headers=auth(user),
    )
    assert r.status_code == 201, r.text
    return r.json()["id"]

def test_template_levels_follow_grants(client, db_session, workspace, owner):
    template_id = create_template(client, owner, workspace.id)
    url = f"/workspaces/{workspace.id}/checklist-templates/{template_id}"

    viewer = make_user(db_session, "viewer@example.com")
    viewer_m = make_member(db_session, workspace, viewer, WorkspaceRole.VIEWER)

    # no grant yet
    assert client.get(url, headers=auth(viewer)).status_code == 403

    grant(db_session, PermissionLevel.VIEW, workspace_member_id=viewer_m.id, checklist_template_id=template_id)
    assert client.get(url, headers=auth(viewer)).status_code == 200
    assert client.patch(url, json={"title": "x"}, headers=auth(viewer)).status_code == 403

    editor = make_user(db_session, "editor@example.com")
    make_member(db_session, workspace, editor, WorkspaceRole.MEMBER)
    team = make_team(db_session, workspace, "qa", editor)
    grant(db_session, PermissionLevel.EDIT, team_id=team.id, checklist_template_id=template_id)

    r = client.patch(url, json={"title": "renamed", "is_active": False}, headers=auth(editor))
    assert r.status_code == 200, r.text
    assert r.json()["title"] == "renamed"
    assert r.json()["is_active"] is False
    assert client.delete(url, headers=auth(editor)).status_code == 403

    assert client.delete(url, headers=auth(owner)).status_code == 200
    assert client.get(url, headers=auth(owner)).status_code == 404

def test_creator_manages_own_template(client, db_session, workspace):
    author = make_user(db_session, "author@example.com")
    make_member(db_session, workspace, author, WorkspaceRole.MEMBER)

    template_id = create_template(client, author, workspace.id)
    r = client.delete(
        f"/workspaces/{workspace.id}/checklist-templates/{template_id}", headers=auth(author)
    )
    assert r.status_code == 200

@pytest.mark.parametrize("role", [WorkspaceRole.VIEWER, WorkspaceRole.GUEST])
def test_low_roles_cannot_create(client, db_session, workspace, role):
    u = make_user(db_session, "low@example.com")
    make_member(db_session, workspace, u, role)

    r = client.post(
        f"/workspaces/{workspace.id}/checklist-templates",
        json={"title": "t", "items": [{"title": "step"}]},
        headers=auth(u),
    )
    assert r.status_code == 403
    r = client.post(f"/workspaces/{workspace.id}/projects", json={"name": "p"}, headers=auth(u))
    assert r.status_code == 403

def test_list_only_shows_viewable_templates(client, db_session, workspace, owner):
    first = create_template(client, owner, workspace.id, "first")
    create_template(client, owner, workspace.id, "second")

    u = make_user(db_session, "u@example.com")
    m = make_member(db_session, workspace, u, WorkspaceRole.MEMBER)

    r = client.get(f"/workspaces/{workspace.id}/checklist-templates", headers=auth(u))
    assert r.status_code == 200
    assert r.json() == []

    grant(db_session, PermissionLevel.VIEW, workspace_member_id=m.id, checklist_template_id=first)
    r = client.get(f"/workspaces/{workspace.id}/checklist-templates", headers=auth(u))
    assert [t["id"] for t in r.json()] == [first]

    r = client.get(f"/workspaces/{workspace.id}/checklist-templates", headers=auth(owner))
    assert len(r.json()) == 2

def test_project_crud(client, db_session, workspace, owner):
    r = client.post(
        f"/workspaces/{workspace.id}/projects",
        json={"name": "rollout", "description": "phase one"},
        headers=auth(owner),
    )
    assert r.status_code == 201, r.text
    project_id = r.json()["id"]
    url = f"/workspaces/{workspace.id}/projects/{project_id}"

    u = make_user(db_session, "u@example.com")
    m = make_member(db_session, workspace, u, WorkspaceRole.MEMBER)
    grant(db_session, PermissionLevel.EDIT, workspace_member_id=m.id, project_id=project_id)

    r = client.patch(url, json={"name": "rollout v2"}, headers=auth(u))
    assert r.status_code == 200
    assert r.json()["name"] == "rollout v2"
    assert r.json()["description"] == "phase one"

    r = client.get(f"/workspaces/{workspace.id}/projects", headers=auth(u))
    assert [p["id"] for p in r.json()] == [project_id]

    assert client.delete(url, headers=auth(u)).status_code == 403
    assert client.delete(url, headers=auth(owner)).status_code == 200

def test_resource_from_another_workspace_is_not_found(client, db_session, workspace, owner):
    other = make_workspace(db_session, "other", owner=owner)
    template_id = create_template(client, owner, other.id)

    r = client.get(f"/workspaces/{workspace.id}/checklist-templates/{template_id}", headers=auth(owner))
    assert r.status_code == 404
