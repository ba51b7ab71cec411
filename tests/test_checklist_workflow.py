from app.models.assignment import ChecklistAssignment
from app.models.enums import PermissionLevel, WorkspaceRole

from helpers import auth, grant, make_member, make_team, make_user, make_workspace

def new_template(client, user, workspace_id: int, *items: str, **extra) -> dict:
    body = {"title": "line check", "items": [{"title": t} for t in items or ("guards", "exits")], **extra}
    r = client.post(f"/workspaces/{workspace_id}/checklist-templates", json=body, headers=auth(user))
    assert r.status_code == 201, r.text
    return r.json()

def assign(client, user, workspace_id: int, template_id: int, **assignees):
    return client.post(
        f"/workspaces/{workspace_id}/checklist-templates/{template_id}/assignments",
        json=assignees,
        headers=auth(user),
    )

def test_items_keep_their_order(client, workspace, owner):
    r = client.post(
        f"/workspaces/{workspace.id}/checklist-templates",
        json={
            "title": "opening",
            "items": [
                {"title": "lights", "order": 2},
                {"title": "doors", "order": 0},
                {"title": "alarm", "order": 1},
            ],
        },
        headers=auth(owner),
    )
    assert r.status_code == 201, r.text
    assert [i["title"] for i in r.json()["items"]] == ["doors", "alarm", "lights"]

def test_template_needs_at_least_one_item(client, workspace, owner):
    r = client.post(
        f"/workspaces/{workspace.id}/checklist-templates",
        json={"title": "empty", "items": []},
        headers=auth(owner),
    )
    assert r.status_code == 422

def test_assign_and_respond(client, db_session, workspace, owner):
    template = new_template(client, owner, workspace.id, "guards", "exits")

    worker = make_user(db_session, "worker@example.com")
    make_member(db_session, workspace, worker, WorkspaceRole.MEMBER)
    crew_mate = make_user(db_session, "crew@example.com")
    make_member(db_session, workspace, crew_mate, WorkspaceRole.GUEST)
    crew = make_team(db_session, workspace, "crew", crew_mate)

    r = assign(
        client, owner, workspace.id, template["id"],
        due_date="2026-11-01", assigned_user_ids=[worker.id], assigned_team_ids=[crew.id],
    )
    assert r.status_code == 201, r.text
    assignment = r.json()
    assert assignment["assigned_user_ids"] == [worker.id]
    assert assignment["assigned_team_ids"] == [crew.id]
    assert [x["status"] for x in assignment["responses"]] == ["NONE", "NONE"]
    assert assignment["completed"] is False

    # assignees need no grant on the template to work their checklist
    r = client.get(f"/workspaces/{workspace.id}/checklist-assignments", headers=auth(worker))
    assert [a["id"] for a in r.json()] == [assignment["id"]]
    r = client.get(f"/workspaces/{workspace.id}/checklist-assignments", headers=auth(crew_mate))
    assert [a["id"] for a in r.json()] == [assignment["id"]]

    url = f"/workspaces/{workspace.id}/checklist-assignments/{assignment['id']}"
    assert client.get(url, headers=auth(worker)).status_code == 200

    guards, exits = (x["item_id"] for x in assignment["responses"])
    r = client.patch(
        f"{url}/responses", json={"responses": [{"item_id": guards, "status": "ACCEPTABLE"}]}, headers=auth(worker)
    )
    assert r.status_code == 200, r.text
    assert r.json()["completed"] is False
    assert r.json()["responses"][0]["responded_by"] == worker.id

    r = client.patch(
        f"{url}/responses",
        json={"responses": [{"item_id": exits, "status": "UNACCEPTABLE"}]},
        headers=auth(crew_mate),
    )
    assert r.status_code == 200
    assert r.json()["completed"] is True
    assert [x["status"] for x in r.json()["responses"]] == ["ACCEPTABLE", "UNACCEPTABLE"]

def test_assigning_needs_edit_on_template(client, db_session, workspace, owner):
    template = new_template(client, owner, workspace.id)
    base = f"/workspaces/{workspace.id}/checklist-templates/{template['id']}/assignments"

    viewer = make_user(db_session, "viewer@example.com")
    viewer_m = make_member(db_session, workspace, viewer, WorkspaceRole.MEMBER)
    grant(db_session, PermissionLevel.VIEW, workspace_member_id=viewer_m.id, checklist_template_id=template["id"])

    assert client.get(base, headers=auth(viewer)).status_code == 200
    r = assign(client, viewer, workspace.id, template["id"], assigned_user_ids=[viewer.id])
    assert r.status_code == 403

    editor = make_user(db_session, "editor@example.com")
    editor_m = make_member(db_session, workspace, editor, WorkspaceRole.MEMBER)
    grant(db_session, PermissionLevel.EDIT, workspace_member_id=editor_m.id, checklist_template_id=template["id"])

    r = assign(client, editor, workspace.id, template["id"], assigned_user_ids=[viewer.id])
    assert r.status_code == 201
    assert len(client.get(base, headers=auth(viewer)).json()) == 1

def test_only_assignees_respond(client, db_session, workspace, owner):
    template = new_template(client, owner, workspace.id)
    worker = make_user(db_session, "worker@example.com")
    make_member(db_session, workspace, worker, WorkspaceRole.MEMBER)
    assignment = assign(client, owner, workspace.id, template["id"], assigned_user_ids=[worker.id]).json()
    url = f"/workspaces/{workspace.id}/checklist-assignments/{assignment['id']}"
    body = {"responses": [{"item_id": assignment["responses"][0]["item_id"], "status": "ACCEPTABLE"}]}

    reader = make_user(db_session, "reader@example.com")
    reader_m = make_member(db_session, workspace, reader, WorkspaceRole.MEMBER)
    stranger = make_user(db_session, "stranger@example.com")
    make_member(db_session, workspace, stranger, WorkspaceRole.MEMBER)
    grant(db_session, PermissionLevel.VIEW, workspace_member_id=reader_m.id, checklist_template_id=template["id"])

    assert client.get(url, headers=auth(reader)).status_code == 200
    assert client.patch(f"{url}/responses", json=body, headers=auth(reader)).status_code == 403

    r = client.get(url, headers=auth(stranger))
    assert r.status_code == 403
    assert r.json() == {"error": "you do not have access"}

    # not even the owner answers for someone else
    assert client.patch(f"{url}/responses", json=body, headers=auth(owner)).status_code == 403

def test_assignees_must_belong_to_workspace(client, db_session, workspace, owner):
    template = new_template(client, owner, workspace.id)
    outsider = make_user(db_session, "outsider@example.com")
    other = make_workspace(db_session, "other", owner=outsider)
    foreign_team = make_team(db_session, other, "elsewhere")

    r = assign(client, owner, workspace.id, template["id"], assigned_user_ids=[outsider.id])
    assert r.status_code == 400
    r = assign(client, owner, workspace.id, template["id"], assigned_team_ids=[foreign_team.id])
    assert r.status_code == 400
    r = assign(client, owner, workspace.id, template["id"])
    assert r.status_code == 422

def test_responses_must_name_items_of_the_assignment(client, db_session, workspace, owner):
    template = new_template(client, owner, workspace.id)
    assignment = assign(client, owner, workspace.id, template["id"], assigned_user_ids=[owner.id]).json()

    r = client.patch(
        f"/workspaces/{workspace.id}/checklist-assignments/{assignment['id']}/responses",
        json={"responses": [{"item_id": 9999, "status": "ACCEPTABLE"}]},
        headers=auth(owner),
    )
    assert r.status_code == 400
    assert "9999" in r.json()["detail"]

def test_inactive_template_cannot_be_assigned(client, workspace, owner):
    template = new_template(client, owner, workspace.id)
    url = f"/workspaces/{workspace.id}/checklist-templates/{template['id']}"
    assert client.patch(url, json={"is_active": False}, headers=auth(owner)).status_code == 200

    r = assign(client, owner, workspace.id, template["id"], assigned_user_ids=[owner.id])
    assert r.status_code == 400

def test_missing_assignment_is_only_reported_to_admins(client, db_session, workspace, owner):
    member = make_user(db_session, "m@example.com")
    make_member(db_session, workspace, member, WorkspaceRole.MEMBER)
    url = f"/workspaces/{workspace.id}/checklist-assignments/999"

    assert client.get(url, headers=auth(member)).status_code == 403
    assert client.get(url, headers=auth(owner)).status_code == 404

def test_deleting_template_removes_its_assignments(client, db_session, workspace, owner):
    template = new_template(client, owner, workspace.id)
    assignment = assign(client, owner, workspace.id, template["id"], assigned_user_ids=[owner.id]).json()

    r = client.delete(f"/workspaces/{workspace.id}/checklist-templates/{template['id']}", headers=auth(owner))
    assert r.status_code == 200

    db_session.expire_all()
    assert db_session.get(ChecklistAssignment, assignment["id"]) is None
    r = client.get(f"/workspaces/{workspace.id}/checklist-assignments/{assignment['id']}", headers=auth(owner))
    assert r.status_code == 404

def test_assignment_can_be_withdrawn_by_editors(client, db_session, workspace, owner):
    template = new_template(client, owner, workspace.id)
    worker = make_user(db_session, "worker@example.com")
    make_member(db_session, workspace, worker, WorkspaceRole.MEMBER)
    assignment = assign(client, owner, workspace.id, template["id"], assigned_user_ids=[worker.id]).json()
    url = f"/workspaces/{workspace.id}/checklist-assignments/{assignment['id']}"

    assert client.delete(url, headers=auth(worker)).status_code == 403
    assert client.delete(url, headers=auth(owner)).status_code == 200
    assert client.get(f"/workspaces/{workspace.id}/checklist-assignments", headers=auth(worker)).json() == []
