from app.models.checklist import TemplateCategory
from app.models.enums import WorkspaceRole

from helpers import auth, make_member, make_user, make_workspace

def test_category_tree(client, workspace, owner):
    base = f"/workspaces/{workspace.id}/categories"

    r = client.post(base, json={"name": "safety"}, headers=auth(owner))
    assert r.status_code == 201, r.text
    safety = r.json()
    r = client.post(base, json={"name": "fire", "parent_id": safety["id"]}, headers=auth(owner))
    assert r.status_code == 201
    fire = r.json()
    assert fire["parent_id"] == safety["id"]

    assert client.post(base, json={"name": "safety"}, headers=auth(owner)).status_code == 409

    # a category cannot end up under its own descendant
    r = client.patch(f"{base}/{safety['id']}", json={"parent_id": fire["id"]}, headers=auth(owner))
    assert r.status_code == 400
    r = client.patch(f"{base}/{safety['id']}", json={"parent_id": safety["id"]}, headers=auth(owner))
    assert r.status_code == 400

    assert client.delete(f"{base}/{safety['id']}", headers=auth(owner)).status_code == 400
    assert client.delete(f"{base}/{fire['id']}", headers=auth(owner)).status_code == 200
    assert client.delete(f"{base}/{safety['id']}", headers=auth(owner)).status_code == 200

    assert client.get(base, headers=auth(owner)).json() == []

def test_parent_must_be_in_same_workspace(client, db_session, workspace, owner):
    other = make_workspace(db_session, "other", owner=owner)
    r = client.post(f"/workspaces/{other.id}/categories", json={"name": "elsewhere"}, headers=auth(owner))
    foreign_id = r.json()["id"]

    r = client.post(
        f"/workspaces/{workspace.id}/categories",
        json={"name": "local", "parent_id": foreign_id},
        headers=auth(owner),
    )
    assert r.status_code == 400

def test_tags(client, db_session, workspace, owner):
    base = f"/workspaces/{workspace.id}/tags"

    r = client.post(base, json={"name": "daily"}, headers=auth(owner))
    assert r.status_code == 201
    daily = r.json()
    assert daily["color"] == "gray"
    assert client.post(base, json={"name": "daily", "color": "red"}, headers=auth(owner)).status_code == 409

    r = client.patch(f"{base}/{daily['id']}", json={"color": "green"}, headers=auth(owner))
    assert r.json() == {**daily, "color": "green"}

    viewer = make_user(db_session, "viewer@example.com")
    make_member(db_session, workspace, viewer, WorkspaceRole.VIEWER)
    assert [t["name"] for t in client.get(base, headers=auth(viewer)).json()] == ["daily"]
    assert client.post(base, json={"name": "weekly"}, headers=auth(viewer)).status_code == 403
    assert client.delete(f"{base}/{daily['id']}", headers=auth(viewer)).status_code == 403

def test_templates_are_labelled_and_filtered(client, db_session, workspace, owner):
    category = client.post(
        f"/workspaces/{workspace.id}/categories", json={"name": "safety"}, headers=auth(owner)
    ).json()
    tag = client.post(f"/workspaces/{workspace.id}/tags", json={"name": "daily"}, headers=auth(owner)).json()
    base = f"/workspaces/{workspace.id}/checklist-templates"

    r = client.post(
        base,
        json={
            "title": "labelled",
            "items": [{"title": "step"}],
            "category_ids": [category["id"]],
            "tag_ids": [tag["id"]],
        },
        headers=auth(owner),
    )
    assert r.status_code == 201, r.text
    labelled = r.json()
    assert labelled["category_ids"] == [category["id"]]
    assert labelled["tag_ids"] == [tag["id"]]
    client.post(base, json={"title": "plain", "items": [{"title": "step"}]}, headers=auth(owner))

    r = client.get(base, params={"category_id": category["id"]}, headers=auth(owner))
    assert [t["id"] for t in r.json()] == [labelled["id"]]
    r = client.get(base, params={"tag_id": tag["id"]}, headers=auth(owner))
    assert [t["id"] for t in r.json()] == [labelled["id"]]

    r = client.patch(f"{base}/{labelled['id']}", json={"tag_ids": []}, headers=auth(owner))
    assert r.json()["tag_ids"] == []
    assert r.json()["category_ids"] == [category["id"]]

    client.delete(f"/workspaces/{workspace.id}/categories/{category['id']}", headers=auth(owner))
    db_session.expire_all()
    assert db_session.query(TemplateCategory).count() == 0

def test_labels_from_another_workspace_are_rejected(client, db_session, workspace, owner):
    other = make_workspace(db_session, "other", owner=owner)
    foreign_tag = client.post(f"/workspaces/{other.id}/tags", json={"name": "x"}, headers=auth(owner)).json()

    r = client.post(
        f"/workspaces/{workspace.id}/checklist-templates",
        json={"title": "t", "items": [{"title": "step"}], "tag_ids": [foreign_tag["id"]]},
        headers=auth(owner),
    )
    assert r.status_code == 400
