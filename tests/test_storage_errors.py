from unittest.mock import MagicMock

from sqlalchemy.exc import OperationalError

from app.models.enums import WorkspaceRole
from app.rbac.deps import get_access_store
from app.rbac.store import SqlAccessStore

from helpers import auth

def test_storage_outage_is_a_500_not_a_403(client, workspace, owner):
    broken = MagicMock()
    broken.scalar.side_effect = OperationalError("SELECT", {}, Exception("db down"))
    client.app.dependency_overrides[get_access_store] = lambda: SqlAccessStore(broken)

    r = client.get(
        f"/workspaces/{workspace.id}/access",
        params={"resource_type": "Project", "resource_id": 1},
        headers=auth(owner),
    )
    assert r.status_code == 500
    assert r.json() == {"error": "internal error"}

def test_outage_during_grant_lookup(client, workspace, owner):
    store = MagicMock()
    store.find_membership.return_value = MagicMock(id=1, role=WorkspaceRole.MEMBER, workspace_id=workspace.id)
    store.find_team_ids_for_user_in_workspace.return_value = set()
    broken = MagicMock()
    broken.scalars.side_effect = OperationalError("SELECT", {}, Exception("db down"))
    store.find_grants.side_effect = lambda *a: SqlAccessStore(broken).find_grants(*a)
    client.app.dependency_overrides[get_access_store] = lambda: store

    r = client.get(f"/workspaces/{workspace.id}/projects/1", headers=auth(owner))
    assert r.status_code == 500
