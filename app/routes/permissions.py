from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.db import get_db
from app.models.checklist import ChecklistTemplate
from app.models.enums import PermissionLevel, ResourceType
from app.models.permission import Permission
from app.models.project import Project
from app.models.team import Team
from app.models.workspace import WorkspaceMember
from app.rbac.deps import (
    WorkspaceContext,
    enforce_access,
    get_access_store,
    get_workspace_context,
    not_found,
)
from app.rbac.resources import ChecklistTemplateRef, ProjectRef, ResourceRef, resource_ref
from app.rbac.store import SqlAccessStore, grant_resource_clause
from app.schemas.permissions import PermissionCreateIn, PermissionOut

router = APIRouter(prefix="/workspaces/{workspace_id}/permissions", tags=["permissions"])

def _out(g: Permission) -> PermissionOut:
    ref = grant_resource(g)
    return PermissionOut(
        id=g.id,
        level=g.level,
        resource_type=ref.type,
        resource_id=ref.id,
        member_id=g.workspace_member_id,
        team_id=g.team_id,
    )

def grant_resource(g: Permission) -> ResourceRef:
    if g.checklist_template_id is not None:
        return ChecklistTemplateRef(id=g.checklist_template_id)
    return ProjectRef(id=g.project_id)

def _ensure_resource_in_workspace(db: Session, resource: ResourceRef, workspace_id: int) -> None:
    model = ChecklistTemplate if isinstance(resource, ChecklistTemplateRef) else Project
    found = db.scalar(select(model.id).where(model.id == resource.id, model.workspace_id == workspace_id))
    if found is None:
        raise HTTPException(status_code=404, detail="resource not found")

@router.get("", response_model=list[PermissionOut])
def list_permissions(
    workspace_id: int,
    resource_type: str = Query(...),
    resource_id: int = Query(..., gt=0),
    ctx: WorkspaceContext = Depends(get_workspace_context),
    store: SqlAccessStore = Depends(get_access_store),
    db: Session = Depends(get_db),
) -> list[PermissionOut]:
    resource = resource_ref(resource_type, resource_id)
    enforce_access(store, ctx.user, workspace_id, resource, PermissionLevel.MANAGE)
    _ensure_resource_in_workspace(db, resource, workspace_id)

    rows = db.scalars(select(Permission).where(grant_resource_clause(resource)).order_by(Permission.id)).all()
    return [_out(g) for g in rows]

@router.post("", response_model=PermissionOut, status_code=201)
def create_permission(
    workspace_id: int,
    payload: PermissionCreateIn,
    ctx: WorkspaceContext = Depends(get_workspace_context),
    store: SqlAccessStore = Depends(get_access_store),
    db: Session = Depends(get_db),
) -> PermissionOut:
    resource = resource_ref(payload.resource.type, payload.resource.id)
    enforce_access(store, ctx.user, workspace_id, resource, PermissionLevel.MANAGE)
    _ensure_resource_in_workspace(db, resource, workspace_id)

    if payload.member_id is not None:
        m = db.get(WorkspaceMember, payload.member_id)
        if m is None or m.workspace_id != workspace_id:
            raise HTTPException(status_code=404, detail="member not found")
    else:
        team = db.get(Team, payload.team_id)
        if team is None or team.workspace_id != workspace_id:
            raise HTTPException(status_code=404, detail="team not found")

    # several grants per principal and resource are allowed; the highest wins
    g = Permission(
        level=payload.level,
        workspace_member_id=payload.member_id,
        team_id=payload.team_id,
        checklist_template_id=resource.id if resource.type == ResourceType.checklist_template else None,
        project_id=resource.id if resource.type == ResourceType.project else None,
    )
    db.add(g)
    db.commit()
    db.refresh(g)
    return _out(g)

@router.delete("/{permission_id}")
def delete_permission(
    workspace_id: int,
    permission_id: int,
    ctx: WorkspaceContext = Depends(get_workspace_context),
    store: SqlAccessStore = Depends(get_access_store),
    db: Session = Depends(get_db),
) -> dict:
    g = db.get(Permission, permission_id)
    if g is None:
        raise not_found(ctx, "permission not found")

    resource = grant_resource(g)
    enforce_access(store, ctx.user, workspace_id, resource, PermissionLevel.MANAGE)
    _ensure_resource_in_workspace(db, resource, workspace_id)

    db.delete(g)
    db.commit()
    return {"deleted": True}
