from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.db import get_db
from app.models.enums import PermissionLevel, ResourceType, WorkspaceRole
from app.models.permission import Permission
from app.models.project import Project
from app.rbac.deps import (
    ResourceContext,
    WorkspaceContext,
    get_access_store,
    get_workspace_context,
    require_access,
    require_workspace_role,
)
from app.rbac.resolver import visible_resource_ids
from app.rbac.store import SqlAccessStore
from app.routes.issues import delete_issues
from app.schemas.projects import ProjectCreateIn, ProjectOut, ProjectUpdateIn

router = APIRouter(prefix="/workspaces/{workspace_id}/projects", tags=["projects"])

PROJECT = ResourceType.project

def _out(p: Project) -> ProjectOut:
    return ProjectOut(
        id=p.id,
        workspace_id=p.workspace_id,
        name=p.name,
        description=p.description,
        created_by=p.created_by,
    )

def _get_project(db: Session, ctx: ResourceContext) -> Project:
    p = db.scalar(
        select(Project).where(
            Project.id == ctx.resource.id,
            Project.workspace_id == ctx.workspace_id,
        )
    )
    if p is None:
        raise HTTPException(status_code=404, detail="project not found")
    return p

@router.post("", response_model=ProjectOut, status_code=201)
def create_project(
    workspace_id: int,
    payload: ProjectCreateIn,
    ctx: WorkspaceContext = Depends(
        require_workspace_role(WorkspaceRole.OWNER, WorkspaceRole.ADMIN, WorkspaceRole.MEMBER)
    ),
    db: Session = Depends(get_db),
) -> ProjectOut:
    p = Project(
        workspace_id=workspace_id,
        name=payload.name,
        description=payload.description,
        created_by=ctx.user.id,
    )
    db.add(p)
    db.flush()

    # the author manages what they created
    db.add(
        Permission(
            level=PermissionLevel.MANAGE,
            workspace_member_id=ctx.membership_id,
            project_id=p.id,
        )
    )
    db.commit()
    db.refresh(p)
    return _out(p)

@router.get("", response_model=list[ProjectOut])
def list_projects(
    ctx: WorkspaceContext = Depends(get_workspace_context),
    store: SqlAccessStore = Depends(get_access_store),
    db: Session = Depends(get_db),
) -> list[ProjectOut]:
    q = select(Project).where(Project.workspace_id == ctx.workspace_id)

    visible = visible_resource_ids(store, ctx.user.id, ctx.workspace_id, PROJECT)
    if visible is not None:
        if not visible:
            return []
        q = q.where(Project.id.in_(visible))

    rows = db.scalars(q.order_by(Project.created_at.desc(), Project.id.desc())).all()
    return [_out(p) for p in rows]

@router.get("/{resource_id}", response_model=ProjectOut)
def get_project(
    ctx: ResourceContext = Depends(require_access(PROJECT, PermissionLevel.VIEW)),
    db: Session = Depends(get_db),
) -> ProjectOut:
    return _out(_get_project(db, ctx))

@router.patch("/{resource_id}", response_model=ProjectOut)
def update_project(
    payload: ProjectUpdateIn,
    ctx: ResourceContext = Depends(require_access(PROJECT, PermissionLevel.EDIT)),
    db: Session = Depends(get_db),
) -> ProjectOut:
    p = _get_project(db, ctx)
    changes = payload.model_dump(exclude_unset=True)
    for field in ("name", "description"):
        if field in changes:
            setattr(p, field, changes[field])
    db.commit()
    db.refresh(p)
    return _out(p)

@router.delete("/{resource_id}")
def delete_project(
    ctx: ResourceContext = Depends(require_access(PROJECT, PermissionLevel.MANAGE)),
    db: Session = Depends(get_db),
) -> dict:
    p = _get_project(db, ctx)
    delete_issues(db, p.id)
    db.execute(delete(Permission).where(Permission.project_id == p.id))
    db.delete(p)
    db.commit()
    return {"deleted": True}
