from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.db import get_db
from app.models.checklist import TemplateTag
from app.models.enums import WorkspaceRole
from app.models.taxonomy import Tag
from app.rbac.deps import WorkspaceContext, get_workspace_context, require_workspace_role
from app.schemas.taxonomy import TagCreateIn, TagOut, TagUpdateIn

router = APIRouter(prefix="/workspaces/{workspace_id}/tags", tags=["tags"])

require_editor = require_workspace_role(WorkspaceRole.OWNER, WorkspaceRole.ADMIN, WorkspaceRole.MEMBER)

def _out(t: Tag) -> TagOut:
    return TagOut(id=t.id, workspace_id=t.workspace_id, name=t.name, color=t.color)

def _get_tag(db: Session, workspace_id: int, tag_id: int) -> Tag:
    t = db.scalar(select(Tag).where(Tag.id == tag_id, Tag.workspace_id == workspace_id))
    if t is None:
        raise HTTPException(status_code=404, detail="tag not found")
    return t

def _commit_unique(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="a tag with this name already exists")

@router.get("", response_model=list[TagOut])
def list_tags(
    ctx: WorkspaceContext = Depends(get_workspace_context),
    db: Session = Depends(get_db),
) -> list[TagOut]:
    rows = db.scalars(select(Tag).where(Tag.workspace_id == ctx.workspace_id).order_by(Tag.name.asc())).all()
    return [_out(t) for t in rows]

@router.post("", response_model=TagOut, status_code=201)
def create_tag(
    workspace_id: int,
    payload: TagCreateIn,
    ctx: WorkspaceContext = Depends(require_editor),
    db: Session = Depends(get_db),
) -> TagOut:
    t = Tag(workspace_id=workspace_id, name=payload.name.strip(), color=payload.color)
    db.add(t)
    _commit_unique(db)
    db.refresh(t)
    return _out(t)

@router.patch("/{tag_id}", response_model=TagOut)
def update_tag(
    workspace_id: int,
    tag_id: int,
    payload: TagUpdateIn,
    ctx: WorkspaceContext = Depends(require_editor),
    db: Session = Depends(get_db),
) -> TagOut:
    t = _get_tag(db, workspace_id, tag_id)
    if payload.name is not None:
        t.name = payload.name.strip()
    if payload.color is not None:
        t.color = payload.color
    _commit_unique(db)
    db.refresh(t)
    return _out(t)

@router.delete("/{tag_id}")
def delete_tag(
    workspace_id: int,
    tag_id: int,
    ctx: WorkspaceContext = Depends(require_editor),
    db: Session = Depends(get_db),
) -> dict:
    t = _get_tag(db, workspace_id, tag_id)
    db.execute(delete(TemplateTag).where(TemplateTag.tag_id == t.id))
    db.delete(t)
    db.commit()
    return {"deleted": True}
