from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.db import get_db
from app.models.checklist import TemplateCategory
from app.models.enums import WorkspaceRole
from app.models.taxonomy import Category
from app.rbac.deps import WorkspaceContext, get_workspace_context, require_workspace_role
from app.schemas.taxonomy import CategoryCreateIn, CategoryOut, CategoryUpdateIn

router = APIRouter(prefix="/workspaces/{workspace_id}/categories", tags=["categories"])

require_editor = require_workspace_role(WorkspaceRole.OWNER, WorkspaceRole.ADMIN, WorkspaceRole.MEMBER)

def _out(c: Category) -> CategoryOut:
    return CategoryOut(id=c.id, workspace_id=c.workspace_id, name=c.name, parent_id=c.parent_id)

def _get_category(db: Session, workspace_id: int, category_id: int) -> Category:
    c = db.scalar(select(Category).where(Category.id == category_id, Category.workspace_id == workspace_id))
    if c is None:
        raise HTTPException(status_code=404, detail="category not found")
    return c

def _check_parent(db: Session, workspace_id: int, parent_id: int, category_id: int | None = None) -> None:
    # walk up from the new parent; reaching the category itself would close a loop
    current: int | None = parent_id
    while current is not None:
        if current == category_id:
            raise HTTPException(status_code=400, detail="a category cannot be nested under itself")
        parent = db.scalar(select(Category).where(Category.id == current, Category.workspace_id == workspace_id))
        if parent is None:
            raise HTTPException(status_code=400, detail="parent category not found")
        current = parent.parent_id

def _commit_unique(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="a category with this name already exists")

@router.get("", response_model=list[CategoryOut])
def list_categories(
    ctx: WorkspaceContext = Depends(get_workspace_context),
    db: Session = Depends(get_db),
) -> list[CategoryOut]:
    rows = db.scalars(
        select(Category).where(Category.workspace_id == ctx.workspace_id).order_by(Category.name.asc())
    ).all()
    return [_out(c) for c in rows]

@router.post("", response_model=CategoryOut, status_code=201)
def create_category(
    workspace_id: int,
    payload: CategoryCreateIn,
    ctx: WorkspaceContext = Depends(require_editor),
    db: Session = Depends(get_db),
) -> CategoryOut:
    if payload.parent_id is not None:
        _check_parent(db, workspace_id, payload.parent_id)

    c = Category(workspace_id=workspace_id, name=payload.name.strip(), parent_id=payload.parent_id)
    db.add(c)
    _commit_unique(db)
    db.refresh(c)
    return _out(c)

@router.patch("/{category_id}", response_model=CategoryOut)
def update_category(
    workspace_id: int,
    category_id: int,
    payload: CategoryUpdateIn,
    ctx: WorkspaceContext = Depends(require_editor),
    db: Session = Depends(get_db),
) -> CategoryOut:
    c = _get_category(db, workspace_id, category_id)
    changes = payload.model_dump(exclude_unset=True)

    if "parent_id" in changes:
        if changes["parent_id"] is not None:
            _check_parent(db, workspace_id, changes["parent_id"], category_id=c.id)
        c.parent_id = changes["parent_id"]
    if changes.get("name") is not None:
        c.name = changes["name"].strip()

    _commit_unique(db)
    db.refresh(c)
    return _out(c)

@router.delete("/{category_id}")
def delete_category(
    workspace_id: int,
    category_id: int,
    ctx: WorkspaceContext = Depends(require_editor),
    db: Session = Depends(get_db),
) -> dict:
    c = _get_category(db, workspace_id, category_id)
    if db.scalar(select(Category.id).where(Category.parent_id == c.id).limit(1)) is not None:
        raise HTTPException(status_code=400, detail="category has subcategories")

    db.execute(delete(TemplateCategory).where(TemplateCategory.category_id == c.id))
    db.delete(c)
    db.commit()
    return {"deleted": True}
