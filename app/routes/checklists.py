from collections import defaultdict

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.db import get_db
from app.models.assignment import ChecklistAssignment
from app.models.checklist import ChecklistItem, ChecklistTemplate, TemplateCategory, TemplateTag
from app.models.enums import PermissionLevel, ResourceType, WorkspaceRole
from app.models.permission import Permission
from app.models.taxonomy import Category, Tag
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
from app.routes.assignments import delete_assignments
from app.schemas.checklists import ItemOut, TemplateCreateIn, TemplateOut, TemplateUpdateIn

router = APIRouter(prefix="/workspaces/{workspace_id}/checklist-templates", tags=["checklists"])

TEMPLATE = ResourceType.checklist_template

def _out_many(db: Session, templates: list[ChecklistTemplate]) -> list[TemplateOut]:
    ids = [t.id for t in templates]
    if not ids:
        return []

    items: dict[int, list[ItemOut]] = defaultdict(list)
    for it in db.scalars(
        select(ChecklistItem)
        .where(ChecklistItem.template_id.in_(ids))
        .order_by(ChecklistItem.position.asc(), ChecklistItem.id.asc())
    ):
        items[it.template_id].append(
            ItemOut(id=it.id, title=it.title, description=it.description, order=it.position)
        )

    categories: dict[int, list[int]] = defaultdict(list)
    for template_id, category_id in db.execute(
        select(TemplateCategory.template_id, TemplateCategory.category_id)
        .where(TemplateCategory.template_id.in_(ids))
        .order_by(TemplateCategory.category_id)
    ):
        categories[template_id].append(category_id)

    tags: dict[int, list[int]] = defaultdict(list)
    for template_id, tag_id in db.execute(
        select(TemplateTag.template_id, TemplateTag.tag_id)
        .where(TemplateTag.template_id.in_(ids))
        .order_by(TemplateTag.tag_id)
    ):
        tags[template_id].append(tag_id)

    return [
        TemplateOut(
            id=t.id,
            workspace_id=t.workspace_id,
            title=t.title,
            description=t.description,
            is_active=t.is_active,
            created_by=t.created_by,
            items=items[t.id],
            category_ids=categories[t.id],
            tag_ids=tags[t.id],
        )
        for t in templates
    ]

def _out(db: Session, t: ChecklistTemplate) -> TemplateOut:
    return _out_many(db, [t])[0]

def _get_template(db: Session, ctx: ResourceContext) -> ChecklistTemplate:
    t = db.scalar(
        select(ChecklistTemplate).where(
            ChecklistTemplate.id == ctx.resource.id,
            ChecklistTemplate.workspace_id == ctx.workspace_id,
        )
    )
    if t is None:
        raise HTTPException(status_code=404, detail="checklist template not found")
    return t

def _check_labels(db: Session, workspace_id: int, category_ids: list[int], tag_ids: list[int]) -> None:
    wanted = set(category_ids)
    if wanted:
        found = set(
            db.scalars(select(Category.id).where(Category.workspace_id == workspace_id, Category.id.in_(wanted)))
        )
        if wanted - found:
            raise HTTPException(status_code=400, detail="unknown category for this workspace")
    wanted = set(tag_ids)
    if wanted:
        found = set(db.scalars(select(Tag.id).where(Tag.workspace_id == workspace_id, Tag.id.in_(wanted))))
        if wanted - found:
            raise HTTPException(status_code=400, detail="unknown tag for this workspace")

def _set_labels(
    db: Session,
    template_id: int,
    category_ids: list[int] | None = None,
    tag_ids: list[int] | None = None,
) -> None:
    if category_ids is not None:
        db.execute(delete(TemplateCategory).where(TemplateCategory.template_id == template_id))
        db.add_all(TemplateCategory(template_id=template_id, category_id=c) for c in dict.fromkeys(category_ids))
    if tag_ids is not None:
        db.execute(delete(TemplateTag).where(TemplateTag.template_id == template_id))
        db.add_all(TemplateTag(template_id=template_id, tag_id=t) for t in dict.fromkeys(tag_ids))

@router.post("", response_model=TemplateOut, status_code=201)
def create_template(
    workspace_id: int,
    payload: TemplateCreateIn,
    ctx: WorkspaceContext = Depends(
        require_workspace_role(WorkspaceRole.OWNER, WorkspaceRole.ADMIN, WorkspaceRole.MEMBER)
    ),
    db: Session = Depends(get_db),
) -> TemplateOut:
    _check_labels(db, workspace_id, payload.category_ids, payload.tag_ids)

    t = ChecklistTemplate(
        workspace_id=workspace_id,
        title=payload.title,
        description=payload.description,
        created_by=ctx.user.id,
    )
    db.add(t)
    db.flush()

    db.add_all(
        ChecklistItem(
            template_id=t.id,
            title=item.title,
            description=item.description,
            position=item.order if item.order is not None else i,
        )
        for i, item in enumerate(payload.items)
    )
    _set_labels(db, t.id, payload.category_ids, payload.tag_ids)

    # the author manages what they created
    db.add(
        Permission(
            level=PermissionLevel.MANAGE,
            workspace_member_id=ctx.membership_id,
            checklist_template_id=t.id,
        )
    )
    db.commit()
    db.refresh(t)
    return _out(db, t)

@router.get("", response_model=list[TemplateOut])
def list_templates(
    category_id: int | None = Query(None, gt=0),
    tag_id: int | None = Query(None, gt=0),
    ctx: WorkspaceContext = Depends(get_workspace_context),
    store: SqlAccessStore = Depends(get_access_store),
    db: Session = Depends(get_db),
) -> list[TemplateOut]:
    q = select(ChecklistTemplate).where(ChecklistTemplate.workspace_id == ctx.workspace_id)

    visible = visible_resource_ids(store, ctx.user.id, ctx.workspace_id, TEMPLATE)
    if visible is not None:
        if not visible:
            return []
        q = q.where(ChecklistTemplate.id.in_(visible))

    if category_id is not None:
        q = q.where(
            ChecklistTemplate.id.in_(
                select(TemplateCategory.template_id).where(TemplateCategory.category_id == category_id)
            )
        )
    if tag_id is not None:
        q = q.where(ChecklistTemplate.id.in_(select(TemplateTag.template_id).where(TemplateTag.tag_id == tag_id)))

    rows = db.scalars(q.order_by(ChecklistTemplate.created_at.desc(), ChecklistTemplate.id.desc())).all()
    return _out_many(db, list(rows))

@router.get("/{resource_id}", response_model=TemplateOut)
def get_template(
    ctx: ResourceContext = Depends(require_access(TEMPLATE, PermissionLevel.VIEW)),
    db: Session = Depends(get_db),
) -> TemplateOut:
    return _out(db, _get_template(db, ctx))

@router.patch("/{resource_id}", response_model=TemplateOut)
def update_template(
    payload: TemplateUpdateIn,
    ctx: ResourceContext = Depends(require_access(TEMPLATE, PermissionLevel.EDIT)),
    db: Session = Depends(get_db),
) -> TemplateOut:
    t = _get_template(db, ctx)
    changes = payload.model_dump(exclude_unset=True)
    for field in ("title", "description", "is_active"):
        if field in changes:
            setattr(t, field, changes[field])

    _check_labels(db, ctx.workspace_id, payload.category_ids or [], payload.tag_ids or [])
    _set_labels(db, t.id, payload.category_ids, payload.tag_ids)

    db.commit()
    db.refresh(t)
    return _out(db, t)

@router.delete("/{resource_id}")
def delete_template(
    ctx: ResourceContext = Depends(require_access(TEMPLATE, PermissionLevel.MANAGE)),
    db: Session = Depends(get_db),
) -> dict:
    t = _get_template(db, ctx)
    assignment_ids = db.scalars(select(ChecklistAssignment.id).where(ChecklistAssignment.template_id == t.id)).all()
    delete_assignments(db, list(assignment_ids))
    db.execute(delete(ChecklistItem).where(ChecklistItem.template_id == t.id))
    db.execute(delete(TemplateCategory).where(TemplateCategory.template_id == t.id))
    db.execute(delete(TemplateTag).where(TemplateTag.template_id == t.id))
    db.execute(delete(Permission).where(Permission.checklist_template_id == t.id))
    db.delete(t)
    db.commit()
    return {"deleted": True}
