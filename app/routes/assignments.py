from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import delete, or_, select, update
from sqlalchemy.orm import Session

from app.assignees import check_assignees, user_team_ids
from app.auth.tokens import now_utc
from app.db import get_db
from app.errors import AccessDenied
from app.models.assignment import AssignmentAssignee, AssignmentTeam, ChecklistAssignment, ChecklistResponse
from app.models.checklist import ChecklistItem, ChecklistTemplate
from app.models.enums import PermissionLevel, ResourceType, ResponseStatus
from app.models.issue import Issue
from app.rbac.deps import (
    ResourceContext,
    WorkspaceContext,
    enforce_access,
    get_access_store,
    get_workspace_context,
    not_found,
    require_access,
)
from app.rbac.resources import ChecklistTemplateRef
from app.rbac.store import SqlAccessStore
from app.schemas.assignments import AssignmentCreateIn, AssignmentOut, ResponseOut, ResponsesUpdateIn

router = APIRouter(prefix="/workspaces/{workspace_id}", tags=["assignments"])

TEMPLATE = ResourceType.checklist_template

def delete_assignments(db: Session, assignment_ids: list[int]) -> None:
    if not assignment_ids:
        return
    response_ids = select(ChecklistResponse.id).where(ChecklistResponse.assignment_id.in_(assignment_ids))
    db.execute(
        update(Issue)
        .where(Issue.checklist_response_id.in_(response_ids))
        .values(checklist_response_id=None)
        .execution_options(synchronize_session=False)
    )
    db.execute(delete(ChecklistResponse).where(ChecklistResponse.assignment_id.in_(assignment_ids)))
    db.execute(delete(AssignmentAssignee).where(AssignmentAssignee.assignment_id.in_(assignment_ids)))
    db.execute(delete(AssignmentTeam).where(AssignmentTeam.assignment_id.in_(assignment_ids)))
    db.execute(delete(ChecklistAssignment).where(ChecklistAssignment.id.in_(assignment_ids)))

def _out(db: Session, a: ChecklistAssignment, template: ChecklistTemplate) -> AssignmentOut:
    rows = db.execute(
        select(ChecklistResponse, ChecklistItem)
        .join(ChecklistItem, ChecklistItem.id == ChecklistResponse.item_id)
        .where(ChecklistResponse.assignment_id == a.id)
        .order_by(ChecklistItem.position.asc(), ChecklistItem.id.asc())
    ).all()
    responses = [
        ResponseOut(
            id=r.id,
            item_id=item.id,
            item_title=item.title,
            order=item.position,
            status=r.status,
            responded_by=r.responded_by,
            responded_at=r.responded_at,
        )
        for r, item in rows
    ]
    user_ids = db.scalars(
        select(AssignmentAssignee.user_id)
        .where(AssignmentAssignee.assignment_id == a.id)
        .order_by(AssignmentAssignee.user_id)
    ).all()
    team_ids = db.scalars(
        select(AssignmentTeam.team_id).where(AssignmentTeam.assignment_id == a.id).order_by(AssignmentTeam.team_id)
    ).all()
    return AssignmentOut(
        id=a.id,
        template_id=template.id,
        template_title=template.title,
        due_date=a.due_date,
        created_by=a.created_by,
        assigned_user_ids=list(user_ids),
        assigned_team_ids=list(team_ids),
        completed=bool(responses) and all(r.status != ResponseStatus.NONE for r in responses),
        responses=responses,
    )

def _template_in_workspace(db: Session, template_id: int, workspace_id: int) -> ChecklistTemplate:
    t = db.scalar(
        select(ChecklistTemplate).where(
            ChecklistTemplate.id == template_id,
            ChecklistTemplate.workspace_id == workspace_id,
        )
    )
    if t is None:
        raise HTTPException(status_code=404, detail="checklist template not found")
    return t

def _load(db: Session, ctx: WorkspaceContext, assignment_id: int) -> tuple[ChecklistAssignment, ChecklistTemplate]:
    row = db.execute(
        select(ChecklistAssignment, ChecklistTemplate)
        .join(ChecklistTemplate, ChecklistTemplate.id == ChecklistAssignment.template_id)
        .where(
            ChecklistAssignment.id == assignment_id,
            ChecklistTemplate.workspace_id == ctx.workspace_id,
        )
    ).first()
    if row is None:
        raise not_found(ctx, "checklist assignment not found")
    return row[0], row[1]

def _is_assignee(db: Session, ctx: WorkspaceContext, assignment_id: int) -> bool:
    direct = db.scalar(
        select(AssignmentAssignee.user_id).where(
            AssignmentAssignee.assignment_id == assignment_id,
            AssignmentAssignee.user_id == ctx.user.id,
        )
    )
    if direct is not None:
        return True

    teams = user_team_ids(db, ctx.workspace_id, ctx.user.id)
    if not teams:
        return False
    via_team = db.scalar(
        select(AssignmentTeam.team_id)
        .where(AssignmentTeam.assignment_id == assignment_id, AssignmentTeam.team_id.in_(teams))
        .limit(1)
    )
    return via_team is not None

@router.post("/checklist-templates/{resource_id}/assignments", response_model=AssignmentOut, status_code=201)
def create_assignment(
    payload: AssignmentCreateIn,
    ctx: ResourceContext = Depends(require_access(TEMPLATE, PermissionLevel.EDIT)),
    db: Session = Depends(get_db),
) -> AssignmentOut:
    template = _template_in_workspace(db, ctx.resource.id, ctx.workspace_id)
    if not template.is_active:
        raise HTTPException(status_code=400, detail="checklist template is not active")

    item_ids = db.scalars(
        select(ChecklistItem.id)
        .where(ChecklistItem.template_id == template.id)
        .order_by(ChecklistItem.position.asc(), ChecklistItem.id.asc())
    ).all()
    if not item_ids:
        raise HTTPException(status_code=400, detail="checklist template has no items")

    check_assignees(db, ctx.workspace_id, payload.assigned_user_ids, payload.assigned_team_ids)

    a = ChecklistAssignment(template_id=template.id, due_date=payload.due_date, created_by=ctx.user.id)
    db.add(a)
    db.flush()

    db.add_all(ChecklistResponse(assignment_id=a.id, item_id=item_id) for item_id in item_ids)
    db.add_all(AssignmentAssignee(assignment_id=a.id, user_id=u) for u in dict.fromkeys(payload.assigned_user_ids))
    db.add_all(AssignmentTeam(assignment_id=a.id, team_id=t) for t in dict.fromkeys(payload.assigned_team_ids))
    db.commit()
    db.refresh(a)
    return _out(db, a, template)

@router.get("/checklist-templates/{resource_id}/assignments", response_model=list[AssignmentOut])
def list_template_assignments(
    ctx: ResourceContext = Depends(require_access(TEMPLATE, PermissionLevel.VIEW)),
    db: Session = Depends(get_db),
) -> list[AssignmentOut]:
    template = _template_in_workspace(db, ctx.resource.id, ctx.workspace_id)
    rows = db.scalars(
        select(ChecklistAssignment)
        .where(ChecklistAssignment.template_id == template.id)
        .order_by(ChecklistAssignment.created_at.desc(), ChecklistAssignment.id.desc())
    ).all()
    return [_out(db, a, template) for a in rows]

@router.get("/checklist-assignments", response_model=list[AssignmentOut])
def list_my_assignments(
    ctx: WorkspaceContext = Depends(get_workspace_context),
    db: Session = Depends(get_db),
) -> list[AssignmentOut]:
    mine = ChecklistAssignment.id.in_(
        select(AssignmentAssignee.assignment_id).where(AssignmentAssignee.user_id == ctx.user.id)
    )
    teams = user_team_ids(db, ctx.workspace_id, ctx.user.id)
    if teams:
        mine = or_(
            mine,
            ChecklistAssignment.id.in_(
                select(AssignmentTeam.assignment_id).where(AssignmentTeam.team_id.in_(teams))
            ),
        )

    q = (
        select(ChecklistAssignment, ChecklistTemplate)
        .join(ChecklistTemplate, ChecklistTemplate.id == ChecklistAssignment.template_id)
        .where(ChecklistTemplate.workspace_id == ctx.workspace_id, mine)
        .order_by(ChecklistAssignment.created_at.desc(), ChecklistAssignment.id.desc())
    )
    return [_out(db, a, t) for a, t in db.execute(q).all()]

@router.get("/checklist-assignments/{assignment_id}", response_model=AssignmentOut)
def get_assignment(
    assignment_id: int,
    ctx: WorkspaceContext = Depends(get_workspace_context),
    store: SqlAccessStore = Depends(get_access_store),
    db: Session = Depends(get_db),
) -> AssignmentOut:
    a, template = _load(db, ctx, assignment_id)
    # assignees see their own checklist without a grant on the template
    if not _is_assignee(db, ctx, a.id):
        enforce_access(store, ctx.user, ctx.workspace_id, ChecklistTemplateRef(template.id), PermissionLevel.VIEW)
    return _out(db, a, template)

@router.patch("/checklist-assignments/{assignment_id}/responses", response_model=AssignmentOut)
def update_responses(
    assignment_id: int,
    payload: ResponsesUpdateIn,
    ctx: WorkspaceContext = Depends(get_workspace_context),
    db: Session = Depends(get_db),
) -> AssignmentOut:
    a, template = _load(db, ctx, assignment_id)
    if not _is_assignee(db, ctx, a.id):
        raise AccessDenied()

    by_item = {
        r.item_id: r
        for r in db.scalars(select(ChecklistResponse).where(ChecklistResponse.assignment_id == a.id))
    }
    unknown = sorted({u.item_id for u in payload.responses} - by_item.keys())
    if unknown:
        raise HTTPException(
            status_code=400, detail=f"items not in this assignment: {', '.join(map(str, unknown))}"
        )

    now = now_utc()
    for u in payload.responses:
        r = by_item[u.item_id]
        r.status = u.status
        r.responded_by = ctx.user.id
        r.responded_at = now
    db.commit()
    return _out(db, a, template)

@router.delete("/checklist-assignments/{assignment_id}")
def delete_assignment(
    assignment_id: int,
    ctx: WorkspaceContext = Depends(get_workspace_context),
    store: SqlAccessStore = Depends(get_access_store),
    db: Session = Depends(get_db),
) -> dict:
    a, template = _load(db, ctx, assignment_id)
    enforce_access(store, ctx.user, ctx.workspace_id, ChecklistTemplateRef(template.id), PermissionLevel.EDIT)
    delete_assignments(db, [a.id])
    db.commit()
    return {"deleted": True}
