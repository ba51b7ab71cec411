from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.assignees import check_assignees
from app.db import get_db
from app.models.assignment import ChecklistAssignment, ChecklistResponse
from app.models.checklist import ChecklistTemplate
from app.models.enums import IssueStatus, PermissionLevel, ResourceType
from app.models.issue import Issue, IssueAssignee, IssueTeam
from app.models.project import Project
from app.rbac.deps import ResourceContext, require_access
from app.schemas.issues import IssueCreateIn, IssueOut, IssueUpdateIn

router = APIRouter(prefix="/workspaces/{workspace_id}/projects/{resource_id}/issues", tags=["issues"])

PROJECT = ResourceType.project

def delete_issues(db: Session, project_id: int) -> None:
    issue_ids = list(db.scalars(select(Issue.id).where(Issue.project_id == project_id)))
    if not issue_ids:
        return
    db.execute(delete(IssueAssignee).where(IssueAssignee.issue_id.in_(issue_ids)))
    db.execute(delete(IssueTeam).where(IssueTeam.issue_id.in_(issue_ids)))
    db.execute(delete(Issue).where(Issue.id.in_(issue_ids)))

def _out(db: Session, i: Issue) -> IssueOut:
    user_ids = db.scalars(
        select(IssueAssignee.user_id).where(IssueAssignee.issue_id == i.id).order_by(IssueAssignee.user_id)
    ).all()
    team_ids = db.scalars(
        select(IssueTeam.team_id).where(IssueTeam.issue_id == i.id).order_by(IssueTeam.team_id)
    ).all()
    return IssueOut(
        id=i.id,
        project_id=i.project_id,
        checklist_response_id=i.checklist_response_id,
        title=i.title,
        description=i.description,
        status=i.status,
        created_by=i.created_by,
        created_at=i.created_at,
        assigned_user_ids=list(user_ids),
        assigned_team_ids=list(team_ids),
    )

def _check_project(db: Session, ctx: ResourceContext) -> None:
    found = db.scalar(
        select(Project.id).where(Project.id == ctx.resource.id, Project.workspace_id == ctx.workspace_id)
    )
    if found is None:
        raise HTTPException(status_code=404, detail="project not found")

def _get_issue(db: Session, ctx: ResourceContext, issue_id: int) -> Issue:
    _check_project(db, ctx)
    i = db.scalar(select(Issue).where(Issue.id == issue_id, Issue.project_id == ctx.resource.id))
    if i is None:
        raise HTTPException(status_code=404, detail="issue not found")
    return i

def _check_response(db: Session, workspace_id: int, response_id: int) -> None:
    found = db.scalar(
        select(ChecklistResponse.id)
        .join(ChecklistAssignment, ChecklistAssignment.id == ChecklistResponse.assignment_id)
        .join(ChecklistTemplate, ChecklistTemplate.id == ChecklistAssignment.template_id)
        .where(ChecklistResponse.id == response_id, ChecklistTemplate.workspace_id == workspace_id)
    )
    if found is None:
        raise HTTPException(status_code=400, detail="checklist response not found in this workspace")

def _set_assignees(
    db: Session,
    issue_id: int,
    user_ids: list[str] | None = None,
    team_ids: list[int] | None = None,
) -> None:
    if user_ids is not None:
        db.execute(delete(IssueAssignee).where(IssueAssignee.issue_id == issue_id))
        db.add_all(IssueAssignee(issue_id=issue_id, user_id=u) for u in dict.fromkeys(user_ids))
    if team_ids is not None:
        db.execute(delete(IssueTeam).where(IssueTeam.issue_id == issue_id))
        db.add_all(IssueTeam(issue_id=issue_id, team_id=t) for t in dict.fromkeys(team_ids))

@router.get("", response_model=list[IssueOut])
def list_issues(
    status: IssueStatus | None = Query(None),
    ctx: ResourceContext = Depends(require_access(PROJECT, PermissionLevel.VIEW)),
    db: Session = Depends(get_db),
) -> list[IssueOut]:
    _check_project(db, ctx)
    q = select(Issue).where(Issue.project_id == ctx.resource.id)
    if status is not None:
        q = q.where(Issue.status == status)
    rows = db.scalars(q.order_by(Issue.created_at.desc(), Issue.id.desc())).all()
    return [_out(db, i) for i in rows]

@router.post("", response_model=IssueOut, status_code=201)
def create_issue(
    payload: IssueCreateIn,
    ctx: ResourceContext = Depends(require_access(PROJECT, PermissionLevel.EDIT)),
    db: Session = Depends(get_db),
) -> IssueOut:
    _check_project(db, ctx)
    if payload.checklist_response_id is not None:
        _check_response(db, ctx.workspace_id, payload.checklist_response_id)
    check_assignees(db, ctx.workspace_id, payload.assigned_user_ids, payload.assigned_team_ids)

    i = Issue(
        project_id=ctx.resource.id,
        checklist_response_id=payload.checklist_response_id,
        title=payload.title,
        description=payload.description,
        created_by=ctx.user.id,
    )
    db.add(i)
    db.flush()
    _set_assignees(db, i.id, payload.assigned_user_ids, payload.assigned_team_ids)
    db.commit()
    db.refresh(i)
    return _out(db, i)

@router.get("/{issue_id}", response_model=IssueOut)
def get_issue(
    issue_id: int,
    ctx: ResourceContext = Depends(require_access(PROJECT, PermissionLevel.VIEW)),
    db: Session = Depends(get_db),
) -> IssueOut:
    return _out(db, _get_issue(db, ctx, issue_id))

@router.patch("/{issue_id}", response_model=IssueOut)
def update_issue(
    issue_id: int,
    payload: IssueUpdateIn,
    ctx: ResourceContext = Depends(require_access(PROJECT, PermissionLevel.EDIT)),
    db: Session = Depends(get_db),
) -> IssueOut:
    i = _get_issue(db, ctx, issue_id)
    changes = payload.model_dump(exclude_unset=True)
    for field in ("title", "description", "status"):
        if changes.get(field) is not None:
            setattr(i, field, changes[field])

    check_assignees(db, ctx.workspace_id, payload.assigned_user_ids or [], payload.assigned_team_ids or [])
    _set_assignees(db, i.id, payload.assigned_user_ids, payload.assigned_team_ids)

    db.commit()
    db.refresh(i)
    return _out(db, i)

@router.delete("/{issue_id}")
def delete_issue(
    issue_id: int,
    ctx: ResourceContext = Depends(require_access(PROJECT, PermissionLevel.MANAGE)),
    db: Session = Depends(get_db),
) -> dict:
    i = _get_issue(db, ctx, issue_id)
    db.execute(delete(IssueAssignee).where(IssueAssignee.issue_id == i.id))
    db.execute(delete(IssueTeam).where(IssueTeam.issue_id == i.id))
    db.delete(i)
    db.commit()
    return {"deleted": True}
