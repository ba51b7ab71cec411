from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.auth.deps import get_current_user
from app.db import get_db
from app.models.assignment import AssignmentAssignee, ChecklistAssignment
from app.models.checklist import ChecklistTemplate
from app.models.enums import PermissionLevel, WorkspaceRole
from app.models.issue import Issue, IssueAssignee
from app.models.permission import Permission
from app.models.project import Project
from app.models.team import Team, TeamMember
from app.models.user import User
from app.models.workspace import Workspace, WorkspaceMember
from app.rbac.deps import (
    WorkspaceContext,
    get_access_store,
    get_workspace_context,
    require_workspace_role,
)
from app.rbac.resolver import resolve_access
from app.rbac.resources import resource_ref
from app.rbac.store import SqlAccessStore
from app.schemas.workspaces import (
    AccessOut,
    MemberAddIn,
    MemberOut,
    MemberUpdateIn,
    WorkspaceCreateIn,
    WorkspaceOut,
)

router = APIRouter(prefix="/workspaces", tags=["workspaces"])

require_admin = require_workspace_role(WorkspaceRole.OWNER, WorkspaceRole.ADMIN)

def _member_out(m: WorkspaceMember, u: User) -> MemberOut:
    return MemberOut(
        id=m.id,
        workspace_id=m.workspace_id,
        user_id=u.id,
        email=u.email,
        name=u.name,
        role=m.role,
    )

def _get_member(db: Session, workspace_id: int, member_id: int) -> WorkspaceMember:
    m = db.get(WorkspaceMember, member_id)
    if m is None or m.workspace_id != workspace_id:
        raise HTTPException(status_code=404, detail="member not found")
    return m

@router.post("", response_model=WorkspaceOut)
def create_workspace(
    payload: WorkspaceCreateIn,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> WorkspaceOut:
    ws = Workspace(name=payload.name)
    db.add(ws)
    db.flush()

    db.add(WorkspaceMember(workspace_id=ws.id, user_id=user.id, role=WorkspaceRole.OWNER))
    db.commit()

    return WorkspaceOut(id=ws.id, name=ws.name, role=WorkspaceRole.OWNER)

@router.get("", response_model=list[WorkspaceOut])
def list_workspaces(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[WorkspaceOut]:
    q = (
        select(Workspace, WorkspaceMember.role)
        .join(WorkspaceMember, WorkspaceMember.workspace_id == Workspace.id)
        .where(WorkspaceMember.user_id == user.id)
        .order_by(Workspace.created_at.desc(), Workspace.id.desc())
    )
    return [WorkspaceOut(id=ws.id, name=ws.name, role=role) for ws, role in db.execute(q).all()]

@router.get("/{workspace_id}", response_model=WorkspaceOut)
def get_workspace(
    ctx: WorkspaceContext = Depends(get_workspace_context),
    db: Session = Depends(get_db),
) -> WorkspaceOut:
    ws = db.get(Workspace, ctx.workspace_id)
    return WorkspaceOut(id=ws.id, name=ws.name, role=ctx.role)

@router.get("/{workspace_id}/access", response_model=AccessOut)
def check_access(
    workspace_id: int,
    resource_type: str = Query(...),
    resource_id: int = Query(..., gt=0),
    level: str = Query(PermissionLevel.VIEW.value),
    user: User = Depends(get_current_user),
    store: SqlAccessStore = Depends(get_access_store),
) -> AccessOut:
    # unknown resource_type or level -> InvalidArgumentError -> 400
    resource = resource_ref(resource_type, resource_id)
    result = resolve_access(store, user.id, workspace_id, resource, level)
    return AccessOut(**result.as_dict())

@router.get("/{workspace_id}/members", response_model=list[MemberOut])
def list_members(
    ctx: WorkspaceContext = Depends(get_workspace_context),
    db: Session = Depends(get_db),
) -> list[MemberOut]:
    q = (
        select(WorkspaceMember, User)
        .join(User, User.id == WorkspaceMember.user_id)
        .where(WorkspaceMember.workspace_id == ctx.workspace_id)
        .order_by(WorkspaceMember.joined_at.asc(), WorkspaceMember.id.asc())
    )
    return [_member_out(m, u) for m, u in db.execute(q).all()]

@router.post("/{workspace_id}/members", response_model=MemberOut, status_code=201)
def add_member(
    workspace_id: int,
    payload: MemberAddIn,
    ctx: WorkspaceContext = Depends(require_admin),
    db: Session = Depends(get_db),
) -> MemberOut:
    if payload.role == WorkspaceRole.OWNER:
        raise HTTPException(status_code=400, detail="owner role cannot be assigned")

    email = payload.email.lower().strip()
    invited = db.scalar(select(User).where(User.email == email))
    if invited is None:
        raise HTTPException(status_code=404, detail="user not found")

    m = WorkspaceMember(workspace_id=workspace_id, user_id=invited.id, role=payload.role)
    db.add(m)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="user is already a member")
    db.refresh(m)
    return _member_out(m, invited)

@router.patch("/{workspace_id}/members/{member_id}", response_model=MemberOut)
def update_member(
    workspace_id: int,
    member_id: int,
    payload: MemberUpdateIn,
    ctx: WorkspaceContext = Depends(require_admin),
    db: Session = Depends(get_db),
) -> MemberOut:
    m = _get_member(db, workspace_id, member_id)
    if m.role == WorkspaceRole.OWNER:
        raise HTTPException(status_code=403, detail="the owner's role cannot be changed")
    if payload.role == WorkspaceRole.OWNER:
        raise HTTPException(status_code=400, detail="owner role cannot be assigned")

    m.role = payload.role
    db.commit()
    db.refresh(m)
    return _member_out(m, db.get(User, m.user_id))

@router.delete("/{workspace_id}/members/{member_id}")
def remove_member(
    workspace_id: int,
    member_id: int,
    ctx: WorkspaceContext = Depends(require_admin),
    db: Session = Depends(get_db),
) -> dict:
    m = _get_member(db, workspace_id, member_id)
    if m.role == WorkspaceRole.OWNER:
        raise HTTPException(status_code=403, detail="the owner cannot be removed")

    # anything tying the user to this workspace goes with the membership
    db.execute(delete(Permission).where(Permission.workspace_member_id == m.id))
    team_ids = select(Team.id).where(Team.workspace_id == workspace_id)
    db.execute(
        delete(TeamMember).where(TeamMember.user_id == m.user_id, TeamMember.team_id.in_(team_ids))
    )
    assignment_ids = (
        select(ChecklistAssignment.id)
        .join(ChecklistTemplate, ChecklistTemplate.id == ChecklistAssignment.template_id)
        .where(ChecklistTemplate.workspace_id == workspace_id)
    )
    db.execute(
        delete(AssignmentAssignee)
        .where(AssignmentAssignee.user_id == m.user_id, AssignmentAssignee.assignment_id.in_(assignment_ids))
        .execution_options(synchronize_session=False)
    )
    issue_ids = (
        select(Issue.id)
        .join(Project, Project.id == Issue.project_id)
        .where(Project.workspace_id == workspace_id)
    )
    db.execute(
        delete(IssueAssignee)
        .where(IssueAssignee.user_id == m.user_id, IssueAssignee.issue_id.in_(issue_ids))
        .execution_options(synchronize_session=False)
    )
    db.delete(m)
    db.commit()
    return {"deleted": True}
