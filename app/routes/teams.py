from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.db import get_db
from app.models.assignment import AssignmentTeam
from app.models.enums import WorkspaceRole
from app.models.issue import IssueTeam
from app.models.permission import Permission
from app.models.team import Team, TeamMember
from app.models.user import User
from app.models.workspace import WorkspaceMember
from app.rbac.deps import WorkspaceContext, get_workspace_context, require_workspace_role
from app.schemas.teams import TeamCreateIn, TeamMemberAddIn, TeamMemberOut, TeamOut

router = APIRouter(prefix="/workspaces/{workspace_id}/teams", tags=["teams"])

require_admin = require_workspace_role(WorkspaceRole.OWNER, WorkspaceRole.ADMIN)

def _get_team(db: Session, workspace_id: int, team_id: int) -> Team:
    t = db.scalar(select(Team).where(Team.id == team_id, Team.workspace_id == workspace_id))
    if t is None:
        raise HTTPException(status_code=404, detail="team not found")
    return t

@router.get("", response_model=list[TeamOut])
def list_teams(
    ctx: WorkspaceContext = Depends(get_workspace_context),
    db: Session = Depends(get_db),
) -> list[TeamOut]:
    q = (
        select(Team, func.count(TeamMember.user_id))
        .outerjoin(TeamMember, TeamMember.team_id == Team.id)
        .where(Team.workspace_id == ctx.workspace_id)
        .group_by(Team.id)
        .order_by(Team.name.asc())
    )
    return [
        TeamOut(id=t.id, workspace_id=t.workspace_id, name=t.name, member_count=n)
        for t, n in db.execute(q).all()
    ]

@router.post("", response_model=TeamOut, status_code=201)
def create_team(
    workspace_id: int,
    payload: TeamCreateIn,
    ctx: WorkspaceContext = Depends(require_admin),
    db: Session = Depends(get_db),
) -> TeamOut:
    t = Team(workspace_id=workspace_id, name=payload.name.strip())
    db.add(t)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="a team with this name already exists")
    db.refresh(t)
    return TeamOut(id=t.id, workspace_id=t.workspace_id, name=t.name, member_count=0)

@router.delete("/{team_id}")
def delete_team(
    workspace_id: int,
    team_id: int,
    ctx: WorkspaceContext = Depends(require_admin),
    db: Session = Depends(get_db),
) -> dict:
    t = _get_team(db, workspace_id, team_id)
    db.execute(delete(Permission).where(Permission.team_id == t.id))
    db.execute(delete(AssignmentTeam).where(AssignmentTeam.team_id == t.id))
    db.execute(delete(IssueTeam).where(IssueTeam.team_id == t.id))
    db.execute(delete(TeamMember).where(TeamMember.team_id == t.id))
    db.delete(t)
    db.commit()
    return {"deleted": True}

@router.get("/{team_id}/members", response_model=list[TeamMemberOut])
def list_team_members(
    workspace_id: int,
    team_id: int,
    ctx: WorkspaceContext = Depends(require_admin),
    db: Session = Depends(get_db),
) -> list[TeamMemberOut]:
    _get_team(db, workspace_id, team_id)
    q = (
        select(TeamMember, User)
        .join(User, User.id == TeamMember.user_id)
        .where(TeamMember.team_id == team_id)
        .order_by(TeamMember.joined_at.asc())
    )
    return [
        TeamMemberOut(team_id=tm.team_id, user_id=u.id, email=u.email, name=u.name)
        for tm, u in db.execute(q).all()
    ]

@router.post("/{team_id}/members", response_model=TeamMemberOut, status_code=201)
def add_team_member(
    workspace_id: int,
    team_id: int,
    payload: TeamMemberAddIn,
    ctx: WorkspaceContext = Depends(require_admin),
    db: Session = Depends(get_db),
) -> TeamMemberOut:
    _get_team(db, workspace_id, team_id)

    u = db.get(User, payload.user_id)
    if u is None:
        raise HTTPException(status_code=404, detail="user not found")

    is_member = db.scalar(
        select(WorkspaceMember.id).where(
            WorkspaceMember.workspace_id == workspace_id,
            WorkspaceMember.user_id == u.id,
        )
    )
    if is_member is None:
        raise HTTPException(status_code=400, detail="user is not a member of this workspace")

    if db.get(TeamMember, {"team_id": team_id, "user_id": u.id}) is not None:
        raise HTTPException(status_code=409, detail="user is already in this team")

    db.add(TeamMember(team_id=team_id, user_id=u.id))
    db.commit()
    return TeamMemberOut(team_id=team_id, user_id=u.id, email=u.email, name=u.name)

@router.delete("/{team_id}/members/{user_id}")
def remove_team_member(
    workspace_id: int,
    team_id: int,
    user_id: str,
    ctx: WorkspaceContext = Depends(require_admin),
    db: Session = Depends(get_db),
) -> dict:
    _get_team(db, workspace_id, team_id)
    tm = db.get(TeamMember, {"team_id": team_id, "user_id": user_id})
    if tm is None:
        raise HTTPException(status_code=404, detail="team member not found")
    db.delete(tm)
    db.commit()
    return {"deleted": True}
