from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.team import Team, TeamMember
from app.models.workspace import WorkspaceMember

def check_assignees(db: Session, workspace_id: int, user_ids: list[str], team_ids: list[int]) -> None:
    """Reject users or teams that do not belong to the workspace."""
    users = set(user_ids)
    if users:
        found = set(
            db.scalars(
                select(WorkspaceMember.user_id).where(
                    WorkspaceMember.workspace_id == workspace_id,
                    WorkspaceMember.user_id.in_(users),
                )
            )
        )
        missing = sorted(users - found)
        if missing:
            raise HTTPException(status_code=400, detail=f"not members of this workspace: {', '.join(missing)}")

    teams = set(team_ids)
    if teams:
        found = set(db.scalars(select(Team.id).where(Team.workspace_id == workspace_id, Team.id.in_(teams))))
        missing = sorted(teams - found)
        if missing:
            raise HTTPException(
                status_code=400, detail=f"teams not in this workspace: {', '.join(map(str, missing))}"
            )

def user_team_ids(db: Session, workspace_id: int, user_id: str) -> set[int]:
    q = (
        select(TeamMember.team_id)
        .join(Team, Team.id == TeamMember.team_id)
        .where(TeamMember.user_id == user_id, Team.workspace_id == workspace_id)
    )
    return set(db.scalars(q))
