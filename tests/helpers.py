from sqlalchemy.orm import Session

from app.auth.tokens import issue_access_token
from app.models.enums import PermissionLevel, WorkspaceRole
from app.models.permission import Permission
from app.models.team import Team, TeamMember
from app.models.user import User
from app.models.workspace import Workspace, WorkspaceMember

def auth(user: User) -> dict[str, str]:
    return {"authorization": f"bearer {issue_access_token(user.id)}"}

def make_user(db: Session, email: str) -> User:
    u = User(email=email.lower(), name=email.split("@")[0])
    db.add(u)
    db.commit()
    return u

def make_workspace(db: Session, name: str, owner: User | None = None) -> Workspace:
    ws = Workspace(name=name)
    db.add(ws)
    db.flush()
    if owner is not None:
        db.add(WorkspaceMember(workspace_id=ws.id, user_id=owner.id, role=WorkspaceRole.OWNER))
    db.commit()
    return ws

def make_member(db: Session, workspace: Workspace, user: User, role: WorkspaceRole) -> WorkspaceMember:
    m = WorkspaceMember(workspace_id=workspace.id, user_id=user.id, role=role)
    db.add(m)
    db.commit()
    return m

def make_team(db: Session, workspace: Workspace, name: str, *users: User) -> Team:
    t = Team(workspace_id=workspace.id, name=name)
    db.add(t)
    db.flush()
    for u in users:
        db.add(TeamMember(team_id=t.id, user_id=u.id))
    db.commit()
    return t

def grant(db: Session, level: PermissionLevel, **target: int) -> Permission:
    g = Permission(level=level, **target)
    db.add(g)
    db.commit()
    return g
