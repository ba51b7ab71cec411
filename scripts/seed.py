from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.db import SessionLocal
from app.models.checklist import ChecklistItem, ChecklistTemplate, TemplateCategory, TemplateTag
from app.models.enums import PermissionLevel, WorkspaceRole
from app.models.issue import Issue
from app.models.permission import Permission
from app.models.project import Project
from app.models.taxonomy import Category, Tag
from app.models.team import Team, TeamMember
from app.models.user import User
from app.models.workspace import Workspace, WorkspaceMember

@dataclass
class SeedResult:
    owner_email: str
    editor_email: str
    viewer_email: str
    workspace_id: int
    team_id: int
    template_id: int
    project_id: int
    issue_id: int

def get_or_create_user(db: Session, email: str, name: str | None = None) -> User:
    email = email.lower().strip()
    u = db.scalar(select(User).where(User.email == email))
    if u is None:
        u = User(email=email, name=name)
        db.add(u)
        db.flush()
    return u

def get_or_create_workspace(db: Session, name: str) -> Workspace:
    ws = db.scalar(select(Workspace).where(Workspace.name == name))
    if ws is None:
        ws = Workspace(name=name)
        db.add(ws)
        db.flush()
    return ws

def get_or_create_member(db: Session, workspace_id: int, user_id: str, role: WorkspaceRole) -> WorkspaceMember:
    m = db.scalar(
        select(WorkspaceMember).where(
            WorkspaceMember.workspace_id == workspace_id,
            WorkspaceMember.user_id == user_id,
        )
    )
    if m is None:
        m = WorkspaceMember(workspace_id=workspace_id, user_id=user_id, role=role)
        db.add(m)
        db.flush()
    elif m.role != role:
        m.role = role
        db.flush()
    return m

def get_or_create_team(db: Session, workspace_id: int, name: str, user_ids: list[str]) -> Team:
    t = db.scalar(select(Team).where(Team.workspace_id == workspace_id, Team.name == name))
    if t is None:
        t = Team(workspace_id=workspace_id, name=name)
        db.add(t)
        db.flush()
    for user_id in user_ids:
        if db.get(TeamMember, {"team_id": t.id, "user_id": user_id}) is None:
            db.add(TeamMember(team_id=t.id, user_id=user_id))
    db.flush()
    return t

def get_or_create_template(
    db: Session, workspace_id: int, title: str, created_by: str, items: list[str]
) -> ChecklistTemplate:
    t = db.scalar(
        select(ChecklistTemplate).where(
            ChecklistTemplate.workspace_id == workspace_id,
            ChecklistTemplate.title == title,
        )
    )
    if t is None:
        t = ChecklistTemplate(workspace_id=workspace_id, title=title, created_by=created_by)
        db.add(t)
        db.flush()
        db.add_all(ChecklistItem(template_id=t.id, title=item, position=i) for i, item in enumerate(items))
        db.flush()
    return t

def get_or_create_category(db: Session, workspace_id: int, name: str) -> Category:
    c = db.scalar(select(Category).where(Category.workspace_id == workspace_id, Category.name == name))
    if c is None:
        c = Category(workspace_id=workspace_id, name=name)
        db.add(c)
        db.flush()
    return c

def get_or_create_tag(db: Session, workspace_id: int, name: str, color: str) -> Tag:
    t = db.scalar(select(Tag).where(Tag.workspace_id == workspace_id, Tag.name == name))
    if t is None:
        t = Tag(workspace_id=workspace_id, name=name, color=color)
        db.add(t)
        db.flush()
    return t

def ensure_labels(db: Session, template_id: int, category_id: int, tag_id: int) -> None:
    if db.get(TemplateCategory, {"template_id": template_id, "category_id": category_id}) is None:
        db.add(TemplateCategory(template_id=template_id, category_id=category_id))
    if db.get(TemplateTag, {"template_id": template_id, "tag_id": tag_id}) is None:
        db.add(TemplateTag(template_id=template_id, tag_id=tag_id))
    db.flush()

def get_or_create_issue(db: Session, project_id: int, title: str, created_by: str) -> Issue:
    i = db.scalar(select(Issue).where(Issue.project_id == project_id, Issue.title == title))
    if i is None:
        i = Issue(project_id=project_id, title=title, description=title, created_by=created_by)
        db.add(i)
        db.flush()
    return i

def get_or_create_project(db: Session, workspace_id: int, name: str, created_by: str) -> Project:
    p = db.scalar(select(Project).where(Project.workspace_id == workspace_id, Project.name == name))
    if p is None:
        p = Project(workspace_id=workspace_id, name=name, created_by=created_by)
        db.add(p)
        db.flush()
    return p

def ensure_grant(db: Session, level: PermissionLevel, **target: int) -> Permission:
    # target: one principal column and one resource column, e.g. team_id=..., project_id=...
    q = select(Permission).where(Permission.level == level)
    for column, value in target.items():
        q = q.where(getattr(Permission, column) == value)
    g = db.scalar(q)
    if g is None:
        g = Permission(level=level, **target)
        db.add(g)
        db.flush()
    return g

def seed(db: Session | None = None) -> SeedResult:
    owns_session = db is None
    db = db or SessionLocal()
    try:
        owner = get_or_create_user(db, "owner@example.com", "owner")
        editor = get_or_create_user(db, "editor@example.com", "editor")
        viewer = get_or_create_user(db, "viewer@example.com", "viewer")

        ws = get_or_create_workspace(db, "seeded workspace")

        get_or_create_member(db, ws.id, owner.id, WorkspaceRole.OWNER)
        editor_m = get_or_create_member(db, ws.id, editor.id, WorkspaceRole.MEMBER)
        viewer_m = get_or_create_member(db, ws.id, viewer.id, WorkspaceRole.VIEWER)

        team = get_or_create_team(db, ws.id, "quality", [editor.id])

        template = get_or_create_template(
            db, ws.id, "daily inspection", owner.id, ["fire exits clear", "guards in place", "floor dry"]
        )
        safety = get_or_create_category(db, ws.id, "safety")
        daily = get_or_create_tag(db, ws.id, "daily", "green")
        ensure_labels(db, template.id, safety.id, daily.id)

        project = get_or_create_project(db, ws.id, "plant rollout", owner.id)
        issue = get_or_create_issue(db, project.id, "line 2 guard missing", owner.id)

        # editor edits through the team, viewer reads directly
        ensure_grant(db, PermissionLevel.EDIT, team_id=team.id, checklist_template_id=template.id)
        ensure_grant(db, PermissionLevel.VIEW, workspace_member_id=viewer_m.id, checklist_template_id=template.id)
        ensure_grant(db, PermissionLevel.MANAGE, workspace_member_id=editor_m.id, project_id=project.id)

        db.commit()

        return SeedResult(
            owner_email=owner.email,
            editor_email=editor.email,
            viewer_email=viewer.email,
            workspace_id=ws.id,
            team_id=team.id,
            template_id=template.id,
            project_id=project.id,
            issue_id=issue.id,
        )
    finally:
        if owns_session:
            db.close()

if __name__ == "__main__":
    r = seed()
    print("seed complete")
    print(f"workspace_id={r.workspace_id}")
    print(f"team_id={r.team_id}")
    print(f"template_id={r.template_id}")
    print(f"project_id={r.project_id}")
    print(f"issue_id={r.issue_id}")
    print("users:")
    print(f"  owner:  {r.owner_email}")
    print(f"  editor: {r.editor_email}")
    print(f"  viewer: {r.viewer_email}")
