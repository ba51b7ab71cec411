from app.models.assignment import AssignmentAssignee, AssignmentTeam, ChecklistAssignment, ChecklistResponse
from app.models.checklist import ChecklistItem, ChecklistTemplate, TemplateCategory, TemplateTag
from app.models.issue import Issue, IssueAssignee, IssueTeam
from app.models.permission import Permission
from app.models.project import Project
from app.models.taxonomy import Category, Tag
from app.models.team import Team, TeamMember
from app.models.user import User
from app.models.workspace import Workspace, WorkspaceMember

__all__ = [
    "User",
    "Workspace",
    "WorkspaceMember",
    "Team",
    "TeamMember",
    "ChecklistTemplate",
    "ChecklistItem",
    "TemplateCategory",
    "TemplateTag",
    "Category",
    "Tag",
    "ChecklistAssignment",
    "AssignmentAssignee",
    "AssignmentTeam",
    "ChecklistResponse",
    "Project",
    "Issue",
    "IssueAssignee",
    "IssueTeam",
    "Permission",
]
