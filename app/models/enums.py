from enum import Enum

class WorkspaceRole(str, Enum):
    OWNER = "OWNER"
    ADMIN = "ADMIN"
    MEMBER = "MEMBER"
    VIEWER = "VIEWER"
    GUEST = "GUEST"

ELEVATED_ROLES = frozenset({WorkspaceRole.OWNER, WorkspaceRole.ADMIN})

class PermissionLevel(str, Enum):
    VIEW = "VIEW"
    EDIT = "EDIT"
    MANAGE = "MANAGE"

    @property
    def rank(self) -> int:
        return LEVEL_RANK[self]

LEVEL_RANK: dict[PermissionLevel, int] = {
    PermissionLevel.VIEW: 1,
    PermissionLevel.EDIT: 2,
    PermissionLevel.MANAGE: 3,
}

class ResourceType(str, Enum):
    checklist_template = "ChecklistTemplate"
    project = "Project"

class ResponseStatus(str, Enum):
    NONE = "NONE"
    ACCEPTABLE = "ACCEPTABLE"
    UNACCEPTABLE = "UNACCEPTABLE"

class IssueStatus(str, Enum):
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    CLOSED = "CLOSED"
