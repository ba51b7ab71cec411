from pydantic import BaseModel, EmailStr, Field

from app.models.enums import PermissionLevel, WorkspaceRole

class WorkspaceCreateIn(BaseModel):
    name: str = Field(min_length=1, max_length=120)

class WorkspaceOut(BaseModel):
    id: int
    name: str
    role: WorkspaceRole

class MemberAddIn(BaseModel):
    email: EmailStr
    role: WorkspaceRole = WorkspaceRole.MEMBER

class MemberUpdateIn(BaseModel):
    role: WorkspaceRole

class MemberOut(BaseModel):
    id: int
    workspace_id: int
    user_id: str
    email: str
    name: str | None
    role: WorkspaceRole

class AccessOut(BaseModel):
    hasAccess: bool
    level: PermissionLevel | None
    role: WorkspaceRole | None
