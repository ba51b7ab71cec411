from datetime import datetime

from pydantic import BaseModel, Field

from app.models.enums import IssueStatus

class IssueCreateIn(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    checklist_response_id: int | None = Field(default=None, gt=0)
    assigned_user_ids: list[str] = Field(default_factory=list)
    assigned_team_ids: list[int] = Field(default_factory=list)

# assignee lists replace the current ones when present
class IssueUpdateIn(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, min_length=1)
    status: IssueStatus | None = None
    assigned_user_ids: list[str] | None = None
    assigned_team_ids: list[int] | None = None

class IssueOut(BaseModel):
    id: int
    project_id: int
    checklist_response_id: int | None
    title: str
    description: str
    status: IssueStatus
    created_by: str
    created_at: datetime
    assigned_user_ids: list[str]
    assigned_team_ids: list[int]
