from datetime import date, datetime

from pydantic import BaseModel, Field, model_validator

from app.models.enums import ResponseStatus

class AssignmentCreateIn(BaseModel):
    due_date: date | None = None
    assigned_user_ids: list[str] = Field(default_factory=list)
    assigned_team_ids: list[int] = Field(default_factory=list)

    @model_validator(mode="after")
    def _someone_assigned(self) -> "AssignmentCreateIn":
        if not self.assigned_user_ids and not self.assigned_team_ids:
            raise ValueError("assign at least one user or team")
        return self

class ResponseUpdateIn(BaseModel):
    item_id: int = Field(gt=0)
    status: ResponseStatus

class ResponsesUpdateIn(BaseModel):
    responses: list[ResponseUpdateIn] = Field(min_length=1)

class ResponseOut(BaseModel):
    id: int
    item_id: int
    item_title: str
    order: int
    status: ResponseStatus
    responded_by: str | None
    responded_at: datetime | None

class AssignmentOut(BaseModel):
    id: int
    template_id: int
    template_title: str
    due_date: date | None
    created_by: str
    assigned_user_ids: list[str]
    assigned_team_ids: list[int]
    completed: bool
    responses: list[ResponseOut]
