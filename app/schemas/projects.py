from pydantic import BaseModel, Field

class ProjectCreateIn(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: str | None = None

class ProjectUpdateIn(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None

class ProjectOut(BaseModel):
    id: int
    workspace_id: int
    name: str
    description: str | None
    created_by: str
