from pydantic import BaseModel, Field

class TeamCreateIn(BaseModel):
    name: str = Field(min_length=2, max_length=100)

class TeamOut(BaseModel):
    id: int
    workspace_id: int
    name: str
    member_count: int = 0

class TeamMemberAddIn(BaseModel):
    user_id: str = Field(min_length=1)

class TeamMemberOut(BaseModel):
    team_id: int
    user_id: str
    email: str
    name: str | None
