from pydantic import BaseModel, Field, model_validator

from app.models.enums import PermissionLevel, ResourceType

class ResourceIn(BaseModel):
    type: ResourceType
    id: int = Field(gt=0)

class PermissionCreateIn(BaseModel):
    resource: ResourceIn
    level: PermissionLevel
    member_id: int | None = Field(default=None, gt=0)
    team_id: int | None = Field(default=None, gt=0)

    @model_validator(mode="after")
    def _one_principal(self) -> "PermissionCreateIn":
        if (self.member_id is None) == (self.team_id is None):
            raise ValueError("exactly one of member_id or team_id is required")
        return self

class PermissionOut(BaseModel):
    id: int
    level: PermissionLevel
    resource_type: ResourceType
    resource_id: int
    member_id: int | None
    team_id: int | None
