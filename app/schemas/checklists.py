from pydantic import BaseModel, Field

class ItemIn(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    order: int | None = Field(default=None, ge=0)

class TemplateCreateIn(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    items: list[ItemIn] = Field(min_length=1)
    category_ids: list[int] = Field(default_factory=list)
    tag_ids: list[int] = Field(default_factory=list)

# items are fixed once created; responses point at them
class TemplateUpdateIn(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    is_active: bool | None = None
    category_ids: list[int] | None = None
    tag_ids: list[int] | None = None

class ItemOut(BaseModel):
    id: int
    title: str
    description: str | None
    order: int

class TemplateOut(BaseModel):
    id: int
    workspace_id: int
    title: str
    description: str | None
    is_active: bool
    created_by: str
    items: list[ItemOut] = []
    category_ids: list[int] = []
    tag_ids: list[int] = []
