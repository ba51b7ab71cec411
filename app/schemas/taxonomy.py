from pydantic import BaseModel, Field

class CategoryCreateIn(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    parent_id: int | None = Field(default=None, gt=0)

class CategoryUpdateIn(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    parent_id: int | None = Field(default=None, gt=0)

class CategoryOut(BaseModel):
    id: int
    workspace_id: int
    name: str
    parent_id: int | None

class TagCreateIn(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    color: str = Field(default="gray", min_length=1, max_length=30)

class TagUpdateIn(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=50)
    color: str | None = Field(default=None, min_length=1, max_length=30)

class TagOut(BaseModel):
    id: int
    workspace_id: int
    name: str
    color: str
