from pydantic import BaseModel, EmailStr, Field

class RequestCodeIn(BaseModel):
    email: EmailStr

class RequestCodeOut(BaseModel):
    sent: bool = True
    expires_in: int
    code: str | None = None

class VerifyCodeIn(BaseModel):
    email: EmailStr
    code: str = Field(min_length=1, max_length=12)

class AccessTokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
