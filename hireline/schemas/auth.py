from pydantic import BaseModel, EmailStr, ConfigDict, Field
from typing import Optional
from hireline.models.user import UserRole
from datetime import datetime

class UserBase(BaseModel):
    email: EmailStr
    username: str = Field(min_length=1, max_length=80)
    role: UserRole = UserRole.CANDIDATE

class UserCreate(UserBase):
    password: str = Field(min_length=8)

class UserResponse(UserBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: Optional[datetime] = None

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class Token(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str
    user: Optional[UserResponse] = None

class RefreshRequest(BaseModel):
    refresh_token: str

class TokenData(BaseModel):
    email: Optional[str] = None
    role: Optional[str] = None
