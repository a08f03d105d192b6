from pydantic import BaseModel, EmailStr
from datetime import datetime
from typing import Optional
from linkshelf.schemas.link import CamelModel

class UserCreate(BaseModel):
    email: EmailStr
    name: Optional[str] = None
    password: str

class UserResponse(CamelModel):
    id: int
    email: str
    name: Optional[str] = None
    created_at: datetime
    updated_at: datetime

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class RefreshRequest(CamelModel):
    refresh_token: Optional[str] = None

class AuthResponse(CamelModel):
    message: str
    user: UserResponse
    access_token: str
    refresh_token: str

class TokenResponse(CamelModel):
    message: str
    access_token: str
    refresh_token: str

class ProfileResponse(CamelModel):
    user: UserResponse
