from pydantic import BaseModel, EmailStr, Field, field_validator
import re
from enum import Enum
from typing import Optional
from datetime import datetime
from backend.core.schemas import CamelModel

# USER ROLE HIERARCHY
class UserRole(str, Enum):
    STUDENT = "student"   # Takes modules, files reports
    TEACHER = "teacher"   # Reviews and resolves reports
    ADMIN = "admin"       # Everything a teacher can do

STAFF_ROLES = {UserRole.TEACHER.value, UserRole.ADMIN.value}

# USER REGISTRATION CONTRACT
class UserCreate(BaseModel):
    username: str
    email: EmailStr
    password: str
    role: UserRole = UserRole.STUDENT

    @field_validator('username')
    @classmethod
    def validate_username(cls, v):
        v = v.strip()
        if len(v) < 3:
            raise ValueError('Username must be at least 3 characters long')
        if len(v) > 30:
            raise ValueError('Username cannot exceed 30 characters')
        if not re.match(r'^[a-zA-Z0-9_]+$', v):
            raise ValueError('Username can only contain letters, numbers, and underscores')
        return v

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return v.lower()

    @field_validator('password')
    @classmethod
    def validate_password(cls, v):
        if len(v) < 6:
            raise ValueError('Password must be at least 6 characters long')
        if len(v.encode('utf-8')) > 72:
            raise ValueError('Password cannot exceed 72 bytes')
        return v

    @field_validator('role')
    @classmethod
    def no_self_service_admin(cls, v):
        if v == UserRole.ADMIN:
            raise ValueError('Role must be either student or teacher')
        return v

# USER LOGIN CONTRACT (username or email)
class UserLogin(BaseModel):
    identifier: str = Field(min_length=1)
    password: str = Field(min_length=1)

# USER RESPONSE CONTRACT (no password hash)
class UserResponse(CamelModel):
    id: str
    username: str
    email: str
    role: UserRole
    points: int = 0
    created_at: Optional[datetime] = None

class AuthData(CamelModel):
    user: UserResponse
    token: str

class AuthResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: AuthData

class ProfileResponse(BaseModel):
    success: bool = True
    data: UserResponse

# TOKEN DATA CONTRACT (the Identity every route receives)
class TokenData(BaseModel):
    user_id: str
    username: str
    role: UserRole

    @property
    def is_staff(self) -> bool:
        return self.role.value in STAFF_ROLES
