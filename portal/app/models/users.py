from datetime import datetime
from enum import Enum
from typing import Annotated, Optional

from pydantic import StringConstraints

from .common import MongoRecord, PortalModel

Email = Annotated[str, StringConstraints(strip_whitespace=True, to_lower=True, min_length=3)]


class UserRole(str, Enum):
    admin = "admin"
    editor = "editor"
    user = "user"


class UserRecord(MongoRecord):
    email: Email
    password_hash: str
    role: UserRole = UserRole.user


class UserResponse(PortalModel):
    id: str
    email: str
    role: UserRole
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RegisterRequest(PortalModel):
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[UserRole] = None


class LoginRequest(PortalModel):
    email: Optional[str] = None
    password: Optional[str] = None


class AuthResponse(PortalModel):
    message: str
    token: str
    user: UserResponse
