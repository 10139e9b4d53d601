# backend/bidding/schemas/user.py
from typing import Optional

from pydantic import BaseModel

from .base import BaseSchema
from ..models.user import Role


class UserSummary(BaseSchema):
    id: int
    name: str
    email: str


class UserProfile(UserSummary):
    role: Role


class SignupRequest(BaseSchema):
    email: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None
    role: Optional[str] = None


class LoginRequest(BaseSchema):
    email: Optional[str] = None
    password: Optional[str] = None


class TokenResponse(BaseModel):
    token: str


class MeResponse(BaseModel):
    user: UserProfile
