"""User and authentication Pydantic schemas."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class UserRole(str, Enum):
    """User role enumeration."""

    SEEKER = "seeker"
    EMPLOYER = "employer"


class UserBase(BaseModel):
    """Base user schema with common fields."""

    name: str = Field(min_length=1, max_length=200)
    email: str = Field(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$", max_length=320)


class UserCreate(UserBase):
    """Schema for registering a new user."""

    password: str = Field(min_length=8, max_length=128)
    role: UserRole = UserRole.SEEKER


class UserUpdate(BaseModel):
    """Schema for updating the current user's profile."""

    name: str = Field(min_length=1, max_length=200)


class LoginRequest(BaseModel):
    """Schema for a login attempt."""

    email: str
    password: str


class User(UserBase):
    """Complete user schema with database fields."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    role: UserRole
    created_at: datetime


class PublicUser(BaseModel):
    """User profile visible to other users."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    role: UserRole


class SessionStatus(BaseModel):
    """Schema describing the caller's authentication state."""

    authenticated: bool
    user: User | None = None
