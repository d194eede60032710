"""Schemas for profile and auth endpoints."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class UserProfile(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    email: str = ""
    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")
    bio: str = ""
    city: str | None = None
    is_verified: bool = Field(default=False, alias="isVerified")
    posts_count: int = Field(default=0, alias="postsCount")
    is_active: bool = Field(default=True, alias="isActive")
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")


class ProfileUpdateRequest(BaseModel):
    """JSON body sent to ``PUT /api/profile``."""

    model_config = ConfigDict(populate_by_name=True)

    first_name: str = Field(..., alias="firstName")
    last_name: str = Field(..., alias="lastName")
    bio: str = ""
    city: str


class ProfileApiResponse(BaseModel):
    user: UserProfile


class AuthRequest(BaseModel):
    email: str
    password: str


class AuthPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user: UserProfile
    token: str
    is_new_user: bool = Field(default=False, alias="isNewUser")


__all__ = [
    "AuthPayload",
    "AuthRequest",
    "ProfileApiResponse",
    "ProfileUpdateRequest",
    "UserProfile",
]
