from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from docshare.application.dtos.common_dto import PageMeta
from docshare.domain.entities.profile import ProfileEntity


class ProfileResponse(BaseModel):
    """Public view of a profile. The password hash is never included."""
    id: str = Field(..., description="Unique identifier of the profile", example="3f2a9c1e7b5d4e0f8a6b2c9d1e4f7a3b")
    first_name: str = Field(..., description="Given name", example="Alice")
    last_name: str = Field(..., description="Family name", example="Liddell")
    email: str = Field(..., description="Email address, unique across profiles", example="alice@example.com")
    creation_date: datetime | None = Field(None, description="ISO timestamp when the profile was created")
    last_modified_date: datetime | None = Field(None, description="ISO timestamp of the last profile change")
    extra: Any = Field(None, description="Arbitrary user-defined JSON stored with the profile")

    @classmethod
    def from_entity(cls, profile: ProfileEntity) -> "ProfileResponse":
        return cls(
            id=profile.id,
            first_name=profile.first_name,
            last_name=profile.last_name,
            email=profile.email,
            creation_date=profile.created_at,
            last_modified_date=profile.updated_at,
            extra=profile.extra,
        )


class UpdateProfileRequest(BaseModel):
    """Request model for updating the caller's own profile."""
    first_name: str = Field(..., min_length=1, description="New given name", example="Alice")
    last_name: str = Field(..., min_length=1, description="New family name", example="Liddell")
    extra: Any = Field(None, description="Replaces the stored extra data; omit to clear it")


class SearchProfilesResponse(PageMeta):
    """One page of profile search results."""
    data: list[ProfileResponse] = Field(..., description="Matching profiles ordered by email, then id")


class ValidateTokenResponse(BaseModel):
    """Response model for token validation."""
    user_id: str = Field(..., description="Unique identifier of the authenticated user")
    email: str = Field(..., description="Email address of the authenticated user", example="user@example.com")
