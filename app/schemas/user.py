"""User request/response schemas - API contract and validation."""

from datetime import datetime

from pydantic import BaseModel, Field

from app.schemas.common import CamelModel


class UserCreate(CamelModel):
    # Required fields are checked by the service so a missing one is a 400
    # with a stable message rather than a schema error.
    email: str | None = None
    username: str | None = None
    display_name: str | None = None
    bio: str | None = None
    profile_image_url: str | None = None


class UserUpdate(CamelModel):
    """Patch body. Omitted fields are left untouched; explicit null clears."""

    display_name: str | None = None
    bio: str | None = None
    profile_image_url: str | None = None


class UserCount(BaseModel):
    posts: int
    followers: int
    following: int


class UserPublic(CamelModel):
    """List projection: never carries email."""

    id: str
    username: str
    display_name: str
    bio: str | None
    profile_image_url: str | None
    created_at: datetime
    updated_at: datetime
    count: UserCount = Field(alias="_count")


class UserResponse(CamelModel):
    """Full user record (create/update responses)."""

    id: str
    email: str
    username: str
    display_name: str
    bio: str | None
    profile_image_url: str | None
    created_at: datetime
    updated_at: datetime


class UserDetail(UserResponse):
    count: UserCount = Field(alias="_count")
