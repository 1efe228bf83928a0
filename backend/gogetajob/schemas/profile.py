from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, TypeAdapter, ValidationError, field_validator


_HTTP_URL = TypeAdapter(HttpUrl)

PROFILE_URL_FIELDS = ("linkedin_url", "github_url", "website_url")


class ProfileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    email: str | None
    first_name: str | None
    last_name: str | None
    phone: str | None
    location: str | None
    headline: str | None
    summary: str | None
    linkedin_url: str | None
    github_url: str | None
    website_url: str | None
    profile_picture_url: str | None
    created_at: datetime
    updated_at: datetime


class ProfileUpdate(BaseModel):
    """PATCH body; only fields present in the request are written."""

    model_config = ConfigDict(extra="forbid")

    email: str | None = Field(default=None, max_length=320, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    phone: str | None = Field(default=None, max_length=50)
    location: str | None = Field(default=None, max_length=120)
    headline: str | None = Field(default=None, max_length=160)
    summary: str | None = Field(default=None, max_length=2000)

    linkedin_url: str | None = Field(default=None, max_length=300)
    github_url: str | None = Field(default=None, max_length=300)
    website_url: str | None = Field(default=None, max_length=300)

    @field_validator("email", "first_name", "last_name", "phone", "location", "headline", "summary", mode="before")
    @classmethod
    def _strip_text(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip() or None
        return v

    @field_validator(*PROFILE_URL_FIELDS, mode="before")
    @classmethod
    def _normalize_url(cls, v: object) -> object:
        if v is None:
            return None
        if isinstance(v, str):
            url = v.strip()
            if not url:
                return None
            try:
                _HTTP_URL.validate_python(url)
            except ValidationError as e:
                raise ValueError("Invalid URL format") from e
            return url
        return v
