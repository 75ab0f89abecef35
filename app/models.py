# app/models.py
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from typing import Optional
from datetime import datetime


class PlaceInfoPayload(BaseModel):
    """Metadata fields the upstream place API is authoritative for."""
    model_config = ConfigDict(extra="ignore")

    main_photo_url: Optional[str] = None
    score: Optional[float] = None
    score_count: Optional[int] = None


class PlaceInfo(PlaceInfoPayload):
    """Cached row of the `place-info` table."""
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("updated_at", mode="wrap")
    @classmethod
    def unreadable_timestamp_is_unknown(cls, value, handler):
        # an unreadable timestamp leaves the row stale so it gets rewritten
        try:
            return handler(value)
        except ValidationError:
            return None


class UserProfile(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    email: Optional[str] = None
    provider_id: Optional[str] = None
    last_sign_in_at: Optional[datetime] = None
    profile_url: Optional[str] = None
    name: Optional[str] = None


# Request / response envelopes
class OAuthRequest(BaseModel):
    code: Optional[str] = None
    redirect_uri: Optional[str] = None


class PlaceInfoResponse(BaseModel):
    data: PlaceInfo


class LoginResponse(BaseModel):
    message: str = "Login successful"
    user: Optional[UserProfile] = None
