"""
Supabase table access for the place-info cache and user profiles
"""
# app/services/db.py
from typing import Optional, List, Dict, Any, Protocol
import logging
import httpx
from datetime import datetime
from postgrest import APIError
from supabase import AsyncClient

from app.core.errors import StoreReadError, StoreWriteError
from app.models import PlaceInfo, PlaceInfoPayload, UserProfile

logger = logging.getLogger(__name__)

PLACE_INFO_COLUMNS = "id, created_at, updated_at, main_photo_url, score, score_count"


def _error_message(error: Exception) -> str:
    return getattr(error, "message", None) or str(error)


def safe_extract_data(response) -> List[Dict[str, Any]]:
    """Safely extract data from Supabase response."""
    if hasattr(response, 'data') and response.data is not None:
        return response.data if isinstance(response.data, list) else [response.data]
    return []


def safe_extract_single(response) -> Optional[Dict[str, Any]]:
    """Safely extract single item from Supabase response."""
    data = safe_extract_data(response)
    return data[0] if data else None


class PlaceInfoStore(Protocol):
    async def find(self, place_id: str) -> Optional[PlaceInfo]:
        ...

    async def upsert(self, place_id: str, payload: PlaceInfoPayload, updated_at: datetime) -> PlaceInfo:
        ...


class UserStore(Protocol):
    async def upsert(self, profile: UserProfile) -> Optional[UserProfile]:
        ...


class SupabasePlaceInfoStore:
    """`place-info` table; one row per place id"""

    def __init__(self, client: AsyncClient, table: str = "place-info"):
        self.client = client
        self.table = table

    async def find(self, place_id: str) -> Optional[PlaceInfo]:
        try:
            response = await self.client.table(self.table)\
                .select(PLACE_INFO_COLUMNS)\
                .eq("id", place_id)\
                .execute()
        except (APIError, httpx.HTTPError) as e:
            logger.error(f"Error reading place info {place_id}: {e}")
            raise StoreReadError(_error_message(e)) from e

        row = safe_extract_single(response)
        return PlaceInfo(**row) if row else None

    async def upsert(self, place_id: str, payload: PlaceInfoPayload, updated_at: datetime) -> PlaceInfo:
        # created_at is omitted so the column default applies on insert only;
        # fields the upstream left out keep their stored values
        record = {
            "id": place_id,
            **payload.model_dump(exclude_unset=True),
            "updated_at": updated_at.isoformat(),
        }
        try:
            response = await self.client.table(self.table)\
                .upsert(record, on_conflict="id")\
                .execute()
        except (APIError, httpx.HTTPError) as e:
            logger.error(f"Error upserting place info {place_id}: {e}")
            raise StoreWriteError(_error_message(e)) from e

        row = safe_extract_single(response)
        if not row:
            raise StoreWriteError("No data returned from upsert operation")
        return PlaceInfo(**row)


class SupabaseUserStore:
    """`user` table holding profiles denormalized from identity claims"""

    def __init__(self, client: AsyncClient, table: str = "user"):
        self.client = client
        self.table = table

    async def upsert(self, profile: UserProfile) -> Optional[UserProfile]:
        record = profile.model_dump(mode="json")
        try:
            response = await self.client.table(self.table)\
                .upsert(record, on_conflict="id")\
                .execute()
        except (APIError, httpx.HTTPError) as e:
            logger.error(f"Error upserting user {profile.id}: {e}")
            raise StoreWriteError(_error_message(e)) from e

        row = safe_extract_single(response)
        return UserProfile(**row) if row else None
