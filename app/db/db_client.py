"""
Supabase client factory
"""
from typing import Optional
from supabase import AsyncClient, acreate_client
from supabase.lib.client_options import AsyncClientOptions
from app.config import Settings


async def create_supabase_client(settings: Settings, authorization: Optional[str] = None) -> AsyncClient:
    """Create an async Supabase client acting as the caller.

    The caller's Authorization header is forwarded so row level security
    is evaluated for that user rather than for the anon key. The client
    lives for one request, so sessions are neither stored nor refreshed.
    """
    if not settings.SUPABASE_URL or not settings.SUPABASE_ANON_KEY:
        raise ValueError("SUPABASE_URL and SUPABASE_ANON_KEY must be set")

    headers = {"Authorization": authorization} if authorization else {}
    return await acreate_client(
        settings.SUPABASE_URL,
        settings.SUPABASE_ANON_KEY,
        options=AsyncClientOptions(
            headers=headers,
            auto_refresh_token=False,
            persist_session=False,
        ),
    )


async def close_supabase_client(client: AsyncClient) -> None:
    """Close the auth and PostgREST HTTP sessions of a per-request client"""
    await client.auth.close()
    await client.postgrest.aclose()
