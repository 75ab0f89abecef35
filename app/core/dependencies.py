"""
Dependency injection helpers
One Supabase client per request (acting as the caller), shared httpx client
and refresh registry from application state
"""
from datetime import timedelta
from typing import AsyncIterator, Optional

import httpx
from fastapi import Depends, Header, Request
from supabase import AsyncClient

from app.config import Settings, get_settings
from app.db.db_client import close_supabase_client, create_supabase_client
from app.services.db import SupabasePlaceInfoStore, SupabaseUserStore
from app.services.identity_provider import KakaoTokenClient
from app.services.place_info_service import PlaceInfoService, RefreshRegistry
from app.services.place_source import HttpPlaceInfoSource


async def get_db(
    authorization: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
) -> AsyncIterator[AsyncClient]:
    """Get a Supabase client that forwards the caller's Authorization header.

    The client is closed once the response has been produced.
    """
    client = await create_supabase_client(settings, authorization)
    try:
        yield client
    finally:
        await close_supabase_client(client)


def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client


def get_refresh_registry(request: Request) -> RefreshRegistry:
    return request.app.state.refresh_registry


def get_place_info_service(
    db: AsyncClient = Depends(get_db),
    http: httpx.AsyncClient = Depends(get_http_client),
    registry: RefreshRegistry = Depends(get_refresh_registry),
    settings: Settings = Depends(get_settings),
) -> PlaceInfoService:
    return PlaceInfoService(
        store=SupabasePlaceInfoStore(db, settings.PLACE_INFO_TABLE),
        source=HttpPlaceInfoSource(http, settings.PLACE_INFO_API_URL),
        freshness_window=timedelta(hours=settings.PLACE_INFO_FRESHNESS_HOURS),
        write_policy=settings.PLACE_INFO_WRITE_POLICY,
        registry=registry if settings.PLACE_INFO_COALESCE_REFRESHES else None,
    )


def get_token_client(
    http: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> KakaoTokenClient:
    return KakaoTokenClient(http, settings)


def get_user_store(
    db: AsyncClient = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> SupabaseUserStore:
    return SupabaseUserStore(db, settings.USER_TABLE)


def get_auth_client(db: AsyncClient = Depends(get_db)):
    """Supabase auth API of the per-request client"""
    return db.auth


__all__ = [
    "get_db",
    "get_http_client",
    "get_refresh_registry",
    "get_place_info_service",
    "get_token_client",
    "get_user_store",
    "get_auth_client",
]
