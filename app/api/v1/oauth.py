from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError
import logging

from app.config import Settings, get_settings
from app.core.auth_service import sign_in_with_kakao
from app.core.dependencies import get_auth_client, get_token_client, get_user_store
from app.core.errors import MethodNotAllowedError, ServiceError
from app.models import LoginResponse, OAuthRequest
from app.services.db import SupabaseUserStore
from app.services.identity_provider import KakaoTokenClient

router = APIRouter(tags=["oauth"])
logger = logging.getLogger(__name__)


async def read_oauth_request(request: Request) -> OAuthRequest:
    try:
        body = await request.json()
        return OAuthRequest.model_validate(body)
    except (ValueError, ValidationError) as e:
        logger.error(f"Unreadable oauth request body: {e}")
        raise ServiceError(str(e)) from e


@router.api_route("/oauth", methods=["GET", "POST", "PUT", "DELETE"], response_model=LoginResponse)
async def oauth_login(
    payload: OAuthRequest = Depends(read_oauth_request),
    tokens: KakaoTokenClient = Depends(get_token_client),
    auth=Depends(get_auth_client),
    users: SupabaseUserStore = Depends(get_user_store),
    settings: Settings = Depends(get_settings),
):
    """Exchange a Kakao authorization code and return the stored profile."""
    stored = await sign_in_with_kakao(
        payload.code,
        payload.redirect_uri,
        tokens=tokens,
        auth=auth,
        users=users,
        write_policy=settings.PROFILE_WRITE_POLICY,
    )
    return LoginResponse(user=stored)


@router.options("/oauth", include_in_schema=False)
async def oauth_preflight():
    return PlainTextResponse("ok")


@router.api_route("/oauth", methods=["HEAD", "PATCH", "CONNECT", "TRACE"], include_in_schema=False)
async def oauth_invalid_method():
    raise MethodNotAllowedError(status_code=401)
