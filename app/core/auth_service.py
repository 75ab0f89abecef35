"""
Kakao sign-in flow
Exchange the authorization code, open a Supabase session from the id_token
and store the user's profile
"""
# app/core/auth_service.py
from typing import Optional, Dict, Any, Protocol
import logging
from functools import wraps

from supabase import AuthError

from app.config import WritePolicy
from app.core.errors import IdentityExchangeError, MissingAuthorizationCodeError, ServiceError, StoreWriteError
from app.models import UserProfile
from app.services.db import UserStore

logger = logging.getLogger(__name__)

# Type definitions
UserMetadata = Dict[str, Any]


class TokenExchanger(Protocol):
    async def exchange_code(self, code: str, redirect_uri: Optional[str]) -> str:
        ...


# Error handling decorator
def handle_auth_errors(func):
    """Decorator for logging authentication errors"""
    @wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except ServiceError as e:
            logger.warning(f"Auth error in {func.__name__}: {e.body()}")
            raise
        except Exception as e:
            logger.error(f"Auth error in {func.__name__}: {e}")
            raise
    return wrapper


def extract_profile(user) -> UserProfile:
    """Denormalize identity claims into the stored profile shape"""
    metadata: UserMetadata = getattr(user, "user_metadata", None) or {}
    provider_id = metadata.get("provider_id")
    return UserProfile(
        id=str(user.id),
        email=getattr(user, "email", None),
        provider_id=str(provider_id) if provider_id is not None else None,
        last_sign_in_at=getattr(user, "last_sign_in_at", None),
        profile_url=metadata.get("picture"),
        name=metadata.get("name"),
    )


async def open_session(auth, id_token: str):
    """Sign in to Supabase with the Kakao id_token and return the user"""
    try:
        response = await auth.sign_in_with_id_token({"provider": "kakao", "token": id_token})
    except AuthError as e:
        raise IdentityExchangeError(IdentityExchangeError.PROVIDER_REJECTED, str(e)) from e

    if not getattr(response, "session", None):
        raise IdentityExchangeError(IdentityExchangeError.NO_SESSION)
    if not getattr(response, "user", None):
        raise IdentityExchangeError(IdentityExchangeError.NO_USER)
    return response.user


async def store_profile(users: UserStore, profile: UserProfile,
                        write_policy: WritePolicy = WritePolicy.BEST_EFFORT) -> Optional[UserProfile]:
    try:
        return await users.upsert(profile)
    except StoreWriteError as e:
        if write_policy is WritePolicy.FAIL:
            raise
        logger.error(f"Failed to store profile for user {profile.id}: {e.message}")
        return None


@handle_auth_errors
async def sign_in_with_kakao(
    code: Optional[str],
    redirect_uri: Optional[str],
    *,
    tokens: TokenExchanger,
    auth,
    users: UserStore,
    write_policy: WritePolicy = WritePolicy.BEST_EFFORT,
) -> Optional[UserProfile]:
    """
    Handle the complete sign-in:
    1. Require an authorization code
    2. Exchange it for a Kakao id_token
    3. Open a Supabase session from the id_token
    4. Upsert the user's profile and return the stored row
    """
    if not code:
        raise MissingAuthorizationCodeError()

    id_token = await tokens.exchange_code(code, redirect_uri)
    user = await open_session(auth, id_token)
    stored = await store_profile(users, extract_profile(user), write_policy)

    logger.info(f"User {user.id} signed in successfully")
    return stored
