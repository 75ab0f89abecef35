"""Kakao OAuth token endpoint client"""
import logging
from typing import Optional

import httpx

from app.config import Settings
from app.core.errors import IdentityExchangeError

logger = logging.getLogger(__name__)


class KakaoTokenClient:
    def __init__(self, http: httpx.AsyncClient, settings: Settings):
        self.http = http
        self.token_url = settings.KAKAO_TOKEN_URL
        self.client_id = settings.KAKAO_RESTAPI_KEY
        self.client_secret = settings.KAKAO_CLIENT_SECRET

    async def exchange_code(self, code: str, redirect_uri: Optional[str]) -> str:
        """Trade an authorization code for a Kakao OpenID Connect id_token"""
        token_resp = await self.http.post(
            self.token_url,
            data={
                "grant_type": "authorization_code",
                "client_id": self.client_id,
                "redirect_uri": redirect_uri or "",
                "code": code,
                "client_secret": self.client_secret,
            },
            headers={"Content-Type": "application/x-www-form-urlencoded;charset=utf-8"},
        )
        if token_resp.status_code != 200:
            logger.warning(f"Kakao token exchange rejected: {token_resp.status_code} {token_resp.text}")
            raise IdentityExchangeError(IdentityExchangeError.PROVIDER_REJECTED, "token exchange rejected")

        id_token = token_resp.json().get("id_token")
        if not id_token:
            logger.warning("Kakao token response carried no id_token")
            raise IdentityExchangeError(IdentityExchangeError.PROVIDER_REJECTED, "missing id_token")
        return id_token
