"""Upstream place API client.

The upstream is the source of truth for place metadata. It answers
`GET {base_url}/place-info/{id}` with the fields nested under `response`.
"""
import logging
from typing import Protocol

import httpx
from pydantic import ValidationError

from app.core.errors import UpstreamFetchError
from app.models import PlaceInfoPayload

logger = logging.getLogger(__name__)


class PlaceInfoSource(Protocol):
    async def fetch(self, place_id: str) -> PlaceInfoPayload:
        ...


class HttpPlaceInfoSource:
    def __init__(self, http: httpx.AsyncClient, base_url: str):
        self.http = http
        self.base_url = base_url.rstrip("/")

    async def fetch(self, place_id: str) -> PlaceInfoPayload:
        url = f"{self.base_url}/place-info/{place_id}"
        logger.info(f"Fetching place info {place_id} from upstream")
        try:
            resp = await self.http.get(url)
            resp.raise_for_status()
            body = resp.json()
        except httpx.HTTPStatusError as e:
            raise UpstreamFetchError(
                f"Upstream returned {e.response.status_code} for place {place_id}") from e
        except (httpx.HTTPError, ValueError) as e:
            raise UpstreamFetchError(f"Upstream request failed: {e}") from e

        fields = body.get("response") if isinstance(body, dict) else None
        if not isinstance(fields, dict):
            raise UpstreamFetchError(f"Upstream response for place {place_id} has no payload")
        try:
            return PlaceInfoPayload(**fields)
        except ValidationError as e:
            raise UpstreamFetchError(f"Upstream payload for place {place_id} is invalid: {e}") from e
