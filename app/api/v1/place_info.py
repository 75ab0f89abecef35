from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from app.core.dependencies import get_place_info_service
from app.core.errors import MethodNotAllowedError, RouteNotFoundError
from app.models import PlaceInfoResponse
from app.services.place_info_service import PlaceInfoService

router = APIRouter(prefix="/place-info", tags=["place-info"])

PATHS = ("", "/{place_id}")


@router.get("/{place_id}", response_model=PlaceInfoResponse)
async def get_place_info(place_id: str, service: PlaceInfoService = Depends(get_place_info_service)):
    """Serve cached place metadata, refreshing it from upstream when stale."""
    record = await service.get(place_id)
    return PlaceInfoResponse(data=record)


@router.get("", response_model=PlaceInfoResponse)
async def get_place_info_without_id(service: PlaceInfoService = Depends(get_place_info_service)):
    # rejected by the service before any I/O
    record = await service.get(None)
    return PlaceInfoResponse(data=record)


async def preflight():
    return PlainTextResponse("ok")


async def not_found():
    raise RouteNotFoundError()


async def invalid_method():
    raise MethodNotAllowedError(status_code=403)


for path in PATHS:
    router.add_api_route(path, preflight, methods=["OPTIONS"], include_in_schema=False)
    router.add_api_route(path, not_found, methods=["POST", "PUT", "DELETE"], include_in_schema=False)
    router.add_api_route(path, invalid_method, methods=["HEAD", "PATCH", "CONNECT", "TRACE"], include_in_schema=False)
