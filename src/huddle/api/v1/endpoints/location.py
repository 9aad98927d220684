"""Observer location endpoint."""

from fastapi import APIRouter, Request

from huddle.api.v1.dependencies import LocatorDep
from huddle.schemas.location import ObserverLocation

router = APIRouter(prefix="/location", tags=["location"])


@router.get("/", response_model=ObserverLocation)
async def get_location(request: Request, locator: LocatorDep) -> ObserverLocation:
    """Return a default observer location for the caller, derived from its IP."""
    client_ip = request.client.host if request.client else None
    return await locator.locate(client_ip)
