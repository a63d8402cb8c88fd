"""
Location Search Endpoint - geocoding proxy for the location picker
"""
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.deps import get_geocoding_service
from app.schemas.location import (
    Coordinates, LocationData, LocationErrorResponse, LocationSearchResponse
)
from app.services.geocoding_service import (
    GeocodingService, GeocodingTimeout, GeocodingUpstreamError, LocationNotFound,
    GeocodingError
)

router = APIRouter()


def error_response(exc: GeocodingError, query: str) -> JSONResponse:
    """Uniform failure envelope; upstream detail is hidden in production"""
    if isinstance(exc, GeocodingUpstreamError):
        body = LocationErrorResponse(
            error="Internal server error",
            message=None if settings.is_production else exc.message
        )
    elif isinstance(exc, GeocodingTimeout):
        body = LocationErrorResponse(error=exc.message, query=query, retryable=True)
    elif isinstance(exc, LocationNotFound):
        body = LocationErrorResponse(error=exc.message, query=query, suggestions=[])
    else:
        body = LocationErrorResponse(error=exc.message, query=query)

    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(exclude_none=True)
    )


@router.get(
    "/find-location",
    response_model=LocationSearchResponse,
    responses={
        400: {"model": LocationErrorResponse},
        404: {"model": LocationErrorResponse},
        500: {"model": LocationErrorResponse},
        504: {"model": LocationErrorResponse}
    }
)
async def find_location(
    q: str = Query(..., min_length=1, description='"lat,lon" pair or place name'),
    geocoder: GeocodingService = Depends(get_geocoding_service)
):
    """
    Resolve a place name or coordinate pair to coordinates and an address
    """
    try:
        result = await geocoder.find_location(q)
    except GeocodingError as e:
        return error_response(e, q)

    return LocationSearchResponse(
        query=q,
        data=LocationData(
            coordinates=Coordinates(lat=result.lat, lon=result.lon),
            address=result.display_name,
            components=result.components,
            boundingbox=result.boundingbox
        ),
        timestamp=datetime.now(timezone.utc).isoformat()
    )
