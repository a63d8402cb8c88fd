"""
Location Search Schemas
"""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel


class Coordinates(BaseModel):
    lat: float
    lon: float


class LocationData(BaseModel):
    """Normalized geocoder hit"""
    coordinates: Coordinates
    address: str
    components: Dict[str, Any] = {}
    boundingbox: Optional[Dict[str, Any]] = None


class LocationSearchResponse(BaseModel):
    """Successful /api/find-location response"""
    success: bool = True
    query: str
    data: LocationData
    attribution: str = "Powered by OpenCage Data"
    timestamp: str


class LocationErrorResponse(BaseModel):
    """Failure envelope shared by every location search error"""
    success: bool = False
    error: str
    query: Optional[str] = None
    suggestions: List[str] = []
    retryable: bool = False
    message: Optional[str] = None
