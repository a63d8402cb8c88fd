"""
Request dependencies
"""
from fastapi import Request

from app.services.geocoding_service import GeocodingService
from app.services.issue_store import IssueStore
from app.services.user_service import UserDirectory


def get_issue_store(request: Request) -> IssueStore:
    """Application-wide issue store created at startup"""
    return request.app.state.issue_store


def get_user_directory(request: Request) -> UserDirectory:
    return request.app.state.user_directory


def get_geocoding_service(request: Request) -> GeocodingService:
    return request.app.state.geocoding_service
