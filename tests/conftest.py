import json
from datetime import datetime
from typing import Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.core.deps import get_geocoding_service, get_issue_store, get_user_directory
from app.core.rate_limit import rate_limiter
from app.models.issue import GeoLocation, Issue, IssueCategory, IssueStatus
from app.services.geocoding_service import GeocodingService
from app.services.issue_store import IssueStore
from app.services.seed_data import build_demo_issues, build_demo_users
from app.services.user_service import UserDirectory

OPENCAGE_MUMBAI = {
    "status": {"code": 200, "message": "OK"},
    "results": [
        {
            "formatted": "Main Street, Mumbai 400001, India",
            "geometry": {"lat": 19.076, "lng": 72.8777},
            "components": {
                "city": "Mumbai",
                "state": "Maharashtra",
                "country": "India",
                "postcode": "400001"
            },
            "bounds": {
                "northeast": {"lat": 19.27, "lng": 72.98},
                "southwest": {"lat": 18.89, "lng": 72.77}
            }
        }
    ]
}


def make_issue(issue_id: str, upvotes: int = 0, downvotes: int = 0, **fields) -> Issue:
    defaults = dict(
        title=f"Issue {issue_id}",
        description="Something on the street",
        category=IssueCategory.OTHER,
        location=GeoLocation(19.0760, 72.8777, "Mumbai"),
        reporter_id="1",
        images=["https://example.com/photo.jpg"],
        status=IssueStatus.REPORTED,
        created_at=datetime(2024, 1, 1),
        updated_at=datetime(2024, 1, 1)
    )
    defaults.update(fields)
    return Issue(id=issue_id, upvotes=upvotes, downvotes=downvotes, **defaults)


def make_geocoder(handler: Callable[[httpx.Request], httpx.Response]) -> GeocodingService:
    return GeocodingService(
        api_key="test-key",
        base_url="https://geocoder.test/geocode/v1/json",
        timeout=5.0,
        transport=httpx.MockTransport(handler)
    )


def json_response(payload, status_code: int = 200) -> Callable[[httpx.Request], httpx.Response]:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, content=json.dumps(payload).encode())
    return handler


@pytest.fixture(scope="function")
def store() -> IssueStore:
    return IssueStore(issues=build_demo_issues())


@pytest.fixture(scope="function")
def users() -> UserDirectory:
    return UserDirectory(build_demo_users())


@pytest.fixture(scope="function")
def geocoder() -> GeocodingService:
    return make_geocoder(json_response(OPENCAGE_MUMBAI))


@pytest.fixture(scope="function")
def client(store: IssueStore, users: UserDirectory, geocoder: GeocodingService):
    app.dependency_overrides[get_issue_store] = lambda: store
    app.dependency_overrides[get_user_directory] = lambda: users
    app.dependency_overrides[get_geocoding_service] = lambda: geocoder
    rate_limiter.reset()
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    rate_limiter.reset()


def override_geocoder(handler: Callable[[httpx.Request], httpx.Response]) -> None:
    app.dependency_overrides[get_geocoding_service] = lambda: make_geocoder(handler)
