import asyncio

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from app.api.v1.endpoints.issues import STORE_UNAVAILABLE, ensure_issue
from app.models.issue import VoteType
from app.services.issue_store import IssueStore, StoreUnavailableError
from conftest import make_issue

API_PREFIX = "/api/v1"

NEW_ISSUE = {
    "title": "Broken water pipe",
    "description": "Water gushing onto the road near the bus stop",
    "category": "water",
    "location": {"latitude": 19.0760, "longitude": 72.8777, "address": "Bus stop, Mumbai"},
    "reporter_id": "1",
    "images": []
}


def test_root_endpoint(client: TestClient):
    response = client.get("/")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["version"] == client.app.version


def test_unknown_route_envelope(client: TestClient):
    response = client.get("/api/v2/nothing")
    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "Endpoint not found"
    assert "GET /api/find-location" in body["availableEndpoints"]


def test_list_categories_and_statuses(client: TestClient):
    categories = client.get(API_PREFIX + "/issues/categories").json()
    assert categories["total"] == 9
    roads = next(c for c in categories["categories"] if c["id"] == "roads")
    assert roads["department"] == "Public Works Department"

    statuses = client.get(API_PREFIX + "/issues/statuses").json()
    assert [s["id"] for s in statuses["statuses"]] == [
        "reported", "verified", "in_progress", "resolved", "closed", "reopened"
    ]


def test_list_issues_default_newest_first(client: TestClient):
    response = client.get(API_PREFIX + "/issues/")
    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 6
    assert [item["id"] for item in body["items"]] == ["4", "6", "2", "5", "1", "3"]


def test_list_issues_most_voted(client: TestClient):
    body = client.get(API_PREFIX + "/issues/", params={"sort_by": "mostVoted"}).json()
    ids = [item["id"] for item in body["items"]]
    assert ids[0] == "4"
    assert ids[-1] == "3"


def test_list_issues_filters(client: TestClient):
    body = client.get(API_PREFIX + "/issues/", params={"category": "roads"}).json()
    assert [item["id"] for item in body["items"]] == ["1"]

    body = client.get(API_PREFIX + "/issues/", params={"status": "resolved"}).json()
    assert [item["id"] for item in body["items"]] == ["3"]

    body = client.get(API_PREFIX + "/issues/", params={"search": "jaipur"}).json()
    assert [item["id"] for item in body["items"]] == ["6"]


def test_list_issues_near_me(client: TestClient):
    params = {"near_me": "true", "radius": 5, "latitude": 19.0760, "longitude": 72.8777}
    body = client.get(API_PREFIX + "/issues/", params=params).json()
    assert [item["id"] for item in body["items"]] == ["1"]
    assert body["filters"]["near_me"] is True


def test_list_issues_rejects_bad_query(client: TestClient):
    assert client.get(API_PREFIX + "/issues/", params={"category": "spaceships"}).status_code == 422
    assert client.get(API_PREFIX + "/issues/", params={"radius": -1}).status_code == 422


def test_get_issue_embeds_reporter(client: TestClient):
    body = client.get(API_PREFIX + "/issues/1").json()
    assert body["reporter"]["name"] == "Priya Sharma"
    assert body["net_score"] == 22
    assert body["ai_analysis"]["assigned_department"] == "Public Works Department"
    assert len(body["comments"]) >= 1


def test_anonymous_issue_hides_reporter(client: TestClient):
    body = client.get(API_PREFIX + "/issues/4").json()
    assert body["is_anonymous"] is True
    assert body["reporter"] is None


def test_get_unknown_issue(client: TestClient):
    response = client.get(API_PREFIX + "/issues/missing")
    assert response.status_code == 404
    assert response.json()["detail"] == "Issue not found"


def test_get_issue_leaves_selection_alone(client: TestClient, store: IssueStore):
    assert client.get(API_PREFIX + "/issues/2").status_code == 200
    assert client.post(API_PREFIX + "/issues/", json=NEW_ISSUE).status_code == 201
    assert store.selected_issue is None


def test_create_issue(client: TestClient, store: IssueStore):
    response = client.post(API_PREFIX + "/issues/", json=NEW_ISSUE)
    assert response.status_code == 201
    body = response.json()
    issue = body["issue"]
    assert issue["id"] == body["id"]
    assert issue["status"] == "reported"
    assert issue["upvotes"] == 0 and issue["downvotes"] == 0
    assert issue["images"] == [store.placeholder_image]
    assert issue["assigned_department"] == "Water Supply Department"
    assert issue["ai_analysis"]["confidence"] == 90
    assert len(store.issues) == 7


def test_create_issue_blank_title(client: TestClient, store: IssueStore):
    response = client.post(API_PREFIX + "/issues/", json={**NEW_ISSUE, "title": "   "})
    assert response.status_code == 400
    assert response.json()["detail"] == "Title is required"
    assert len(store.issues) == 6


def test_create_issue_bad_coordinates(client: TestClient):
    location = {"latitude": 91, "longitude": 0}
    response = client.post(API_PREFIX + "/issues/", json={**NEW_ISSUE, "location": location})
    assert response.status_code == 422


def test_create_issue_store_unavailable(client: TestClient, store: IssueStore, monkeypatch):
    async def failing_round_trip():
        raise StoreUnavailableError("backend down")

    monkeypatch.setattr(store, "_round_trip", failing_round_trip)
    response = client.post(API_PREFIX + "/issues/", json=NEW_ISSUE)
    assert response.status_code == 503
    assert response.json()["detail"] == "Failed to create issue"


def test_vote_store_unavailable(client: TestClient, store: IssueStore, monkeypatch):
    async def failing_round_trip():
        raise StoreUnavailableError("backend down")

    monkeypatch.setattr(store, "_round_trip", failing_round_trip)
    response = client.post(API_PREFIX + "/issues/2/vote", json={"user_id": "1", "vote_type": "upvote"})
    assert response.status_code == 503
    assert response.json()["detail"] == STORE_UNAVAILABLE

    response = client.post(API_PREFIX + "/issues/missing/vote", json={"user_id": "1", "vote_type": "upvote"})
    assert response.status_code == 404


async def test_overlapping_failure_does_not_turn_not_found_into_503(monkeypatch):
    store = IssueStore(issues=[make_issue("a")])

    async def slow_failure():
        await asyncio.sleep(0.01)
        raise StoreUnavailableError("backend down")

    monkeypatch.setattr(store, "_round_trip", slow_failure)
    failed, missing = await asyncio.gather(
        store.vote_issue("a", "1", VoteType.UPVOTE),
        store.vote_issue("missing", "1", VoteType.UPVOTE)
    )
    assert store.error == "Failed to vote on issue"

    with pytest.raises(HTTPException) as excinfo:
        ensure_issue(missing, "missing", store)
    assert excinfo.value.status_code == 404

    with pytest.raises(HTTPException) as excinfo:
        ensure_issue(failed, "a", store)
    assert excinfo.value.status_code == 503


def test_status_update_requires_manager(client: TestClient):
    payload = {"status": "resolved", "text": "Fixed", "user_id": "1"}
    response = client.post(API_PREFIX + "/issues/1/status", json=payload)
    assert response.status_code == 403

    response = client.post(API_PREFIX + "/issues/1/status", json={**payload, "user_id": "4"})
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "resolved"
    assert body["updates"][-1]["text"] == "Fixed"


def test_status_update_unknown_issue(client: TestClient):
    payload = {"status": "resolved", "text": "Fixed", "user_id": "4"}
    assert client.post(API_PREFIX + "/issues/missing/status", json=payload).status_code == 404


def test_vote(client: TestClient):
    response = client.post(API_PREFIX + "/issues/2/vote", json={"user_id": "1", "vote_type": "upvote"})
    assert response.status_code == 200
    assert response.json()["upvotes"] == 33

    response = client.post(API_PREFIX + "/issues/2/vote", json={"user_id": "1", "vote_type": "downvote"})
    assert response.json()["downvotes"] == 1


def test_duplicate_vote_conflict(client: TestClient, store: IssueStore):
    store.one_vote_per_user = True
    payload = {"user_id": "1", "vote_type": "upvote"}
    assert client.post(API_PREFIX + "/issues/2/vote", json=payload).status_code == 200
    assert client.post(API_PREFIX + "/issues/2/vote", json=payload).status_code == 409


def test_add_comment(client: TestClient):
    response = client.post(API_PREFIX + "/issues/2/comments", json={"text": "Still there", "user_id": "3"})
    assert response.status_code == 201
    assert response.json()["comments"][-1]["text"] == "Still there"

    response = client.post(API_PREFIX + "/issues/2/comments", json={"text": "", "user_id": "3"})
    assert response.status_code == 400


def test_assign_worker(client: TestClient):
    payload = {
        "worker_id": "worker-3",
        "assigned_by": "dept-admin",
        "deadline": "2030-01-01T00:00:00",
        "notes": "Clear the drains"
    }
    response = client.post(API_PREFIX + "/issues/4/assignments", json=payload)
    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "in_progress"
    assert body["assignments"][-1]["status"] == "assigned"
    assert body["assignments"][-1]["worker"]["name"] == "Vikram Patel"

    response = client.post(API_PREFIX + "/issues/4/assignments", json={**payload, "assigned_by": "2"})
    assert response.status_code == 403


def test_request_more_info(client: TestClient):
    response = client.post(
        API_PREFIX + "/issues/4/request-info",
        json={"text": "Which lane?", "sender_id": "dept-admin"}
    )
    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "reported"
    assert body["chat_messages"][-1]["is_group_message"] is False


def test_chat_and_share(client: TestClient):
    response = client.post(
        API_PREFIX + "/issues/2/chat",
        json={"text": "Team, please check", "sender_id": "4", "is_group_message": True}
    )
    assert response.status_code == 201
    assert response.json()["chat_messages"][-1]["is_group_message"] is True

    response = client.post(
        API_PREFIX + "/issues/2/share",
        json={"group_name": "Ward 7", "member_count": 12, "shared_by": "4"}
    )
    assert response.status_code == 201
    assert response.json()["group_shares"][-1]["group_name"] == "Ward 7"


def test_dashboard_stats(client: TestClient):
    body = client.get(API_PREFIX + "/issues/stats/overview", params={"reporter_id": "1"}).json()
    assert body["total_issues"] == 6
    assert body["resolved_issues"] == 1
    assert [issue["id"] for issue in body["my_recent_issues"]] == ["6", "1", "3"]


def test_urgent_issues(client: TestClient):
    body = client.get(API_PREFIX + "/issues/urgent", params={"limit": 3}).json()
    assert len(body) == 3
    assert all(issue["status"] not in ("resolved", "closed") for issue in body)


def test_departments(client: TestClient):
    departments = client.get(API_PREFIX + "/departments/").json()
    assert len(departments) == 9

    workers = client.get(API_PREFIX + "/departments/Public Works Department/workers").json()
    assert any(worker["name"] == "Raj Sharma" for worker in workers)
