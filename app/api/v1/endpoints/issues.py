"""
Issue Endpoints - citizen reports, votes, comments and department actions
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query

from app.core.config import settings
from app.core.deps import get_issue_store, get_user_directory
from app.models.issue import GeoLocation, Issue, IssueCategory, IssueStatus
from app.schemas.issue import (
    AssignmentCreate, ChatMessageCreate, CommentCreate, DashboardStats,
    GroupShareCreate, InfoRequest, IssueCreate, IssueCreatedResponse,
    IssueFilters, IssueListResponse, IssueResponse, SortOrder,
    StatusUpdateRequest, VoteRequest
)
from app.schemas.user import UserResponse
from app.services.issue_ai_service import issue_ai_service
from app.services.issue_store import DuplicateVoteError, IssueStore, IssueValidationError
from app.services.user_service import UserDirectory

router = APIRouter()

STORE_UNAVAILABLE = "Issue store unavailable, please try again"

CATEGORY_INFO = {
    IssueCategory.ROADS: {"name": "Road Issues", "icon": "road", "color": "bg-amber-500"},
    IssueCategory.WATER: {"name": "Water Supply", "icon": "droplets", "color": "bg-blue-500"},
    IssueCategory.ELECTRICITY: {"name": "Electricity", "icon": "zap", "color": "bg-yellow-500"},
    IssueCategory.GARBAGE: {"name": "Waste Management", "icon": "trash-2", "color": "bg-green-500"},
    IssueCategory.SEWAGE: {"name": "Sewage", "icon": "pipe", "color": "bg-brown-500"},
    IssueCategory.POLLUTION: {"name": "Pollution", "icon": "factory", "color": "bg-slate-500"},
    IssueCategory.SAFETY: {"name": "Safety & Security", "icon": "shield", "color": "bg-red-500"},
    IssueCategory.TRAFFIC: {"name": "Traffic", "icon": "car", "color": "bg-orange-500"},
    IssueCategory.OTHER: {"name": "Other Issues", "icon": "more-horizontal", "color": "bg-gray-500"}
}

STATUS_INFO = {
    IssueStatus.REPORTED: {"name": "Reported", "icon": "flag", "color": "bg-gray-500"},
    IssueStatus.VERIFIED: {"name": "Verified", "icon": "check-circle", "color": "bg-blue-500"},
    IssueStatus.IN_PROGRESS: {"name": "In Progress", "icon": "clock", "color": "bg-yellow-500"},
    IssueStatus.RESOLVED: {"name": "Resolved", "icon": "check", "color": "bg-green-500"},
    IssueStatus.CLOSED: {"name": "Closed", "icon": "x-circle", "color": "bg-red-500"},
    IssueStatus.REOPENED: {"name": "Reopened", "icon": "refresh-cw", "color": "bg-purple-500"}
}


def to_issue_response(issue: Issue, users: UserDirectory) -> IssueResponse:
    """Serialize an issue, embedding the reporter unless the report is anonymous"""
    response = IssueResponse.model_validate(issue)
    if not issue.is_anonymous:
        reporter = users.get(issue.reporter_id)
        if reporter:
            response.reporter = UserResponse.model_validate(reporter)
    return response


def ensure_issue(issue: Optional[Issue], issue_id: str, store: IssueStore) -> Issue:
    """
    Map a soft store miss to 404, or to 503 when this call's round trip failed

    Issues are never removed, so a None for a known id means the round trip
    failed.
    """
    if issue is None:
        if store.find(issue_id) is not None:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=STORE_UNAVAILABLE
            )
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Issue not found"
        )
    return issue


def require_manager(user_id: str, users: UserDirectory) -> None:
    """Only authorities and NGOs may move an issue through its lifecycle"""
    actor = users.get(user_id)
    if actor is None or not actor.can_manage_issues:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only authority or NGO users can perform this action"
        )


def bad_request(exc: IssueValidationError) -> HTTPException:
    if isinstance(exc, DuplicateVoteError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


# ============================================
# PUBLIC LOOKUPS
# ============================================

@router.get("/categories")
async def list_categories():
    """
    Issue categories with display metadata and owning department
    """
    categories = [
        {"id": category.value, **info, "department": issue_ai_service.get_department(category)}
        for category, info in CATEGORY_INFO.items()
    ]
    return {
        "categories": categories,
        "total": len(categories)
    }


@router.get("/statuses")
async def list_statuses():
    """Issue statuses with display metadata"""
    statuses = [{"id": s.value, **info} for s, info in STATUS_INFO.items()]
    return {
        "statuses": statuses,
        "total": len(statuses)
    }


@router.get("/stats/overview", response_model=DashboardStats)
async def get_dashboard_stats(
    reporter_id: Optional[str] = Query(None, description="Include this reporter's recent issues"),
    store: IssueStore = Depends(get_issue_store),
    users: UserDirectory = Depends(get_user_directory)
):
    """
    Dashboard statistics
    """
    stats = store.get_dashboard_stats(reporter_id=reporter_id)
    for key in ("recent_issues", "top_voted_issues", "my_recent_issues"):
        stats[key] = [to_issue_response(issue, users) for issue in stats[key]]
    return DashboardStats(**stats)


@router.get("/urgent", response_model=List[IssueResponse])
async def list_urgent_issues(
    limit: int = Query(10, ge=1, le=100),
    store: IssueStore = Depends(get_issue_store),
    users: UserDirectory = Depends(get_user_directory)
):
    """
    Open issues ordered by AI priority score
    """
    return [to_issue_response(issue, users) for issue in store.get_urgent_issues(limit)]


# ============================================
# ISSUES
# ============================================

@router.get("/", response_model=IssueListResponse)
async def list_issues(
    category: Optional[IssueCategory] = Query(None),
    status_filter: Optional[IssueStatus] = Query(None, alias="status"),
    search: str = Query(""),
    sort_by: SortOrder = Query(SortOrder.NEWEST),
    radius: float = Query(settings.DEFAULT_SEARCH_RADIUS_KM, ge=0, description="Search radius (km)"),
    near_me: bool = Query(False),
    latitude: Optional[float] = Query(None, ge=-90, le=90, description="User latitude"),
    longitude: Optional[float] = Query(None, ge=-180, le=180, description="User longitude"),
    store: IssueStore = Depends(get_issue_store),
    users: UserDirectory = Depends(get_user_directory)
):
    """
    List issues with filters and sorting

    The near-me radius only applies when near_me is set and both
    coordinates are given.
    """
    filters = IssueFilters(
        category=category,
        status=status_filter,
        search=search,
        sort_by=sort_by,
        radius=radius,
        near_me=near_me
    )
    user_location = None
    if latitude is not None and longitude is not None:
        user_location = GeoLocation(latitude=latitude, longitude=longitude)

    issues = store.search(filters, user_location)
    return IssueListResponse(
        items=[to_issue_response(issue, users) for issue in issues],
        total=len(issues),
        filters=filters
    )


@router.post("/", response_model=IssueCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_issue(
    issue_in: IssueCreate,
    store: IssueStore = Depends(get_issue_store),
    users: UserDirectory = Depends(get_user_directory)
):
    """
    Report a new issue

    The AI analysis runs immediately; reports without images get a
    placeholder image.
    """
    location = GeoLocation(
        latitude=issue_in.location.latitude,
        longitude=issue_in.location.longitude,
        address=issue_in.location.address
    )
    try:
        issue_id = await store.create_issue(
            title=issue_in.title,
            description=issue_in.description,
            category=issue_in.category,
            location=location,
            reporter_id=issue_in.reporter_id,
            images=issue_in.images,
            is_anonymous=issue_in.is_anonymous
        )
    except IssueValidationError as e:
        raise bad_request(e)

    if not issue_id:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Failed to create issue"
        )

    issue = store.find(issue_id)
    return IssueCreatedResponse(id=issue_id, issue=to_issue_response(ensure_issue(issue, issue_id, store), users))


@router.get("/{issue_id}", response_model=IssueResponse)
async def get_issue(
    issue_id: str,
    store: IssueStore = Depends(get_issue_store),
    users: UserDirectory = Depends(get_user_directory)
):
    """
    Issue detail
    """
    return to_issue_response(ensure_issue(store.find(issue_id), issue_id, store), users)


@router.post("/{issue_id}/status", response_model=IssueResponse)
async def update_issue_status(
    issue_id: str,
    update: StatusUpdateRequest,
    store: IssueStore = Depends(get_issue_store),
    users: UserDirectory = Depends(get_user_directory)
):
    """
    Change status with a note (authority/NGO only); any transition is allowed
    """
    require_manager(update.user_id, users)
    try:
        issue = await store.update_issue_status(issue_id, update.status, update.text, update.user_id)
    except IssueValidationError as e:
        raise bad_request(e)
    return to_issue_response(ensure_issue(issue, issue_id, store), users)


@router.post("/{issue_id}/vote", response_model=IssueResponse)
async def vote_issue(
    issue_id: str,
    vote: VoteRequest,
    store: IssueStore = Depends(get_issue_store),
    users: UserDirectory = Depends(get_user_directory)
):
    """Upvote or downvote"""
    try:
        issue = await store.vote_issue(issue_id, vote.user_id, vote.vote_type)
    except IssueValidationError as e:
        raise bad_request(e)
    return to_issue_response(ensure_issue(issue, issue_id, store), users)


@router.post("/{issue_id}/comments", response_model=IssueResponse, status_code=status.HTTP_201_CREATED)
async def add_comment(
    issue_id: str,
    comment: CommentCreate,
    store: IssueStore = Depends(get_issue_store),
    users: UserDirectory = Depends(get_user_directory)
):
    try:
        issue = await store.add_comment(issue_id, comment.text, comment.user_id)
    except IssueValidationError as e:
        raise bad_request(e)
    return to_issue_response(ensure_issue(issue, issue_id, store), users)


@router.post("/{issue_id}/assignments", response_model=IssueResponse, status_code=status.HTTP_201_CREATED)
async def assign_worker(
    issue_id: str,
    assignment: AssignmentCreate,
    store: IssueStore = Depends(get_issue_store),
    users: UserDirectory = Depends(get_user_directory)
):
    """
    Assign a department worker; the issue moves to in_progress
    """
    require_manager(assignment.assigned_by, users)
    try:
        issue = await store.assign_worker(
            issue_id,
            assignment.worker_id,
            assignment.assigned_by,
            assignment.deadline,
            assignment.notes
        )
    except IssueValidationError as e:
        raise bad_request(e)
    return to_issue_response(ensure_issue(issue, issue_id, store), users)


@router.post("/{issue_id}/request-info", response_model=IssueResponse, status_code=status.HTTP_201_CREATED)
async def request_more_info(
    issue_id: str,
    request_in: InfoRequest,
    store: IssueStore = Depends(get_issue_store),
    users: UserDirectory = Depends(get_user_directory)
):
    """Private message asking the reporter for more details"""
    try:
        issue = await store.request_more_info(issue_id, request_in.text, request_in.sender_id)
    except IssueValidationError as e:
        raise bad_request(e)
    return to_issue_response(ensure_issue(issue, issue_id, store), users)


@router.post("/{issue_id}/chat", response_model=IssueResponse, status_code=status.HTTP_201_CREATED)
async def add_chat_message(
    issue_id: str,
    message: ChatMessageCreate,
    store: IssueStore = Depends(get_issue_store),
    users: UserDirectory = Depends(get_user_directory)
):
    try:
        issue = await store.add_chat_message(
            issue_id, message.text, message.sender_id, message.is_group_message
        )
    except IssueValidationError as e:
        raise bad_request(e)
    return to_issue_response(ensure_issue(issue, issue_id, store), users)


@router.post("/{issue_id}/share", response_model=IssueResponse, status_code=status.HTTP_201_CREATED)
async def share_to_group(
    issue_id: str,
    share: GroupShareCreate,
    store: IssueStore = Depends(get_issue_store),
    users: UserDirectory = Depends(get_user_directory)
):
    """Share an issue with a team group"""
    try:
        issue = await store.share_to_group(issue_id, share.group_name, share.member_count, share.shared_by)
    except IssueValidationError as e:
        raise bad_request(e)
    return to_issue_response(ensure_issue(issue, issue_id, store), users)
