# Pydantic Schemas
from app.schemas.user import UserCreate, UserResponse
from app.schemas.issue import (
    SortOrder, IssueFilters, GeoLocationSchema,
    IssueCreate, StatusUpdateRequest, VoteRequest, CommentCreate,
    AssignmentCreate, InfoRequest, ChatMessageCreate, GroupShareCreate,
    IssueResponse, IssueListResponse, IssueCreatedResponse,
    AIAnalysisResponse, AssignmentResponse, WorkerResponse,
    DepartmentResponse, DashboardStats
)
from app.schemas.location import (
    Coordinates, LocationData, LocationSearchResponse, LocationErrorResponse
)

__all__ = [
    # User
    "UserCreate", "UserResponse",
    # Issue
    "SortOrder", "IssueFilters", "GeoLocationSchema",
    "IssueCreate", "StatusUpdateRequest", "VoteRequest", "CommentCreate",
    "AssignmentCreate", "InfoRequest", "ChatMessageCreate", "GroupShareCreate",
    "IssueResponse", "IssueListResponse", "IssueCreatedResponse",
    "AIAnalysisResponse", "AssignmentResponse", "WorkerResponse",
    "DepartmentResponse", "DashboardStats",
    # Location
    "Coordinates", "LocationData", "LocationSearchResponse", "LocationErrorResponse"
]
