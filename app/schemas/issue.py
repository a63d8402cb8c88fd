"""
Issue Schemas
"""
from datetime import datetime
from typing import Dict, List, Optional
import enum
from pydantic import BaseModel, Field

from app.models.issue import (
    AssignmentStatus, IssueCategory, IssueStatus, Severity, VoteType
)
from app.schemas.user import UserResponse


class SortOrder(str, enum.Enum):
    """Issue list orderings"""
    NEWEST = "newest"
    OLDEST = "oldest"
    MOST_VOTED = "mostVoted"
    LEAST_VOTED = "leastVoted"


class IssueFilters(BaseModel):
    """Filter configuration of one client session"""
    category: Optional[IssueCategory] = None
    status: Optional[IssueStatus] = None
    search: str = ""
    sort_by: SortOrder = SortOrder.NEWEST
    radius: float = Field(5.0, ge=0)  # kilometers
    near_me: bool = False

    class Config:
        extra = "forbid"
        validate_assignment = True


class GeoLocationSchema(BaseModel):
    """Coordinates with an optional address"""
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    address: Optional[str] = None

    class Config:
        from_attributes = True


# ============================================
# REQUESTS
# ============================================

class IssueCreate(BaseModel):
    """New issue report"""
    title: str
    description: str
    category: IssueCategory
    location: GeoLocationSchema
    reporter_id: str
    images: List[str] = []
    is_anonymous: bool = False


class StatusUpdateRequest(BaseModel):
    """Status change with a mandatory note"""
    status: IssueStatus
    text: str
    user_id: str


class VoteRequest(BaseModel):
    user_id: str
    vote_type: VoteType


class CommentCreate(BaseModel):
    text: str
    user_id: str


class AssignmentCreate(BaseModel):
    """Worker assignment made from the department dashboard"""
    worker_id: str
    assigned_by: str
    deadline: datetime
    notes: str = ""


class InfoRequest(BaseModel):
    text: str
    sender_id: str


class ChatMessageCreate(BaseModel):
    text: str
    sender_id: str
    is_group_message: bool = False


class GroupShareCreate(BaseModel):
    group_name: str
    member_count: int = Field(..., ge=0)
    shared_by: str


# ============================================
# RESPONSES
# ============================================

class IssueCommentResponse(BaseModel):
    id: str
    issue_id: str
    user_id: str
    text: str
    created_at: datetime

    class Config:
        from_attributes = True


class IssueUpdateResponse(BaseModel):
    id: str
    issue_id: str
    user_id: str
    text: str
    new_status: Optional[IssueStatus] = None
    created_at: datetime

    class Config:
        from_attributes = True


class AIAnalysisResponse(BaseModel):
    """Heuristic analysis attached at creation"""
    id: str
    issue_id: str
    severity: Severity
    confidence: int
    detected_issues: List[str]
    recommendations: List[str]
    assigned_department: str
    estimated_resolution_days: int
    risk_factors: List[str]
    analyzed_at: datetime

    class Config:
        from_attributes = True


class WorkerResponse(BaseModel):
    id: str
    name: str
    phone: str
    email: str
    department: str
    experience: str
    avatar: Optional[str] = None
    vehicle: Optional[str] = None

    class Config:
        from_attributes = True


class AssignmentResponse(BaseModel):
    id: str
    issue_id: str
    worker_id: str
    worker: Optional[WorkerResponse] = None
    assigned_by: str
    assigned_at: datetime
    deadline: datetime
    status: AssignmentStatus
    notes: str

    class Config:
        from_attributes = True


class ChatMessageResponse(BaseModel):
    id: str
    issue_id: str
    sender_id: str
    text: str
    is_group_message: bool
    created_at: datetime

    class Config:
        from_attributes = True


class GroupShareResponse(BaseModel):
    id: str
    issue_id: str
    group_name: str
    shared_by: str
    member_count: int
    shared_at: datetime

    class Config:
        from_attributes = True


class IssueResponse(BaseModel):
    """Issue detail"""
    id: str
    title: str
    description: str
    category: IssueCategory
    status: IssueStatus
    location: GeoLocationSchema
    images: List[str]
    reporter_id: str
    is_anonymous: bool
    upvotes: int
    downvotes: int
    net_score: int
    created_at: datetime
    updated_at: datetime
    assigned_department: Optional[str] = None
    ai_analysis: Optional[AIAnalysisResponse] = None

    comments: List[IssueCommentResponse] = []
    updates: List[IssueUpdateResponse] = []
    assignments: List[AssignmentResponse] = []
    chat_messages: List[ChatMessageResponse] = []
    group_shares: List[GroupShareResponse] = []

    # Absent for anonymous reports
    reporter: Optional[UserResponse] = None

    class Config:
        from_attributes = True


class IssueListResponse(BaseModel):
    items: List[IssueResponse]
    total: int
    filters: IssueFilters


class IssueCreatedResponse(BaseModel):
    id: str
    issue: IssueResponse


class DepartmentResponse(BaseModel):
    category: IssueCategory
    department: str
    worker_count: int


class DashboardStats(BaseModel):
    """Dashboard statistics"""
    total_issues: int
    resolved_issues: int
    in_progress_issues: int
    pending_issues: int

    issues_by_category: Dict[str, int]
    issues_by_status: Dict[str, int]

    recent_issues: List[IssueResponse]
    top_voted_issues: List[IssueResponse]
    my_recent_issues: List[IssueResponse] = []
