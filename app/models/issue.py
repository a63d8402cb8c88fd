"""
Issue Models
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional
import enum


class IssueCategory(str, enum.Enum):
    """Issue categories"""
    ROADS = "roads"
    WATER = "water"
    ELECTRICITY = "electricity"
    GARBAGE = "garbage"
    SEWAGE = "sewage"
    POLLUTION = "pollution"
    SAFETY = "safety"
    TRAFFIC = "traffic"
    OTHER = "other"


class IssueStatus(str, enum.Enum):
    """Issue lifecycle states; any state may follow any other"""
    REPORTED = "reported"
    VERIFIED = "verified"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"
    REOPENED = "reopened"


class Severity(str, enum.Enum):
    """Heuristic urgency tiers"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class VoteType(str, enum.Enum):
    UPVOTE = "upvote"
    DOWNVOTE = "downvote"


class AssignmentStatus(str, enum.Enum):
    """Worker assignment states"""
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass
class GeoLocation:
    """A point in degrees with an optional human readable address"""
    latitude: float
    longitude: float
    address: Optional[str] = None


@dataclass
class IssueComment:
    id: str
    issue_id: str
    user_id: str
    text: str
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class IssueUpdate:
    """Status change note left by an authority or NGO"""
    id: str
    issue_id: str
    user_id: str
    text: str
    new_status: Optional[IssueStatus] = None
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class IssueVote:
    id: str
    issue_id: str
    user_id: str
    type: VoteType
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class AIAnalysis:
    """Heuristic assessment attached to an issue when it is reported"""
    id: str
    issue_id: str
    severity: Severity
    confidence: int  # 0-100
    detected_issues: List[str]
    recommendations: List[str]
    assigned_department: str
    estimated_resolution_days: int
    risk_factors: List[str]
    analyzed_at: datetime = field(default_factory=datetime.utcnow)


@dataclass(frozen=True)
class Worker:
    """Department staff member (read-only reference data)"""
    id: str
    name: str
    phone: str
    email: str
    department: str
    experience: str
    avatar: Optional[str] = None
    vehicle: Optional[str] = None


@dataclass
class Assignment:
    """Binding of a worker to an issue"""
    id: str
    issue_id: str
    worker_id: str
    worker: Optional[Worker]
    assigned_by: str
    deadline: datetime
    notes: str = ""
    status: AssignmentStatus = AssignmentStatus.ASSIGNED
    assigned_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class ChatMessage:
    id: str
    issue_id: str
    sender_id: str
    text: str
    is_group_message: bool = False
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class GroupShare:
    id: str
    issue_id: str
    group_name: str
    shared_by: str
    member_count: int
    shared_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class Issue:
    """A reported civic problem"""
    id: str
    title: str
    description: str
    category: IssueCategory
    location: GeoLocation
    reporter_id: str
    images: List[str] = field(default_factory=list)
    is_anonymous: bool = False
    status: IssueStatus = IssueStatus.REPORTED

    # Votes only ever increase
    upvotes: int = 0
    downvotes: int = 0

    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    ai_analysis: Optional[AIAnalysis] = None
    assigned_department: Optional[str] = None

    # Append-only threads
    comments: List[IssueComment] = field(default_factory=list)
    updates: List[IssueUpdate] = field(default_factory=list)
    votes: List[IssueVote] = field(default_factory=list)
    assignments: List[Assignment] = field(default_factory=list)
    chat_messages: List[ChatMessage] = field(default_factory=list)
    group_shares: List[GroupShare] = field(default_factory=list)

    @property
    def net_score(self) -> int:
        return self.upvotes - self.downvotes

    def __repr__(self):
        return f"<Issue {self.id}: {self.title}>"
