# Domain Models
from app.models.user import User, UserRole
from app.models.issue import (
    Issue, IssueCategory, IssueStatus, Severity, VoteType, AssignmentStatus,
    GeoLocation, IssueComment, IssueUpdate, IssueVote, AIAnalysis,
    Worker, Assignment, ChatMessage, GroupShare
)

__all__ = [
    "User",
    "UserRole",
    "Issue",
    "IssueCategory",
    "IssueStatus",
    "Severity",
    "VoteType",
    "AssignmentStatus",
    "GeoLocation",
    "IssueComment",
    "IssueUpdate",
    "IssueVote",
    "AIAnalysis",
    "Worker",
    "Assignment",
    "ChatMessage",
    "GroupShare"
]
