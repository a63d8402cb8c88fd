"""
Demo data
Users, issues and their threads loaded at startup for development and demos
"""
from datetime import datetime
from typing import List

from app.models.issue import (
    Assignment, AssignmentStatus, ChatMessage, GeoLocation, Issue, IssueCategory,
    IssueComment, IssueStatus, IssueUpdate
)
from app.models.user import User, UserRole
from app.services.issue_ai_service import IssueAIService, issue_ai_service
from app.services.worker_directory import find_worker

PEXELS = "https://images.pexels.com/photos/{}/pexels-photo-{}.jpeg?auto=compress&cs=tinysrgb&w={}"


def _photo(photo_id: int, width: int = 600) -> str:
    return PEXELS.format(photo_id, photo_id, width)


def build_demo_users() -> List[User]:
    """Sample users; one of each role plus the department admin"""
    return [
        User(id="1", name="Priya Sharma", email="priya@example.com", role=UserRole.CITIZEN,
             avatar=_photo(415829, 150), created_at=datetime(2023, 1, 15)),
        User(id="2", name="Raj Kumar", email="raj@example.com", role=UserRole.CITIZEN,
             avatar=_photo(614810, 150), created_at=datetime(2023, 2, 20)),
        User(id="3", name="Green Earth NGO", email="contact@greenearth.org", role=UserRole.NGO,
             avatar=_photo(3184423, 150), created_at=datetime(2022, 11, 5)),
        User(id="4", name="Municipal Commissioner", email="commissioner@city.gov", role=UserRole.AUTHORITY,
             avatar=_photo(5668768, 150), created_at=datetime(2022, 10, 1)),
        User(id="dept-admin", name="Department Admin", email="admin@dept.com", role=UserRole.AUTHORITY,
             created_at=datetime(2022, 10, 1)),
    ]


def _demo_issue(ai_service: IssueAIService, **fields) -> Issue:
    issue = Issue(**fields)
    analysis = ai_service.generate_analysis(
        issue.id, issue.title, issue.description, issue.category, len(issue.images)
    )
    analysis.analyzed_at = issue.created_at
    issue.ai_analysis = analysis
    issue.assigned_department = analysis.assigned_department
    return issue


def build_demo_issues(ai_service: IssueAIService = issue_ai_service) -> List[Issue]:
    """Six sample issues across India with comments, updates and one assignment"""
    issues = [
        _demo_issue(
            ai_service,
            id="1",
            title="Pothole on Main Street",
            description="Large pothole near the intersection of Main St. and 5th Avenue causing traffic issues and potential vehicle damage.",
            category=IssueCategory.ROADS,
            status=IssueStatus.VERIFIED,
            location=GeoLocation(19.0760, 72.8777, "Main St & 5th Avenue, Mumbai"),
            images=[_photo(5379219)],
            reporter_id="1",
            upvotes=24,
            downvotes=2,
            created_at=datetime(2023, 6, 15),
            updated_at=datetime(2023, 6, 17)
        ),
        _demo_issue(
            ai_service,
            id="2",
            title="Garbage not collected in Sector 7",
            description="Garbage has not been collected in Sector 7 for the past week, causing sanitation issues.",
            category=IssueCategory.GARBAGE,
            status=IssueStatus.IN_PROGRESS,
            location=GeoLocation(28.7041, 77.1025, "Sector 7, Delhi"),
            images=[_photo(2768961)],
            reporter_id="2",
            upvotes=32,
            downvotes=0,
            created_at=datetime(2023, 7, 2),
            updated_at=datetime(2023, 7, 5)
        ),
        _demo_issue(
            ai_service,
            id="3",
            title="Street light not working",
            description="Street light at the corner of Park Road has been out for two weeks, creating a safety hazard at night.",
            category=IssueCategory.ELECTRICITY,
            status=IssueStatus.RESOLVED,
            location=GeoLocation(12.9716, 77.5946, "Park Road, Bangalore"),
            images=[_photo(248159)],
            reporter_id="1",
            upvotes=15,
            downvotes=1,
            created_at=datetime(2023, 5, 20),
            updated_at=datetime(2023, 6, 1)
        ),
        _demo_issue(
            ai_service,
            id="4",
            title="Water logging after rain",
            description="Severe water logging in the residential area after rainfall. The drainage system needs immediate attention.",
            category=IssueCategory.WATER,
            status=IssueStatus.REPORTED,
            location=GeoLocation(22.5726, 88.3639, "Lake Gardens, Kolkata"),
            images=[_photo(753869)],
            reporter_id="2",
            is_anonymous=True,
            upvotes=45,
            downvotes=3,
            created_at=datetime(2023, 7, 25),
            updated_at=datetime(2023, 7, 25)
        ),
        _demo_issue(
            ai_service,
            id="5",
            title="Public park maintenance needed",
            description="The public park in Green Valley needs maintenance. Overgrown grass, broken benches, and playground equipment needs repair.",
            category=IssueCategory.OTHER,
            status=IssueStatus.VERIFIED,
            location=GeoLocation(17.3850, 78.4867, "Green Valley Park, Hyderabad"),
            images=[_photo(763426)],
            reporter_id="3",
            upvotes=18,
            downvotes=2,
            created_at=datetime(2023, 6, 30),
            updated_at=datetime(2023, 7, 2)
        ),
        _demo_issue(
            ai_service,
            id="6",
            title="Stray dog issue",
            description="Increasing number of stray dogs in the neighborhood causing safety concerns for children and elderly.",
            category=IssueCategory.SAFETY,
            status=IssueStatus.IN_PROGRESS,
            location=GeoLocation(26.9124, 75.7873, "Shyam Nagar, Jaipur"),
            images=[_photo(1741205)],
            reporter_id="1",
            upvotes=37,
            downvotes=5,
            created_at=datetime(2023, 7, 10),
            updated_at=datetime(2023, 7, 15)
        ),
    ]
    by_id = {issue.id: issue for issue in issues}

    comments = [
        IssueComment("1", "1", "2", "I noticed this pothole too. It's becoming dangerous!", datetime(2023, 6, 16)),
        IssueComment("2", "1", "3", "We've reported this to the authorities as well.", datetime(2023, 6, 16)),
        IssueComment("3", "2", "1", "Same issue in my sector as well. Hope it gets fixed soon.", datetime(2023, 7, 3)),
        IssueComment("4", "3", "4", "We've scheduled a repair team to fix this issue.", datetime(2023, 5, 25)),
    ]
    for comment in comments:
        by_id[comment.issue_id].comments.append(comment)

    updates = [
        IssueUpdate("1", "1", "4", "Issue has been verified and assigned to the roads department.",
                    IssueStatus.VERIFIED, datetime(2023, 6, 17)),
        IssueUpdate("2", "2", "4", "Waste management team has been dispatched to address the issue.",
                    IssueStatus.IN_PROGRESS, datetime(2023, 7, 5)),
        IssueUpdate("3", "3", "4", "The street light has been repaired and is now functioning.",
                    IssueStatus.RESOLVED, datetime(2023, 6, 1)),
    ]
    for update in updates:
        by_id[update.issue_id].updates.append(update)

    by_id["1"].assignments.append(Assignment(
        id="assign-1",
        issue_id="1",
        worker_id="worker-1",
        worker=find_worker("worker-1"),
        assigned_by="dept-admin",
        deadline=datetime(2024, 11, 23),
        notes="Urgent repair needed. Heavy traffic during peak hours. Deploy early morning crew.",
        status=AssignmentStatus.IN_PROGRESS,
        assigned_at=datetime(2024, 11, 20)
    ))

    by_id["1"].chat_messages.extend([
        ChatMessage("msg-1", "1", "dept-admin",
                    "Raj has been assigned to this job. Please complete it by 23 November.",
                    True, datetime(2024, 11, 20, 10, 30)),
        ChatMessage("msg-2", "1", "worker-1",
                    "Sir, I will reach the site at 8 tomorrow morning. Is any special equipment needed?",
                    True, datetime(2024, 11, 20, 11, 15)),
        ChatMessage("msg-3", "1", "1",
                    "Thank you. This was fixed very quickly!",
                    False, datetime(2024, 11, 22, 14, 45)),
    ])

    return issues
