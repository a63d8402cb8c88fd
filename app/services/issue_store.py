"""
Issue Store

Single owner of the issue collection, the filtered view, the selected issue
and the session filter state. Every operation runs to completion; the only
suspension point is the simulated round trip, which happens before any state
is touched. Mutations on the same issue are serialized with a per-id lock.
"""
import asyncio
import logging
import uuid
from collections import defaultdict
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional

from pydantic import ValidationError

from app.core.config import settings
from app.models.issue import (
    Assignment, ChatMessage, GeoLocation, GroupShare, Issue, IssueCategory,
    IssueComment, IssueStatus, IssueUpdate, IssueVote, VoteType, Worker
)
from app.schemas.issue import IssueFilters, SortOrder
from app.services.distance_service import is_within_radius
from app.services.issue_ai_service import IssueAIService, issue_ai_service
from app.services import worker_directory

logger = logging.getLogger(__name__)


class IssueStoreError(Exception):
    """Base class for store errors"""


class IssueValidationError(IssueStoreError, ValueError):
    """Input rejected before any state was changed"""


class DuplicateVoteError(IssueValidationError):
    """A user voted twice on the same issue while one-vote-per-user is on"""


class StoreUnavailableError(IssueStoreError):
    """The backing round trip failed"""


# I/O failures that are recorded in the error slot instead of propagating
IO_ERRORS = (StoreUnavailableError, asyncio.TimeoutError, OSError)

RESOLVED_STATUSES = (IssueStatus.RESOLVED, IssueStatus.CLOSED)
IN_PROGRESS_STATUSES = (IssueStatus.IN_PROGRESS, IssueStatus.VERIFIED)


def _new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def _require_text(value: Optional[str], message: str) -> str:
    if value is None or not str(value).strip():
        raise IssueValidationError(message)
    return str(value).strip()


def apply_filters(
    issues: Iterable[Issue],
    filters: IssueFilters,
    user_location: Optional[GeoLocation] = None
) -> List[Issue]:
    """
    Filter and sort issues

    Order of application: category, status, text search over
    title/description/address, near-me radius (only when near_me is set and
    a location is known), then sorting.
    """
    filtered = list(issues)

    if filters.category:
        filtered = [issue for issue in filtered if issue.category == filters.category]

    if filters.status:
        filtered = [issue for issue in filtered if issue.status == filters.status]

    if filters.search:
        needle = filters.search.lower()
        filtered = [
            issue for issue in filtered
            if needle in issue.title.lower()
            or needle in issue.description.lower()
            or needle in (issue.location.address or "").lower()
        ]

    if filters.near_me and user_location is not None:
        filtered = [
            issue for issue in filtered
            if is_within_radius(user_location, issue.location, filters.radius)
        ]

    if filters.sort_by == SortOrder.NEWEST:
        filtered.sort(key=lambda issue: issue.created_at, reverse=True)
    elif filters.sort_by == SortOrder.OLDEST:
        filtered.sort(key=lambda issue: issue.created_at)
    elif filters.sort_by == SortOrder.MOST_VOTED:
        filtered.sort(key=lambda issue: issue.net_score, reverse=True)
    elif filters.sort_by == SortOrder.LEAST_VOTED:
        filtered.sort(key=lambda issue: issue.net_score)

    return filtered


class IssueStore:
    """In-memory issue repository with session filter state"""

    def __init__(
        self,
        issues: Optional[Iterable[Issue]] = None,
        ai_service: IssueAIService = issue_ai_service,
        latency: float = 0.0,
        one_vote_per_user: bool = False,
        placeholder_image: str = settings.PLACEHOLDER_IMAGE_URL,
        default_radius_km: float = settings.DEFAULT_SEARCH_RADIUS_KM
    ):
        self.ai_service = ai_service
        self.latency = latency
        self.one_vote_per_user = one_vote_per_user
        self.placeholder_image = placeholder_image
        self.default_radius_km = default_radius_km

        self._issues: Dict[str, Issue] = {}
        for issue in issues or []:
            self._issues[issue.id] = issue
        # Only ids present in _issues get a lock
        self._locks: Dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

        self.filtered_issues: List[Issue] = apply_filters(self._issues.values(), self.default_filters())
        self.selected_issue_id: Optional[str] = None
        self.filters: IssueFilters = self.default_filters()
        self.user_location: Optional[GeoLocation] = None
        self.error: Optional[str] = None
        self._in_flight = 0

    @property
    def issues(self) -> List[Issue]:
        return list(self._issues.values())

    @property
    def is_loading(self) -> bool:
        return self._in_flight > 0

    @property
    def selected_issue(self) -> Optional[Issue]:
        if self.selected_issue_id is None:
            return None
        return self._issues.get(self.selected_issue_id)

    def default_filters(self) -> IssueFilters:
        return IssueFilters(radius=self.default_radius_km)

    async def _round_trip(self) -> None:
        """Stand-in for backend I/O"""
        if self.latency:
            await asyncio.sleep(self.latency)

    @asynccontextmanager
    async def _tracked(self, failure_message: str):
        """Loading flag and error slot bookkeeping around one operation"""
        self._in_flight += 1
        self.error = None
        try:
            yield
        except IO_ERRORS as exc:
            logger.warning(f"{failure_message}: {exc!r}")
            self.error = failure_message
        finally:
            self._in_flight -= 1

    async def _mutate(
        self,
        issue_id: str,
        failure_message: str,
        apply: Callable[[Issue], None]
    ) -> Optional[Issue]:
        """
        Run `apply` against one issue under its lock

        Returns the issue, or None when it does not exist or the round trip
        failed. `apply` must raise before changing anything. Issues are never
        removed, so a None for a known id always means a failed round trip.
        """
        if issue_id not in self._issues:
            logger.warning(f"Issue {issue_id} not found")
            return None

        result = None
        async with self._tracked(failure_message):
            async with self._locks[issue_id]:
                await self._round_trip()
                issue = self._issues[issue_id]
                apply(issue)
                result = issue
        return result

    # ============================================
    # QUERIES
    # ============================================

    def search(
        self,
        filters: IssueFilters,
        user_location: Optional[GeoLocation] = None
    ) -> List[Issue]:
        """Stateless query used by request handlers"""
        return apply_filters(self._issues.values(), filters, user_location)

    def find(self, issue_id: str) -> Optional[Issue]:
        """Lookup without touching the selection"""
        return self._issues.get(issue_id)

    async def fetch_issues(self) -> List[Issue]:
        """Recompute the filtered view; the previous view survives a failure"""
        async with self._tracked("Failed to fetch issues"):
            await self._round_trip()
            self.filtered_issues = apply_filters(
                self._issues.values(), self.filters, self.user_location
            )
        return self.filtered_issues

    async def get_issue(self, issue_id: str) -> Optional[Issue]:
        """Select one issue; an unknown id clears the selection"""
        issue = None
        async with self._tracked("Failed to fetch issue details"):
            await self._round_trip()
            issue = self._issues.get(issue_id)
            if issue is None:
                logger.info(f"Issue {issue_id} not found")
            self.selected_issue_id = issue.id if issue else None
        return issue

    def get_available_workers(self, department: str) -> List[Worker]:
        return worker_directory.get_available_workers(department)

    # ============================================
    # MUTATIONS
    # ============================================

    async def create_issue(
        self,
        title: str,
        description: str,
        category: IssueCategory,
        location: Optional[GeoLocation],
        reporter_id: str,
        images: Optional[List[str]] = None,
        is_anonymous: bool = False
    ) -> Optional[str]:
        """
        Report a new issue

        Runs the AI analysis synchronously and stores it with its department.
        An empty image list is replaced by the placeholder image.

        Returns:
            The new issue id, or None if the round trip failed
        """
        title = _require_text(title, "Title is required")
        description = _require_text(description, "Description is required")
        reporter_id = _require_text(reporter_id, "Reporter is required")
        if location is None:
            raise IssueValidationError("Location is required")
        try:
            category = IssueCategory(category)
        except ValueError:
            raise IssueValidationError(f"Invalid category: {category}")

        images = [image for image in (images or []) if image] or [self.placeholder_image]

        issue_id = None
        async with self._tracked("Failed to create issue"):
            await self._round_trip()

            new_id = _new_id("issue")
            now = datetime.utcnow()
            analysis = self.ai_service.generate_analysis(
                new_id, title, description, category, len(images)
            )
            issue = Issue(
                id=new_id,
                title=title,
                description=description,
                category=category,
                location=location,
                reporter_id=reporter_id,
                images=images,
                is_anonymous=is_anonymous,
                status=IssueStatus.REPORTED,
                created_at=now,
                updated_at=now,
                ai_analysis=analysis,
                assigned_department=analysis.assigned_department
            )
            self._issues[new_id] = issue
            issue_id = new_id
            logger.info(
                f"Issue {new_id} reported in {category.value} "
                f"(severity={analysis.severity.value}, department={analysis.assigned_department})"
            )

        if issue_id:
            await self.fetch_issues()
        return issue_id

    async def update_issue_status(
        self,
        issue_id: str,
        status: IssueStatus,
        update_text: str,
        user_id: str
    ) -> Optional[Issue]:
        """Move an issue to any status, recording the note as an update"""
        update_text = _require_text(update_text, "Update text is required")
        try:
            status = IssueStatus(status)
        except ValueError:
            raise IssueValidationError(f"Invalid status: {status}")

        def apply(issue: Issue) -> None:
            update = IssueUpdate(
                id=_new_id("update"),
                issue_id=issue.id,
                user_id=user_id,
                text=update_text,
                new_status=status
            )
            issue.status = status
            issue.updated_at = update.created_at
            issue.updates.append(update)
            logger.info(f"Issue {issue.id} moved to {status.value} by {user_id}")

        issue = await self._mutate(issue_id, "Failed to update issue status", apply)
        if issue:
            await self.fetch_issues()
        return issue

    async def add_comment(self, issue_id: str, text: str, user_id: str) -> Optional[Issue]:
        text = _require_text(text, "Comment text is required")

        def apply(issue: Issue) -> None:
            issue.comments.append(IssueComment(
                id=_new_id("comment"),
                issue_id=issue.id,
                user_id=user_id,
                text=text
            ))

        return await self._mutate(issue_id, "Failed to add comment", apply)

    async def vote_issue(self, issue_id: str, user_id: str, vote_type: VoteType) -> Optional[Issue]:
        """Increment exactly one of the two vote counters by one"""
        try:
            vote_type = VoteType(vote_type)
        except ValueError:
            raise IssueValidationError(f"Invalid vote type: {vote_type}")

        def apply(issue: Issue) -> None:
            if self.one_vote_per_user and any(vote.user_id == user_id for vote in issue.votes):
                raise DuplicateVoteError("User has already voted on this issue")

            vote = IssueVote(
                id=_new_id("vote"),
                issue_id=issue.id,
                user_id=user_id,
                type=vote_type
            )
            if vote_type == VoteType.UPVOTE:
                issue.upvotes += 1
            else:
                issue.downvotes += 1
            issue.votes.append(vote)

        issue = await self._mutate(issue_id, "Failed to vote on issue", apply)
        if issue:
            await self.fetch_issues()
        return issue

    async def assign_worker(
        self,
        issue_id: str,
        worker_id: str,
        assigned_by: str,
        deadline: datetime,
        notes: str = ""
    ) -> Optional[Issue]:
        """
        Assign a department worker; the issue moves to in_progress

        An unknown worker id still records the assignment, without a worker.
        """
        worker_id = _require_text(worker_id, "Worker is required")
        if deadline is None:
            raise IssueValidationError("Deadline is required")

        worker = worker_directory.find_worker(worker_id)
        if worker is None:
            logger.warning(f"Worker {worker_id} not in directory; assignment left unlinked")

        def apply(issue: Issue) -> None:
            assignment = Assignment(
                id=_new_id("assign"),
                issue_id=issue.id,
                worker_id=worker_id,
                worker=worker,
                assigned_by=assigned_by,
                deadline=deadline,
                notes=notes or ""
            )
            issue.assignments.append(assignment)
            issue.status = IssueStatus.IN_PROGRESS
            issue.updated_at = assignment.assigned_at
            logger.info(f"Worker {worker_id} assigned to issue {issue.id} by {assigned_by}")

        issue = await self._mutate(issue_id, "Failed to assign worker", apply)
        if issue:
            await self.fetch_issues()
        return issue

    async def add_chat_message(
        self,
        issue_id: str,
        text: str,
        sender_id: str,
        is_group_message: bool = False
    ) -> Optional[Issue]:
        text = _require_text(text, "Message text is required")

        def apply(issue: Issue) -> None:
            issue.chat_messages.append(ChatMessage(
                id=_new_id("msg"),
                issue_id=issue.id,
                sender_id=sender_id,
                text=text,
                is_group_message=is_group_message
            ))

        return await self._mutate(issue_id, "Failed to add chat message", apply)

    async def request_more_info(self, issue_id: str, text: str, sender_id: str) -> Optional[Issue]:
        """Private message to the reporter; the status is left alone"""
        return await self.add_chat_message(issue_id, text, sender_id, is_group_message=False)

    async def share_to_group(
        self,
        issue_id: str,
        group_name: str,
        member_count: int,
        shared_by: str
    ) -> Optional[Issue]:
        group_name = _require_text(group_name, "Group name is required")
        if member_count is None or member_count < 0:
            raise IssueValidationError("Member count must be zero or more")

        def apply(issue: Issue) -> None:
            issue.group_shares.append(GroupShare(
                id=_new_id("share"),
                issue_id=issue.id,
                group_name=group_name,
                shared_by=shared_by,
                member_count=member_count
            ))

        return await self._mutate(issue_id, "Failed to share to group", apply)

    # ============================================
    # SESSION STATE
    # ============================================

    async def set_filters(self, **changes) -> List[Issue]:
        """Merge partial filter changes, then refresh the view"""
        try:
            self.filters = IssueFilters.model_validate({**self.filters.model_dump(), **changes})
        except ValidationError as exc:
            raise IssueValidationError(str(exc))
        return await self.fetch_issues()

    async def clear_filters(self) -> List[Issue]:
        self.filters = self.default_filters()
        return await self.fetch_issues()

    async def set_user_location(self, location: GeoLocation) -> List[Issue]:
        self.user_location = location
        return await self.fetch_issues()

    # ============================================
    # DASHBOARD
    # ============================================

    def get_dashboard_stats(self, reporter_id: Optional[str] = None, limit: int = 3) -> Dict:
        """Aggregate counts plus recent and top voted issues"""
        issues = self.issues

        by_category = {category.value: 0 for category in IssueCategory}
        by_status = {status.value: 0 for status in IssueStatus}
        for issue in issues:
            by_category[issue.category.value] += 1
            by_status[issue.status.value] += 1

        newest_first = sorted(issues, key=lambda issue: issue.created_at, reverse=True)
        my_recent = []
        if reporter_id:
            my_recent = [issue for issue in newest_first if issue.reporter_id == reporter_id][:limit]

        return {
            "total_issues": len(issues),
            "resolved_issues": sum(1 for issue in issues if issue.status in RESOLVED_STATUSES),
            "in_progress_issues": sum(1 for issue in issues if issue.status in IN_PROGRESS_STATUSES),
            "pending_issues": by_status[IssueStatus.REPORTED.value],
            "issues_by_category": by_category,
            "issues_by_status": by_status,
            "recent_issues": newest_first[:limit],
            "top_voted_issues": sorted(issues, key=lambda issue: issue.net_score, reverse=True)[:limit],
            "my_recent_issues": my_recent
        }

    def get_urgent_issues(self, limit: int = 10) -> List[Issue]:
        """Open issues ordered by AI priority score"""
        candidates = [
            issue for issue in self.issues
            if issue.ai_analysis is not None and issue.status not in RESOLVED_STATUSES
        ]
        candidates.sort(
            key=lambda issue: self.ai_service.get_priority_score(issue.ai_analysis),
            reverse=True
        )
        return candidates[:limit]
