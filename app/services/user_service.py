"""
User directory
"""
import logging
import uuid
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from app.models.user import User, UserRole

logger = logging.getLogger(__name__)


class UserAlreadyExistsError(ValueError):
    """Raised when an email is registered twice"""


class UserDirectory:
    """In-memory user registry; a user's role never changes after registration"""

    def __init__(self, users: Optional[Iterable[User]] = None):
        self._users: Dict[str, User] = {}
        for user in users or []:
            self._users[user.id] = user

    def register(
        self,
        name: str,
        email: str,
        role: UserRole = UserRole.CITIZEN,
        phone: Optional[str] = None,
        avatar: Optional[str] = None
    ) -> User:
        name = (name or "").strip()
        email = (email or "").strip().lower()
        if not name:
            raise ValueError("Name is required")
        if not email:
            raise ValueError("Email is required")
        if self.get_by_email(email):
            raise UserAlreadyExistsError("Email already registered")

        user = User(
            id=f"user-{uuid.uuid4().hex[:12]}",
            name=name,
            email=email,
            role=UserRole(role),
            phone=phone,
            avatar=avatar,
            created_at=datetime.utcnow()
        )
        self._users[user.id] = user
        logger.info(f"Registered {user.role.value} user {user.id}")
        return user

    def get(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        email = email.strip().lower()
        for user in self._users.values():
            if user.email.lower() == email:
                return user
        return None

    def list_users(self) -> List[User]:
        return list(self._users.values())
