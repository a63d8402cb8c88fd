"""
User Model
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
import enum


class UserRole(str, enum.Enum):
    """User roles, fixed at registration"""
    CITIZEN = "citizen"
    NGO = "ngo"
    AUTHORITY = "authority"


@dataclass
class User:
    id: str
    name: str
    email: str
    role: UserRole = UserRole.CITIZEN
    avatar: Optional[str] = None
    phone: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def can_manage_issues(self) -> bool:
        """Authorities and NGOs move issues through their lifecycle"""
        return self.role in (UserRole.AUTHORITY, UserRole.NGO)

    def __repr__(self):
        return f"<User {self.email}>"
