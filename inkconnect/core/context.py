"""
inkconnect/core/context.py

Request Context

The authenticated caller, passed explicitly into every service call.
"""

from dataclasses import dataclass
from uuid import UUID

from inkconnect.database.enums import UserRole

ADMIN_ROLES = (UserRole.MANAGER, UserRole.OWNER)


@dataclass(frozen=True)
class RequestContext:
    profile_id: UUID
    role: UserRole
    email: str

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES

    @property
    def is_artist(self) -> bool:
        return self.role == UserRole.ARTIST

    @property
    def is_client(self) -> bool:
        return self.role == UserRole.CLIENT

    @classmethod
    def from_profile(cls, profile) -> "RequestContext":
        return cls(profile_id=profile.id, role=profile.role, email=profile.email)
