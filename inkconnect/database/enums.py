"""
inkconnect/database/enums.py

Enumerations

Defines enumerations used across the platform:
- UserRole: Roles assigned to profiles (client, artist, manager, owner)
- AppointmentStatus: Lifecycle states of an appointment
- ArtworkStatus: Progress of an artwork piece
- MessageType / MessageStatus: Kind and delivery state of a message
"""

from enum import Enum

# ---------------------------------------------------
# User Role Enumeration
# ---------------------------------------------------


class UserRole(str, Enum):
    """
    Enum representing profile roles for access control.
    MANAGER and OWNER are the studio admins.
    """

    CLIENT = "client"
    ARTIST = "artist"
    MANAGER = "manager"
    OWNER = "owner"


# ---------------------------------------------------
# Appointment Status Enumeration
# ---------------------------------------------------


class AppointmentStatus(str, Enum):
    """
    Enum representing the lifecycle of an appointment.
    COMPLETED and CANCELLED are terminal.
    """

    PENDING = "pending"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# ---------------------------------------------------
# Artwork Status Enumeration
# ---------------------------------------------------


class ArtworkStatus(str, Enum):
    DRAFT = "draft"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ARCHIVED = "archived"


# ---------------------------------------------------
# Messaging Enumerations
# ---------------------------------------------------


class MessageType(str, Enum):
    TEXT = "text"
    APPOINTMENT = "appointment"
    PAYMENT = "payment"


class MessageStatus(str, Enum):
    SENT = "sent"
    READ = "read"


def enum_values(enum_cls: type[Enum]) -> list[str]:
    """values_callable for SQLAlchemy Enum columns so the lowercase values are stored."""
    return [member.value for member in enum_cls]
