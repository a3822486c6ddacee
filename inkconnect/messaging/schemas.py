"""
inkconnect/messaging/schemas.py

Messaging Schemas
- Sending a message (optionally scoped to an appointment)
- Reading messages and conversation summaries
- Unread counters
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from inkconnect.database.enums import MessageStatus, MessageType
from inkconnect.profile.schemas import ProfilePublic


class MessageCreate(BaseModel):
    recipient_id: UUID = Field(..., description="Profile receiving the message")
    content: str = Field(..., max_length=10000, description="Message text")
    message_type: MessageType = MessageType.TEXT
    appointment_id: UUID | None = Field(None, description="Appointment this message is about")

    @field_validator("content")
    @classmethod
    def strip_content(cls, value: str) -> str:
        return value.strip()


class MessageRead(BaseModel):
    id: UUID
    conversation_id: str
    sender_id: UUID
    recipient_id: UUID
    appointment_id: UUID | None = None
    content: str
    message_type: MessageType
    status: MessageStatus
    read_at: datetime | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ConversationSummary(BaseModel):
    """One row of the inbox: the other participant, their last message and unread count."""

    conversation_id: str
    partner: ProfilePublic
    last_message: MessageRead
    unread_count: int = 0


class UnreadCount(BaseModel):
    unread_count: int


class ThreadReadResult(BaseModel):
    marked_read: int
