"""
inkconnect/messaging/services.py

Messaging Service Layer

Handles direct messages between profiles:
- Sending (optionally scoped to an appointment)
- Symmetric threads keyed by a conversation id derived from both participants
- Read receipts (single message and whole thread) and unread counters
- Inbox summaries per conversation partner

Unread counts are always computed from the messages table.
"""

import hashlib
import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from inkconnect.appointment.services import AppointmentService
from inkconnect.core.context import RequestContext
from inkconnect.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from inkconnect.database.enums import MessageStatus
from inkconnect.database.models import Profile
from inkconnect.database.session import commit_or_rollback
from inkconnect.messaging import schemas
from inkconnect.messaging.manager import manager
from inkconnect.messaging.models import Message
from inkconnect.profile.schemas import ProfilePublic

logger = logging.getLogger(__name__)

MESSAGE_CREATED = "message.created"
MESSAGE_READ = "message.read"


# ---------------------------------------------------
# Conversation Identity
# ---------------------------------------------------
def conversation_id_for(a: UUID, b: UUID) -> str:
    """SHA-256 of the two participant ids in sorted order; identical for (a, b) and (b, a)."""
    first, second = sorted((str(a), str(b)))
    return hashlib.sha256(f"{first}:{second}".encode()).hexdigest()


# ---------------------------------------------------
# Sending
# ---------------------------------------------------
async def send_message(
    db: AsyncSession, ctx: RequestContext, payload: schemas.MessageCreate
) -> schemas.MessageRead:
    """
    Send a message from the caller to `payload.recipient_id`.

    Raises:
        ValidationError: empty content or messaging oneself.
        NotFoundError: unknown recipient or appointment.
        PermissionDeniedError: appointment scope the sender does not take part in.
    """
    if not payload.content:
        raise ValidationError("Message content cannot be empty")
    if payload.recipient_id == ctx.profile_id:
        raise ValidationError("You cannot send a message to yourself")

    recipient = await db.get(Profile, payload.recipient_id)
    if not recipient:
        raise NotFoundError("Recipient not found")

    if payload.appointment_id is not None:
        # raises NotFound / PermissionDenied for unknown or foreign appointments
        await AppointmentService(db).get_model_for_participant(ctx, payload.appointment_id)

    message = Message(
        conversation_id=conversation_id_for(ctx.profile_id, recipient.id),
        sender_id=ctx.profile_id,
        recipient_id=recipient.id,
        appointment_id=payload.appointment_id,
        content=payload.content,
        message_type=payload.message_type,
        status=MessageStatus.SENT,
        read_at=None,
    )
    db.add(message)
    await commit_or_rollback(db, "send message")
    await db.refresh(message)

    response = schemas.MessageRead.model_validate(message)
    logger.info(f"[MESSAGE] {message.id} sent from {ctx.profile_id} to {recipient.id}")
    await manager.publish([ctx.profile_id, recipient.id], MESSAGE_CREATED, response)
    return response


# ---------------------------------------------------
# Threads
# ---------------------------------------------------
async def get_thread(
    db: AsyncSession, ctx: RequestContext, a: UUID, b: UUID
) -> list[schemas.MessageRead]:
    """All messages between `a` and `b`, oldest first. Caller must be a participant or an admin."""
    if ctx.profile_id not in (a, b) and not ctx.is_admin:
        raise PermissionDeniedError("You are not a participant of this conversation")

    result = await db.execute(
        select(Message)
        .where(Message.conversation_id == conversation_id_for(a, b))
        .order_by(Message.created_at.asc(), Message.id.asc())
    )
    return [schemas.MessageRead.model_validate(m) for m in result.scalars().all()]


async def list_conversations(
    db: AsyncSession, ctx: RequestContext
) -> list[schemas.ConversationSummary]:
    """One entry per conversation partner, most recent conversation first."""
    me = ctx.profile_id
    result = await db.execute(
        select(Message)
        .where(or_(Message.sender_id == me, Message.recipient_id == me))
        .order_by(Message.created_at.desc(), Message.id.desc())
    )

    latest: dict[UUID, Message] = {}
    unread: dict[UUID, int] = {}
    for message in result.scalars().all():
        partner_id = message.recipient_id if message.sender_id == me else message.sender_id
        latest.setdefault(partner_id, message)
        if message.recipient_id == me and message.read_at is None:
            unread[partner_id] = unread.get(partner_id, 0) + 1

    if not latest:
        return []

    partners_result = await db.execute(select(Profile).where(Profile.id.in_(latest.keys())))
    partners = {p.id: p for p in partners_result.scalars().all()}

    return [
        schemas.ConversationSummary(
            conversation_id=message.conversation_id,
            partner=ProfilePublic.model_validate(partners[partner_id]),
            last_message=schemas.MessageRead.model_validate(message),
            unread_count=unread.get(partner_id, 0),
        )
        for partner_id, message in latest.items()
        if partner_id in partners
    ]


# ---------------------------------------------------
# Read Receipts
# ---------------------------------------------------
async def mark_read(
    db: AsyncSession, ctx: RequestContext, message_id: UUID
) -> schemas.MessageRead:
    """Mark one message read. Only its recipient may; repeating the call changes nothing."""
    message = await db.get(Message, message_id)
    if not message:
        raise NotFoundError("Message not found")
    if message.recipient_id != ctx.profile_id:
        raise PermissionDeniedError("Only the recipient can mark a message as read")

    if message.read_at is None:
        message.read_at = datetime.now(timezone.utc)
        message.status = MessageStatus.READ
        await commit_or_rollback(db, "mark message read")
        await db.refresh(message)
        logger.debug(f"[MESSAGE] {message.id} read by {ctx.profile_id}")
        response = schemas.MessageRead.model_validate(message)
        await manager.publish([message.sender_id, message.recipient_id], MESSAGE_READ, response)
        return response

    return schemas.MessageRead.model_validate(message)


async def mark_thread_read(db: AsyncSession, ctx: RequestContext, partner_id: UUID) -> int:
    """Mark every unread message from `partner_id` to the caller as read. Returns how many."""
    result = await db.execute(
        update(Message)
        .where(
            Message.sender_id == partner_id,
            Message.recipient_id == ctx.profile_id,
            Message.read_at.is_(None),
        )
        .values(read_at=datetime.now(timezone.utc), status=MessageStatus.READ)
        .execution_options(synchronize_session=False)
    )
    await commit_or_rollback(db, "mark conversation read")
    count = int(result.rowcount or 0)
    if count:
        logger.debug(f"[MESSAGE] {count} messages from {partner_id} read by {ctx.profile_id}")
        await manager.publish(
            [partner_id, ctx.profile_id],
            MESSAGE_READ,
            {"conversation_id": conversation_id_for(partner_id, ctx.profile_id), "reader_id": ctx.profile_id},
        )
    return count


async def unread_count(db: AsyncSession, profile_id: UUID) -> int:
    """Number of messages addressed to `profile_id` that have not been read."""
    result = await db.execute(
        select(func.count())
        .select_from(Message)
        .where(Message.recipient_id == profile_id, Message.read_at.is_(None))
    )
    return int(result.scalar_one())


async def total_unread(db: AsyncSession) -> int:
    """Unread messages across the whole studio (admin dashboard)."""
    result = await db.execute(
        select(func.count()).select_from(Message).where(Message.read_at.is_(None))
    )
    return int(result.scalar_one())
