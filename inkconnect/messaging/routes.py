"""
inkconnect/messaging/routes.py

Messaging API Routes

Defines all routes for the messaging system, including:
- Sending a message to another profile
- Listing conversations (inbox) with unread badges
- Reading a thread with one partner (admins may read any pair)
- Marking a message or a whole thread as read
- Unread counter for the navigation badge

All operations require authentication.
"""

from uuid import UUID

from fastapi import APIRouter, Request, status

from inkconnect.core.dependencies import AdminDep, ContextDep, DBDep
from inkconnect.core.limiter import limiter
from inkconnect.messaging import schemas, services

# ---------------------------------------------------
# Router Configuration
# ---------------------------------------------------
router = APIRouter(prefix="/messages", tags=["Messaging"])


@router.post(
    "",
    response_model=schemas.MessageRead,
    status_code=status.HTTP_201_CREATED,
    summary="Send Message",
    description="Send a message to another profile, optionally about an appointment.",
)
@limiter.limit("30/minute")
async def send_message(
    request: Request,
    payload: schemas.MessageCreate,
    db: DBDep,
    ctx: ContextDep,
) -> schemas.MessageRead:
    return await services.send_message(db, ctx, payload)


@router.get(
    "/conversations",
    response_model=list[schemas.ConversationSummary],
    status_code=status.HTTP_200_OK,
    summary="List Conversations",
)
async def list_conversations(db: DBDep, ctx: ContextDep) -> list[schemas.ConversationSummary]:
    return await services.list_conversations(db, ctx)


@router.get(
    "/unread-count",
    response_model=schemas.UnreadCount,
    status_code=status.HTTP_200_OK,
    summary="Unread Message Count",
)
async def get_unread_count(db: DBDep, ctx: ContextDep) -> schemas.UnreadCount:
    return schemas.UnreadCount(unread_count=await services.unread_count(db, ctx.profile_id))


@router.get(
    "/thread/{partner_id}",
    response_model=list[schemas.MessageRead],
    status_code=status.HTTP_200_OK,
    summary="Get Thread With Partner",
)
async def get_thread(partner_id: UUID, db: DBDep, ctx: ContextDep) -> list[schemas.MessageRead]:
    return await services.get_thread(db, ctx, ctx.profile_id, partner_id)


@router.get(
    "/thread/{profile_a}/{profile_b}",
    response_model=list[schemas.MessageRead],
    status_code=status.HTTP_200_OK,
    summary="Get Thread Between Two Profiles (Admin)",
)
async def get_thread_between(
    profile_a: UUID, profile_b: UUID, db: DBDep, ctx: AdminDep
) -> list[schemas.MessageRead]:
    return await services.get_thread(db, ctx, profile_a, profile_b)


@router.post(
    "/thread/{partner_id}/read",
    response_model=schemas.ThreadReadResult,
    status_code=status.HTTP_200_OK,
    summary="Mark Thread Read",
    description="Marks every unread message from the partner to the caller as read.",
)
async def mark_thread_read(
    partner_id: UUID, db: DBDep, ctx: ContextDep
) -> schemas.ThreadReadResult:
    return schemas.ThreadReadResult(
        marked_read=await services.mark_thread_read(db, ctx, partner_id)
    )


@router.post(
    "/{message_id}/read",
    response_model=schemas.MessageRead,
    status_code=status.HTTP_200_OK,
    summary="Mark Message Read",
)
async def mark_message_read(message_id: UUID, db: DBDep, ctx: ContextDep) -> schemas.MessageRead:
    return await services.mark_read(db, ctx, message_id)
