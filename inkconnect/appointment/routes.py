"""
inkconnect/appointment/routes.py

Appointment API Routes

Defines all routes for appointments, including:
- Booking (client)
- Listing for the caller's role, with calendar window and ordering
- Upcoming appointments for the client dashboard
- Status transitions, detail/payment updates and deletion
"""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, Response, status

from inkconnect.appointment import schemas
from inkconnect.appointment.schemas import SortOrder
from inkconnect.appointment.services import AppointmentService
from inkconnect.core.context import RequestContext
from inkconnect.core.dependencies import ContextDep, DBDep, PaginationParams, require_client
from inkconnect.core.limiter import limiter
from inkconnect.core.schemas import PaginatedResponse
from inkconnect.database.enums import AppointmentStatus

# ---------------------------------------------------
# Router Configuration
# ---------------------------------------------------
router = APIRouter(prefix="/appointments", tags=["Appointments"])

ClientDep = Annotated[RequestContext, Depends(require_client)]


@router.post(
    "",
    response_model=schemas.AppointmentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Book Appointment",
    description="Clients book a session with an available artist. The new appointment is pending.",
)
@limiter.limit("5/minute")
async def book_appointment(
    request: Request,
    payload: schemas.AppointmentCreate,
    db: DBDep,
    ctx: ClientDep,
) -> schemas.AppointmentRead:
    return await AppointmentService(db).book(ctx, payload)


@router.get(
    "",
    response_model=PaginatedResponse[schemas.AppointmentRead],
    status_code=status.HTTP_200_OK,
    summary="List My Appointments",
    description="Clients and artists see their own appointments; admins see all.",
)
async def list_appointments(
    db: DBDep,
    ctx: ContextDep,
    pagination: PaginationParams = Depends(),
    start: datetime | None = Query(None, description="Earliest appointment date (inclusive)"),
    end: datetime | None = Query(None, description="Latest appointment date (inclusive)"),
    order: SortOrder = Query(SortOrder.DESC, description="asc for calendars, desc for lists"),
    status_filter: AppointmentStatus | None = Query(None, alias="status"),
) -> PaginatedResponse[schemas.AppointmentRead]:
    return await AppointmentService(db).list_for_role(
        ctx,
        skip=pagination.skip,
        limit=pagination.limit,
        start=start,
        end=end,
        order=order,
        status=status_filter,
    )


@router.get(
    "/upcoming",
    response_model=list[schemas.AppointmentRead],
    status_code=status.HTTP_200_OK,
    summary="Upcoming Appointments (Client)",
)
async def upcoming_appointments(db: DBDep, ctx: ClientDep) -> list[schemas.AppointmentRead]:
    return await AppointmentService(db).upcoming_for_client(ctx)


@router.get(
    "/{appointment_id}",
    response_model=schemas.AppointmentRead,
    status_code=status.HTTP_200_OK,
    summary="Get Appointment",
)
async def get_appointment(
    appointment_id: UUID, db: DBDep, ctx: ContextDep
) -> schemas.AppointmentRead:
    return await AppointmentService(db).get(ctx, appointment_id)


@router.patch(
    "/{appointment_id}/status",
    response_model=schemas.AppointmentRead,
    status_code=status.HTTP_200_OK,
    summary="Change Appointment Status",
    description="Moves the appointment along one lifecycle edge. Illegal edges return 409.",
)
@limiter.limit("20/minute")
async def change_status(
    request: Request,
    appointment_id: UUID,
    payload: schemas.AppointmentStatusUpdate,
    db: DBDep,
    ctx: ContextDep,
) -> schemas.AppointmentRead:
    return await AppointmentService(db).transition(ctx, appointment_id, payload.status)


@router.patch(
    "/{appointment_id}",
    response_model=schemas.AppointmentRead,
    status_code=status.HTTP_200_OK,
    summary="Update Appointment Details",
    description="Notes, final price and deposit tracking. Owning artist or admin.",
)
async def update_details(
    appointment_id: UUID,
    payload: schemas.AppointmentDetailsUpdate,
    db: DBDep,
    ctx: ContextDep,
) -> schemas.AppointmentRead:
    return await AppointmentService(db).update_details(ctx, appointment_id, payload)


@router.delete(
    "/{appointment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Appointment",
    description="Only pending appointments, by their client or an admin.",
)
async def delete_appointment(appointment_id: UUID, db: DBDep, ctx: ContextDep) -> Response:
    await AppointmentService(db).delete(ctx, appointment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
