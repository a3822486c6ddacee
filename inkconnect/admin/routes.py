"""
inkconnect/admin/routes.py

Admin API Routes

Defines routes for studio administration (manager/owner only):
- Creating accounts of any role
- Assigning roles and activating/deactivating accounts
- Listing and viewing users with filtering and pagination
- Dashboard totals
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from inkconnect.admin import schemas
from inkconnect.admin.services import AdminService
from inkconnect.core.dependencies import AdminDep, DBDep, PaginationParams
from inkconnect.core.limiter import limiter
from inkconnect.core.schemas import PaginatedResponse, SuccessResponse
from inkconnect.database.enums import UserRole
from inkconnect.profile.schemas import ProfileRead

# ---------------------------------------------------
# Router Configuration
# ---------------------------------------------------
router = APIRouter(prefix="/admin", tags=["Admin"])


@router.post(
    "/users",
    response_model=schemas.AdminCreateUserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create User",
    description="Creates an account with the given role and its matching role record.",
)
@limiter.limit("10/minute")
async def create_user(
    request: Request, payload: schemas.AdminCreateUser, db: DBDep, ctx: AdminDep
) -> schemas.AdminCreateUserResponse:
    return await AdminService(db).create_user(ctx, payload)


@router.get(
    "/users",
    response_model=PaginatedResponse[ProfileRead],
    status_code=status.HTTP_200_OK,
    summary="List Users",
)
async def list_users(
    db: DBDep,
    ctx: AdminDep,
    pagination: PaginationParams = Depends(),
    role: UserRole | None = Query(None, description="Only users with this role"),
    search: str | None = Query(None, description="Text to find in email or name"),
) -> PaginatedResponse[ProfileRead]:
    return await AdminService(db).list_users(role, search, pagination.skip, pagination.limit)


@router.get(
    "/users/{profile_id}",
    response_model=ProfileRead,
    status_code=status.HTTP_200_OK,
    summary="Get User",
)
async def get_user(profile_id: UUID, db: DBDep, ctx: AdminDep) -> ProfileRead:
    return await AdminService(db).get_user(profile_id)


@router.post(
    "/users/{profile_id}/role",
    response_model=SuccessResponse,
    status_code=status.HTTP_200_OK,
    summary="Set User Role",
    description="Sets the role and provisions the matching role record when missing.",
)
@limiter.limit("20/minute")
async def set_user_role(
    request: Request,
    profile_id: UUID,
    payload: schemas.RoleAssignment,
    db: DBDep,
    ctx: AdminDep,
) -> SuccessResponse:
    await AdminService(db).set_role(ctx, profile_id, payload.role)
    return SuccessResponse()


@router.post(
    "/users/{profile_id}/status",
    response_model=schemas.ActiveStatusResponse,
    status_code=status.HTTP_200_OK,
    summary="Activate or Deactivate User",
)
async def set_user_status(
    profile_id: UUID, payload: schemas.ActiveStatusUpdate, db: DBDep, ctx: AdminDep
) -> schemas.ActiveStatusResponse:
    return await AdminService(db).set_active(ctx, profile_id, payload.is_active)


@router.get(
    "/dashboard",
    response_model=schemas.DashboardStats,
    status_code=status.HTTP_200_OK,
    summary="Dashboard Totals",
)
async def dashboard(db: DBDep, ctx: AdminDep) -> schemas.DashboardStats:
    return await AdminService(db).dashboard()
