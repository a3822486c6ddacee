"""
inkconnect/profile/routes.py

Profile API Routes
- Read and update the authenticated caller's profile
- Upload a new profile picture
"""

from fastapi import APIRouter, File, Request, UploadFile, status

from inkconnect.core.dependencies import ContextDep, DBDep
from inkconnect.core.limiter import limiter
from inkconnect.profile import schemas
from inkconnect.profile.services import ProfileService

# ---------------------------------------------------
# Router Configuration
# ---------------------------------------------------
router = APIRouter(prefix="/profile", tags=["Profile"])


@router.get(
    "/me",
    response_model=schemas.ProfileRead,
    status_code=status.HTTP_200_OK,
    summary="Get My Profile",
)
async def get_my_profile(db: DBDep, ctx: ContextDep) -> schemas.ProfileRead:
    return await ProfileService(db).get_me(ctx)


@router.patch(
    "/me",
    response_model=schemas.ProfileRead,
    status_code=status.HTTP_200_OK,
    summary="Update My Profile",
    description="Update the caller's display name. The role cannot be changed here.",
)
@limiter.limit("10/minute")
async def update_my_profile(
    request: Request,
    payload: schemas.ProfileUpdate,
    db: DBDep,
    ctx: ContextDep,
) -> schemas.ProfileRead:
    return await ProfileService(db).update_me(ctx, payload)


@router.post(
    "/me/image",
    response_model=schemas.ProfileRead,
    status_code=status.HTTP_200_OK,
    summary="Upload Profile Picture",
)
@limiter.limit("5/minute")
async def upload_profile_image(
    request: Request,
    db: DBDep,
    ctx: ContextDep,
    file: UploadFile = File(...),
) -> schemas.ProfileRead:
    return await ProfileService(db).update_profile_image(ctx, file)
