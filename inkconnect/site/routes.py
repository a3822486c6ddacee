"""
inkconnect/site/routes.py

Public Site Routes
- Contact form (public)
- Hero background image (public read, admin write)
- Service worker script for offline caching
"""

from fastapi import APIRouter, File, Request, Response, UploadFile, status
from fastapi.responses import JSONResponse

from inkconnect.core.dependencies import AdminDep, DBDep
from inkconnect.core.exceptions import UpstreamError
from inkconnect.core.limiter import limiter
from inkconnect.core.schemas import SuccessResponse
from inkconnect.site import schemas, services

router = APIRouter(tags=["Site"])


@router.post(
    "/contact",
    response_model=SuccessResponse,
    status_code=status.HTTP_200_OK,
    summary="Contact Form",
    description="Emails the studio and sends a confirmation to the sender. Failures return 500 with an error.",
    responses={500: {"description": "Email delivery failed", "content": {"application/json": {"example": {"error": "reason"}}}}},
)
@limiter.limit("3/minute")
async def contact(request: Request, payload: schemas.ContactRequest) -> SuccessResponse | JSONResponse:
    try:
        await services.submit_contact(payload)
    except UpstreamError as e:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": e.message}
        )
    return SuccessResponse()


@router.get(
    "/site/hero-background",
    response_model=schemas.HeroBackground,
    status_code=status.HTTP_200_OK,
    summary="Get Hero Background",
)
async def get_hero_background(db: DBDep) -> schemas.HeroBackground:
    return await services.get_hero_background(db)


@router.put(
    "/site/hero-background",
    response_model=schemas.HeroBackground,
    status_code=status.HTTP_200_OK,
    summary="Set Hero Background (Admin)",
    description="Image up to 5 MB, stored as a data URL.",
)
async def set_hero_background(
    db: DBDep, ctx: AdminDep, file: UploadFile = File(...)
) -> schemas.HeroBackground:
    return await services.set_hero_background(db, file)


@router.delete(
    "/site/hero-background",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Clear Hero Background (Admin)",
)
async def clear_hero_background(db: DBDep, ctx: AdminDep) -> Response:
    await services.clear_hero_background(db)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/sw.js", include_in_schema=False)
async def service_worker() -> Response:
    return Response(
        content=services.render_service_worker(),
        media_type="application/javascript",
        headers={"Cache-Control": "no-cache", "Service-Worker-Allowed": "/"},
    )
