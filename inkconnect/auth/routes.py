"""
inkconnect/auth/routes.py

Authentication API Routes
- Signup (client accounts)
- Login via JSON or OAuth2 form (token in body and HttpOnly cookie)
- Logout (token blacklist)
- Current profile
"""

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.security import OAuth2PasswordRequestForm

from inkconnect.auth import services
from inkconnect.auth.schemas import LoginRequest, LoginResponse, SignupRequest
from inkconnect.core.config import settings
from inkconnect.core.dependencies import DBDep, get_current_profile
from inkconnect.core.limiter import limiter
from inkconnect.core.schemas import MessageResponse
from inkconnect.database.models import Profile
from inkconnect.profile.schemas import ProfileRead

# ---------------------------------------------------
# Router Configuration
# ---------------------------------------------------
router = APIRouter(prefix="/auth", tags=["Authentication"])


def _set_auth_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key="access_token",
        value=token,
        httponly=True,
        samesite="lax",
        secure=not settings.DEBUG,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        path="/",
    )


# ---------------------------------------------------
# Registration
# ---------------------------------------------------
@router.post(
    "/signup",
    response_model=ProfileRead,
    status_code=status.HTTP_201_CREATED,
    summary="Register New Client",
    description="Registers a new client account. Artist and admin accounts are created by admins.",
)
@limiter.limit("5/minute")
async def signup(request: Request, payload: SignupRequest, db: DBDep) -> ProfileRead:
    return await services.signup_user(payload, db)


# ---------------------------------------------------
# Login
# ---------------------------------------------------
@router.post(
    "/login/json",
    response_model=LoginResponse,
    status_code=status.HTTP_200_OK,
    summary="Login with JSON",
    description="Returns the access token and profile; also sets the token in an HttpOnly cookie.",
)
@limiter.limit("10/minute")
async def login_json(
    request: Request, payload: LoginRequest, response: Response, db: DBDep
) -> LoginResponse:
    result = await services.login_user_json(payload, db)
    _set_auth_cookie(response, result.access_token)
    return result


@router.post(
    "/login/oauth",
    response_model=LoginResponse,
    status_code=status.HTTP_200_OK,
    summary="Login with OAuth2 Form",
)
@limiter.limit("10/minute")
async def login_oauth(
    request: Request,
    response: Response,
    db: DBDep,
    form_data: OAuth2PasswordRequestForm = Depends(),
) -> LoginResponse:
    result = await services.login_user(form_data.username, form_data.password, db)
    _set_auth_cookie(response, result.access_token)
    return result


# ---------------------------------------------------
# Logout
# ---------------------------------------------------
@router.post(
    "/logout",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Logout",
    description="Blacklists the current access token and clears the cookie.",
)
@limiter.limit("20/minute")
async def logout(request: Request, response: Response) -> MessageResponse:
    auth_header = request.headers.get("Authorization")
    token = None
    if auth_header and auth_header.startswith("Bearer "):
        token = auth_header.removeprefix("Bearer ")
    elif request.cookies.get("access_token"):
        token = request.cookies.get("access_token")

    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")

    result = await services.logout_user_token(token)
    response.delete_cookie("access_token", path="/")
    return MessageResponse(**result)


@router.get(
    "/me",
    response_model=ProfileRead,
    status_code=status.HTTP_200_OK,
    summary="Current Profile",
)
async def me(profile: Profile = Depends(get_current_profile)) -> ProfileRead:
    return ProfileRead.model_validate(profile)
