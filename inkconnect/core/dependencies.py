"""
inkconnect/core/dependencies.py

Authentication and Authorization Dependencies

Provides authentication and role-based access control (RBAC) for FastAPI routes:
- Validates JWT tokens from Bearer header OR HttpOnly cookie
- Checks against blacklisted tokens (logout protection)
- Retrieves the authenticated profile from the database
- Builds the explicit RequestContext handed to services
- Restricts access based on profile roles

Pagination Dependency:
- Provides reusable dependency for pagination (skip, limit).
"""

import logging
from collections.abc import Callable, Coroutine
from typing import Annotated, Any

from fastapi import Cookie, Depends, HTTPException, Query, WebSocket, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from inkconnect.core.cache import is_token_blacklisted
from inkconnect.core.context import ADMIN_ROLES, RequestContext
from inkconnect.core.exceptions import PermissionDeniedError
from inkconnect.core.security import decode_access_token
from inkconnect.database.enums import UserRole
from inkconnect.database.models import Profile
from inkconnect.database.session import get_db

# ---------------------------------------------------
# Logger Configuration
# ---------------------------------------------------
logger = logging.getLogger(__name__)

# ---------------------------------------------------
# OAuth2 Configuration
# ---------------------------------------------------
# auto_error is disabled so a missing header falls through to the cookie check
oauth2_scheme: OAuth2PasswordBearer = OAuth2PasswordBearer(
    tokenUrl="/auth/login/oauth", auto_error=False
)


# ---------------------------------------------------
# Pagination Dependency
# ---------------------------------------------------
class PaginationParams:
    """
    Dependency that provides pagination parameters from query parameters.
    """

    def __init__(
        self,
        skip: int = Query(0, ge=0, description="Number of records to skip for pagination"),
        limit: int = Query(100, ge=1, le=500, description="Maximum number of records to return"),
    ):
        self.skip = skip
        self.limit = limit


# ---------------------------------------------------
# Authentication Functions
# ---------------------------------------------------
async def _resolve_profile(token: str, db: AsyncSession) -> Profile | None:
    """Decode the token, reject blacklisted ones and load the active profile it names."""
    try:
        token_data = decode_access_token(token)
    except ValueError as e:
        logger.warning(f"[AUTH] JWT decoding/validation failed: {e}")
        return None

    if token_data.jti and await is_token_blacklisted(token_data.jti):
        logger.warning(f"[AUTH] Blacklisted token detected: jti={token_data.jti}")
        return None

    profile = await db.get(Profile, token_data.sub)
    if not profile:
        logger.warning(f"[AUTH] JWT valid but no matching profile found: profile_id={token_data.sub}")
        return None
    if not profile.is_active:
        logger.warning(f"[AUTH] Authentication attempt by inactive profile: {profile.id}")
        return None
    return profile


async def get_current_profile(
    token_header: Annotated[str | None, Depends(oauth2_scheme)] = None,
    token_cookie: Annotated[str | None, Cookie(alias="access_token")] = None,
    db: AsyncSession = Depends(get_db),
) -> Profile:
    """
    Authenticate the current profile based on the provided JWT access token,
    checking Bearer header first, then HttpOnly cookie.

    Raises:
        HTTPException: 401 Unauthorized if authentication fails.
    """
    token = token_header or token_cookie

    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if token is None:
        logger.debug("[AUTH] No token found in Authorization header or access_token cookie.")
        raise credentials_exception

    profile = await _resolve_profile(token, db)
    if profile is None:
        raise credentials_exception

    logger.debug(
        f"[AUTH] Profile {profile.id} authenticated via {'Header' if token_header else 'Cookie'}."
    )
    return profile


async def get_request_context(
    profile: Profile = Depends(get_current_profile),
) -> RequestContext:
    """The authenticated caller as an explicit context object."""
    return RequestContext.from_profile(profile)


async def get_optional_context(
    token_header: Annotated[str | None, Depends(oauth2_scheme)] = None,
    token_cookie: Annotated[str | None, Cookie(alias="access_token")] = None,
    db: AsyncSession = Depends(get_db),
) -> RequestContext | None:
    """Context for public endpoints that show more to signed-in callers; None when anonymous."""
    token = token_header or token_cookie
    if not token:
        return None
    profile = await _resolve_profile(token, db)
    return RequestContext.from_profile(profile) if profile else None


async def get_current_profile_from_ws(websocket: WebSocket, db: AsyncSession) -> Profile | None:
    """
    Authenticate the current profile from a WebSocket connection.
    Tries the `token` query parameter, then Authorization header, then cookie.
    Closes the socket with a policy violation and returns None on failure.
    """
    token = websocket.query_params.get("token")
    token_header = websocket.headers.get("Authorization")
    if not token and token_header and token_header.startswith("Bearer "):
        token = token_header.removeprefix("Bearer ")
    if not token:
        token = websocket.cookies.get("access_token")

    if not token:
        await websocket.close(
            code=status.WS_1008_POLICY_VIOLATION, reason="Authentication token missing."
        )
        return None

    profile = await _resolve_profile(token, db)
    if profile is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason="Authentication failed.")
        return None
    return profile


# ---------------------------------------------------
# Authorization Functions (Role-Based)
# ---------------------------------------------------
def require_roles(*roles: UserRole) -> Callable[..., Coroutine[Any, Any, RequestContext]]:
    """
    Dependency to restrict access to profiles having any of the specified roles.
    """

    async def checker(ctx: RequestContext = Depends(get_request_context)) -> RequestContext:
        if ctx.role not in roles:
            logger.warning(
                f"[RBAC] Access denied: Profile {ctx.profile_id} with role {ctx.role} attempted access (allowed roles: {roles})"
            )
            raise PermissionDeniedError(f"Access denied for role: {ctx.role.value}")
        return ctx

    return checker


require_admin = require_roles(*ADMIN_ROLES)
require_artist = require_roles(UserRole.ARTIST)
require_client = require_roles(UserRole.CLIENT)

# ---------------------------------------------------
# Annotated shorthands used by routers
# ---------------------------------------------------
DBDep = Annotated[AsyncSession, Depends(get_db)]
ContextDep = Annotated[RequestContext, Depends(get_request_context)]
AdminDep = Annotated[RequestContext, Depends(require_admin)]
