"""
inkconnect/auth/services.py

Authentication Service Layer
- Account provisioning (profile + matching role record) shared by signup and admin
- Credential checks and access token issuing
- Logout by blacklisting the token's JTI
"""

import logging
from datetime import datetime, timezone

from fastapi import HTTPException, status
from jose import JWTError, jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from inkconnect.artist.models import Artist
from inkconnect.auth.schemas import LoginRequest, LoginResponse, SignupRequest
from inkconnect.client.models import Client
from inkconnect.core.cache import blacklist_token
from inkconnect.core.config import settings
from inkconnect.core.exceptions import ValidationError
from inkconnect.core.security import create_access_token, get_password_hash, verify_password
from inkconnect.database.enums import UserRole
from inkconnect.database.models import Profile
from inkconnect.database.session import commit_or_rollback
from inkconnect.profile.schemas import ProfileRead

logger = logging.getLogger(__name__)


# ------------------------------------------------
# Account Provisioning
# ------------------------------------------------
async def ensure_role_record(db: AsyncSession, profile: Profile) -> None:
    """
    Add the role record matching `profile.role` when it does not exist yet.
    Artists start with an empty bio and available; clients start empty.
    Admin roles have no role record. Does not commit.
    """
    if profile.role == UserRole.ARTIST:
        existing = await db.execute(select(Artist.id).where(Artist.profile_id == profile.id))
        if existing.scalar_one_or_none() is None:
            db.add(Artist(profile_id=profile.id, bio="", specializations=[], is_available=True))
            logger.info(f"[AUTH] Provisioned artist record for {profile.id}")
    elif profile.role == UserRole.CLIENT:
        existing = await db.execute(select(Client.id).where(Client.profile_id == profile.id))
        if existing.scalar_one_or_none() is None:
            db.add(Client(profile_id=profile.id))
            logger.info(f"[AUTH] Provisioned client record for {profile.id}")


async def create_account(
    db: AsyncSession, email: str, password: str, full_name: str, role: UserRole
) -> Profile:
    """Create a profile with `role` and its role record in one transaction."""
    email = email.strip().lower()
    existing = await db.execute(select(Profile.id).where(Profile.email == email))
    if existing.scalar_one_or_none() is not None:
        logger.warning(f"[AUTH] Account creation with existing email: {email}")
        raise ValidationError("An account with this email already exists")

    profile = Profile(
        email=email,
        full_name=full_name,
        role=role,
        hashed_password=get_password_hash(password),
        is_active=True,
    )
    db.add(profile)
    await db.flush()
    await ensure_role_record(db, profile)
    await commit_or_rollback(db, "create account")
    await db.refresh(profile)
    logger.info(f"[AUTH] Created {role.value} account {profile.id}")
    return profile


async def signup_user(payload: SignupRequest, db: AsyncSession) -> ProfileRead:
    """Public registration. Self-registered accounts are always clients."""
    profile = await create_account(
        db, payload.email, payload.password, payload.full_name, UserRole.CLIENT
    )
    return ProfileRead.model_validate(profile)


# ------------------------------------------------
# Login
# ------------------------------------------------
async def _authenticate_user(email: str, password: str, db: AsyncSession) -> Profile:
    result = await db.execute(select(Profile).where(Profile.email == email.strip().lower()))
    profile = result.scalar_one_or_none()

    if not profile or not verify_password(password, profile.hashed_password):
        logger.warning(f"[AUTH] Failed login attempt for {email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not profile.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is disabled")
    return profile


async def login_user(email: str, password: str, db: AsyncSession) -> LoginResponse:
    profile = await _authenticate_user(email, password, db)
    token = create_access_token({"sub": str(profile.id), "role": profile.role.value})
    logger.info(f"[AUTH] Profile {profile.id} logged in")
    return LoginResponse(access_token=token, profile=ProfileRead.model_validate(profile))


async def login_user_json(payload: LoginRequest, db: AsyncSession) -> LoginResponse:
    return await login_user(payload.email, payload.password, db)


# ------------------------------------------------
# Logout
# ------------------------------------------------
async def logout_user_token(token: str) -> dict[str, str]:
    """Blacklists the provided JWT access token for the rest of its lifetime."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        # An invalid or expired token is already unusable
        logger.warning(f"[AUTH] Error decoding token during logout: {e}")
        return {"detail": "Logout successful"}

    jti = payload.get("jti")
    exp = payload.get("exp")
    if jti and exp:
        ttl = max(0, int(exp - datetime.now(timezone.utc).timestamp()))
        if ttl > 0:
            await blacklist_token(jti, ttl)
            logger.info(f"[AUTH] Access token blacklisted (JTI: {jti}) for {ttl} seconds.")
    else:
        logger.warning("[AUTH] Attempted logout with token missing 'jti' or 'exp'.")
    return {"detail": "Logout successful"}
