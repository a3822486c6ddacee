"""
inkconnect/site/services.py

Public Site Service Layer
- Contact form: studio notification plus confirmation to the sender
- Hero background image persisted as a single site setting
- Service worker script for the offline asset cache
"""

import base64
import logging

from fastapi import UploadFile
from jinja2 import Environment, FileSystemLoader, select_autoescape
from sqlalchemy.ext.asyncio import AsyncSession

from inkconnect.core.config import settings
from inkconnect.core.email import send_contact_confirmation, send_contact_notification
from inkconnect.core.upload import read_image_upload
from inkconnect.database.models import SiteSetting
from inkconnect.database.session import commit_or_rollback
from inkconnect.site import schemas

logger = logging.getLogger(__name__)

HERO_BACKGROUND_KEY = "hero-background-image"
HERO_MAX_FILE_SIZE = 5 * 1024 * 1024

site_env = Environment(
    loader=FileSystemLoader(settings.site_templates_path),
    autoescape=select_autoescape(["html", "xml"]),
)


# ---------------------------------------------------
# Contact Form
# ---------------------------------------------------
async def submit_contact(payload: schemas.ContactRequest) -> None:
    """Send both contact emails. Raises UpstreamError when either fails."""
    await send_contact_notification(payload.name, str(payload.email), payload.subject, payload.message)
    await send_contact_confirmation(payload.name, str(payload.email), payload.subject, payload.message)
    logger.info(f"[SITE] Contact form handled for {payload.email}")


# ---------------------------------------------------
# Hero Background
# ---------------------------------------------------
async def get_hero_background(db: AsyncSession) -> schemas.HeroBackground:
    setting = await db.get(SiteSetting, HERO_BACKGROUND_KEY)
    return schemas.HeroBackground(image=setting.value if setting else None)


async def set_hero_background(db: AsyncSession, file: UploadFile) -> schemas.HeroBackground:
    """Store an uploaded image (max 5 MB) as a data URL, replacing any previous one."""
    data, mime = await read_image_upload(file, max_size=HERO_MAX_FILE_SIZE)
    data_url = f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"

    setting = await db.get(SiteSetting, HERO_BACKGROUND_KEY)
    if setting is None:
        setting = SiteSetting(key=HERO_BACKGROUND_KEY, value=data_url)
        db.add(setting)
    else:
        setting.value = data_url
    await commit_or_rollback(db, "save hero background")
    logger.info(f"[SITE] Hero background updated ({len(data)} bytes, {mime})")
    return schemas.HeroBackground(image=data_url)


async def clear_hero_background(db: AsyncSession) -> None:
    setting = await db.get(SiteSetting, HERO_BACKGROUND_KEY)
    if setting is not None:
        await db.delete(setting)
        await commit_or_rollback(db, "clear hero background")
        logger.info("[SITE] Hero background cleared")


# ---------------------------------------------------
# Offline Asset Cache
# ---------------------------------------------------
def render_service_worker() -> str:
    template = site_env.get_template("sw.js.j2")
    return template.render(
        cache_name=settings.OFFLINE_CACHE_NAME,
        urls=settings.offline_cache_urls,
    )
