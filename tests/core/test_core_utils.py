# tests/core/test_core_utils.py
import io
from uuid import uuid4

import pytest
from fastapi import UploadFile, status
from PIL import Image

from inkconnect.core import cache
from inkconnect.core.context import RequestContext
from inkconnect.core.email import send_contact_confirmation
from inkconnect.core.exceptions import UpstreamError, ValidationError
from inkconnect.core.logging import build_logging_config
from inkconnect.core.upload import compress_image, get_s3_key_from_url, read_image_upload
from inkconnect.core.validators import clean_tags, password_validator, required_text
from inkconnect.database.enums import UserRole


def test_required_text_strips_and_rejects_blank():
    assert required_text("  hello ", "Message") == "hello"
    with pytest.raises(ValueError, match="Message is required"):
        required_text("   ", "Message")
    with pytest.raises(ValueError):
        required_text(None)


def test_clean_tags_keeps_first_occurrence_order():
    assert clean_tags([" Realism", "", "Neo-Traditional", "Realism ", "  "]) == [
        "Realism",
        "Neo-Traditional",
    ]
    assert clean_tags(None) == []


def test_compress_image_downscales_large_png():
    buffer = io.BytesIO()
    Image.new("RGB", (4000, 1000), color=(10, 10, 10)).save(buffer, format="PNG")

    compressed = compress_image(buffer.getvalue(), "image/png", max_dimension=800)

    with Image.open(io.BytesIO(compressed)) as img:
        assert img.size == (800, 200)
        assert img.format == "PNG"


def test_compress_image_rejects_garbage():
    with pytest.raises(ValidationError):
        compress_image(b"definitely not an image", "image/png")


@pytest.mark.asyncio
async def test_read_image_upload_rejects_empty_file():
    with pytest.raises(ValidationError) as exc_info:
        await read_image_upload(UploadFile(file=io.BytesIO(b""), filename="empty.png"))

    assert exc_info.value.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.asyncio
async def test_read_image_upload_detects_type_from_content(png_bytes):
    data, mime = await read_image_upload(
        UploadFile(file=io.BytesIO(png_bytes), filename="renamed.jpg")
    )

    assert mime == "image/png"
    assert data == png_bytes


def test_s3_key_from_url():
    url = "https://bucket.s3.us-east-1.amazonaws.com/artworks/abc/piece.png"
    assert get_s3_key_from_url(url) == "artworks/abc/piece.png"
    assert get_s3_key_from_url("") is None


@pytest.mark.asyncio
async def test_cache_helpers_are_noops_without_redis():
    assert cache.redis_client is None

    await cache.cache_set("k", "v")
    assert await cache.cache_get("k") is None
    await cache.invalidate_pattern("artist:*")
    assert await cache.is_token_blacklisted("some-jti") is False


def test_request_context_roles():
    owner = RequestContext(profile_id=uuid4(), role=UserRole.OWNER, email="o@example.com")
    artist = RequestContext(profile_id=uuid4(), role=UserRole.ARTIST, email="a@example.com")

    assert owner.is_admin and not owner.is_artist
    assert artist.is_artist and not artist.is_admin and not artist.is_client


def test_logging_config_without_files(tmp_path):
    config = build_logging_config(level="debug", log_dir=tmp_path, to_file=False)

    assert config["root"] == {"level": "DEBUG", "handlers": ["console"]}
    assert config["loggers"]["botocore"] == {"level": "WARNING"}
    assert not any(tmp_path.iterdir())


def test_logging_config_routes_realtime_records(tmp_path):
    config = build_logging_config(level="info", log_dir=tmp_path / "logs", to_file=True)

    assert config["handlers"]["realtime_file"]["filename"] == str(tmp_path / "logs" / "realtime.log")
    assert config["loggers"]["inkconnect.messaging.websocket"]["handlers"] == ["realtime_file"]
    assert config["handlers"]["error_file"]["level"] == "ERROR"
    assert (tmp_path / "logs").is_dir()


@pytest.mark.asyncio
async def test_mail_transport_failure_becomes_upstream_error(unreachable_mail_provider):
    with pytest.raises(UpstreamError, match="connection refused"):
        await send_contact_confirmation("Riley", "riley@example.com", "Hi", "Hello there")


def test_password_policy_bounds():
    assert password_validator("Tattoo!2024") == "Tattoo!2024"
    with pytest.raises(ValueError, match="ASCII"):
        password_validator("Tätowier!24")
    with pytest.raises(ValueError, match="at most"):
        password_validator("Aa1!" * 40)
