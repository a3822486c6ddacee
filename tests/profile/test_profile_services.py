# tests/profile/test_profile_services.py
import io
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import UploadFile

from inkconnect.core.exceptions import NotFoundError, PermissionDeniedError, UpstreamError
from inkconnect.database.enums import UserRole
from inkconnect.profile.schemas import ProfileUpdate
from inkconnect.profile.services import ProfileService

BUCKET_URL = "https://inkconnect-media.s3.us-east-1.amazonaws.com"


@pytest.mark.asyncio
async def test_role_record_requires_matching_role(db_session, seed):
    client_profile, _ = await seed.client()

    with pytest.raises(PermissionDeniedError):
        await ProfileService(db_session).resolve_role_record(client_profile, UserRole.ARTIST)


@pytest.mark.asyncio
async def test_missing_artist_record(db_session, seed, make_ctx):
    orphan = await seed.profile(UserRole.ARTIST)

    with pytest.raises(NotFoundError):
        await ProfileService(db_session).get_artist_record(make_ctx(orphan))


@pytest.mark.asyncio
async def test_client_record_created_once(db_session, seed, make_ctx):
    profile = await seed.profile(UserRole.CLIENT)
    service = ProfileService(db_session)

    first = await service.get_client_record(make_ctx(profile))
    second = await service.get_client_record(make_ctx(profile))

    assert first.id == second.id
    assert first.profile_id == profile.id


@pytest.mark.asyncio
async def test_update_me_strips_name(db_session, seed, make_ctx):
    profile = await seed.profile(UserRole.CLIENT, full_name="Old Name")

    updated = await ProfileService(db_session).update_me(
        make_ctx(profile), ProfileUpdate(full_name="  New Name  ")
    )

    assert updated.full_name == "New Name"
    assert updated.role == UserRole.CLIENT


def test_profile_update_rejects_role_field():
    with pytest.raises(ValueError):
        ProfileUpdate(full_name="Sneaky", role="owner")


@pytest.mark.asyncio
async def test_profile_image_replaces_previous(db_session, seed, make_ctx, png_bytes):
    profile = await seed.profile(UserRole.ARTIST)
    profile.profile_image = f"{BUCKET_URL}/profile_pictures/old.png"
    await db_session.commit()
    upload = MagicMock(side_effect=lambda data, key, mime: f"{BUCKET_URL}/{key}")
    delete = MagicMock(return_value=True)

    with patch("inkconnect.profile.services.upload_bytes_to_s3", upload), patch(
        "inkconnect.profile.services.delete_from_s3", delete
    ):
        updated = await ProfileService(db_session).update_profile_image(
            make_ctx(profile), UploadFile(file=io.BytesIO(png_bytes), filename="me.png")
        )

    key = upload.call_args.args[1]
    assert key.startswith(f"profile_pictures/{profile.id}-")
    assert key.endswith(".png")
    assert upload.call_args.args[2] == "image/png"
    assert updated.profile_image == f"{BUCKET_URL}/{key}"
    delete.assert_called_once_with(f"{BUCKET_URL}/profile_pictures/old.png")


@pytest.mark.asyncio
async def test_profile_image_removed_from_storage_when_save_fails(
    db_session, seed, make_ctx, png_bytes
):
    profile = await seed.profile(UserRole.CLIENT)
    upload = MagicMock(side_effect=lambda data, key, mime: f"{BUCKET_URL}/{key}")
    delete = MagicMock(return_value=True)

    with patch("inkconnect.profile.services.upload_bytes_to_s3", upload), patch(
        "inkconnect.profile.services.delete_from_s3", delete
    ), patch(
        "inkconnect.profile.services.commit_or_rollback",
        new=AsyncMock(side_effect=UpstreamError("Failed to update profile picture.")),
    ):
        with pytest.raises(UpstreamError):
            await ProfileService(db_session).update_profile_image(
                make_ctx(profile), UploadFile(file=io.BytesIO(png_bytes), filename="me.png")
            )

    delete.assert_called_once_with(f"{BUCKET_URL}/{upload.call_args.args[1]}")
