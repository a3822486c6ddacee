# tests/admin/test_admin_services.py
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest
from sqlalchemy import select

from inkconnect.admin.schemas import AdminCreateUser
from inkconnect.admin.services import AdminService
from inkconnect.appointment.schemas import AppointmentCreate
from inkconnect.appointment.services import AppointmentService
from inkconnect.artist.models import Artist
from inkconnect.artist.services import ArtistService
from inkconnect.core.exceptions import NotFoundError, UpstreamError, ValidationError
from inkconnect.database.enums import AppointmentStatus, UserRole

PASSWORD = "Needle#Gun42"


def _new_user(email: str, role: UserRole = UserRole.ARTIST) -> AdminCreateUser:
    return AdminCreateUser(email=email, password=PASSWORD, full_name="New Person", role=role)


def _booking(artist_id) -> AppointmentCreate:
    return AppointmentCreate(
        artist_id=artist_id,
        appointment_date=datetime.now(timezone.utc) + timedelta(days=5),
        duration_hours=Decimal("2"),
    )


@pytest.mark.asyncio
async def test_create_artist_provisions_artist_record(db_session, seed, make_ctx):
    owner = await seed.profile(UserRole.OWNER)

    result = await AdminService(db_session).create_user(
        make_ctx(owner), _new_user("New.Artist@Example.com")
    )

    assert result.success is True
    assert result.user.email == "new.artist@example.com"
    assert result.user.role == UserRole.ARTIST
    artist = (
        await db_session.execute(select(Artist).where(Artist.profile_id == result.user.id))
    ).scalar_one()
    assert artist.is_available is True
    assert artist.bio == ""


@pytest.mark.asyncio
async def test_create_user_with_existing_email(db_session, seed, make_ctx):
    owner = await seed.profile(UserRole.OWNER, email="owner@example.com")

    with pytest.raises(ValidationError):
        await AdminService(db_session).create_user(
            make_ctx(owner), _new_user("OWNER@example.com", UserRole.CLIENT)
        )


@pytest.mark.asyncio
async def test_account_survives_failed_notification(db_session, seed, make_ctx):
    manager = await seed.profile(UserRole.MANAGER)

    with patch(
        "inkconnect.admin.services.send_account_created_email",
        new=AsyncMock(side_effect=UpstreamError("Mail provider unavailable")),
    ):
        result = await AdminService(db_session).create_user(
            make_ctx(manager), _new_user("late.mail@example.com", UserRole.CLIENT)
        )

    assert (await AdminService(db_session).get_user(result.user.id)).email == "late.mail@example.com"


@pytest.mark.asyncio
async def test_role_change_provisions_role_record(db_session, seed, make_ctx):
    owner = await seed.profile(UserRole.OWNER)
    client_profile, _ = await seed.client()

    await AdminService(db_session).set_role(make_ctx(owner), client_profile.id, UserRole.ARTIST)

    artist = (
        await db_session.execute(select(Artist).where(Artist.profile_id == client_profile.id))
    ).scalar_one_or_none()
    assert artist is not None
    assert (await AdminService(db_session).get_user(client_profile.id)).role == UserRole.ARTIST


@pytest.mark.asyncio
async def test_set_active(db_session, seed, make_ctx):
    owner = await seed.profile(UserRole.OWNER)
    client_profile, _ = await seed.client()
    service = AdminService(db_session)

    result = await service.set_active(make_ctx(owner), client_profile.id, False)
    assert result.is_active is False

    with pytest.raises(ValidationError):
        await service.set_active(make_ctx(owner), owner.id, False)


@pytest.mark.asyncio
async def test_unknown_user(db_session, seed, make_ctx):
    owner = await seed.profile(UserRole.OWNER)

    with pytest.raises(NotFoundError):
        await AdminService(db_session).set_role(make_ctx(owner), uuid4(), UserRole.CLIENT)


@pytest.mark.asyncio
async def test_list_users_filters(db_session, seed):
    await seed.artist(full_name="Marta Lines")
    await seed.client(full_name="Ola Client")
    await seed.profile(UserRole.MANAGER, full_name="Front Desk")
    service = AdminService(db_session)

    artists = await service.list_users(role=UserRole.ARTIST)
    searched = await service.list_users(search="ola")

    assert artists.total_count == 1
    assert [p.full_name for p in searched.items] == ["Ola Client"]


@pytest.mark.asyncio
async def test_dashboard_totals(db_session, seed):
    _, artist = await seed.artist()
    _, client = await seed.client()
    await seed.appointment(artist, client, days_ahead=5)
    await seed.appointment(artist, client, status=AppointmentStatus.CANCELLED, days_ahead=6)

    stats = await AdminService(db_session).dashboard()

    assert stats.total_artists == 1
    assert stats.total_clients == 1
    assert stats.upcoming_appointments == 1
    assert stats.unread_messages == 0


@pytest.mark.asyncio
async def test_account_survives_unreachable_mail_provider(
    db_session, seed, make_ctx, unreachable_mail_provider
):
    owner = await seed.profile(UserRole.OWNER)

    result = await AdminService(db_session).create_user(
        make_ctx(owner), _new_user("offline.mail@example.com")
    )

    assert result.success is True
    assert unreachable_mail_provider.return_value.client.mail.send.post.called
    assert (await AdminService(db_session).get_user(result.user.id)).role == UserRole.ARTIST


@pytest.mark.asyncio
async def test_demoted_artist_leaves_directory_and_booking(db_session, seed, make_ctx):
    owner = await seed.profile(UserRole.OWNER)
    artist_profile, artist = await seed.artist(full_name="Former Artist")
    client_profile, _ = await seed.client()
    directory = ArtistService(db_session)
    assert [a.id for a in (await directory.list_directory(None, 0, 100)).items] == [artist.id]

    await AdminService(db_session).set_role(make_ctx(owner), artist_profile.id, UserRole.CLIENT)

    assert (await directory.list_directory(None, 0, 100)).total_count == 0
    assert (await db_session.get(Artist, artist.id)).is_available is False
    with pytest.raises(ValidationError):
        await AppointmentService(db_session).book(make_ctx(client_profile), _booking(artist.id))


@pytest.mark.asyncio
async def test_deactivated_artist_leaves_directory_and_booking(db_session, seed, make_ctx):
    owner = await seed.profile(UserRole.OWNER)
    artist_profile, artist = await seed.artist()
    client_profile, _ = await seed.client()

    await AdminService(db_session).set_active(make_ctx(owner), artist_profile.id, False)

    assert (await ArtistService(db_session).list_directory(None, 0, 100)).total_count == 0
    with pytest.raises(ValidationError):
        await AppointmentService(db_session).book(make_ctx(client_profile), _booking(artist.id))
