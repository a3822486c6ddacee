# tests/artist/test_artist_services.py
from decimal import Decimal
from uuid import uuid4

import pytest

from inkconnect.artist.schemas import ArtistUpdate
from inkconnect.artist.services import ArtistService
from inkconnect.core.exceptions import NotFoundError, PermissionDeniedError
from inkconnect.database.enums import UserRole


@pytest.mark.asyncio
async def test_directory_lists_available_artists_only(db_session, seed):
    await seed.artist(full_name="Open Books", specializations=["Blackwork", "Dotwork"])
    await seed.artist(full_name="On Break", is_available=False)
    service = ArtistService(db_session)

    directory = await service.list_directory(None, 0, 100)
    filtered = await service.list_directory("blackwork", 0, 100)
    no_match = await service.list_directory("watercolor", 0, 100)

    assert [a.full_name for a in directory.items] == ["Open Books"]
    assert filtered.total_count == 1
    assert no_match.total_count == 0


@pytest.mark.asyncio
async def test_artist_updates_own_record(db_session, seed, make_ctx):
    artist_profile, artist = await seed.artist()

    updated = await ArtistService(db_session).update_me(
        make_ctx(artist_profile),
        ArtistUpdate(
            bio="Fine line and botanicals.",
            specializations=["Fine Line", " Botanical ", "Fine Line"],
            hourly_rate=Decimal("150.00"),
            instagram_handle="@rosa.ink",
        ),
    )

    assert updated.id == artist.id
    assert updated.bio == "Fine line and botanicals."
    assert updated.specializations == ["Fine Line", "Botanical"]
    assert updated.hourly_rate == Decimal("150.00")
    assert updated.instagram_handle == "rosa.ink"
    assert updated.full_name == artist_profile.full_name


@pytest.mark.asyncio
async def test_client_has_no_artist_record(db_session, seed, make_ctx):
    client_profile, _ = await seed.client()

    with pytest.raises(PermissionDeniedError):
        await ArtistService(db_session).get_me(make_ctx(client_profile))


@pytest.mark.asyncio
async def test_artist_profile_without_record(db_session, seed, make_ctx):
    orphan = await seed.profile(UserRole.ARTIST)

    with pytest.raises(NotFoundError):
        await ArtistService(db_session).get_me(make_ctx(orphan))


@pytest.mark.asyncio
async def test_admin_update_and_public_lookup(db_session, seed):
    _, artist = await seed.artist()
    service = ArtistService(db_session)

    await service.admin_update(artist.id, ArtistUpdate(is_available=False))

    assert (await service.get_public_artist(artist.id)).is_available is False
    with pytest.raises(NotFoundError):
        await service.get_public_artist(uuid4())
