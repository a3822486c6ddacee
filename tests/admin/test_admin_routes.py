# tests/admin/test_admin_routes.py
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest
from fastapi import status
from httpx import AsyncClient

from inkconnect.admin.schemas import ActiveStatusResponse, DashboardStats
from inkconnect.admin.services import AdminService
from inkconnect.database.enums import UserRole
from inkconnect.database.models import Profile


@pytest.mark.asyncio
@patch.object(AdminService, "dashboard", new_callable=AsyncMock)
async def test_dashboard_for_manager(
    mock_dashboard: AsyncMock,
    mock_current_admin: Profile,
    async_client: AsyncClient,
    override_get_db: None,
) -> None:
    mock_dashboard.return_value = DashboardStats(
        total_artists=4, total_clients=120, upcoming_appointments=9, unread_messages=2
    )

    response = await async_client.get("/admin/dashboard")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["total_clients"] == 120


@pytest.mark.asyncio
async def test_dashboard_forbidden_for_artist(
    mock_current_artist: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    response = await async_client.get("/admin/dashboard")

    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["detail"]["code"] == "permission_denied"


@pytest.mark.asyncio
async def test_create_user_rejects_weak_password(
    mock_current_admin: Profile, async_client: AsyncClient, override_get_db: None
) -> None:
    response = await async_client.post(
        "/admin/users",
        json={"email": "x@example.com", "password": "short", "full_name": "X", "role": "artist"},
    )

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


@pytest.mark.asyncio
@patch.object(AdminService, "set_role", new_callable=AsyncMock)
async def test_assign_role(
    mock_set_role: AsyncMock,
    mock_current_admin: Profile,
    async_client: AsyncClient,
    override_get_db: None,
) -> None:
    profile_id = uuid4()

    response = await async_client.post(f"/admin/users/{profile_id}/role", json={"role": "artist"})

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"success": True}
    _, called_id, role = mock_set_role.call_args.args
    assert called_id == profile_id
    assert role == UserRole.ARTIST


@pytest.mark.asyncio
@patch.object(AdminService, "set_active", new_callable=AsyncMock)
async def test_deactivate_user(
    mock_set_active: AsyncMock,
    mock_current_admin: Profile,
    async_client: AsyncClient,
    override_get_db: None,
) -> None:
    profile_id = uuid4()
    mock_set_active.return_value = ActiveStatusResponse(profile_id=profile_id, is_active=False)

    response = await async_client.post(
        f"/admin/users/{profile_id}/status", json={"is_active": False}
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["is_active"] is False
