import pytest

from tests.utils.helpers import assert_error_response, create_auth_headers

STAFF_PAYLOAD = {
    "email": "staff@example.com",
    "password": "Password123",
    "first_name": "Staff",
    "last_name": "Member",
}


class TestAdminAccountsEndpoint:
    @pytest.mark.asyncio
    async def test_should_create_and_list_admins(self, test_client, test_super_admin_token):
        headers = create_auth_headers(test_super_admin_token)

        response = await test_client.post(
            "/api/v1/super-admin/admins", json=STAFF_PAYLOAD, headers=headers
        )
        assert response.status_code == 201
        assert response.json()["role"] == "ADMIN"

        response = await test_client.get("/api/v1/super-admin/admins", headers=headers)
        assert response.status_code == 200
        assert [a["email"] for a in response.json()] == ["staff@example.com"]

    @pytest.mark.asyncio
    async def test_should_return_403_for_admin(self, test_client, test_admin_token):
        response = await test_client.post(
            "/api/v1/super-admin/admins",
            json=STAFF_PAYLOAD,
            headers=create_auth_headers(test_admin_token),
        )

        assert_error_response(response, 403, "FORBIDDEN")

    @pytest.mark.asyncio
    async def test_should_delete_admin(self, test_client, test_super_admin_token, test_admin):
        headers = create_auth_headers(test_super_admin_token)

        response = await test_client.delete(
            f"/api/v1/super-admin/admins/{test_admin.id}", headers=headers
        )
        assert response.status_code == 204

        response = await test_client.get("/api/v1/super-admin/admins", headers=headers)
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_should_return_400_when_deleting_non_admin(
        self, test_client, test_super_admin_token, test_user
    ):
        response = await test_client.delete(
            f"/api/v1/super-admin/admins/{test_user.id}",
            headers=create_auth_headers(test_super_admin_token),
        )

        assert_error_response(response, 400, "VALIDATION_ERROR")


class TestInstructorAccountsEndpoint:
    @pytest.mark.asyncio
    async def test_should_create_instructor(self, test_client, test_super_admin_token):
        response = await test_client.post(
            "/api/v1/super-admin/instructors",
            json=STAFF_PAYLOAD,
            headers=create_auth_headers(test_super_admin_token),
        )

        assert response.status_code == 201
        assert response.json()["role"] == "INSTRUCTOR"
