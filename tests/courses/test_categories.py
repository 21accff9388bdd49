import pytest

from tests.utils.factories import create_category_factory, create_course_factory
from tests.utils.helpers import assert_error_response, create_auth_headers


class TestCategoryEndpoints:
    @pytest.mark.asyncio
    async def test_should_create_category_when_admin(self, test_client, test_admin_token):
        response = await test_client.post(
            "/api/v1/categories",
            json={"name": "Programming", "description": "Code all the things"},
            headers=create_auth_headers(test_admin_token),
        )

        assert response.status_code == 201
        assert response.json()["name"] == "Programming"

    @pytest.mark.asyncio
    async def test_should_return_403_when_instructor_creates_category(
        self, test_client, test_instructor_token
    ):
        response = await test_client.post(
            "/api/v1/categories",
            json={"name": "Design"},
            headers=create_auth_headers(test_instructor_token),
        )

        assert_error_response(response, 403, "FORBIDDEN")

    @pytest.mark.asyncio
    async def test_should_return_409_when_name_taken(
        self, test_client, test_admin_token, db_session
    ):
        create_category_factory(db_session, name="Data")

        response = await test_client.post(
            "/api/v1/categories",
            json={"name": "Data"},
            headers=create_auth_headers(test_admin_token),
        )

        assert_error_response(response, 409, "CONFLICT")

    @pytest.mark.asyncio
    async def test_should_list_categories_publicly(self, test_client, db_session):
        create_category_factory(db_session, name="Marketing")
        create_category_factory(db_session, name="Business")

        response = await test_client.get("/api/v1/categories")

        assert response.status_code == 200
        assert [c["name"] for c in response.json()] == ["Business", "Marketing"]

    @pytest.mark.asyncio
    async def test_should_update_category(self, test_client, test_admin_token, db_session):
        category = create_category_factory(db_session, name="Old")

        response = await test_client.put(
            f"/api/v1/categories/{category.id}",
            json={"name": "New"},
            headers=create_auth_headers(test_admin_token),
        )

        assert response.status_code == 200
        assert response.json()["name"] == "New"

    @pytest.mark.asyncio
    async def test_should_return_409_when_deleting_category_in_use(
        self, test_client, test_admin_token, test_instructor, db_session
    ):
        category = create_category_factory(db_session, name="Busy")
        create_course_factory(db_session, test_instructor, category=category)

        response = await test_client.delete(
            f"/api/v1/categories/{category.id}", headers=create_auth_headers(test_admin_token)
        )

        assert_error_response(response, 409, "CONFLICT")

    @pytest.mark.asyncio
    async def test_should_delete_unused_category(self, test_client, test_admin_token, db_session):
        category = create_category_factory(db_session, name="Idle")

        response = await test_client.delete(
            f"/api/v1/categories/{category.id}", headers=create_auth_headers(test_admin_token)
        )
        assert response.status_code == 204

        response = await test_client.get(f"/api/v1/categories/{category.id}")
        assert_error_response(response, 404, "NOT_FOUND")
