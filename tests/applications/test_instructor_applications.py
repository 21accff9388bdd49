"""
E2E tests for the instructor application workflow.
"""

import pytest

from app.auth.models.user import UserRole
from tests.utils.helpers import assert_error_response, create_auth_headers

APPLICATION = {
    "motivation": "I have taught Python for ten years.",
    "expertise": "Python, data engineering",
    "linkedin_url": "https://linkedin.example.com/in/jane-doe",
}


async def submit(client, token):
    return await client.post(
        "/api/v1/instructor-applications", json=APPLICATION, headers=create_auth_headers(token)
    )


class TestSubmitApplication:
    @pytest.mark.asyncio
    async def test_student_can_apply(self, test_client, test_user, test_user_token):
        response = await submit(test_client, test_user_token)

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "PENDING"
        assert data["applicant_email"] == test_user.email

        check = await test_client.get(
            "/api/v1/instructor-applications/check",
            headers=create_auth_headers(test_user_token),
        )
        assert check.json() is True

    @pytest.mark.asyncio
    async def test_second_pending_application_conflicts(self, test_client, test_user_token):
        await submit(test_client, test_user_token)

        response = await submit(test_client, test_user_token)

        assert_error_response(response, 409, "CONFLICT")

    @pytest.mark.asyncio
    async def test_instructor_cannot_apply(self, test_client, test_instructor_token):
        response = await submit(test_client, test_instructor_token)

        assert_error_response(response, 403, "FORBIDDEN")

    @pytest.mark.asyncio
    async def test_motivation_length_is_limited(self, test_client, test_user_token):
        response = await test_client.post(
            "/api/v1/instructor-applications",
            json={"motivation": "x" * 501},
            headers=create_auth_headers(test_user_token),
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_my_application_404_before_applying(self, test_client, test_user_token):
        response = await test_client.get(
            "/api/v1/instructor-applications/me", headers=create_auth_headers(test_user_token)
        )

        assert_error_response(response, 404, "NOT_FOUND")


class TestReviewApplication:
    @pytest.mark.asyncio
    async def test_approval_promotes_applicant(
        self, test_client, test_user, test_user_token, test_admin_token, db_session
    ):
        application = (await submit(test_client, test_user_token)).json()
        admin_headers = create_auth_headers(test_admin_token)

        count = await test_client.get(
            "/api/v1/admin/instructor-applications/pending-count", headers=admin_headers
        )
        assert count.json() == {"count": 1}

        response = await test_client.put(
            f"/api/v1/admin/instructor-applications/{application['id']}/review",
            json={"status": "APPROVED", "comment": "Welcome aboard"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "APPROVED"
        assert data["admin_comment"] == "Welcome aboard"
        assert data["reviewed_at"] is not None
        db_session.refresh(test_user)
        assert test_user.role is UserRole.INSTRUCTOR

    @pytest.mark.asyncio
    async def test_rejection_keeps_student_role(
        self, test_client, test_user, test_user_token, test_admin_token, db_session
    ):
        application = (await submit(test_client, test_user_token)).json()

        response = await test_client.put(
            f"/api/v1/admin/instructor-applications/{application['id']}/review",
            json={"status": "REJECTED"},
            headers=create_auth_headers(test_admin_token),
        )

        assert response.status_code == 200
        db_session.refresh(test_user)
        assert test_user.role is UserRole.STUDENT

    @pytest.mark.asyncio
    async def test_decided_application_cannot_be_reviewed_again(
        self, test_client, test_user_token, test_admin_token
    ):
        application = (await submit(test_client, test_user_token)).json()
        url = f"/api/v1/admin/instructor-applications/{application['id']}/review"
        headers = create_auth_headers(test_admin_token)
        await test_client.put(url, json={"status": "REJECTED"}, headers=headers)

        response = await test_client.put(url, json={"status": "APPROVED"}, headers=headers)

        assert_error_response(response, 409, "INVALID_STATE")

    @pytest.mark.asyncio
    async def test_review_to_pending_is_400(self, test_client, test_user_token, test_admin_token):
        application = (await submit(test_client, test_user_token)).json()

        response = await test_client.put(
            f"/api/v1/admin/instructor-applications/{application['id']}/review",
            json={"status": "PENDING"},
            headers=create_auth_headers(test_admin_token),
        )

        assert_error_response(response, 400, "VALIDATION_ERROR")

    @pytest.mark.asyncio
    async def test_list_filters_by_status(self, test_client, test_user_token, test_admin_token):
        await submit(test_client, test_user_token)

        response = await test_client.get(
            "/api/v1/admin/instructor-applications",
            params={"status": "PENDING"},
            headers=create_auth_headers(test_admin_token),
        )

        assert response.status_code == 200
        assert response.json()["meta"]["total"] == 1

    @pytest.mark.asyncio
    async def test_student_cannot_list_applications(self, test_client, test_user_token):
        response = await test_client.get(
            "/api/v1/admin/instructor-applications", headers=create_auth_headers(test_user_token)
        )

        assert_error_response(response, 403, "FORBIDDEN")
