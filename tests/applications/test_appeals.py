"""
E2E tests for suspension appeals.
"""

import pytest

from tests.utils.factories import create_user_factory
from tests.utils.helpers import assert_error_response, create_auth_headers


@pytest.fixture
def suspended_user(db_session):
    return create_user_factory(
        db_session, email="suspended@example.com", password="testpass123", is_active=False
    )


def appeal_payload(reason="I was suspended by mistake."):
    return {"email": "suspended@example.com", "password": "testpass123", "reason": reason}


class TestSubmitAppeal:
    @pytest.mark.asyncio
    async def test_suspended_user_can_appeal_with_credentials(self, test_client, suspended_user):
        response = await test_client.post("/api/v1/appeals", json=appeal_payload())

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "PENDING"
        assert data["user_id"] == str(suspended_user.id)

        mine = await test_client.post(
            "/api/v1/appeals/mine",
            json={"email": "suspended@example.com", "password": "testpass123"},
        )
        assert mine.status_code == 200
        assert len(mine.json()) == 1

    @pytest.mark.asyncio
    async def test_wrong_password_is_401(self, test_client, suspended_user):
        payload = appeal_payload()
        payload["password"] = "wrongpass123"

        response = await test_client.post("/api/v1/appeals", json=payload)

        assert_error_response(response, 401, "UNAUTHORIZED")

    @pytest.mark.asyncio
    async def test_active_user_cannot_appeal(self, test_client, test_user):
        response = await test_client.post(
            "/api/v1/appeals",
            json={"email": test_user.email, "password": "testpass123", "reason": "Why not"},
        )

        assert_error_response(response, 400, "VALIDATION_ERROR")

    @pytest.mark.asyncio
    async def test_blank_reason_is_400(self, test_client, suspended_user):
        response = await test_client.post("/api/v1/appeals", json=appeal_payload(reason="   "))

        assert_error_response(response, 400, "VALIDATION_ERROR")

    @pytest.mark.asyncio
    async def test_second_pending_appeal_conflicts(self, test_client, suspended_user):
        await test_client.post("/api/v1/appeals", json=appeal_payload())

        response = await test_client.post("/api/v1/appeals", json=appeal_payload())

        assert_error_response(response, 409, "CONFLICT")


class TestReviewAppeal:
    @pytest.mark.asyncio
    async def test_approval_reactivates_account(
        self, test_client, suspended_user, test_admin_token, db_session
    ):
        appeal = (await test_client.post("/api/v1/appeals", json=appeal_payload())).json()
        headers = create_auth_headers(test_admin_token)

        pending = await test_client.get("/api/v1/admin/appeals/pending", headers=headers)
        assert [a["id"] for a in pending.json()] == [appeal["id"]]

        response = await test_client.put(
            f"/api/v1/admin/appeals/{appeal['id']}/review",
            json={"status": "APPROVED", "comment": "Sorry about that"},
            headers=headers,
        )

        assert response.status_code == 200
        assert response.json()["admin_response"] == "Sorry about that"
        db_session.refresh(suspended_user)
        assert suspended_user.is_active is True

        login = await test_client.post(
            "/api/v1/auth/login",
            json={"email": "suspended@example.com", "password": "testpass123"},
        )
        assert login.status_code == 200

    @pytest.mark.asyncio
    async def test_rejection_keeps_account_suspended(
        self, test_client, suspended_user, test_admin_token, db_session
    ):
        appeal = (await test_client.post("/api/v1/appeals", json=appeal_payload())).json()

        response = await test_client.put(
            f"/api/v1/admin/appeals/{appeal['id']}/review",
            json={"status": "REJECTED"},
            headers=create_auth_headers(test_admin_token),
        )

        assert response.status_code == 200
        db_session.refresh(suspended_user)
        assert suspended_user.is_active is False

    @pytest.mark.asyncio
    async def test_decided_appeal_cannot_be_reviewed_again(
        self, test_client, suspended_user, test_admin_token, db_session
    ):
        appeal = (await test_client.post("/api/v1/appeals", json=appeal_payload())).json()
        url = f"/api/v1/admin/appeals/{appeal['id']}/review"
        headers = create_auth_headers(test_admin_token)
        await test_client.put(url, json={"status": "REJECTED"}, headers=headers)

        response = await test_client.put(url, json={"status": "APPROVED"}, headers=headers)

        assert_error_response(response, 409, "INVALID_STATE")
        db_session.refresh(suspended_user)
        assert suspended_user.is_active is False

    @pytest.mark.asyncio
    async def test_unknown_appeal_is_404(self, test_client, test_admin_token):
        response = await test_client.put(
            "/api/v1/admin/appeals/00000000-0000-0000-0000-000000000000/review",
            json={"status": "APPROVED"},
            headers=create_auth_headers(test_admin_token),
        )

        assert_error_response(response, 404, "NOT_FOUND")

    @pytest.mark.asyncio
    async def test_instructor_cannot_review_appeals(self, test_client, test_instructor_token):
        response = await test_client.get(
            "/api/v1/admin/appeals/pending", headers=create_auth_headers(test_instructor_token)
        )

        assert_error_response(response, 403, "FORBIDDEN")
