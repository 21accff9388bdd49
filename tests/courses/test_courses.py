"""
E2E tests for course authoring and the public catalog.
"""

import pytest

from app.courses.models import CourseStatus
from tests.utils.factories import (
    create_course_factory,
    create_lesson_factory,
    create_section_factory,
)
from tests.utils.helpers import assert_error_response, auth_headers_for, create_auth_headers


class TestCreateCourseEndpoint:
    @pytest.mark.asyncio
    async def test_should_create_draft_course_for_instructor(
        self, test_client, test_instructor, test_instructor_token
    ):
        response = await test_client.post(
            "/api/v1/courses",
            json={"title": "Python 101", "price": 19.99},
            headers=create_auth_headers(test_instructor_token),
        )

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "DRAFT"
        assert data["instructor_id"] == str(test_instructor.id)
        assert data["price"] == 19.99
        assert data["is_free"] is False
        assert data["total_lessons"] == 0

    @pytest.mark.asyncio
    async def test_should_return_403_for_student(self, test_client, test_user_token):
        response = await test_client.post(
            "/api/v1/courses",
            json={"title": "Nope"},
            headers=create_auth_headers(test_user_token),
        )

        assert_error_response(response, 403, "FORBIDDEN")

    @pytest.mark.asyncio
    async def test_admin_can_create_course_for_instructor(
        self, test_client, test_admin_token, test_instructor
    ):
        response = await test_client.post(
            "/api/v1/courses",
            json={"title": "On behalf", "instructor_id": str(test_instructor.id)},
            headers=create_auth_headers(test_admin_token),
        )

        assert response.status_code == 201
        assert response.json()["instructor_id"] == str(test_instructor.id)

    @pytest.mark.asyncio
    async def test_instructor_cannot_create_course_for_someone_else(
        self, test_client, test_instructor_token, other_instructor
    ):
        response = await test_client.post(
            "/api/v1/courses",
            json={"title": "Hijack", "instructor_id": str(other_instructor.id)},
            headers=create_auth_headers(test_instructor_token),
        )

        assert_error_response(response, 403, "FORBIDDEN")

    @pytest.mark.asyncio
    async def test_should_return_422_for_negative_price(self, test_client, test_instructor_token):
        response = await test_client.post(
            "/api/v1/courses",
            json={"title": "Bad price", "price": -1},
            headers=create_auth_headers(test_instructor_token),
        )

        assert response.status_code == 422


class TestCatalogEndpoint:
    @pytest.mark.asyncio
    async def test_should_list_only_published_courses(
        self, test_client, test_course, draft_course, db_session, test_instructor
    ):
        create_course_factory(
            db_session, test_instructor, title="Old Course", status=CourseStatus.ARCHIVED
        )

        response = await test_client.get("/api/v1/courses")

        assert response.status_code == 200
        data = response.json()
        assert data["meta"]["total"] == 1
        assert [c["title"] for c in data["data"]] == ["Test Course"]

    @pytest.mark.asyncio
    async def test_should_filter_by_title(self, test_client, db_session, test_instructor):
        create_course_factory(db_session, test_instructor, title="Intro to Rust")
        create_course_factory(db_session, test_instructor, title="Advanced Go")

        response = await test_client.get("/api/v1/courses", params={"search": "rust"})

        assert [c["title"] for c in response.json()["data"]] == ["Intro to Rust"]

    @pytest.mark.asyncio
    async def test_should_list_own_courses_in_every_status(
        self, test_client, test_instructor_token, test_course, draft_course
    ):
        response = await test_client.get(
            "/api/v1/courses/mine", headers=create_auth_headers(test_instructor_token)
        )

        assert response.status_code == 200
        assert {c["title"] for c in response.json()} == {"Test Course", "Draft Course"}


class TestGetCourseEndpoint:
    @pytest.mark.asyncio
    async def test_should_return_outline_in_order(
        self, test_client, course_with_lessons
    ):
        course, sections, lessons = course_with_lessons

        response = await test_client.get(f"/api/v1/courses/{course.id}")

        assert response.status_code == 200
        data = response.json()
        assert data["total_sections"] == 2
        assert data["total_lessons"] == 4
        assert [s["id"] for s in data["sections"]] == [str(s.id) for s in sections]
        outline_lessons = [lesson["id"] for s in data["sections"] for lesson in s["lessons"]]
        assert outline_lessons == [str(lesson.id) for lesson in lessons]

    @pytest.mark.asyncio
    async def test_draft_is_hidden_from_anonymous_and_students(
        self, test_client, draft_course, test_user_token
    ):
        response = await test_client.get(f"/api/v1/courses/{draft_course.id}")
        assert_error_response(response, 404, "NOT_FOUND")

        response = await test_client.get(
            f"/api/v1/courses/{draft_course.id}", headers=create_auth_headers(test_user_token)
        )
        assert_error_response(response, 404, "NOT_FOUND")

    @pytest.mark.asyncio
    async def test_draft_is_visible_to_owner_and_admin(
        self, test_client, draft_course, test_instructor_token, test_admin_token
    ):
        for token in (test_instructor_token, test_admin_token):
            response = await test_client.get(
                f"/api/v1/courses/{draft_course.id}", headers=create_auth_headers(token)
            )
            assert response.status_code == 200
            assert response.json()["status"] == "DRAFT"


class TestUpdateCourseEndpoint:
    @pytest.mark.asyncio
    async def test_owner_can_update(self, test_client, test_course, test_instructor_token):
        response = await test_client.put(
            f"/api/v1/courses/{test_course.id}",
            json={"title": "Renamed", "price": 10},
            headers=create_auth_headers(test_instructor_token),
        )

        assert response.status_code == 200
        assert response.json()["title"] == "Renamed"
        assert response.json()["price"] == 10.0

    @pytest.mark.asyncio
    async def test_other_instructor_gets_403(self, test_client, test_course, other_instructor):
        response = await test_client.put(
            f"/api/v1/courses/{test_course.id}",
            json={"title": "Stolen"},
            headers=auth_headers_for(other_instructor),
        )

        assert_error_response(response, 403, "FORBIDDEN")

    @pytest.mark.asyncio
    async def test_should_return_404_for_unknown_category(
        self, test_client, test_course, test_instructor_token
    ):
        response = await test_client.put(
            f"/api/v1/courses/{test_course.id}",
            json={"category_id": "00000000-0000-0000-0000-000000000000"},
            headers=create_auth_headers(test_instructor_token),
        )

        assert_error_response(response, 404, "NOT_FOUND")


class TestCourseLifecycle:
    @pytest.mark.asyncio
    async def test_should_not_publish_course_without_lessons(
        self, test_client, draft_course, test_instructor_token
    ):
        response = await test_client.patch(
            f"/api/v1/courses/{draft_course.id}/publish",
            headers=create_auth_headers(test_instructor_token),
        )

        assert_error_response(response, 400, "VALIDATION_ERROR")

    @pytest.mark.asyncio
    async def test_should_publish_then_archive(
        self, test_client, draft_course, test_instructor_token, db_session
    ):
        section = create_section_factory(db_session, draft_course)
        create_lesson_factory(db_session, section)
        headers = create_auth_headers(test_instructor_token)

        response = await test_client.patch(
            f"/api/v1/courses/{draft_course.id}/publish", headers=headers
        )
        assert response.status_code == 200
        assert response.json()["status"] == "PUBLISHED"

        response = await test_client.patch(
            f"/api/v1/courses/{draft_course.id}/publish", headers=headers
        )
        assert_error_response(response, 409, "INVALID_STATE")

        response = await test_client.patch(
            f"/api/v1/courses/{draft_course.id}/archive", headers=headers
        )
        assert response.status_code == 200
        assert response.json()["status"] == "ARCHIVED"

    @pytest.mark.asyncio
    async def test_should_not_archive_draft(
        self, test_client, draft_course, test_instructor_token
    ):
        response = await test_client.patch(
            f"/api/v1/courses/{draft_course.id}/archive",
            headers=create_auth_headers(test_instructor_token),
        )

        assert_error_response(response, 409, "INVALID_STATE")


class TestThumbnailUpload:
    @pytest.mark.asyncio
    async def test_should_store_thumbnail_and_set_url(
        self, test_client, test_course, test_instructor_token, storage
    ):
        response = await test_client.post(
            f"/api/v1/courses/{test_course.id}/thumbnail",
            files={"file": ("cover.png", b"\x89PNG\r\n\x1a\nfake", "image/png")},
            headers=create_auth_headers(test_instructor_token),
        )

        assert response.status_code == 200
        url = response.json()["thumbnail_url"]
        assert url.endswith(".png")
        relative = url.split("/uploads/", 1)[1]
        assert storage.exists(relative)

    @pytest.mark.asyncio
    async def test_should_reject_non_image(
        self, test_client, test_course, test_instructor_token
    ):
        response = await test_client.post(
            f"/api/v1/courses/{test_course.id}/thumbnail",
            files={"file": ("notes.txt", b"hello", "text/plain")},
            headers=create_auth_headers(test_instructor_token),
        )

        assert_error_response(response, 400, "VALIDATION_ERROR")
