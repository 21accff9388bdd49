"""
E2E tests for the course outline: sections, lessons, ordering and content gating.
"""

import pytest

from tests.utils.factories import create_lesson_factory, create_section_factory
from tests.utils.helpers import assert_error_response, auth_headers_for, create_auth_headers


class TestSectionEndpoints:
    @pytest.mark.asyncio
    async def test_should_append_sections_in_order(
        self, test_client, test_course, test_instructor_token
    ):
        headers = create_auth_headers(test_instructor_token)

        for title in ("Intro", "Basics", "Advanced"):
            response = await test_client.post(
                f"/api/v1/courses/{test_course.id}/sections",
                json={"title": title},
                headers=headers,
            )
            assert response.status_code == 201

        response = await test_client.get(f"/api/v1/courses/{test_course.id}/sections")

        assert response.status_code == 200
        data = response.json()
        assert [s["title"] for s in data] == ["Intro", "Basics", "Advanced"]
        assert [s["order_index"] for s in data] == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_student_cannot_create_section(self, test_client, test_course, test_user_token):
        response = await test_client.post(
            f"/api/v1/courses/{test_course.id}/sections",
            json={"title": "Sneaky"},
            headers=create_auth_headers(test_user_token),
        )

        assert_error_response(response, 403, "FORBIDDEN")

    @pytest.mark.asyncio
    async def test_delete_section_compacts_siblings_and_removes_lessons(
        self, test_client, course_with_lessons, test_instructor_token, db_session
    ):
        course, sections, lessons = course_with_lessons
        third = create_section_factory(db_session, course, order_index=3)

        response = await test_client.delete(
            f"/api/v1/sections/{sections[0].id}",
            headers=create_auth_headers(test_instructor_token),
        )
        assert response.status_code == 204

        response = await test_client.get(f"/api/v1/courses/{course.id}/sections")
        data = response.json()
        assert [s["id"] for s in data] == [str(sections[1].id), str(third.id)]
        assert [s["order_index"] for s in data] == [1, 2]

        response = await test_client.get(
            f"/api/v1/lessons/{lessons[0].id}",
            headers=create_auth_headers(test_instructor_token),
        )
        assert_error_response(response, 404, "NOT_FOUND")

    @pytest.mark.asyncio
    async def test_should_reorder_sections(
        self, test_client, course_with_lessons, test_instructor_token
    ):
        course, sections, _ = course_with_lessons

        response = await test_client.put(
            f"/api/v1/courses/{course.id}/sections/reorder",
            json={"ordered_ids": [str(sections[1].id), str(sections[0].id)]},
            headers=create_auth_headers(test_instructor_token),
        )

        assert response.status_code == 200
        data = response.json()
        assert [s["id"] for s in data] == [str(sections[1].id), str(sections[0].id)]
        assert [s["order_index"] for s in data] == [1, 2]

    @pytest.mark.asyncio
    async def test_reorder_rejects_incomplete_list(
        self, test_client, course_with_lessons, test_instructor_token
    ):
        course, sections, _ = course_with_lessons

        response = await test_client.put(
            f"/api/v1/courses/{course.id}/sections/reorder",
            json={"ordered_ids": [str(sections[1].id)]},
            headers=create_auth_headers(test_instructor_token),
        )

        assert_error_response(response, 400, "VALIDATION_ERROR")

    @pytest.mark.asyncio
    async def test_reorder_rejects_duplicates(
        self, test_client, course_with_lessons, test_instructor_token
    ):
        course, sections, _ = course_with_lessons

        response = await test_client.put(
            f"/api/v1/courses/{course.id}/sections/reorder",
            json={"ordered_ids": [str(sections[0].id), str(sections[0].id)]},
            headers=create_auth_headers(test_instructor_token),
        )

        assert_error_response(response, 400, "VALIDATION_ERROR")

    @pytest.mark.asyncio
    async def test_reorder_rejects_section_from_other_course(
        self, test_client, course_with_lessons, test_course, test_instructor_token, db_session
    ):
        course, sections, _ = course_with_lessons
        foreign = create_section_factory(db_session, test_course)

        response = await test_client.put(
            f"/api/v1/courses/{course.id}/sections/reorder",
            json={"ordered_ids": [str(sections[0].id), str(sections[1].id), str(foreign.id)]},
            headers=create_auth_headers(test_instructor_token),
        )

        assert_error_response(response, 400, "VALIDATION_ERROR")

    @pytest.mark.asyncio
    async def test_reorder_unknown_section_returns_404(
        self, test_client, course_with_lessons, test_instructor_token
    ):
        course, sections, _ = course_with_lessons

        response = await test_client.put(
            f"/api/v1/courses/{course.id}/sections/reorder",
            json={
                "ordered_ids": [
                    str(sections[0].id),
                    "00000000-0000-0000-0000-000000000000",
                ]
            },
            headers=create_auth_headers(test_instructor_token),
        )

        assert_error_response(response, 404, "NOT_FOUND")


class TestLessonEndpoints:
    @pytest.mark.asyncio
    async def test_should_append_lesson(
        self, test_client, test_section, test_lesson, test_instructor_token
    ):
        response = await test_client.post(
            f"/api/v1/sections/{test_section.id}/lessons",
            json={"title": "Second", "type": "VIDEO", "duration_minutes": 12},
            headers=create_auth_headers(test_instructor_token),
        )

        assert response.status_code == 201
        data = response.json()
        assert data["order_index"] == 2
        assert data["type"] == "VIDEO"

    @pytest.mark.asyncio
    async def test_delete_lesson_compacts_siblings(
        self, test_client, test_section, test_instructor_token, db_session
    ):
        lessons = [
            create_lesson_factory(db_session, test_section, order_index=i) for i in (1, 2, 3)
        ]

        response = await test_client.delete(
            f"/api/v1/lessons/{lessons[1].id}",
            headers=create_auth_headers(test_instructor_token),
        )
        assert response.status_code == 204

        response = await test_client.get(f"/api/v1/sections/{test_section.id}/lessons")
        data = response.json()
        assert [lesson["id"] for lesson in data] == [str(lessons[0].id), str(lessons[2].id)]
        assert [lesson["order_index"] for lesson in data] == [1, 2]

    @pytest.mark.asyncio
    async def test_should_reorder_lessons(
        self, test_client, test_section, test_instructor_token, db_session
    ):
        first = create_lesson_factory(db_session, test_section, order_index=1)
        second = create_lesson_factory(db_session, test_section, order_index=2)

        response = await test_client.put(
            f"/api/v1/sections/{test_section.id}/lessons/reorder",
            json={"ordered_ids": [str(second.id), str(first.id)]},
            headers=create_auth_headers(test_instructor_token),
        )

        assert response.status_code == 200
        assert [lesson["id"] for lesson in response.json()] == [str(second.id), str(first.id)]

    @pytest.mark.asyncio
    async def test_other_instructor_cannot_update_lesson(
        self, test_client, test_lesson, other_instructor
    ):
        response = await test_client.put(
            f"/api/v1/lessons/{test_lesson.id}",
            json={"title": "Mine now"},
            headers=auth_headers_for(other_instructor),
        )

        assert_error_response(response, 403, "FORBIDDEN")


class TestLessonAccess:
    @pytest.mark.asyncio
    async def test_free_lesson_is_public(self, test_client, free_lesson):
        response = await test_client.get(f"/api/v1/lessons/{free_lesson.id}")

        assert response.status_code == 200
        assert response.json()["content"] == free_lesson.content

    @pytest.mark.asyncio
    async def test_anonymous_gets_401_for_paid_lesson(self, test_client, test_lesson):
        response = await test_client.get(f"/api/v1/lessons/{test_lesson.id}")

        assert_error_response(response, 401, "UNAUTHORIZED")

    @pytest.mark.asyncio
    async def test_not_enrolled_student_gets_403(self, test_client, test_lesson, test_user_token):
        response = await test_client.get(
            f"/api/v1/lessons/{test_lesson.id}", headers=create_auth_headers(test_user_token)
        )

        assert_error_response(response, 403, "FORBIDDEN")

    @pytest.mark.asyncio
    async def test_enrollment_grants_access(
        self, test_client, test_lesson, test_enrollment, test_user_token
    ):
        response = await test_client.get(
            f"/api/v1/lessons/{test_lesson.id}", headers=create_auth_headers(test_user_token)
        )

        assert response.status_code == 200
        assert response.json()["id"] == str(test_lesson.id)

    @pytest.mark.asyncio
    async def test_owner_can_read_any_lesson(
        self, test_client, test_lesson, test_instructor_token
    ):
        response = await test_client.get(
            f"/api/v1/lessons/{test_lesson.id}", headers=create_auth_headers(test_instructor_token)
        )

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_lesson_of_draft_course_is_hidden(
        self, test_client, draft_course, test_user_token, db_session
    ):
        section = create_section_factory(db_session, draft_course)
        lesson = create_lesson_factory(db_session, section, is_free=True)

        response = await test_client.get(
            f"/api/v1/lessons/{lesson.id}", headers=create_auth_headers(test_user_token)
        )

        assert_error_response(response, 404, "NOT_FOUND")


class TestLessonMediaUpload:
    @pytest.mark.asyncio
    async def test_pdf_is_stored_as_file_url(
        self, test_client, test_lesson, test_instructor_token
    ):
        response = await test_client.post(
            f"/api/v1/lessons/{test_lesson.id}/media",
            files={"file": ("slides.pdf", b"%PDF-1.4 fake", "application/pdf")},
            headers=create_auth_headers(test_instructor_token),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["file_url"].endswith(".pdf")
        assert data["video_url"] is None

    @pytest.mark.asyncio
    async def test_video_is_stored_as_video_url(
        self, test_client, test_lesson, test_instructor_token
    ):
        response = await test_client.post(
            f"/api/v1/lessons/{test_lesson.id}/media",
            files={"file": ("clip.mp4", b"\x00\x00\x00\x18ftypmp42", "video/mp4")},
            headers=create_auth_headers(test_instructor_token),
        )

        assert response.status_code == 200
        assert response.json()["video_url"].endswith(".mp4")

    @pytest.mark.asyncio
    async def test_unsupported_type_is_rejected(
        self, test_client, test_lesson, test_instructor_token
    ):
        response = await test_client.post(
            f"/api/v1/lessons/{test_lesson.id}/media",
            files={"file": ("notes.txt", b"plain", "text/plain")},
            headers=create_auth_headers(test_instructor_token),
        )

        assert_error_response(response, 400, "VALIDATION_ERROR")
