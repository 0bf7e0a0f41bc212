from datetime import timedelta

import pytest

from app.services.notification_service import (
    PARENT_NOTE_TITLE,
    NotificationService,
    deadline_message,
)
from app.utils.datetime_utils import utc_today

from tests.factories import auth_headers, make_application, make_note, make_university


@pytest.fixture
def notification_service(db_session) -> NotificationService:
    return NotificationService(db_session)


@pytest.mark.unit
class TestDeadlineMessage:
    def test_wording(self):
        assert deadline_message(0) == "Deadline today"
        assert deadline_message(1) == "Deadline in 1 day"
        assert deadline_message(9) == "Deadline in 9 days"


@pytest.mark.unit
class TestStudentNotifications:
    @pytest.mark.asyncio
    async def test_only_deadlines_inside_the_window(
        self, notification_service, db_session, student, university, fixed_today
    ):
        near = make_application(
            db_session, student, university, deadline=fixed_today + timedelta(days=5)
        )
        for name, offset in (("Far Away College", 20), ("Past College", -1)):
            make_application(
                db_session,
                student,
                make_university(db_session, name),
                deadline=fixed_today + timedelta(days=offset),
            )
        make_application(db_session, student, make_university(db_session, "No Deadline U"))

        items, unread = await notification_service.get_notifications_for_student(
            student.user_id, today=fixed_today
        )

        assert unread == 1
        assert items == [
            {
                "id": f"dl-{near.id}-5",
                "type": "deadline",
                "title": "Stanford University",
                "message": "Deadline in 5 days",
                "date": "2025-03-06",
                "application_id": near.id,
            }
        ]

    @pytest.mark.asyncio
    async def test_window_edges_are_inclusive(
        self, notification_service, db_session, student, university, fixed_today
    ):
        make_application(db_session, student, university, deadline=fixed_today)
        make_application(
            db_session,
            student,
            make_university(db_session, "Edge University"),
            deadline=fixed_today + timedelta(days=14),
        )

        items, _ = await notification_service.get_notifications_for_student(
            student.user_id, today=fixed_today
        )

        assert [item["message"] for item in items] == [
            "Deadline in 14 days",
            "Deadline today",
        ]

    @pytest.mark.asyncio
    async def test_parent_notes_merge_newest_first(
        self,
        notification_service,
        db_session,
        student,
        linked_parent,
        university,
        fixed_today,
        utc_midnight,
    ):
        application = make_application(
            db_session, student, university, deadline=fixed_today + timedelta(days=2)
        )
        older = make_note(
            db_session,
            application,
            linked_parent,
            "Did you ask for the recommendation letter?",
            created_at=utc_midnight(fixed_today - timedelta(days=3), 9),
        )
        newer = make_note(
            db_session,
            application,
            linked_parent,
            "Proud of you!",
            created_at=utc_midnight(fixed_today - timedelta(days=1), 12),
        )

        items, unread = await notification_service.get_notifications_for_student(
            student.user_id, today=fixed_today
        )

        assert unread == 3
        assert [item["id"] for item in items] == [
            f"dl-{application.id}-2",
            f"pn-{newer.id}",
            f"pn-{older.id}",
        ]
        assert items[1]["type"] == "parent"
        assert items[1]["title"] == PARENT_NOTE_TITLE
        assert items[1]["message"] == "Proud of you!"

    @pytest.mark.asyncio
    async def test_other_students_items_are_excluded(
        self,
        notification_service,
        db_session,
        student,
        other_student,
        university,
        fixed_today,
    ):
        make_application(
            db_session,
            other_student,
            university,
            deadline=fixed_today + timedelta(days=1),
        )

        items, unread = await notification_service.get_notifications_for_student(
            student.user_id, today=fixed_today
        )
        assert items == []
        assert unread == 0


@pytest.mark.integration
class TestNotificationEndpoints:
    @pytest.mark.asyncio
    async def test_student_notifications(self, client, db_session, student, university):
        make_application(
            db_session, student, university, deadline=utc_today() + timedelta(days=3)
        )

        response = await client.get(
            "/api/v1/student/notifications", headers=auth_headers(student)
        )

        assert response.status_code == 200
        body = response.json()
        assert body["unread"] == 1
        assert body["data"][0]["message"] == "Deadline in 3 days"

    @pytest.mark.asyncio
    async def test_parents_get_their_recent_notes(
        self, client, db_session, student, linked_parent, application
    ):
        make_note(db_session, application, linked_parent, "Good luck!")

        response = await client.get(
            "/api/v1/parent/notifications", headers=auth_headers(linked_parent)
        )

        assert response.status_code == 200
        body = response.json()
        assert body["unread"] == 1
        assert body["data"][0]["note"] == "Good luck!"
        assert body["data"][0]["student"]["first_name"] == "Alex"
        assert body["data"][0]["university_name"] == "Stanford University"

    @pytest.mark.asyncio
    async def test_role_is_enforced(self, client, parent):
        response = await client.get(
            "/api/v1/student/notifications", headers=auth_headers(parent)
        )
        assert response.status_code == 403
