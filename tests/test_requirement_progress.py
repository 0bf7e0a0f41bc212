import uuid

import pytest
from sqlalchemy import func, select

from app.db.models import ApplicationRequirementProgress, RequirementStatus
from app.schemas.university_schemas import RequirementCreateRequest
from app.services.requirement_service import RequirementService
from app.utils.errors import NotFoundError

from tests.factories import auth_headers, make_application, service_headers


@pytest.fixture
def requirement_service(db_session) -> RequirementService:
    return RequirementService(db_session)


def progress_rows(db, application_id):
    return db.execute(
        select(func.count())
        .select_from(ApplicationRequirementProgress)
        .where(ApplicationRequirementProgress.application_id == application_id)
    ).scalar_one()


@pytest.mark.unit
class TestUpsertRequirementProgress:
    @pytest.mark.asyncio
    async def test_repeated_upserts_keep_a_single_row(
        self, requirement_service, db_session, application, requirements
    ):
        essay = requirements[1]
        for status in (
            RequirementStatus.IN_PROGRESS,
            RequirementStatus.IN_PROGRESS,
            RequirementStatus.COMPLETED,
        ):
            progress = await requirement_service.upsert_requirement_progress(
                application.id, essay.id, status
            )

        assert progress["status"] == "completed"
        assert progress_rows(db_session, application.id) == 1

    @pytest.mark.asyncio
    async def test_completed_at_follows_status(
        self, requirement_service, application, requirements
    ):
        requirement_id = requirements[0].id

        completed = await requirement_service.upsert_requirement_progress(
            application.id, requirement_id, RequirementStatus.COMPLETED
        )
        assert completed["completed_at"] is not None

        reopened = await requirement_service.upsert_requirement_progress(
            application.id, requirement_id, RequirementStatus.NOT_STARTED
        )
        assert reopened["status"] == "not_started"
        assert reopened["completed_at"] is None

    @pytest.mark.asyncio
    async def test_notes_survive_when_omitted(
        self, requirement_service, application, requirements
    ):
        requirement_id = requirements[0].id
        await requirement_service.upsert_requirement_progress(
            application.id,
            requirement_id,
            RequirementStatus.IN_PROGRESS,
            notes="Ask counselor to send",
        )

        progress = await requirement_service.upsert_requirement_progress(
            application.id, requirement_id, RequirementStatus.COMPLETED
        )
        assert progress["notes"] == "Ask counselor to send"

        progress = await requirement_service.upsert_requirement_progress(
            application.id, requirement_id, RequirementStatus.COMPLETED, notes="Sent"
        )
        assert progress["notes"] == "Sent"

    @pytest.mark.asyncio
    async def test_requirement_of_another_university_is_rejected(
        self,
        requirement_service,
        db_session,
        student,
        second_university,
        requirements,
    ):
        toronto_application = make_application(db_session, student, second_university)

        with pytest.raises(NotFoundError, match="Requirement not found"):
            await requirement_service.upsert_requirement_progress(
                toronto_application.id,
                requirements[0].id,
                RequirementStatus.COMPLETED,
            )
        assert progress_rows(db_session, toronto_application.id) == 0

    @pytest.mark.asyncio
    async def test_unknown_application(self, requirement_service, requirements):
        with pytest.raises(NotFoundError, match="Application not found"):
            await requirement_service.upsert_requirement_progress(
                str(uuid.uuid4()), requirements[0].id, RequirementStatus.COMPLETED
            )


@pytest.mark.unit
class TestRequirementListing:
    @pytest.mark.asyncio
    async def test_requirements_in_checklist_order(
        self, requirement_service, university, requirements
    ):
        items = await requirement_service.get_requirements(university.id)
        assert [item["requirement_name"] for item in items] == [
            "Official Transcript",
            "Personal Essay",
            "SAT or ACT Scores",
        ]
        assert "application_requirement_progress" not in items[0]

    @pytest.mark.asyncio
    async def test_progress_attached_per_application(
        self, requirement_service, university, application, requirements
    ):
        await requirement_service.upsert_requirement_progress(
            application.id, requirements[1].id, RequirementStatus.IN_PROGRESS
        )

        items = await requirement_service.get_requirements(
            university.id, application_id=application.id
        )

        progress = [item["application_requirement_progress"] for item in items]
        assert progress[0] == []
        assert progress[1][0]["status"] == "in_progress"
        assert progress[2] == []

    @pytest.mark.asyncio
    async def test_unknown_university(self, requirement_service):
        with pytest.raises(NotFoundError, match="University not found"):
            await requirement_service.get_requirements(str(uuid.uuid4()))

    @pytest.mark.asyncio
    async def test_create_requirement(self, requirement_service, university):
        created = await requirement_service.create_requirement(
            university.id,
            RequirementCreateRequest(
                requirement_type="recommendation",
                requirement_name="Counselor Letter",
                order_index=4,
            ),
        )
        assert created["university_id"] == university.id
        assert created["is_required"] is True


@pytest.mark.integration
class TestRequirementEndpoints:
    @pytest.mark.asyncio
    async def test_put_progress_sets_and_clears_completed_at(
        self, client, student, application, requirements
    ):
        url = f"/api/v1/applications/{application.id}/requirements/{requirements[0].id}"

        response = await client.put(
            url, json={"status": "completed"}, headers=auth_headers(student)
        )
        assert response.status_code == 200
        assert response.json()["data"]["completed_at"] is not None

        response = await client.put(
            url, json={"status": "not_started"}, headers=auth_headers(student)
        )
        assert response.status_code == 200
        assert response.json()["data"].get("completed_at") is None

    @pytest.mark.asyncio
    async def test_post_progress_and_list(
        self, client, student, application, requirements
    ):
        base = f"/api/v1/applications/{application.id}/requirements"
        response = await client.post(
            base,
            json={"requirement_id": requirements[2].id, "status": "in_progress"},
            headers=auth_headers(student),
        )
        assert response.status_code == 200

        response = await client.get(base, headers=auth_headers(student))
        assert response.status_code == 200
        assert [row["requirement_id"] for row in response.json()["data"]] == [
            requirements[2].id
        ]

    @pytest.mark.asyncio
    async def test_invalid_status_is_rejected(
        self, client, student, application, requirements
    ):
        response = await client.put(
            f"/api/v1/applications/{application.id}/requirements/{requirements[0].id}",
            json={"status": "done"},
            headers=auth_headers(student),
        )
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_other_student_cannot_update(
        self, client, other_student, application, requirements
    ):
        response = await client.put(
            f"/api/v1/applications/{application.id}/requirements/{requirements[0].id}",
            json={"status": "completed"},
            headers=auth_headers(other_student),
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_university_requirements_with_application_progress(
        self, client, student, university, application, requirements
    ):
        response = await client.get(
            f"/api/v1/universities/{university.id}/requirements",
            params={"application_id": application.id},
            headers=auth_headers(student),
        )
        assert response.status_code == 200
        items = response.json()["data"]
        assert len(items) == 3
        assert all(item["application_requirement_progress"] == [] for item in items)

    @pytest.mark.asyncio
    async def test_application_from_another_university(
        self, client, student, second_university, application, requirements
    ):
        response = await client.get(
            f"/api/v1/universities/{second_university.id}/requirements",
            params={"application_id": application.id},
            headers=auth_headers(student),
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_creating_requirements_needs_the_service_key(
        self, client, student, university
    ):
        body = {"requirement_type": "essay", "requirement_name": "Why Stanford"}
        url = f"/api/v1/universities/{university.id}/requirements"

        response = await client.post(url, json=body, headers=auth_headers(student))
        assert response.status_code == 403

        response = await client.post(url, json=body, headers=service_headers())
        assert response.status_code == 201
        assert response.json()["data"]["requirement_name"] == "Why Stanford"
