import uuid
from io import BytesIO

import pytest

from app.utils.auth import AuthUtils

from tests.factories import auth_headers, make_university


@pytest.mark.integration
class TestApplicationFlow:
    @pytest.mark.asyncio
    async def test_student_creates_application_and_parent_comments(
        self, client, student, linked_parent, other_parent, university
    ):
        response = await client.post(
            "/api/v1/applications",
            json={
                "university_id": university.id,
                "application_type": "Early_Action",
                "deadline": "2024-11-01",
            },
            headers=auth_headers(student),
        )
        assert response.status_code == 201
        created = response.json()["data"]
        assert created["status"] == "NOT_STARTED"
        application_id = created["id"]

        response = await client.post(
            "/api/v1/parent/notes",
            json={"application_id": application_id, "note": "Essay looks great"},
            headers=auth_headers(linked_parent),
        )
        assert response.status_code == 201
        note_id = response.json()["data"]["id"]

        response = await client.get(
            f"/api/v1/applications/{application_id}/parent-notes",
            headers=auth_headers(student),
        )
        assert response.status_code == 200
        notes = response.json()["data"]
        assert [n["id"] for n in notes] == [note_id]
        assert notes[0]["parent"]["first_name"] == "Jordan"

        response = await client.post(
            "/api/v1/parent/notes",
            json={"application_id": application_id, "note": "Hello"},
            headers=auth_headers(other_parent),
        )
        assert response.status_code == 403

        response = await client.get(
            f"/api/v1/applications/{application_id}/parent-notes",
            headers=auth_headers(other_parent),
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_duplicate_application_conflicts(self, client, student, application, university):
        response = await client.post(
            "/api/v1/applications",
            json={"university_id": university.id},
            headers=auth_headers(student),
        )
        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_list_and_read_own_applications(self, client, student, application):
        response = await client.get("/api/v1/applications", headers=auth_headers(student))
        assert response.status_code == 200
        body = response.json()
        assert [a["id"] for a in body["data"]] == [application.id]
        assert body["pagination"]["total"] == 1

        response = await client.get(
            f"/api/v1/applications/{application.id}", headers=auth_headers(student)
        )
        assert response.status_code == 200
        assert response.json()["data"]["university"]["programs"] == [
            "Computer Science",
            "Economics",
        ]

    @pytest.mark.asyncio
    async def test_partial_update(self, client, student, application):
        response = await client.put(
            f"/api/v1/applications/{application.id}",
            json={"status": "SUBMITTED", "submitted_date": "2024-12-20"},
            headers=auth_headers(student),
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["status"] == "SUBMITTED"
        assert data["submitted_date"] == "2024-12-20"
        assert data["deadline"] == "2025-01-02"

    @pytest.mark.asyncio
    async def test_linked_parent_reads_but_cannot_update(
        self, client, linked_parent, application
    ):
        url = f"/api/v1/applications/{application.id}"

        response = await client.get(url, headers=auth_headers(linked_parent))
        assert response.status_code == 200

        response = await client.put(
            url, json={"notes": "parent edit"}, headers=auth_headers(linked_parent)
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_unknown_application_is_denied(self, client, student):
        response = await client.get(
            f"/api/v1/applications/{uuid.uuid4()}", headers=auth_headers(student)
        )
        assert response.status_code == 403


@pytest.mark.integration
class TestRequestValidation:
    @pytest.mark.asyncio
    async def test_malformed_ids_are_rejected_before_lookup(self, client, student):
        response = await client.get(
            "/api/v1/applications/not-a-uuid", headers=auth_headers(student)
        )
        assert response.status_code == 400
        assert response.json()["success"] is False

        response = await client.get(
            "/api/v1/applications/not-a-uuid/requirements/also-bad",
            headers=auth_headers(student),
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_ids_with_trailing_newline_are_rejected(
        self, client, student, university
    ):
        response = await client.post(
            "/api/v1/applications",
            json={"university_id": university.id + "\n"},
            headers=auth_headers(student),
        )
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

        response = await client.get(
            f"/api/v1/universities/{university.id}%0A", headers=auth_headers(student)
        )
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_ID_FORMAT"

    @pytest.mark.asyncio
    async def test_null_status_is_rejected(self, client, student, application):
        response = await client.put(
            f"/api/v1/applications/{application.id}",
            json={"status": None},
            headers=auth_headers(student),
        )
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

        response = await client.get(
            f"/api/v1/applications/{application.id}", headers=auth_headers(student)
        )
        assert response.json()["data"]["status"] == "NOT_STARTED"

    @pytest.mark.asyncio
    async def test_unknown_body_fields(self, client, student, university):
        response = await client.post(
            "/api/v1/applications",
            json={"university_id": university.id, "priority": "high"},
            headers=auth_headers(student),
        )
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_bad_date(self, client, student, university):
        response = await client.post(
            "/api/v1/applications",
            json={"university_id": university.id, "deadline": "2024-02-30"},
            headers=auth_headers(student),
        )
        assert response.status_code == 400


@pytest.mark.integration
class TestAuthentication:
    @pytest.mark.asyncio
    async def test_missing_token(self, client):
        response = await client.get("/api/v1/applications")
        assert response.status_code == 401
        assert response.json()["success"] is False

    @pytest.mark.asyncio
    async def test_invalid_token(self, client):
        response = await client.get(
            "/api/v1/applications", headers={"Authorization": "Bearer not-a-jwt"}
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_token_in_cookie(self, client, student):
        token = AuthUtils.generate_access_token(student.user_id, email=student.email)
        response = await client.get(
            "/api/v1/applications", headers={"Cookie": f"access_token={token}"}
        )
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_token_without_profile(self, client):
        token = AuthUtils.generate_access_token(str(uuid.uuid4()))
        response = await client.get(
            "/api/v1/applications", headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_wrong_role(self, client, parent):
        response = await client.get("/api/v1/applications", headers=auth_headers(parent))
        assert response.status_code == 403
        assert response.json()["code"] == "ROLE_REQUIRED"


@pytest.mark.integration
class TestSharedEndpoints:
    @pytest.mark.asyncio
    async def test_health_needs_no_auth(self, client):
        response = await client.get("/api/v1/shared/health")
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, client):
        response = await client.get(
            "/api/v1/shared/health", headers={"X-Request-ID": "trace-123"}
        )
        assert response.headers["X-Request-ID"] == "trace-123"
        assert response.json()["request_id"] == "trace-123"

        response = await client.get("/api/v1/shared/health")
        assert uuid.UUID(response.headers["X-Request-ID"])

    @pytest.mark.asyncio
    async def test_read_and_update_profile(self, client, student):
        response = await client.patch(
            "/api/v1/shared/profile",
            json={"first_name": "Alexandra"},
            headers=auth_headers(student),
        )
        assert response.status_code == 200

        response = await client.get("/api/v1/shared/profile", headers=auth_headers(student))
        data = response.json()["data"]
        assert data["first_name"] == "Alexandra"
        assert data["last_name"] == "Kim"
        assert data["role"] == "student"


@pytest.mark.integration
class TestProfileCreation:
    @pytest.mark.asyncio
    async def test_legacy_endpoint_creates_profile(self, client):
        user_id = str(uuid.uuid4())
        token = AuthUtils.generate_access_token(user_id, email="new@example.com")
        headers = {"Authorization": f"Bearer {token}"}
        body = {
            "user_id": user_id,
            "role": "parent",
            "first_name": "Casey",
            "email": "new@example.com",
        }

        response = await client.post("/api/profiles", json=body, headers=headers)
        assert response.status_code == 200
        assert response.json()["data"]["role"] == "parent"

        body["last_name"] = "Nguyen"
        response = await client.post("/api/profiles", json=body, headers=headers)
        assert response.status_code == 200
        assert response.json()["data"]["last_name"] == "Nguyen"

    @pytest.mark.asyncio
    async def test_cannot_create_someone_elses_profile(self, client, student):
        response = await client.post(
            "/api/profiles",
            json={"user_id": str(uuid.uuid4()), "role": "student"},
            headers=auth_headers(student),
        )
        assert response.status_code == 403
        assert response.json()["code"] == "PROFILE_USER_MISMATCH"

    @pytest.mark.asyncio
    async def test_student_endpoint_keeps_existing_role(self, client, parent):
        response = await client.post(
            "/api/v1/student/profiles",
            json={"user_id": parent.user_id, "role": "student"},
            headers=auth_headers(parent),
        )
        assert response.status_code == 403


@pytest.mark.integration
class TestStudentProfileViews:
    @pytest.mark.asyncio
    async def test_academic_profile_round_trip(self, client, student):
        response = await client.get(
            "/api/v1/student/academic-profile", headers=auth_headers(student)
        )
        assert response.status_code == 200
        assert response.json()["data"] is None

        response = await client.put(
            "/api/v1/student/academic-profile",
            json={
                "graduation_year": 2026,
                "gpa": 3.8,
                "sat_score": 1480,
                "intended_majors": ["Computer Science"],
            },
            headers=auth_headers(student),
        )
        assert response.status_code == 200
        assert response.json()["data"]["sat_score"] == 1480

        response = await client.put(
            "/api/v1/student/academic-profile",
            json={"sat_score": 1700},
            headers=auth_headers(student),
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_parent_sees_linked_student(self, client, linked_parent, student):
        await client.put(
            "/api/v1/student/academic-profile",
            json={"gpa": 3.9, "target_countries": ["USA"]},
            headers=auth_headers(student),
        )
        await client.post(
            "/api/v1/student/files",
            data={"kind": "essay"},
            files={"file": ("why-us.pdf", BytesIO(b"%PDF-1.4"), "application/pdf")},
            headers=auth_headers(student),
        )

        response = await client.get(
            "/api/v1/parent/student-profile", headers=auth_headers(linked_parent)
        )

        assert response.status_code == 200
        view = response.json()["data"]
        assert view["user_id"] == student.user_id
        assert view["academic_profile"]["gpa"] == 3.9
        assert [f["name"] for f in view["files"]["essays"]] == ["why-us.pdf"]
        assert view["files"]["transcripts"] == []

    @pytest.mark.asyncio
    async def test_parent_without_links(self, client, parent, student):
        response = await client.get(
            "/api/v1/parent/student-profile", headers=auth_headers(parent)
        )
        assert response.status_code == 404

        response = await client.get(
            "/api/v1/parent/student-profile",
            params={"student_id": student.user_id},
            headers=auth_headers(parent),
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_storage_outage_still_renders(
        self, client, fake_minio, linked_parent, student
    ):
        fake_minio.fail_listing = True
        response = await client.get(
            "/api/v1/parent/student-profile", headers=auth_headers(linked_parent)
        )
        assert response.status_code == 200
        assert response.json()["data"]["files"] == {"essays": [], "transcripts": []}


@pytest.mark.integration
class TestUniversityEndpoints:
    @pytest.mark.asyncio
    async def test_search_envelope(self, client, student, university, second_university):
        response = await client.get(
            "/api/v1/universities",
            params={"program": "Computer Science", "limit": 1, "sort_by": "ranking"},
            headers=auth_headers(student),
        )
        assert response.status_code == 200
        body = response.json()
        assert [u["name"] for u in body["data"]] == ["Stanford University"]
        assert body["pagination"] == {
            "total": 2,
            "limit": 1,
            "offset": 0,
            "has_more": True,
        }
        assert body["filters"]["applied"] == {"program": "Computer Science"}

    @pytest.mark.asyncio
    async def test_limit_is_clamped(self, client, student, db_session):
        make_university(db_session, "Solo College")
        response = await client.get(
            "/api/v1/universities", params={"limit": 1000}, headers=auth_headers(student)
        )
        assert response.json()["pagination"]["limit"] == 100

    @pytest.mark.asyncio
    async def test_inverted_range(self, client, student):
        response = await client.get(
            "/api/v1/universities",
            params={"acceptance_rate_min": 60, "acceptance_rate_max": 10},
            headers=auth_headers(student),
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_bad_sort_field(self, client, student):
        response = await client.get(
            "/api/v1/universities",
            params={"sort_by": "popularity"},
            headers=auth_headers(student),
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_search_requires_login(self, client):
        response = await client.get("/api/v1/universities")
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_single_university(self, client, student, university):
        response = await client.get(
            f"/api/v1/universities/{university.id}", headers=auth_headers(student)
        )
        assert response.status_code == 200
        assert response.json()["data"]["location"] == "Stanford, CA, USA"

        response = await client.get(
            f"/api/v1/universities/{uuid.uuid4()}", headers=auth_headers(student)
        )
        assert response.status_code == 404
