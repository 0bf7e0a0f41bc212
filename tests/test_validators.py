import pytest
from datetime import date
from pydantic import ValidationError

from app.utils.errors import BadRequestError
from app.utils.validators import (
    is_valid_uuid,
    parse_date,
    require,
    validate_date,
    validate_enum,
    validate_number,
    validate_string,
    validate_uuid,
)
from app.schemas.application_schemas import (
    ApplicationCreateRequest,
    ApplicationUpdateRequest,
)
from app.schemas.parent_schemas import LinkStudentRequest

VALID_ID = "3f2c1a9e-8b7d-4c6e-9a5f-1b2c3d4e5f60"


@pytest.mark.unit
class TestUUIDValidation:
    """UUID checks applied to path ids and id fields."""

    def test_accepts_canonical_uuid(self):
        assert is_valid_uuid(VALID_ID)
        assert validate_uuid(VALID_ID) == VALID_ID

    def test_normalises_upper_case(self):
        assert validate_uuid(VALID_ID.upper()) == VALID_ID

    @pytest.mark.parametrize(
        "value",
        [
            "not-a-uuid",
            "",
            None,
            123,
            VALID_ID[:-1],
            VALID_ID.replace("-", ""),
            VALID_ID + "\n",
            " " + VALID_ID,
        ],
    )
    def test_rejects_malformed_values(self, value):
        assert not is_valid_uuid(value)
        with pytest.raises(BadRequestError) as exc_info:
            validate_uuid(value, "application ID")
        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Invalid application ID format"
        assert exc_info.value.error_code == "INVALID_ID_FORMAT"


@pytest.mark.unit
class TestFieldValidators:
    def test_require(self):
        assert require("x", "name") == "x"
        with pytest.raises(BadRequestError, match="name is required"):
            require("", "name")
        with pytest.raises(BadRequestError):
            require(None, "name")

    def test_validate_string_length(self):
        assert validate_string("hello", "note", max_length=5) == "hello"
        with pytest.raises(BadRequestError, match="less than 5 characters"):
            validate_string("toolong", "note", max_length=5)
        with pytest.raises(BadRequestError, match="must be a string"):
            validate_string(42, "note")

    def test_validate_number_bounds(self):
        assert validate_number("3.5", "gpa", 0, 5) == 3.5
        with pytest.raises(BadRequestError, match="at most 5"):
            validate_number(5.1, "gpa", 0, 5)
        with pytest.raises(BadRequestError, match="at least 0"):
            validate_number(-1, "gpa", 0, 5)
        with pytest.raises(BadRequestError, match="valid number"):
            validate_number("abc", "gpa")
        with pytest.raises(BadRequestError, match="valid number"):
            validate_number(True, "gpa")

    def test_validate_enum(self):
        assert validate_enum("asc", "sort_order", ["asc", "desc"]) == "asc"
        with pytest.raises(BadRequestError, match="must be one of: asc, desc"):
            validate_enum("up", "sort_order", ["asc", "desc"])

    def test_parse_date_formats(self):
        assert parse_date("2025-01-15") == date(2025, 1, 15)
        assert parse_date("2025-01-15T10:30:00Z") == date(2025, 1, 15)
        assert parse_date(date(2025, 1, 15)) == date(2025, 1, 15)
        with pytest.raises(ValueError):
            parse_date("15/01/2025")

    def test_validate_date_raises_bad_request(self):
        with pytest.raises(BadRequestError, match="deadline must be a valid date"):
            validate_date("soon", "deadline")


@pytest.mark.unit
class TestRequestSchemas:
    """Request bodies reuse the same rules through annotated field types."""

    def test_create_request_parses_fields(self):
        body = ApplicationCreateRequest(
            university_id=VALID_ID.upper(),
            application_type="Early_Action",
            deadline="2025-11-01",
        )
        assert body.university_id == VALID_ID
        assert body.deadline == date(2025, 11, 1)

    def test_create_request_rejects_bad_uuid(self):
        with pytest.raises(ValidationError) as exc_info:
            ApplicationCreateRequest(university_id="not-a-uuid")
        assert exc_info.value.errors()[0]["msg"] == "Invalid ID format"

    def test_create_request_rejects_trailing_newline_in_uuid(self):
        with pytest.raises(ValidationError):
            ApplicationCreateRequest(university_id=VALID_ID + "\n")

    def test_create_request_rejects_unknown_fields(self):
        with pytest.raises(ValidationError):
            ApplicationCreateRequest(university_id=VALID_ID, status="ACCEPTED")

    def test_update_request_tracks_supplied_fields(self):
        body = ApplicationUpdateRequest(status="SUBMITTED", decision_date=None)
        assert body.model_fields_set == {"status", "decision_date"}

    def test_update_request_rejects_null_status(self):
        with pytest.raises(ValidationError, match="status cannot be null"):
            ApplicationUpdateRequest(status=None)

        body = ApplicationUpdateRequest(notes=None, deadline=None)
        assert body.model_fields_set == {"notes", "deadline"}

    def test_link_request_accepts_both_spellings(self):
        assert LinkStudentRequest(studentId=VALID_ID).student_id == VALID_ID
        assert LinkStudentRequest(student_id=VALID_ID).student_id == VALID_ID
