"""
Path parameter dependencies.

Each one rejects a malformed id with 400 before any other dependency runs,
so list them first in a route's signature.
"""

from typing import Annotated

from fastapi import Path

from app.utils.validators import validate_uuid


def application_id_path(
    application_id: Annotated[str, Path(description="Application ID")],
) -> str:
    return validate_uuid(application_id, "application ID")


def requirement_id_path(
    requirement_id: Annotated[str, Path(description="University requirement ID")],
) -> str:
    return validate_uuid(requirement_id, "requirement ID")


def university_id_path(
    university_id: Annotated[str, Path(description="University ID")],
) -> str:
    return validate_uuid(university_id, "university ID")


def student_id_path(
    student_id: Annotated[str, Path(description="Student user ID")],
) -> str:
    return validate_uuid(student_id, "student ID")


def parent_id_path(
    parent_id: Annotated[str, Path(description="Parent user ID")],
) -> str:
    return validate_uuid(parent_id, "parent ID")
