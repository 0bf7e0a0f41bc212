import pytest
from sqlalchemy import func, select

from app.db.models import University, UniversityRequirement
from app.db.seeds.universities_seed import UNIVERSITIES, seed_universities
from app.db.seeds.university_requirements_seed import (
    SAMPLE_REQUIREMENTS,
    seed_university_requirements,
)


def count(db, model) -> int:
    return db.execute(select(func.count()).select_from(model)).scalar_one()


@pytest.mark.unit
class TestReferenceSeeds:
    def test_every_university_gets_the_checklist(self, db_session):
        seed_universities(db_session)
        seed_university_requirements(db_session)

        assert count(db_session, University) == len(UNIVERSITIES)
        assert count(db_session, UniversityRequirement) == len(UNIVERSITIES) * len(
            SAMPLE_REQUIREMENTS
        )

    def test_reseeding_replaces_rows(self, db_session):
        for _ in range(2):
            seed_universities(db_session)
            seed_university_requirements(db_session)

        assert count(db_session, University) == len(UNIVERSITIES)
        assert count(db_session, UniversityRequirement) == len(UNIVERSITIES) * len(
            SAMPLE_REQUIREMENTS
        )
