from sqlalchemy.orm import Session
from sqlalchemy import delete, select

from app.db.models import University, UniversityRequirement
from app.utils.logging import get_logger

logger = get_logger()

SAMPLE_REQUIREMENTS = [
    {
        "requirement_type": "transcript",
        "requirement_name": "High School Transcript",
        "description": "Official high school transcript with all grades",
        "is_required": True,
        "order_index": 1,
    },
    {
        "requirement_type": "test_scores",
        "requirement_name": "SAT/ACT Scores",
        "description": "Official SAT or ACT test scores",
        "is_required": True,
        "order_index": 2,
    },
    {
        "requirement_type": "essay",
        "requirement_name": "Personal Statement",
        "description": "Personal essay or statement of purpose",
        "is_required": True,
        "order_index": 3,
    },
    {
        "requirement_type": "recommendation",
        "requirement_name": "Letters of Recommendation",
        "description": "Two letters of recommendation from teachers",
        "is_required": True,
        "order_index": 4,
    },
    {
        "requirement_type": "fee",
        "requirement_name": "Application Fee",
        "description": "Non-refundable application processing fee",
        "is_required": True,
        "order_index": 5,
    },
    {
        "requirement_type": "essay",
        "requirement_name": "Supplemental Essays",
        "description": "Additional essays specific to this university",
        "is_required": False,
        "order_index": 6,
    },
    {
        "requirement_type": "activities",
        "requirement_name": "Activities List",
        "description": "List of extracurricular activities and achievements",
        "is_required": True,
        "order_index": 7,
    },
]


def seed_university_requirements(db_session: Session):
    """Sync version: Give every university the sample requirement checklist"""

    db_session.execute(delete(UniversityRequirement))

    university_ids = db_session.execute(select(University.id)).scalars().all()
    requirements = [
        UniversityRequirement(university_id=university_id, **data)
        for university_id in university_ids
        for data in SAMPLE_REQUIREMENTS
    ]

    db_session.add_all(requirements)
    db_session.commit()
    logger.info(
        f"Seeded {len(requirements)} requirements for {len(university_ids)} universities"
    )
