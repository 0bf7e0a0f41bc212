from sqlalchemy.orm import Session
from sqlalchemy import delete

from app.db.models import University
from app.utils.logging import get_logger

logger = get_logger()

UNIVERSITIES = [
    {
        "name": "Massachusetts Institute of Technology",
        "city": "Cambridge",
        "state": "MA",
        "country": "USA",
        "us_news_ranking": 2,
        "acceptance_rate": 4.0,
        "tuition_in_state": 61990,
        "tuition_out_state": 61990,
        "application_fee": 75,
        "application_system": "MIT Application",
        "deadlines": {"early_action": "2025-11-01", "regular": "2026-01-05"},
        "programs": ["Computer Science", "Engineering", "Mathematics", "Physics"],
    },
    {
        "name": "Stanford University",
        "city": "Stanford",
        "state": "CA",
        "country": "USA",
        "us_news_ranking": 3,
        "acceptance_rate": 3.7,
        "tuition_in_state": 65127,
        "tuition_out_state": 65127,
        "application_fee": 90,
        "application_system": "Common App",
        "deadlines": {"early_action": "2025-11-01", "regular": "2026-01-05"},
        "programs": ["Computer Science", "Economics", "Biology", "Engineering"],
    },
    {
        "name": "University of California, Berkeley",
        "city": "Berkeley",
        "state": "CA",
        "country": "USA",
        "us_news_ranking": 15,
        "acceptance_rate": 11.4,
        "tuition_in_state": 14312,
        "tuition_out_state": 48465,
        "application_fee": 80,
        "application_system": "UC Application",
        "deadlines": {"regular": "2025-11-30"},
        "programs": ["Computer Science", "Business", "Chemistry", "Economics"],
    },
    {
        "name": "University of Michigan",
        "city": "Ann Arbor",
        "state": "MI",
        "country": "USA",
        "us_news_ranking": 21,
        "acceptance_rate": 17.7,
        "tuition_in_state": 17736,
        "tuition_out_state": 58072,
        "application_fee": 75,
        "application_system": "Common App",
        "deadlines": {"early_action": "2025-11-01", "regular": "2026-02-01"},
        "programs": ["Business", "Engineering", "Psychology", "Nursing"],
    },
    {
        "name": "Purdue University",
        "city": "West Lafayette",
        "state": "IN",
        "country": "USA",
        "us_news_ranking": 46,
        "acceptance_rate": 50.3,
        "tuition_in_state": 9992,
        "tuition_out_state": 28794,
        "application_fee": 60,
        "application_system": "Common App",
        "deadlines": {"early_action": "2025-11-01", "regular": "2026-01-15"},
        "programs": ["Engineering", "Agriculture", "Computer Science"],
    },
    {
        "name": "University of Toronto",
        "city": "Toronto",
        "state": "ON",
        "country": "Canada",
        "us_news_ranking": None,
        "acceptance_rate": 43.0,
        "tuition_in_state": None,
        "tuition_out_state": 45690,
        "application_fee": 125,
        "application_system": "OUAC",
        "deadlines": {"regular": "2026-01-15"},
        "programs": ["Computer Science", "Life Sciences", "Commerce"],
    },
]


def seed_universities(db_session: Session):
    """Sync version: Seed universities data - clear existing and add new"""

    # Clear existing universities (requirements cascade with them)
    db_session.execute(delete(University))

    universities = [University(**data) for data in UNIVERSITIES]

    db_session.add_all(universities)
    db_session.commit()
    logger.info(f"Seeded {len(universities)} universities")
