"""
Main seeding file that orchestrates all database seeding operations.

Universities are reference data seeded out of band; requirements depend on
them, so they run second.
"""

from app.db.session import get_session_factory
from app.utils.logging import get_logger

from .universities_seed import seed_universities
from .university_requirements_seed import seed_university_requirements

logger = get_logger()


def seed_all_data():
    """Sync version: Seed all reference tables in dependency order."""

    db_session = get_session_factory()()
    try:
        logger.info("Starting database seeding...")

        seed_universities(db_session)
        seed_university_requirements(db_session)  # Depends on universities

        logger.info("Database seeding completed successfully!")
        return True

    except Exception as e:
        logger.error(f"Database seeding failed: {str(e)}")
        db_session.rollback()
        raise e
    finally:
        db_session.close()
