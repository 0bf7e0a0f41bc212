from typing import Optional

from sqlalchemy.engine import Engine

from .models import Base
from .seeds.main import seed_all_data
from .session import get_engine

from app.utils.logging import get_logger

logger = get_logger()


def create_tables(engine: Optional[Engine] = None):
    """Create every table on `engine` (the configured engine by default)."""
    Base.metadata.create_all(engine or get_engine())
    logger.info("Created all tables.")


def drop_tables(engine: Optional[Engine] = None):
    Base.metadata.drop_all(engine or get_engine())
    logger.info("Dropped all tables.")


def seed_db():
    """Load the sample universities and their requirement checklists."""
    seed_all_data()


def reset_db():
    logger.info("Resetting database...")
    drop_tables()
    create_tables()
    seed_db()
    logger.info("Database reset complete.")


if __name__ == "__main__":
    reset_db()
