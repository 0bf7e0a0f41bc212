from typing import Any, Dict, List, Tuple

from fastapi import Depends
from sqlalchemy.orm import Session
from sqlalchemy import func, select

from app.config.settings import settings
from app.utils.logging import get_logger
from app.utils.errors import BadRequestError, NotFoundError
from app.db.models import University
from app.db.session import get_sync_session
from app.schemas.university_schemas import UniversityResponse, UniversitySearchParams

logger = get_logger()

# sort_by value -> column
SORT_COLUMNS = {
    "name": University.name,
    "ranking": University.us_news_ranking,
    "acceptance_rate": University.acceptance_rate,
    "tuition_fees": University.tuition_out_state,
}

# filter prefix -> column, for the *_min / *_max pairs
RANGE_FILTERS = {
    "ranking": University.us_news_ranking,
    "acceptance_rate": University.acceptance_rate,
    "tuition": University.tuition_out_state,
}


def clamp_limit(limit) -> int:
    if limit is None:
        return settings.UNIVERSITY_SEARCH_DEFAULT_LIMIT
    return max(1, min(int(limit), settings.UNIVERSITY_SEARCH_MAX_LIMIT))


class UniversityService:
    """Service provider for university reference data"""

    def __init__(self, db_session: Session):
        self.db = db_session

    async def search_universities(
        self, params: UniversitySearchParams
    ) -> Tuple[List[Dict[str, Any]], int, int]:
        """
        Filter, sort and page universities.

        Returns (rows, total matching, effective limit).
        """
        for name in RANGE_FILTERS:
            low = getattr(params, f"{name}_min")
            high = getattr(params, f"{name}_max")
            if low is not None and high is not None and low > high:
                raise BadRequestError(f"{name}_min cannot be greater than {name}_max")

        query = select(University)

        if params.q:
            query = query.where(University.name.ilike(f"%{params.q}%"))
        if params.country:
            query = query.where(University.country == params.country)
        for name, column in RANGE_FILTERS.items():
            low = getattr(params, f"{name}_min")
            high = getattr(params, f"{name}_max")
            if low is not None:
                query = query.where(column >= low)
            if high is not None:
                query = query.where(column <= high)
        if params.program:
            query = query.where(self._has_program(params.program))

        total = self.db.execute(
            select(func.count()).select_from(query.subquery())
        ).scalar_one()

        sort_column = SORT_COLUMNS[params.sort_by]
        ordering = sort_column.desc() if params.sort_order == "desc" else sort_column.asc()
        limit = clamp_limit(params.limit)

        universities = (
            self.db.execute(
                query.order_by(ordering, University.id).offset(params.offset).limit(limit)
            )
            .scalars()
            .all()
        )

        logger.debug(
            f"University search matched {total} rows (offset={params.offset}, limit={limit})"
        )
        return (
            [UniversityResponse.model_validate(u).model_dump() for u in universities],
            total,
            limit,
        )

    def _has_program(self, program: str):
        """EXISTS over the elements of the programs JSON list, compared case-insensitively."""
        if self.db.get_bind().dialect.name == "sqlite":
            elements = func.json_each(University.programs).table_valued("value")
            lower = func.unicode_lower
        else:
            elements = func.json_array_elements_text(University.programs).table_valued(
                "value"
            )
            lower = func.lower
        return (
            select(1)
            .select_from(elements)
            .where(lower(elements.c.value) == program.lower())
            .correlate(University)
            .exists()
        )

    async def get_university(self, university_id: str) -> Dict[str, Any]:
        university = self.db.get(University, university_id)
        if not university:
            raise NotFoundError("University not found", "UNIVERSITY_NOT_FOUND")
        return UniversityResponse.model_validate(university).model_dump()


def get_university_service(
    db: Session = Depends(get_sync_session),
) -> UniversityService:
    """Dependency to provide UniversityService instance"""
    return UniversityService(db)
