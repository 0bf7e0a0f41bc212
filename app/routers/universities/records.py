from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from app.middlewares.auth_middleware import get_current_user
from app.services.university_service import UniversityService, get_university_service
from app.schemas.university_schemas import UniversitySearchParams
from app.routers.path_params import university_id_path
from app.utils.responses import ResponseBuilder

universities_router = APIRouter()


@universities_router.get(
    "",
    response_model=None,
    status_code=status.HTTP_200_OK,
    summary="Search universities",
    description="Name search, country and range filters, sorting and offset/limit pagination (limit is capped at 100).",
    dependencies=[Depends(get_current_user)],
)
async def search_universities(
    request: Request,
    query_params: Annotated[UniversitySearchParams, Depends()],
    university_service: UniversityService = Depends(get_university_service),
):
    universities, total, limit = await university_service.search_universities(
        query_params
    )
    return ResponseBuilder.paginated(
        request=request,
        data=universities,
        total=total,
        limit=limit,
        offset=query_params.offset,
        filters=query_params.applied_filters(),
    )


@universities_router.get(
    "/{university_id}",
    response_model=None,
    status_code=status.HTTP_200_OK,
    summary="Get a university",
    dependencies=[Depends(get_current_user)],
)
async def get_university(
    request: Request,
    university_id: str = Depends(university_id_path),
    university_service: UniversityService = Depends(get_university_service),
):
    university = await university_service.get_university(university_id)
    return ResponseBuilder.success(request=request, data=university)
