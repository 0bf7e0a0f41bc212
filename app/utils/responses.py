from typing import Any, Dict, List, Optional
from fastapi import status, Request
from fastapi.responses import JSONResponse
from app.schemas.response_schemas import ApiResponse, FiltersMeta, PaginationMeta


class ResponseBuilder:
    """Builder class for creating standardized responses"""

    @staticmethod
    def _render(
        request: Request, status_code: int, keep_data: bool = False, **fields
    ) -> JSONResponse:
        request_id = getattr(request.state, "request_id", None)
        if request_id:
            fields["request_id"] = request_id
        response = ApiResponse(path=str(request.url.path), **fields)
        content = response.model_dump(exclude_none=True)
        if keep_data:
            # `data: null` is meaningful for success bodies (e.g. no progress row yet)
            content.setdefault("data", None)
        return JSONResponse(status_code=status_code, content=content)

    @staticmethod
    def success(
        request: Request,
        data: Any = None,
        message: Optional[str] = None,
        pagination: Optional[PaginationMeta] = None,
        filters: Optional[Dict[str, Any]] = None,
        unread: Optional[int] = None,
        status_code: int = status.HTTP_200_OK,
    ) -> JSONResponse:
        """Create a success response"""
        return ResponseBuilder._render(
            request,
            status_code,
            keep_data=True,
            success=True,
            message=message,
            data=data,
            pagination=pagination,
            filters=FiltersMeta(applied=filters) if filters is not None else None,
            unread=unread,
        )

    @staticmethod
    def error(
        request: Request,
        message: str = "An error occurred",
        errors: Optional[List[Dict[str, Any]]] = None,
        error_code: Optional[str] = None,
        status_code: int = status.HTTP_400_BAD_REQUEST,
    ) -> JSONResponse:
        """Create an error response"""
        return ResponseBuilder._render(
            request,
            status_code,
            success=False,
            error=message,
            code=error_code,
            errors=errors,
        )

    @staticmethod
    def paginated(
        request: Request,
        data: List[Any],
        total: int,
        limit: int,
        offset: int,
        message: Optional[str] = None,
        filters: Optional[Dict[str, Any]] = None,
    ) -> JSONResponse:
        """Create an offset/limit paginated response"""
        pagination = PaginationMeta(
            total=total,
            limit=limit,
            offset=offset,
            has_more=total > offset + limit,
        )

        return ResponseBuilder.success(
            request=request,
            data=data,
            message=message,
            pagination=pagination,
            filters=filters,
        )
