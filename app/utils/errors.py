from fastapi import FastAPI, Request, status
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
import traceback
from .logging import get_logger
from .responses import ResponseBuilder

logger = get_logger()


class APIError(Exception):
    """Base error carrying the HTTP status it maps to."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "An internal server error occurred"
    default_code: str = "INTERNAL_ERROR"

    def __init__(self, message: str = None, error_code: str = None):
        self.message = message or self.default_message
        self.error_code = error_code or self.default_code
        super().__init__(self.message)


class BadRequestError(APIError):
    """Malformed or invalid input, including bad UUIDs and schema violations."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"
    default_code = "BAD_REQUEST"


class AuthenticationError(APIError):
    """Custom exception for authentication errors."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"
    default_code = "UNAUTHORIZED"


class AuthorizationError(APIError):
    """Authenticated, but wrong role or no access to the resource."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Access denied"
    default_code = "FORBIDDEN"


class NotFoundError(APIError):
    """Custom exception for resource not found errors."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"
    default_code = "NOT_FOUND"


class ConflictError(APIError):
    """Duplicate application or duplicate parent link."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"
    default_code = "CONFLICT"


class DatabaseError(APIError):
    """Custom exception for database-related errors."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "A database error occurred"
    default_code = "DB_ERROR"


class StorageError(APIError):
    """Object storage failures."""

    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "Storage service error"
    default_code = "STORAGE_ERROR"


def _format_validation_errors(errors) -> list:
    formatted_errors = []
    for error in errors:
        field_path = " -> ".join(str(loc) for loc in error["loc"])
        formatted_errors.append(
            {
                "field": field_path,
                "message": error["msg"],
                "type": error["type"],
            }
        )
    return formatted_errors


def _validation_error_response(request: Request, errors):
    formatted_errors = _format_validation_errors(errors)
    first = formatted_errors[0] if formatted_errors else None
    message = (
        f"{first['field'].split(' -> ')[-1]}: {first['message']}"
        if first
        else "Request validation failed"
    )

    return ResponseBuilder.error(
        request=request,
        message=message,
        errors=formatted_errors,
        error_code="VALIDATION_ERROR",
        status_code=status.HTTP_400_BAD_REQUEST,
    )


def setup_error_handlers(app: FastAPI):
    """Setup custom error handlers."""

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        if exc.status_code >= 500:
            logger.error(f"{type(exc).__name__}: {exc.message}")
            # Internal failures never leak their detail
            message = (
                exc.default_message if isinstance(exc, DatabaseError) else exc.message
            )
        else:
            logger.warning(f"{type(exc).__name__}: {exc.message}")
            message = exc.message

        return ResponseBuilder.error(
            request=request,
            message=message,
            error_code=exc.error_code,
            status_code=exc.status_code,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger.warning(f"HTTP Exception: {exc.status_code} - {exc.detail}")
        return ResponseBuilder.error(
            request=request,
            message=str(exc.detail),
            error_code="HTTP_ERROR",
            status_code=exc.status_code,
        )

    # Invalid bodies, query strings and path values map to 400

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(
        request: Request, exc: RequestValidationError
    ):
        logger.warning(f"Request Validation Error: {exc.errors()}")
        return _validation_error_response(request, exc.errors())

    # Query models built through Depends() raise plain pydantic errors
    @app.exception_handler(ValidationError)
    async def pydantic_validation_exception_handler(
        request: Request, exc: ValidationError
    ):
        logger.warning(f"Validation Error: {exc.errors()}")
        return _validation_error_response(request, exc.errors())

    @app.exception_handler(SQLAlchemyError)
    async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError):
        logger.error(f"SQLAlchemy Error: {str(exc)}")

        # Don't expose internal database errors to users
        return ResponseBuilder.error(
            request=request,
            message="A database error occurred",
            error_code="DATABASE_ERROR",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle all other unhandled exceptions"""
        logger.error(f"Unhandled Exception: {str(exc)}")
        logger.error(f"Traceback: {traceback.format_exc()}")

        return ResponseBuilder.error(
            request=request,
            message="Internal server error",
            error_code="INTERNAL_ERROR",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
