from typing import Optional, Callable
from fastapi import Depends, Header, Request, Response
from sqlalchemy.orm import Session
from starlette.middleware.base import BaseHTTPMiddleware

from app.db.models import Profile, UserRole
from app.db.session import get_sync_session
from app.utils.auth import AuthUtils
from app.utils.context import set_user_id
from app.utils.errors import AuthenticationError, AuthorizationError
from app.utils.responses import ResponseBuilder
from app.utils.logging import get_logger
from app.utils.validators import is_valid_uuid

logger = get_logger()

ACCESS_TOKEN_COOKIE = "access_token"


class AuthState:
    """Authentication state to be stored in request.state"""

    def __init__(
        self,
        user_id: str,
        email: Optional[str] = None,
        is_authenticated: bool = True,
    ):
        self.user_id = user_id
        self.email = email
        self.is_authenticated = is_authenticated


class AuthMiddleware(BaseHTTPMiddleware):
    """
    Verifies the identity provider's access token when one is presented.

    The token is read from `Authorization: Bearer ...` first, then from the
    `access_token` cookie. A request without any token passes through with
    `request.state.auth = None`; route dependencies decide whether that is a 401.
    A token that is present but invalid or expired is rejected here.
    """

    # Paths that don't look at credentials at all
    EXCLUDED_PATHS = {
        "/docs",
        "/redoc",
        "/openapi.json",
        "/api/v1/shared/health",
    }

    def __init__(self, app, excluded_paths: Optional[set] = None):
        super().__init__(app)
        self.excluded_paths = set(self.EXCLUDED_PATHS)
        if excluded_paths:
            self.excluded_paths.update(excluded_paths)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request through authentication middleware"""
        request.state.auth = None

        # Skip authentication for excluded paths and CORS preflight
        if self._is_excluded_path(request.url.path) or request.method == "OPTIONS":
            return await call_next(request)

        token = AuthUtils.extract_bearer_token(
            request.headers.get("authorization")
        ) or request.cookies.get(ACCESS_TOKEN_COOKIE)

        if token:
            payload = AuthUtils.verify_access_token(token)
            if not payload:
                logger.warning(f"Rejected invalid token for {request.url.path}")
                return ResponseBuilder.error(
                    request=request,
                    message="Invalid or expired authentication",
                    error_code="UNAUTHORIZED",
                    status_code=401,
                )

            request.state.auth = AuthState(
                user_id=str(payload["sub"]).lower(),
                email=payload.get("email"),
            )
            set_user_id(request.state.auth.user_id)

        return await call_next(request)

    def _is_excluded_path(self, path: str) -> bool:
        """Check if path is excluded from authentication"""
        return any(path.startswith(excluded) for excluded in self.excluded_paths)


# Dependency for getting current user from request state
def get_current_user(request: Request) -> AuthState:
    """Dependency to get current authenticated user from request state"""
    auth_state = getattr(request.state, "auth", None)

    if not auth_state or not auth_state.is_authenticated:
        raise AuthenticationError("Unauthorized", "UNAUTHORIZED")

    return auth_state


def get_current_profile(
    current_user: AuthState = Depends(get_current_user),
    db_session: Session = Depends(get_sync_session),
) -> Profile:
    """Dependency that loads the caller's profile, which carries their role"""
    profile = None
    if is_valid_uuid(current_user.user_id):
        profile = db_session.get(Profile, current_user.user_id)
    if not profile:
        raise AuthorizationError("Profile not found", "PROFILE_NOT_FOUND")
    return profile


# Dependency for requiring a specific role
def require_role(role: UserRole):
    """Create dependency that requires the caller's profile to have `role`"""

    def check_role(profile: Profile = Depends(get_current_profile)) -> Profile:
        if profile.role != role:
            raise AuthorizationError(
                f"Access denied. {role.value} role required.",
                "ROLE_REQUIRED",
            )
        return profile

    return check_role


def require_service_key(x_service_key: Optional[str] = Header(default=None)) -> None:
    """Dependency for service-only operations such as seeding requirements"""
    if not AuthUtils.verify_service_key(x_service_key):
        raise AuthorizationError("Service key required", "SERVICE_KEY_REQUIRED")


# Pre-defined dependencies for the two roles
require_student = require_role(UserRole.STUDENT)
require_parent = require_role(UserRole.PARENT)
