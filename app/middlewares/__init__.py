from .request_id_middleware import *
from .security_middleware import *
from .auth_middleware import *

__all__ = [
    "RequestIDMiddleware",
    "DevSecurityMiddleware",
    "ProdSecurityMiddleware",
    "AuthMiddleware",
    "AuthState",
    "get_current_user",
    "get_current_profile",
    "require_role",
    "require_student",
    "require_parent",
    "require_service_key",
]
