from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
import hmac
import uuid
import jwt

from app.config.settings import settings


class AuthUtils:
    """JWT helpers for the identity provider's HS256 access tokens"""

    @staticmethod
    def generate_access_token(
        user_id: str,
        email: Optional[str] = None,
        expires_minutes: Optional[int] = None,
    ) -> str:
        """Generate an access token shaped like the identity provider's (used by tooling and tests)"""
        now = datetime.now(timezone.utc)
        expire = now + timedelta(
            minutes=(
                settings.ACCESS_TOKEN_EXPIRE_MINUTES
                if expires_minutes is None
                else expires_minutes
            )
        )

        payload = {
            "sub": str(user_id),  # Subject (user ID)
            "aud": settings.JWT_AUDIENCE,
            "role": "authenticated",
            "iat": now,  # Issued at
            "exp": expire,  # Expiration
            "jti": str(uuid.uuid4()),  # JWT ID for uniqueness
        }
        if email:
            payload["email"] = email

        return jwt.encode(
            payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM
        )

    @staticmethod
    def verify_access_token(token: str) -> Optional[Dict[str, Any]]:
        """Verify and decode access token; None when invalid or expired"""
        try:
            payload = jwt.decode(
                token,
                settings.JWT_SECRET_KEY,
                algorithms=[settings.JWT_ALGORITHM],
                audience=settings.JWT_AUDIENCE,
                options={"require": ["sub", "exp"]},
            )
        except jwt.ExpiredSignatureError:
            return None
        except jwt.InvalidTokenError:
            return None

        return payload

    @staticmethod
    def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
        """Extract the token from an `Authorization: Bearer <token>` header value"""
        if not authorization:
            return None
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            return None
        return token.strip()

    @staticmethod
    def verify_service_key(provided: Optional[str]) -> bool:
        if not provided:
            return False
        return hmac.compare_digest(provided, settings.SERVICE_ROLE_KEY)
