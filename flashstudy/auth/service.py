"""
Authentication service - JWT verification.

Users sign in with the external identity provider, which issues access
tokens signed with the shared secret. This service only decodes them.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

from jose import JWTError, jwt

from flashstudy.auth.schemas import AuthenticatedUser, TokenPayload
from flashstudy.config import get_settings
from flashstudy.core.exceptions import InvalidTokenError

logger = logging.getLogger(__name__)
settings = get_settings()


class AuthService:
    """Service for token operations."""

    def __init__(self, secret_key: Optional[str] = None, algorithm: Optional[str] = None):
        self.secret_key = secret_key or settings.jwt_secret_key
        self.algorithm = algorithm or settings.jwt_algorithm

    def create_access_token(
        self,
        user_id: str,
        features: Iterable[str] = (),
        expires_delta: timedelta = timedelta(hours=1),
    ) -> str:
        """
        Create a signed access token.

        Used by local tooling and tests to stand in for the identity provider.

        Args:
            user_id: Subject of the token
            features: Plan features to grant
            expires_delta: Token lifetime

        Returns:
            Encoded JWT string
        """
        expire = datetime.now(timezone.utc) + expires_delta
        payload = {
            "sub": user_id,
            "exp": expire,
            "features": list(features),
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify_token(self, token: str) -> TokenPayload:
        """
        Verify and decode a JWT token.

        Args:
            token: JWT token string

        Returns:
            TokenPayload with decoded data

        Raises:
            InvalidTokenError: If token is invalid or expired
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
            )
        except JWTError as e:
            logger.warning(f"[AuthService] Token verification failed: {e}")
            raise InvalidTokenError("Invalid or expired token")

        if not payload.get("sub"):
            raise InvalidTokenError("Token has no subject")

        features = payload.get("features") or []
        if not isinstance(features, list):
            raise InvalidTokenError("Malformed features claim")

        exp = payload.get("exp")
        return TokenPayload(
            sub=str(payload["sub"]),
            exp=datetime.fromtimestamp(exp, tz=timezone.utc) if exp else None,
            features=[str(f) for f in features],
        )

    def authenticate(self, token: str) -> AuthenticatedUser:
        """Resolve a bearer token to the calling user."""
        payload = self.verify_token(token)
        return AuthenticatedUser(id=payload.sub, features=payload.features)


def get_auth_service() -> AuthService:
    """Factory function for AuthService."""
    return AuthService()
