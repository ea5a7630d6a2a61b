"""
FastAPI dependencies for dependency injection.
Provides the authenticated caller and shared resources.
"""

import logging
from typing import Annotated, AsyncGenerator, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from openai import AsyncOpenAI

from flashstudy.auth.schemas import AuthenticatedUser
from flashstudy.auth.service import AuthService, get_auth_service
from flashstudy.config import get_settings
from flashstudy.core.exceptions import InvalidTokenError, unauthorized
from flashstudy.study.store import StudySessionStore

logger = logging.getLogger(__name__)

# HTTP Bearer token scheme
security = HTTPBearer(auto_error=False)


async def get_current_user(
        credentials: Annotated[
            Optional[HTTPAuthorizationCredentials],
            Depends(security)
        ],
        auth_service: AuthService = Depends(get_auth_service),
) -> AuthenticatedUser:
    """
    Dependency to get the current authenticated user.

    Extracts JWT from Authorization header and validates it.

    Raises:
        HTTPException: If authentication fails
    """
    if not credentials:
        raise unauthorized()

    try:
        return auth_service.authenticate(credentials.credentials)
    except InvalidTokenError as e:
        raise unauthorized(e.message)


def get_study_store(request: Request) -> StudySessionStore:
    """The study session store owned by the running application."""
    return request.app.state.study_store


# Type aliases for cleaner dependency injection
CurrentUser = Annotated[AuthenticatedUser, Depends(get_current_user)]
StudyStore = Annotated[StudySessionStore, Depends(get_study_store)]


async def get_openai_client() -> AsyncGenerator[AsyncOpenAI, None]:
    """
    Provides an OpenAI client instance.
    Closed when the request finishes.
    """
    settings = get_settings()
    client = AsyncOpenAI(
        api_key=settings.openai_api_key,
        timeout=settings.openai_timeout_seconds,
    )
    try:
        yield client
    finally:
        await client.close()


OpenAIClient = Annotated[AsyncOpenAI, Depends(get_openai_client)]
