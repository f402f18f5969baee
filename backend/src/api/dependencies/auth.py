"""
Shared authentication dependencies for all API endpoints.

Long-lived collaborators (repository, token service) are created once in the
application lifespan and read from app state here.
"""

from fastapi import Depends, Header, Request

from ...database.repositories.user_repository import UserRepository
from ...models.user import User
from ...services.auth_service import AuthService
from ...services.token_service import TokenService

def get_user_repository(request: Request) -> UserRepository:
    """Get the user repository created at startup."""
    user_repo: UserRepository = request.app.state.user_repository
    return user_repo


def get_token_service(request: Request) -> TokenService:
    """Get the token service created at startup."""
    token_service: TokenService = request.app.state.token_service
    return token_service


def get_auth_service(
    user_repo: UserRepository = Depends(get_user_repository),
    token_service: TokenService = Depends(get_token_service),
) -> AuthService:
    """Get auth service instance."""
    return AuthService(user_repo, token_service)


async def get_current_user(
    authorization: str | None = Header(None),
    auth_service: AuthService = Depends(get_auth_service),
) -> User:
    """
    Resolve the Authorization header to the authenticated user.

    Args:
        authorization: Authorization header (Bearer token)
        auth_service: Auth service for token verification

    Returns:
        Full User object, passed explicitly to the handler

    Raises:
        UnauthorizedError: If the header is missing/malformed, the token is
            invalid or expired, or the user no longer exists (401)
    """
    return await auth_service.resolve_bearer(authorization)
