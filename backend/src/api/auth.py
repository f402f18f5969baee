"""
Authentication API endpoints.
Email/password registration and login issuing JWT bearer tokens.
"""

from fastapi import APIRouter, Depends, Request

from ..services.auth_service import AuthService
from .dependencies.auth import get_auth_service
from .dependencies.rate_limit import AUTH_LIMIT, limiter
from .schemas.auth_schemas import AuthResponse, LoginRequest, RegisterRequest

router = APIRouter(prefix="/api/auth", tags=["authentication"])


@router.post("/register", response_model=AuthResponse, status_code=201)
@limiter.limit(AUTH_LIMIT)
async def register_user(
    request: Request,
    payload: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """
    Register a new user with email and password.

    Returns a bearer token so the client is signed in immediately.

    Raises:
        InvalidInputError: 400 if any field is missing
        DuplicateIdentityError: 400 if the email is already registered
    """
    user, token = await auth_service.register(
        first_name=payload.first_name,
        last_name=payload.last_name,
        email=payload.email,
        password=payload.password,
    )

    return AuthResponse(
        user_id=user.user_id,
        token=token,
        message="User registered successfully",
    )


@router.post("/login", response_model=AuthResponse)
@limiter.limit(AUTH_LIMIT)
async def login_with_password(
    request: Request,
    payload: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """
    Login with email and password.

    Raises:
        InvalidInputError: 400 if email or password is missing
        AuthenticationError: 401 if credentials don't match
    """
    user, token = await auth_service.login(payload.email, payload.password)

    return AuthResponse(
        user_id=user.user_id,
        token=token,
        message="Login successful",
    )
