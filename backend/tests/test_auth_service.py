"""
Unit tests for AuthService.

Tests registration, password login and bearer resolution, using a mocked
repository and a real TokenService.
"""

from unittest.mock import AsyncMock, Mock

import pytest
from structlog.testing import capture_logs

from src.core.exceptions import (
    AuthenticationError,
    DuplicateIdentityError,
    InvalidInputError,
    TokenExpiredError,
    UnauthorizedError,
)
from src.models.user import User
from src.services.auth_service import AuthService
from src.services.password import hash_password
from src.services.token_service import TokenService

# ===== Fixtures =====


@pytest.fixture
def sample_user():
    """Stored user whose password is 'SecureP@ssw0rd'"""
    return User(
        user_id="user_abc123def456",
        name="Ada Lovelace",
        email="ada@example.com",
        password_hash=hash_password("SecureP@ssw0rd", rounds=4),
    )


@pytest.fixture
def mock_user_repo(sample_user):
    """Mock UserRepository"""
    repo = Mock()
    repo.create = AsyncMock(return_value=sample_user)
    repo.get_by_email = AsyncMock(return_value=sample_user)
    repo.get_by_id = AsyncMock(return_value=sample_user)
    return repo


@pytest.fixture
def token_service():
    return TokenService("test-secret-key")


@pytest.fixture
def auth_service(mock_user_repo, token_service):
    return AuthService(mock_user_repo, token_service)


# ===== Register Tests =====


class TestRegister:
    """Test user registration"""

    @pytest.mark.asyncio
    async def test_register_success(self, auth_service, mock_user_repo, token_service):
        """Test register joins the name and returns a verifiable token"""
        # Act
        user, token = await auth_service.register(
            "Ada", "Lovelace", "ada@example.com", "SecureP@ssw0rd"
        )

        # Assert
        user_create = mock_user_repo.create.call_args[0][0]
        assert user_create.name == "Ada Lovelace"
        assert user_create.email == "ada@example.com"
        assert token_service.verify(token) == user.user_id

    @pytest.mark.asyncio
    async def test_register_missing_fields(self, auth_service, mock_user_repo):
        """Test every blank field is reported and nothing is created"""
        # Act & Assert
        with pytest.raises(InvalidInputError) as exc_info:
            await auth_service.register("Ada", "", None, "pw")

        assert "lastName" in exc_info.value.message
        assert "email" in exc_info.value.message
        mock_user_repo.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, auth_service, mock_user_repo):
        """Test duplicate identity from the store propagates"""
        # Arrange
        mock_user_repo.create.side_effect = DuplicateIdentityError("User already exists")

        # Act & Assert
        with pytest.raises(DuplicateIdentityError):
            await auth_service.register("Ada", "Lovelace", "ada@example.com", "pw")

    @pytest.mark.asyncio
    async def test_register_overlong_password(self, auth_service, mock_user_repo):
        """Test passwords past the bcrypt limit are invalid input"""
        with pytest.raises(InvalidInputError):
            await auth_service.register("Ada", "Lovelace", "ada@example.com", "x" * 73)

        mock_user_repo.create.assert_not_called()


# ===== Login Tests =====


class TestLogin:
    """Test password login"""

    @pytest.mark.asyncio
    async def test_login_success(self, auth_service, sample_user, token_service):
        """Test correct credentials return the user and a token"""
        # Act
        user, token = await auth_service.login("ada@example.com", "SecureP@ssw0rd")

        # Assert
        assert user is sample_user
        assert token_service.verify(token) == sample_user.user_id

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, auth_service):
        """Test wrong password is rejected with a generic message"""
        with pytest.raises(AuthenticationError) as exc_info:
            await auth_service.login("ada@example.com", "wrong")

        assert exc_info.value.message == "Invalid credentials"

    @pytest.mark.asyncio
    async def test_login_unknown_email(self, auth_service, mock_user_repo):
        """Test unknown email gets the same error as a wrong password"""
        # Arrange
        mock_user_repo.get_by_email.return_value = None

        # Act & Assert
        with pytest.raises(AuthenticationError) as exc_info:
            await auth_service.login("nobody@example.com", "SecureP@ssw0rd")

        assert exc_info.value.message == "Invalid credentials"

    @pytest.mark.asyncio
    async def test_failed_login_does_not_log_email(self, auth_service):
        """Test the failed-attempt event carries no email address"""
        with capture_logs() as logs:
            with pytest.raises(AuthenticationError):
                await auth_service.login("ada@example.com", "wrong")

        failed = [e for e in logs if e["event"] == "Failed login attempt"]
        assert len(failed) == 1
        assert "ada@example.com" not in str(failed[0])

    @pytest.mark.asyncio
    async def test_login_missing_fields(self, auth_service):
        """Test blank email or password is invalid input"""
        with pytest.raises(InvalidInputError):
            await auth_service.login("", "pw")


# ===== Bearer Resolution Tests =====


class TestResolveBearer:
    """Test Authorization header resolution"""

    @pytest.mark.asyncio
    async def test_valid_bearer(self, auth_service, token_service, sample_user):
        """Test a valid token resolves to the stored user"""
        token = token_service.issue(sample_user.user_id)

        user = await auth_service.resolve_bearer(f"Bearer {token}")

        assert user is sample_user

    @pytest.mark.asyncio
    async def test_scheme_is_case_insensitive(self, auth_service, token_service):
        """Test 'bearer' in lower case is accepted"""
        token = token_service.issue("user_abc123def456")

        user = await auth_service.resolve_bearer(f"bearer {token}")

        assert user.user_id == "user_abc123def456"

    @pytest.mark.asyncio
    async def test_missing_header(self, auth_service):
        """Test missing header is unauthorized"""
        with pytest.raises(UnauthorizedError) as exc_info:
            await auth_service.resolve_bearer(None)

        assert exc_info.value.message == "Access token required"
        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    @pytest.mark.parametrize("header", ["Token abc", "Bearer", "Bearer a b"])
    async def test_malformed_header(self, auth_service, header):
        """Test headers not shaped 'Bearer <token>' are unauthorized"""
        with pytest.raises(UnauthorizedError):
            await auth_service.resolve_bearer(header)

    @pytest.mark.asyncio
    async def test_expired_token_keeps_cause(self, auth_service):
        """Test an expired token is unauthorized with the expiry as cause"""
        token = TokenService("test-secret-key", expire_days=-1).issue("user_1")

        with pytest.raises(UnauthorizedError) as exc_info:
            await auth_service.resolve_bearer(f"Bearer {token}")

        assert isinstance(exc_info.value.__cause__, TokenExpiredError)
        assert exc_info.value.context["reason"] == "token_expired"

    @pytest.mark.asyncio
    async def test_deleted_user(self, auth_service, token_service, mock_user_repo):
        """Test a valid token for a removed user is unauthorized"""
        mock_user_repo.get_by_id.return_value = None
        token = token_service.issue("user_gone")

        with pytest.raises(UnauthorizedError) as exc_info:
            await auth_service.resolve_bearer(f"Bearer {token}")

        assert exc_info.value.message == "User not found"
