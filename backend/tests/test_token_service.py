"""
Unit tests for TokenService and signing key resolution.

Tests:
- Issued tokens verify to the same user
- Expired, tampered and subject-less tokens are rejected
- Secret key fallback and fail-closed behavior
"""

from datetime import timedelta
from unittest.mock import Mock

import pytest
from jose import jwt

from src.core.exceptions import (
    AuthenticationError,
    ConfigurationError,
    InvalidTokenError,
    TokenExpiredError,
)
from src.core.utils.date_utils import utcnow
from src.services.token_service import (
    DEFAULT_SECRET_KEY,
    TokenService,
    resolve_secret_key,
)

# ===== Fixtures =====


@pytest.fixture
def token_service():
    """TokenService with a test key"""
    return TokenService("test-secret-key")


def make_settings(secret_key=None, environment="development", require_secret_key=False):
    settings = Mock()
    settings.secret_key = secret_key
    settings.environment = environment
    settings.is_production = environment == "production"
    settings.require_secret_key = require_secret_key
    return settings


# ===== Issue / Verify Tests =====


class TestIssueAndVerify:
    """Test token round trip"""

    def test_issued_token_verifies(self, token_service):
        """Test verify returns the user bound at issue"""
        token = token_service.issue("user_abc123def456")

        assert token_service.verify(token) == "user_abc123def456"

    def test_token_expires_after_seven_days(self, token_service):
        """Test default expiry is 7 days after issue"""
        token = token_service.issue("user_1")

        claims = jwt.get_unverified_claims(token)
        assert claims["sub"] == "user_1"
        assert claims["exp"] - claims["iat"] == int(timedelta(days=7).total_seconds())

    def test_expired_token_rejected(self):
        """Test a token past its expiry raises TokenExpiredError"""
        service = TokenService("test-secret-key", expire_days=-1)
        token = service.issue("user_1")

        with pytest.raises(TokenExpiredError) as exc_info:
            service.verify(token)

        assert exc_info.value.message == "Token has expired"
        assert exc_info.value.status_code == 401

    def test_wrong_key_rejected(self, token_service):
        """Test a token signed with another key is invalid"""
        token = TokenService("other-key").issue("user_1")

        with pytest.raises(InvalidTokenError):
            token_service.verify(token)

    def test_garbage_token_rejected(self, token_service):
        """Test a malformed token is invalid"""
        with pytest.raises(InvalidTokenError):
            token_service.verify("not-a-jwt")

    def test_missing_subject_rejected(self, token_service):
        """Test a validly signed token without sub is invalid"""
        now = utcnow()
        token = jwt.encode(
            {"iat": now, "exp": now + timedelta(days=1)},
            "test-secret-key",
            algorithm="HS256",
        )

        with pytest.raises(InvalidTokenError):
            token_service.verify(token)

    def test_token_errors_are_authentication_errors(self, token_service):
        """Test both token failures share the 401 base class"""
        assert issubclass(TokenExpiredError, AuthenticationError)
        assert issubclass(InvalidTokenError, AuthenticationError)


# ===== Secret Key Resolution Tests =====


class TestResolveSecretKey:
    """Test signing key selection"""

    def test_configured_key_used(self):
        """Test an explicit key wins"""
        assert resolve_secret_key(make_settings(secret_key="s3cret")) == "s3cret"

    def test_development_falls_back_to_default(self):
        """Test development uses the fixed default key"""
        assert resolve_secret_key(make_settings()) == DEFAULT_SECRET_KEY

    def test_production_fails_closed(self):
        """Test production refuses to start without a key"""
        with pytest.raises(ConfigurationError):
            resolve_secret_key(make_settings(environment="production"))

    def test_required_key_fails_closed(self):
        """Test REQUIRE_SECRET_KEY refuses the default in any environment"""
        with pytest.raises(ConfigurationError):
            resolve_secret_key(make_settings(require_secret_key=True))
