"""
Unit tests for password hashing utilities.
"""

import pytest

from src.services.password import MAX_PASSWORD_BYTES, hash_password, verify_password


class TestPasswordHashing:
    """Test bcrypt hashing and verification"""

    def test_hash_and_verify(self):
        """Test a hashed password verifies"""
        password_hash = hash_password("correct horse", rounds=4)

        assert password_hash.startswith("$2")
        assert verify_password("correct horse", password_hash) is True

    def test_wrong_password_rejected(self):
        """Test a different password does not verify"""
        password_hash = hash_password("correct horse", rounds=4)

        assert verify_password("battery staple", password_hash) is False

    def test_same_password_different_salts(self):
        """Test hashing twice yields different hashes"""
        assert hash_password("pw", rounds=4) != hash_password("pw", rounds=4)

    def test_overlong_password_rejected(self):
        """Test passwords past the bcrypt input limit are refused"""
        with pytest.raises(ValueError):
            hash_password("x" * (MAX_PASSWORD_BYTES + 1), rounds=4)

    def test_overlong_password_never_verifies(self):
        """Test verification of an overlong password returns False"""
        password_hash = hash_password("x" * MAX_PASSWORD_BYTES, rounds=4)

        assert verify_password("x" * (MAX_PASSWORD_BYTES + 1), password_hash) is False
