"""Tests for auth utility functions."""
import pytest
from datetime import timedelta


class TestPasswordHashing:
    """Tests for password hashing functions."""

    def test_hash_password(self):
        """Test password hashing produces salted bcrypt hashes."""
        from app.utils.auth import hash_password

        hashed = hash_password("mysecretpassword123")

        assert hashed.startswith("$2b$")
        assert hashed != hash_password("mysecretpassword123")

    def test_verify_password(self):
        """Test password verification with correct and incorrect passwords."""
        from app.utils.auth import hash_password, verify_password

        hashed = hash_password("mysecretpassword123")

        assert verify_password("mysecretpassword123", hashed) is True
        assert verify_password("wrongpassword", hashed) is False
        assert verify_password("", hashed) is False


class TestJWTTokens:
    """Tests for JWT token functions."""

    def test_round_trip(self):
        """Test a token decodes back to the user it was issued for."""
        from app.utils.auth import create_access_token, verify_access_token

        token = create_access_token(user_id="user123")

        assert verify_access_token(token) == "user123"

    def test_expired_token(self):
        """Test an expired token is rejected."""
        from jose import JWTError

        from app.utils.auth import create_access_token, verify_access_token

        token = create_access_token(user_id="user123", expires_delta=timedelta(seconds=-1))

        with pytest.raises(JWTError):
            verify_access_token(token)

    def test_tampered_token(self):
        """Test a token signed with another key is rejected."""
        from jose import JWTError, jwt

        from app.utils.auth import verify_access_token

        token = jwt.encode({"sub": "user123"}, "some-other-secret", algorithm="HS256")

        with pytest.raises(JWTError):
            verify_access_token(token)

    def test_token_without_subject(self):
        """Test a token with no sub claim is rejected."""
        from jose import JWTError, jwt

        from app.config import settings
        from app.utils.auth import verify_access_token

        token = jwt.encode({"foo": "bar"}, settings.jwt_secret, algorithm=settings.jwt_algorithm)

        with pytest.raises(JWTError):
            verify_access_token(token)
