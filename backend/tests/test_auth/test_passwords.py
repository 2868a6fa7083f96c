"""Unit tests for password hashing and verification."""

from hotel_booking.auth.passwords import hash_password, verify_password


class TestHashPassword:
    def test_hash_returns_string(self):
        assert isinstance(hash_password("mypassword"), str)

    def test_hash_differs_from_plaintext(self):
        assert hash_password("mypassword") != "mypassword"

    def test_same_password_different_salts(self):
        assert hash_password("samepassword") != hash_password("samepassword")

    def test_long_password_is_accepted(self):
        hashed = hash_password("x" * 100)
        assert verify_password("x" * 100, hashed)


class TestVerifyPassword:
    def test_correct_password(self):
        hashed = hash_password("correct-horse")
        assert verify_password("correct-horse", hashed) is True

    def test_wrong_password(self):
        hashed = hash_password("correct-horse")
        assert verify_password("battery-staple", hashed) is False

    def test_missing_hash_never_verifies(self):
        """Walk-in guests have no password at all."""
        assert verify_password("anything", None) is False
        assert verify_password("anything", "") is False
