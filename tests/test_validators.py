"""
Tests for the shared field validators.
"""
import pytest

from linkup.core.validators import (
    normalize_email,
    validate_email,
    validate_highlight_title,
    validate_image_url,
    validate_password,
    validate_username,
    validate_verification_code,
)


class TestUsername:
    @pytest.mark.parametrize("username", ["bob", "alice_99", "A" * 20])
    def test_valid(self, username):
        assert validate_username(username)

    @pytest.mark.parametrize("username", ["", "ab", "A" * 21, "has space", "dash-name", "émile", None])
    def test_invalid(self, username):
        assert not validate_username(username)


class TestEmail:
    def test_valid(self):
        assert validate_email("someone@example.com")

    @pytest.mark.parametrize("email", ["", "plain", "no@tld", "two@@example.com", "spa ce@example.com"])
    def test_invalid(self, email):
        assert not validate_email(email)

    def test_gmail_dots_are_ignored(self):
        assert normalize_email("John.Doe@Gmail.com") == normalize_email("johndoe@gmail.com")

    def test_dots_kept_for_other_domains(self):
        assert normalize_email("john.doe@example.com") == "john.doe@example.com"


class TestPassword:
    def test_valid(self):
        assert validate_password("Secret123!")

    @pytest.mark.parametrize(
        "password",
        [
            "Sh0rt!",          # too short
            "alllower123!",    # no uppercase
            "ALLUPPER123!",    # no lowercase
            "NoDigits!!",      # no digit
            "NoSpecial123",    # no special character
            "Bad#Char123",     # character outside the allowed set
        ],
    )
    def test_invalid(self, password):
        assert not validate_password(password)


def test_highlight_title_bounds():
    assert validate_highlight_title("ab")
    assert validate_highlight_title("x" * 50)
    assert not validate_highlight_title("a")
    assert not validate_highlight_title("x" * 51)
    assert not validate_highlight_title("   ")


def test_image_url():
    assert validate_image_url("https://cdn.example.com/pic.JPG")
    assert validate_image_url("http://cdn.example.com/pic.webp?size=large")
    assert not validate_image_url("https://cdn.example.com/pic.gif")
    assert not validate_image_url("ftp://cdn.example.com/pic.png")


def test_verification_code():
    assert validate_verification_code("0421")
    assert not validate_verification_code("042")
    assert not validate_verification_code("04a1")
