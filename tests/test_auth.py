"""
Tests for the /api/auth endpoints.
"""
from linkup.core import security
from linkup.core.email import EmailService, get_email_service
from linkup.core.validators import PASSWORD_MESSAGE, USERNAME_MESSAGE
from linkup.main import app

from tests.conftest import PASSWORD


def register_payload(**overrides):
    payload = {"username": "alice", "email": "alice@example.com", "password": PASSWORD}
    payload.update(overrides)
    return payload


class RecordingEmailService(EmailService):
    """Captures reset codes instead of calling SendGrid."""

    def __init__(self):
        super().__init__(api_key="test-key")
        self.codes = {}

    async def send_password_reset_code(self, to: str, code: str) -> bool:
        self.codes[to] = code
        return True


class TestRegister:
    def test_register_returns_token(self, client):
        response = client.post("/api/auth/register", json=register_payload())

        assert response.status_code == 201
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["user"]["username"] == "alice"
        assert data["user"]["role"] == "USER"
        assert "hashed_password" not in data["user"]
        assert security.decode_token(data["access_token"]) == data["user"]["id"]

    def test_signup_alias(self, client):
        response = client.post("/api/auth/signup", json=register_payload())
        assert response.status_code == 201

    def test_duplicate_username(self, client):
        client.post("/api/auth/register", json=register_payload())
        response = client.post("/api/auth/register", json=register_payload(email="other@example.com"))

        assert response.status_code == 400
        assert response.json()["detail"] == "Username is already taken"

    def test_duplicate_email(self, client):
        client.post("/api/auth/register", json=register_payload())
        response = client.post("/api/auth/register", json=register_payload(username="alice2"))

        assert response.status_code == 400
        assert response.json()["detail"] == "Email is already registered"

    def test_duplicate_caught_by_unique_constraint(self, client, monkeypatch):
        client.post("/api/auth/register", json=register_payload())
        # Simulate a concurrent request that passed the lookups before the first insert committed
        monkeypatch.setattr("linkup.modules.auth.api.router.is_username_taken", lambda *args, **kwargs: False)
        monkeypatch.setattr("linkup.modules.auth.api.router.is_email_taken", lambda *args, **kwargs: False)

        response = client.post("/api/auth/register", json=register_payload())

        assert response.status_code == 400
        assert response.json()["detail"] == "Username or email is already registered"

    def test_gmail_dot_variant_is_duplicate(self, client):
        client.post("/api/auth/register", json=register_payload(email="john.doe@gmail.com"))
        response = client.post(
            "/api/auth/register",
            json=register_payload(username="john2", email="johndoe@gmail.com"),
        )
        assert response.status_code == 400

    def test_weak_password(self, client):
        response = client.post("/api/auth/register", json=register_payload(password="password"))

        assert response.status_code == 400
        data = response.json()
        assert data["message"] == "Validation failed"
        assert {"field": "password", "msg": PASSWORD_MESSAGE} in data["errors"]

    def test_invalid_username(self, client):
        response = client.post("/api/auth/register", json=register_payload(username="no spaces allowed"))

        assert response.status_code == 400
        assert response.json()["errors"][0]["msg"] == USERNAME_MESSAGE

    def test_welcome_notification(self, client, register):
        user = register("alice")
        response = client.get("/api/notifications", headers=user["headers"])

        assert response.status_code == 200
        items = response.json()["items"]
        assert [item["type"] for item in items] == ["WELCOME"]


class TestLogin:
    def test_login_with_username(self, client, register):
        user = register("alice")
        response = client.post("/api/auth/login", json={"username_or_email": "alice", "password": PASSWORD})

        assert response.status_code == 200
        assert security.decode_token(response.json()["access_token"]) == user["id"]

    def test_login_with_email_ignores_case(self, client, register):
        register("alice")
        response = client.post(
            "/api/auth/login",
            json={"username_or_email": "ALICE@example.com", "password": PASSWORD},
        )
        assert response.status_code == 200

    def test_wrong_password(self, client, register):
        register("alice")
        response = client.post("/api/auth/login", json={"username_or_email": "alice", "password": "Wrong123!"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid credentials"

    def test_unknown_user(self, client):
        response = client.post("/api/auth/login", json={"username_or_email": "ghost", "password": PASSWORD})
        assert response.status_code == 401


class TestTokens:
    def test_protected_route_requires_token(self, client):
        response = client.get("/api/profile")

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"

    def test_invalid_token(self, client):
        response = client.get("/api/profile", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    def test_refresh_token_is_not_an_access_token(self, client, register):
        user = register("alice")
        response = client.get(
            "/api/profile",
            headers={"Authorization": f"Bearer {user['refresh_token']}"},
        )
        assert response.status_code == 401

    def test_validate_token(self, client, register):
        user = register("alice")
        response = client.get("/api/auth/validate-token", headers=user["headers"])

        assert response.status_code == 200
        assert response.json()["valid"] is True
        assert response.json()["user_id"] == user["id"]

    def test_refresh_rotates_tokens(self, client, register):
        user = register("alice")
        response = client.post("/api/auth/refresh", json={"refresh_token": user["refresh_token"]})

        assert response.status_code == 200
        new_refresh = response.json()["refresh_token"]
        assert new_refresh != user["refresh_token"]

        # the previous refresh token is no longer accepted
        response = client.post("/api/auth/refresh", json={"refresh_token": user["refresh_token"]})
        assert response.status_code == 401

    def test_logout_revokes_refresh_token(self, client, register):
        user = register("alice")
        assert client.post("/api/auth/logout", headers=user["headers"]).status_code == 200

        response = client.post("/api/auth/refresh", json={"refresh_token": user["refresh_token"]})
        assert response.status_code == 401


class TestPasswordReset:
    def test_full_reset_flow(self, client, register):
        register("alice")
        mailer = RecordingEmailService()
        app.dependency_overrides[get_email_service] = lambda: mailer

        response = client.post("/api/auth/forgot-password", json={"email": "alice@example.com"})
        assert response.status_code == 200
        assert response.json()["code_sent"] is True
        code = mailer.codes["alice@example.com"]

        response = client.post("/api/auth/verify-code", json={"email": "alice@example.com", "code": code})
        assert response.status_code == 200
        reset_token = response.json()["reset_token"]

        response = client.post(
            "/api/auth/reset-password",
            json={"reset_token": reset_token, "new_password": "NewSecret1!"},
        )
        assert response.status_code == 200

        response = client.post(
            "/api/auth/login",
            json={"username_or_email": "alice", "password": "NewSecret1!"},
        )
        assert response.status_code == 200

        # reset tokens are single use
        response = client.post(
            "/api/auth/reset-password",
            json={"reset_token": reset_token, "new_password": "Another1!x"},
        )
        assert response.status_code == 401

    def test_unknown_email_gets_same_message(self, client, register):
        register("alice")
        mailer = RecordingEmailService()
        app.dependency_overrides[get_email_service] = lambda: mailer

        known = client.post("/api/auth/forgot-password", json={"email": "alice@example.com"}).json()
        unknown = client.post("/api/auth/forgot-password", json={"email": "nobody@example.com"}).json()

        assert known["message"] == unknown["message"]
        assert unknown["code_sent"] is False
        assert "nobody@example.com" not in mailer.codes

    def test_wrong_code(self, client, register):
        register("alice")
        mailer = RecordingEmailService()
        app.dependency_overrides[get_email_service] = lambda: mailer
        client.post("/api/auth/forgot-password", json={"email": "alice@example.com"})

        wrong = "0000" if mailer.codes["alice@example.com"] != "0000" else "1111"
        response = client.post("/api/auth/verify-code", json={"email": "alice@example.com", "code": wrong})
        assert response.status_code == 400

    def test_malformed_code(self, client):
        response = client.post("/api/auth/verify-code", json={"email": "alice@example.com", "code": "12"})
        assert response.status_code == 400
