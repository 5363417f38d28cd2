"""
Pytest configuration and shared fixtures.

Settings are read from the environment when linkup is first imported, so the
test environment is set up here before any application import.
"""
import os
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="linkup-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ["UPLOAD_DIRECTORY"] = os.path.join(_TMP_DIR, "uploads")
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["REFRESH_SECRET_KEY"] = "test-refresh-secret-key"
os.environ["BASE_URL"] = "http://testserver"
os.environ["HF_TOKEN"] = ""
os.environ["SENDGRID_API_KEY"] = ""
os.environ["R2_ENDPOINT"] = ""
os.environ["R2_ACCESS_KEY_ID"] = ""
os.environ["R2_SECRET_ACCESS_KEY"] = ""
os.environ["R2_PUBLIC_URL"] = ""

import pytest
from fastapi.testclient import TestClient

from linkup.db.base import Base
from linkup.db.session import SessionLocal, engine
from linkup.main import app
from linkup.modules.user_management.models.user import ROLE_ADMIN, User

PASSWORD = "Secret123!"
JPEG = ("photo.jpg", b"\xff\xd8\xff\xe0fake-jpeg-bytes", "image/jpeg")


@pytest.fixture(scope="function")
def client():
    """Create test client with fresh database for each test."""
    Base.metadata.create_all(bind=engine)

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def register(client):
    """Register a user through the API and return its id, token and auth headers."""

    def _register(username: str, email: str = None, password: str = PASSWORD, private: bool = False) -> dict:
        response = client.post(
            "/api/auth/register",
            json={
                "username": username,
                "email": email or f"{username}@example.com",
                "password": password,
            },
        )
        assert response.status_code == 201, response.text
        data = response.json()
        user = {
            "id": data["user"]["id"],
            "username": username,
            "email": data["user"]["email"],
            "token": data["access_token"],
            "refresh_token": data["refresh_token"],
            "headers": {"Authorization": f"Bearer {data['access_token']}"},
        }
        if private:
            response = client.put("/api/profile/privacy", json={"is_private": True}, headers=user["headers"])
            assert response.status_code == 200, response.text
        return user

    return _register


@pytest.fixture
def make_admin(db):
    def _make_admin(user_id: str) -> None:
        user = db.query(User).filter(User.id == user_id).first()
        user.role = ROLE_ADMIN
        db.commit()

    return _make_admin


@pytest.fixture
def create_post(client):
    def _create_post(user: dict, content: str = "Hello LinkUp") -> dict:
        response = client.post("/api/posts", data={"content": content}, headers=user["headers"])
        assert response.status_code == 201, response.text
        return response.json()

    return _create_post


@pytest.fixture
def create_story(client):
    def _create_story(user: dict) -> dict:
        response = client.post("/api/stories", files={"media": JPEG}, headers=user["headers"])
        assert response.status_code == 201, response.text
        return response.json()

    return _create_story


@pytest.fixture
def follow(client):
    def _follow(follower: dict, followee: dict) -> dict:
        response = client.post(f"/api/profile/follow/{followee['id']}", headers=follower["headers"])
        assert response.status_code == 201, response.text
        return response.json()

    return _follow
