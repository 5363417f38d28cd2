"""
Tests for the /api/admin moderation endpoints.
"""
import pytest

from linkup.modules.admin.models.audit_log import AuditLog


@pytest.fixture
def admin(register, make_admin):
    user = register("moderator")
    make_admin(user["id"])
    return user


def act(client, admin, **body):
    return client.post("/api/admin/actions", json=body, headers=admin["headers"])


def test_admin_routes_require_admin_role(client, register):
    alice = register("alice")
    assert client.get("/api/admin/reports", headers=alice["headers"]).status_code == 403
    assert client.get("/api/admin/users").status_code == 401


def test_pending_reports(client, register, admin, create_post):
    alice, bob = register("alice"), register("bob")
    post = create_post(alice)
    client.post(f"/api/posts/{post['id']}/report", json={"reason": "HARASSMENT"}, headers=bob["headers"])

    reports = client.get("/api/admin/reports", headers=admin["headers"]).json()

    assert len(reports) == 1
    assert reports[0]["post"]["id"] == post["id"]
    assert reports[0]["reporter"]["username"] == "bob"
    assert reports[0]["reason"] == "HARASSMENT"


def test_list_and_read_users(client, register, admin, create_post):
    alice = register("alice")
    create_post(alice)

    page = client.get("/api/admin/users", headers=admin["headers"]).json()
    assert page["total"] == 2

    detail = client.get(f"/api/admin/users/{alice['id']}", headers=admin["headers"]).json()
    assert detail["post_count"] == 1
    assert detail["is_banned"] is False


def test_delete_post_writes_audit_log(client, register, admin, create_post, db):
    alice = register("alice")
    post = create_post(alice)

    response = act(client, admin, action_type="DELETE_POST", reason="spam", post_id=post["id"])

    assert response.status_code == 200
    assert response.json()["audit_log"]["action"] == "DELETE_POST"
    assert client.get(f"/api/posts/{post['id']}", headers=alice["headers"]).status_code == 404
    assert db.query(AuditLog).filter(AuditLog.target_id == post["id"]).count() == 1


def test_admin_can_delete_any_post_directly(client, register, admin, create_post, db):
    alice = register("alice")
    post = create_post(alice)

    assert client.delete(f"/api/posts/{post['id']}", headers=admin["headers"]).status_code == 200
    entry = db.query(AuditLog).filter(AuditLog.target_id == post["id"]).one()
    assert entry.action == "DELETE_POST"


def test_warn_user_sends_notification(client, register, admin):
    alice = register("alice")

    response = act(client, admin, action_type="WARN_USER", reason="Be kind", user_id=alice["id"])

    assert response.status_code == 200
    items = client.get("/api/notifications", headers=alice["headers"]).json()["items"]
    warning = [item for item in items if item["type"] == "ADMIN_WARNING"]
    assert len(warning) == 1
    assert "Be kind" in warning[0]["content"]


def test_ban_and_unban(client, register, admin):
    alice = register("alice")

    assert act(client, admin, action_type="BAN_USER", reason="abuse", user_id=alice["id"]).status_code == 200
    assert client.get("/api/profile", headers=alice["headers"]).status_code == 401
    response = client.post("/api/auth/login", json={"username_or_email": "alice", "password": "Secret123!"})
    assert response.status_code == 403

    assert act(client, admin, action_type="UNBAN_USER", reason="appeal", user_id=alice["id"]).status_code == 200
    response = client.post("/api/auth/login", json={"username_or_email": "alice", "password": "Secret123!"})
    assert response.status_code == 200


def test_dismiss_report(client, register, admin, create_post):
    alice, bob = register("alice"), register("bob")
    post = create_post(alice)
    client.post(f"/api/posts/{post['id']}/report", json={"reason": "SPAM"}, headers=bob["headers"])

    response = act(client, admin, action_type="DISMISS_REPORT", reason="not spam", post_id=post["id"])

    assert response.status_code == 200
    assert client.get("/api/admin/reports", headers=admin["headers"]).json() == []


def test_action_requires_target(client, admin):
    response = act(client, admin, action_type="BAN_USER", reason="abuse")
    assert response.status_code == 400


def test_admin_cannot_ban_self(client, admin):
    response = act(client, admin, action_type="BAN_USER", reason="oops", user_id=admin["id"])
    assert response.status_code == 400
