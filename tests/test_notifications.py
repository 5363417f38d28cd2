"""
Tests for the /api/notifications endpoints.
"""


def seed_notifications(client, register, follow, count: int):
    """Give alice `count` FOLLOW notifications on top of her WELCOME notification."""
    alice = register("alice")
    for index in range(count):
        follow(register(f"fan{index}"), alice)
    return alice


class TestListNotifications:
    def test_pagination(self, client, register, follow):
        alice = seed_notifications(client, register, follow, 4)

        data = client.get("/api/notifications", params={"page": 2, "limit": 2}, headers=alice["headers"]).json()

        assert data["total_count"] == 5
        assert data["total_pages"] == 3
        assert data["page"] == 2
        assert len(data["items"]) == 2

    def test_newest_first_with_actor(self, client, register, follow):
        alice = seed_notifications(client, register, follow, 1)

        items = client.get("/api/notifications", headers=alice["headers"]).json()["items"]

        assert [item["type"] for item in items] == ["FOLLOW", "WELCOME"]
        assert items[0]["actor"]["username"] == "fan0"
        assert items[1]["actor"] is None

    def test_read_status_filter(self, client, register, follow):
        alice = seed_notifications(client, register, follow, 2)
        items = client.get("/api/notifications", headers=alice["headers"]).json()["items"]
        client.put(f"/api/notifications/{items[0]['id']}/read", headers=alice["headers"])

        read = client.get("/api/notifications", params={"read_status": "READ"}, headers=alice["headers"]).json()
        unread = client.get("/api/notifications", params={"read_status": "UNREAD"}, headers=alice["headers"]).json()

        assert [item["id"] for item in read["items"]] == [items[0]["id"]]
        assert unread["total_count"] == 2
        assert unread["unread_count"] == 2

    def test_invalid_read_status(self, client, register):
        alice = register("alice")
        response = client.get("/api/notifications", params={"read_status": "SOME"}, headers=alice["headers"])
        assert response.status_code == 400


class TestUpdateNotifications:
    def test_mark_all_read(self, client, register, follow):
        alice = seed_notifications(client, register, follow, 2)

        response = client.put("/api/notifications/read", headers=alice["headers"])

        assert response.json()["count"] == 3
        assert client.get("/api/notifications", headers=alice["headers"]).json()["unread_count"] == 0

    def test_foreign_notification(self, client, register):
        alice, bob = register("alice"), register("bob")
        notification_id = client.get("/api/notifications", headers=alice["headers"]).json()["items"][0]["id"]

        assert client.put(f"/api/notifications/{notification_id}/read", headers=bob["headers"]).status_code == 403
        assert client.delete(f"/api/notifications/{notification_id}", headers=bob["headers"]).status_code == 403

    def test_delete(self, client, register):
        alice = register("alice")
        notification_id = client.get("/api/notifications", headers=alice["headers"]).json()["items"][0]["id"]

        assert client.delete(f"/api/notifications/{notification_id}", headers=alice["headers"]).status_code == 200
        assert client.delete(f"/api/notifications/{notification_id}", headers=alice["headers"]).status_code == 404


def test_limit_is_capped(client, register):
    alice = register("alice")

    response = client.get("/api/notifications", params={"limit": 51}, headers=alice["headers"])

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "limit"
