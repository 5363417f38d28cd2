"""
Tests for following, follow requests and the visibility of private accounts.
"""


def notification_types(client, user):
    response = client.get("/api/notifications", headers=user["headers"])
    assert response.status_code == 200
    return [item["type"] for item in response.json()["items"]]


class TestFollow:
    def test_follow_public_account(self, client, register):
        alice, bob = register("alice"), register("bob")

        response = client.post(f"/api/profile/follow/{bob['id']}", headers=alice["headers"])

        assert response.status_code == 201
        assert response.json()["status"] == "ACCEPTED"
        assert "FOLLOW" in notification_types(client, bob)

    def test_follow_private_account_creates_request(self, client, register):
        alice, bob = register("alice"), register("bob", private=True)

        response = client.post(f"/api/profile/follow/{bob['id']}", headers=alice["headers"])

        assert response.status_code == 201
        assert response.json()["status"] == "PENDING"
        assert "FOLLOW_REQUEST" in notification_types(client, bob)

        pending = client.get("/api/profile/follow-requests/pending", headers=bob["headers"]).json()
        assert [request["follower"]["username"] for request in pending] == ["alice"]

    def test_cannot_follow_self(self, client, register):
        alice = register("alice")
        response = client.post(f"/api/profile/follow/{alice['id']}", headers=alice["headers"])
        assert response.status_code == 400

    def test_follow_unknown_user(self, client, register):
        alice = register("alice")
        response = client.post("/api/profile/follow/does-not-exist", headers=alice["headers"])
        assert response.status_code == 404

    def test_existing_relation_conflicts(self, client, register, follow):
        alice, bob = register("alice"), register("bob", private=True)
        follow(alice, bob)

        response = client.post(f"/api/profile/follow/{bob['id']}", headers=alice["headers"])

        assert response.status_code == 409
        assert response.json()["detail"] == "Your follow request is still pending"

    def test_unfollow(self, client, register, follow):
        alice, bob = register("alice"), register("bob")
        follow(alice, bob)

        assert client.delete(f"/api/profile/unfollow/{bob['id']}", headers=alice["headers"]).status_code == 200
        assert client.delete(f"/api/profile/unfollow/{bob['id']}", headers=alice["headers"]).status_code == 404

    def test_remove_follower(self, client, register, follow):
        alice, bob = register("alice"), register("bob")
        follow(alice, bob)

        response = client.delete(f"/api/profile/remove-follower/{alice['id']}", headers=bob["headers"])
        assert response.status_code == 200

        followers = client.get(f"/api/profile/followers/{bob['id']}", headers=bob["headers"]).json()
        assert followers["count"] == 0


class TestFollowRequests:
    def test_accept(self, client, register, follow):
        alice, bob = register("alice"), register("bob", private=True)
        request_id = follow(alice, bob)["request_id"]

        response = client.put(f"/api/profile/follow-requests/{request_id}/accept", headers=bob["headers"])

        assert response.status_code == 200
        assert response.json()["status"] == "ACCEPTED"
        assert "FOLLOW_ACCEPTED" in notification_types(client, alice)

    def test_only_the_recipient_can_accept(self, client, register, follow):
        alice, bob = register("alice"), register("bob", private=True)
        request_id = follow(alice, bob)["request_id"]

        response = client.put(f"/api/profile/follow-requests/{request_id}/accept", headers=alice["headers"])
        assert response.status_code == 404

    def test_reject(self, client, register, follow):
        alice, bob = register("alice"), register("bob", private=True)
        request_id = follow(alice, bob)["request_id"]

        response = client.delete(f"/api/profile/follow-requests/{request_id}/reject", headers=bob["headers"])
        assert response.status_code == 200
        assert response.json()["status"] == "REJECTED"

        response = client.post(f"/api/profile/follow/{bob['id']}", headers=alice["headers"])
        assert response.status_code == 409
        assert response.json()["detail"] == "Your previous follow request was rejected"

    def test_going_public_accepts_pending_requests(self, client, register, follow):
        alice, bob = register("alice"), register("bob", private=True)
        follow(alice, bob)

        response = client.put("/api/profile/privacy", json={"is_private": False}, headers=bob["headers"])

        assert response.status_code == 200
        assert response.json() == {"is_private": False, "accepted_requests": 1}
        following = client.get(f"/api/profile/following/{alice['id']}", headers=alice["headers"]).json()
        assert [user["username"] for user in following["users"]] == ["bob"]
        assert "FOLLOW_ACCEPTED" in notification_types(client, alice)


class TestPrivateAccounts:
    def test_followers_hidden_until_accepted(self, client, register, follow):
        alice, bob = register("alice"), register("bob", private=True)
        request_id = follow(alice, bob)["request_id"]

        response = client.get(f"/api/profile/followers/{bob['id']}", headers=alice["headers"])
        assert response.status_code == 403
        assert response.json()["detail"] == "This account is private"

        client.put(f"/api/profile/follow-requests/{request_id}/accept", headers=bob["headers"])
        response = client.get(f"/api/profile/followers/{bob['id']}", headers=alice["headers"])
        assert response.status_code == 200
        assert response.json()["count"] == 1

    def test_owner_sees_own_lists(self, client, register):
        bob = register("bob", private=True)
        response = client.get(f"/api/profile/following/{bob['id']}", headers=bob["headers"])
        assert response.status_code == 200


def test_suggestions_exclude_self_and_followed(client, register, follow):
    alice, bob = register("alice"), register("bob")
    register("carol")
    follow(alice, bob)

    response = client.get("/api/profile/suggestions", params={"limit": 10}, headers=alice["headers"])

    assert response.status_code == 200
    assert [user["username"] for user in response.json()["users"]] == ["carol"]
