"""
Tests for the /api/profile endpoints owned by the current user and public profiles.
"""
from linkup.core.validators import USERNAME_MESSAGE

from tests.conftest import JPEG, PASSWORD


class TestOwnProfile:
    def test_read_profile_with_counts(self, client, register, follow, create_post):
        alice, bob = register("alice"), register("bob")
        follow(bob, alice)
        create_post(alice)

        response = client.get("/api/profile", headers=alice["headers"])

        assert response.status_code == 200
        data = response.json()
        assert data["email"] == "alice@example.com"
        assert (data["post_count"], data["follower_count"], data["following_count"]) == (1, 1, 0)

    def test_edit_profile(self, client, register):
        alice = register("alice")

        response = client.put(
            "/api/profile/edit",
            data={"first_name": "Alice", "last_name": "Liddell", "bio": "Down the rabbit hole", "username": "alice_l"},
            files={"profile_picture": JPEG},
            headers=alice["headers"],
        )

        assert response.status_code == 200, response.text
        data = response.json()
        assert data["profile_name"] == "Alice Liddell"
        assert data["username"] == "alice_l"
        assert data["profile_picture"].startswith("http://testserver/api/media/profile_pictures/")

        media_path = data["profile_picture"].split("/api/media/", 1)[1]
        assert client.get(f"/api/media/{media_path}").status_code == 200

    def test_edit_rejects_taken_username(self, client, register):
        alice = register("alice")
        register("bob")

        response = client.put("/api/profile/edit", data={"username": "bob"}, headers=alice["headers"])
        assert response.status_code == 400

    def test_edit_rejects_invalid_username(self, client, register):
        alice = register("alice")

        response = client.put("/api/profile/edit", data={"username": "x"}, headers=alice["headers"])

        assert response.status_code == 400
        assert response.json()["detail"] == USERNAME_MESSAGE

    def test_edit_rejects_long_bio(self, client, register):
        alice = register("alice")
        response = client.put("/api/profile/edit", data={"bio": "b" * 151}, headers=alice["headers"])
        assert response.status_code == 400

    def test_change_password(self, client, register):
        alice = register("alice")

        response = client.put(
            "/api/profile/change-password",
            json={"old_password": "Wrong123!", "new_password": "NewSecret1!"},
            headers=alice["headers"],
        )
        assert response.status_code == 400

        response = client.put(
            "/api/profile/change-password",
            json={"old_password": PASSWORD, "new_password": "NewSecret1!"},
            headers=alice["headers"],
        )
        assert response.status_code == 200
        response = client.post("/api/auth/login", json={"username_or_email": "alice", "password": "NewSecret1!"})
        assert response.status_code == 200

    def test_delete_account_removes_content(self, client, register, create_post):
        alice, bob = register("alice"), register("bob")
        post = create_post(alice)
        client.post(f"/api/posts/{post['id']}/like", headers=bob["headers"])

        response = client.delete("/api/profile", headers=alice["headers"])
        assert response.status_code == 200

        assert client.get("/api/profile", headers=alice["headers"]).status_code == 401
        assert client.get(f"/api/posts/{post['id']}", headers=bob["headers"]).status_code == 404
        assert client.get("/api/profile/alice", headers=bob["headers"]).status_code == 404


class TestPublicProfile:
    def test_follow_status(self, client, register, follow):
        alice, bob = register("alice"), register("bob", private=True)

        data = client.get("/api/profile/bob", headers=alice["headers"]).json()
        assert (data["follow_status"], data["is_following"], data["is_own_profile"]) == ("NONE", False, False)
        assert "email" not in data

        follow(alice, bob)
        data = client.get("/api/profile/bob", headers=alice["headers"]).json()
        assert data["follow_status"] == "PENDING"

    def test_own_profile(self, client, register):
        alice = register("alice")
        data = client.get("/api/profile/alice", headers=alice["headers"]).json()
        assert data["is_own_profile"] is True

    def test_unknown_username(self, client, register):
        alice = register("alice")
        assert client.get("/api/profile/nobody", headers=alice["headers"]).status_code == 404


class TestSearchAndPosts:
    def test_search(self, client, register):
        alice = register("alice")
        register("bobby")
        register("bobcat")

        response = client.get("/api/profile/search", params={"q": "bob"}, headers=alice["headers"])

        assert response.status_code == 200
        assert sorted(user["username"] for user in response.json()) == ["bobby", "bobcat"]

    def test_search_query_too_short(self, client, register):
        alice = register("alice")
        response = client.get("/api/profile/search", params={"q": "b"}, headers=alice["headers"])
        assert response.status_code == 400

    def test_posts_of_private_user(self, client, register, create_post):
        alice, bob = register("alice"), register("bob", private=True)
        create_post(bob)

        response = client.get(f"/api/profile/posts/{bob['id']}", headers=alice["headers"])
        assert response.status_code == 403

        response = client.get(f"/api/profile/posts/{bob['id']}", headers=bob["headers"])
        assert response.status_code == 200
        assert response.json()["total"] == 1

    def test_saved_posts(self, client, register, create_post):
        alice, bob = register("alice"), register("bob")
        post = create_post(bob)
        client.post(f"/api/posts/{post['id']}/save", headers=alice["headers"])

        response = client.get("/api/profile/saved-posts", headers=alice["headers"])

        assert response.status_code == 200
        items = response.json()["items"]
        assert [item["id"] for item in items] == [post["id"]]
        assert items[0]["is_saved"] is True
