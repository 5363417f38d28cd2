"""
Tests for stories: posting, viewing, likes, the story feed and expiry.
"""
from datetime import datetime, timedelta

from linkup.modules.stories.models.story import Story

from tests.conftest import JPEG


def expire(db, story_id: str) -> None:
    story = db.query(Story).filter(Story.id == story_id).first()
    story.expires_at = datetime.utcnow() - timedelta(minutes=1)
    db.commit()


class TestCreateStory:
    def test_story_expires_after_a_day(self, client, register):
        alice = register("alice")

        response = client.post("/api/stories", files={"media": JPEG}, headers=alice["headers"])

        assert response.status_code == 201
        data = response.json()
        lifetime = datetime.fromisoformat(data["expires_at"]) - datetime.fromisoformat(data["created_at"])
        assert lifetime == timedelta(hours=24)

    def test_media_required(self, client, register):
        alice = register("alice")
        assert client.post("/api/stories", headers=alice["headers"]).status_code == 400

    def test_gif_not_allowed(self, client, register):
        alice = register("alice")
        response = client.post(
            "/api/stories",
            files={"media": ("anim.gif", b"GIF89a", "image/gif")},
            headers=alice["headers"],
        )
        assert response.status_code == 400


class TestViewStory:
    def test_view_is_recorded_once(self, client, register, create_story):
        alice, bob = register("alice"), register("bob")
        story = create_story(alice)

        client.get(f"/api/stories/{story['id']}", headers=bob["headers"])
        response = client.get(f"/api/stories/{story['id']}", headers=bob["headers"])
        assert response.status_code == 200
        assert response.json()["view_count"] == 1

        views = client.get(f"/api/stories/{story['id']}/views", headers=alice["headers"]).json()
        assert [viewer["user"]["username"] for viewer in views["viewers"]] == ["bob"]

    def test_owner_views_are_not_counted(self, client, register, create_story):
        alice = register("alice")
        story = create_story(alice)
        response = client.get(f"/api/stories/{story['id']}", headers=alice["headers"])
        assert response.json()["view_count"] == 0

    def test_views_visible_to_author_only(self, client, register, create_story):
        alice, bob = register("alice"), register("bob")
        story = create_story(alice)
        assert client.get(f"/api/stories/{story['id']}/views", headers=bob["headers"]).status_code == 403

    def test_private_story_hidden(self, client, register, create_story):
        alice, bob = register("alice"), register("bob", private=True)
        story = create_story(bob)
        assert client.get(f"/api/stories/{story['id']}", headers=alice["headers"]).status_code == 403

    def test_expired_story_hidden_from_others(self, client, register, create_story, db):
        alice, bob = register("alice"), register("bob")
        story = create_story(alice)
        expire(db, story["id"])

        assert client.get(f"/api/stories/{story['id']}", headers=bob["headers"]).status_code == 404
        response = client.get(f"/api/stories/{story['id']}", headers=alice["headers"])
        assert response.status_code == 200
        assert response.json()["is_expired"] is True


class TestStoryLikes:
    def test_follower_can_like(self, client, register, follow, create_story):
        alice, bob = register("alice"), register("bob")
        follow(bob, alice)
        story = create_story(alice)

        response = client.post(f"/api/stories/{story['id']}/like", headers=bob["headers"])
        assert response.json() == {"action": "liked", "like_count": 1}

        types = [item["type"] for item in client.get("/api/notifications", headers=alice["headers"]).json()["items"]]
        assert "STORY_LIKE" in types

        response = client.post(f"/api/stories/{story['id']}/like", headers=bob["headers"])
        assert response.json() == {"action": "unliked", "like_count": 0}

    def test_non_follower_cannot_like(self, client, register, create_story):
        alice, bob = register("alice"), register("bob")
        story = create_story(alice)
        assert client.post(f"/api/stories/{story['id']}/like", headers=bob["headers"]).status_code == 403

    def test_expired_story_cannot_be_liked(self, client, register, follow, create_story, db):
        alice, bob = register("alice"), register("bob")
        follow(bob, alice)
        story = create_story(alice)
        expire(db, story["id"])

        response = client.post(f"/api/stories/{story['id']}/like", headers=bob["headers"])
        assert response.status_code == 400


class TestStoryFeed:
    def test_unviewed_first(self, client, register, follow, create_story):
        alice, bob, carol = register("alice"), register("bob"), register("carol")
        follow(alice, bob)
        follow(alice, carol)
        bob_story = create_story(bob)
        create_story(carol)

        # alice watches bob's story, carol's story stays unviewed
        client.get(f"/api/stories/{bob_story['id']}", headers=alice["headers"])

        feed = client.get("/api/stories/feed", headers=alice["headers"]).json()

        assert [entry["user"]["username"] for entry in feed] == ["carol", "bob"]
        assert [entry["has_unviewed_stories"] for entry in feed] == [True, False]

    def test_expired_stories_leave_the_feed(self, client, register, follow, create_story, db):
        alice, bob = register("alice"), register("bob")
        follow(alice, bob)
        story = create_story(bob)
        expire(db, story["id"])

        assert client.get("/api/stories/feed", headers=alice["headers"]).json() == []
        user_stories = client.get(f"/api/stories/user/{bob['id']}", headers=alice["headers"]).json()
        assert user_stories["story_ids"] == []

        own = client.get("/api/profile/stories", headers=bob["headers"]).json()
        assert [item["id"] for item in own] == [story["id"]]


def test_delete_story(client, register, create_story):
    alice, bob = register("alice"), register("bob")
    story = create_story(alice)

    assert client.delete(f"/api/stories/{story['id']}", headers=bob["headers"]).status_code == 403
    assert client.delete(f"/api/stories/{story['id']}", headers=alice["headers"]).status_code == 200
    assert client.get(f"/api/stories/{story['id']}", headers=alice["headers"]).status_code == 404


def test_delete_story_clears_like_notifications(client, register, follow, create_story):
    alice, bob = register("alice"), register("bob")
    follow(bob, alice)
    story = create_story(alice)
    client.post(f"/api/stories/{story['id']}/like", headers=bob["headers"])

    client.delete(f"/api/stories/{story['id']}", headers=alice["headers"])

    notifications = client.get("/api/notifications", headers=alice["headers"]).json()["items"]
    assert "STORY_LIKE" not in [item["type"] for item in notifications]
    assert "FOLLOW" in [item["type"] for item in notifications]
