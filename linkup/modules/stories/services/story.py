from datetime import datetime, timedelta
from typing import Dict, List, Optional, Tuple
import uuid
import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from linkup.modules.follows.services.follow import get_following_ids
from linkup.modules.highlights.models.highlight import HighlightStory
from linkup.modules.notifications.models.notification import STORY_LIKE, Notification
from linkup.modules.stories.models.story import Story, StoryView, StoryLike
from linkup.modules.stories.schemas.story import StoryDetail, StoryFeedEntry, StoryViewer
from linkup.modules.user_management.models.user import User
from linkup.modules.user_management.schemas.user import UserSummary

logger = logging.getLogger(__name__)

STORY_LIFETIME = timedelta(hours=24)


def get_story(db: Session, story_id: str) -> Optional[Story]:
    return db.query(Story).filter(Story.id == story_id).first()


def create_story(db: Session, author_id: str, media_url: str) -> Story:
    now = datetime.utcnow()
    story = Story(
        id=str(uuid.uuid4()),
        author_id=author_id,
        media_url=media_url,
        created_at=now,
        expires_at=now + STORY_LIFETIME,
    )
    db.add(story)
    db.commit()
    db.refresh(story)
    logger.info(f"Created story {story.id} for author {author_id}, expires at {story.expires_at}")
    return story


def delete_story(db: Session, story: Story) -> None:
    """Delete a story along with its views, likes, like notifications and highlight assignments"""
    for model in (HighlightStory, StoryView, StoryLike):
        db.query(model).filter(model.story_id == story.id).delete(synchronize_session=False)
    db.query(Notification).filter(
        Notification.type == STORY_LIKE,
        Notification.related_id == story.id,
    ).delete(synchronize_session=False)
    db.delete(story)
    db.commit()


def get_live_stories(db: Session, author_id: str) -> List[Story]:
    return (
        db.query(Story)
        .filter(Story.author_id == author_id, Story.expires_at > datetime.utcnow())
        .order_by(Story.created_at.asc())
        .all()
    )


def get_all_user_stories(db: Session, author_id: str) -> List[Story]:
    """Every story of a user including expired ones, newest first"""
    return (
        db.query(Story)
        .filter(Story.author_id == author_id)
        .order_by(Story.created_at.desc())
        .all()
    )


def record_view(db: Session, story: Story, viewer_id: str) -> None:
    if story.author_id == viewer_id:
        return
    exists = db.query(StoryView.id).filter(
        StoryView.story_id == story.id,
        StoryView.viewer_id == viewer_id,
    ).first()
    if exists:
        return
    db.add(StoryView(id=str(uuid.uuid4()), story_id=story.id, viewer_id=viewer_id))
    db.commit()


def _count(db: Session, model, story_id: str) -> int:
    return db.query(func.count(model.id)).filter(model.story_id == story_id).scalar() or 0


def get_story_detail(db: Session, story: Story, author: User, viewer_id: str) -> StoryDetail:
    has_liked = db.query(StoryLike.id).filter(
        StoryLike.story_id == story.id,
        StoryLike.user_id == viewer_id,
    ).first() is not None
    return StoryDetail(
        id=story.id,
        author_id=story.author_id,
        media_url=story.media_url,
        expires_at=story.expires_at,
        created_at=story.created_at,
        author=UserSummary.model_validate(author),
        view_count=_count(db, StoryView, story.id),
        like_count=_count(db, StoryLike, story.id),
        has_liked=has_liked,
        is_expired=story.is_expired,
    )


def toggle_story_like(db: Session, story: Story, user_id: str) -> Tuple[bool, int]:
    """Returns (liked, like_count)"""
    existing = db.query(StoryLike).filter(
        StoryLike.story_id == story.id,
        StoryLike.user_id == user_id,
    ).first()
    if existing:
        db.delete(existing)
        liked = False
    else:
        db.add(StoryLike(id=str(uuid.uuid4()), story_id=story.id, user_id=user_id))
        liked = True
    db.commit()
    return liked, _count(db, StoryLike, story.id)


def get_story_viewers(db: Session, story_id: str) -> List[StoryViewer]:
    rows = (
        db.query(StoryView, User)
        .join(User, User.id == StoryView.viewer_id)
        .filter(StoryView.story_id == story_id)
        .order_by(StoryView.viewed_at.desc())
        .all()
    )
    return [StoryViewer(user=UserSummary.model_validate(user), viewed_at=view.viewed_at) for view, user in rows]


def get_story_likers(db: Session, story_id: str) -> List[User]:
    return (
        db.query(User)
        .join(StoryLike, StoryLike.user_id == User.id)
        .filter(StoryLike.story_id == story_id)
        .order_by(StoryLike.created_at.desc())
        .all()
    )


def get_story_feed(db: Session, user_id: str) -> List[StoryFeedEntry]:
    """
    Live stories of followed users and the user, grouped by author.
    Authors with stories the user has not seen come first, then the most recent.
    """
    author_ids = get_following_ids(db, user_id) + [user_id]
    rows = (
        db.query(Story, User)
        .join(User, User.id == Story.author_id)
        .filter(
            Story.author_id.in_(author_ids),
            Story.expires_at > datetime.utcnow(),
            User.is_banned.is_(False),
        )
        .order_by(Story.created_at.asc())
        .all()
    )
    if not rows:
        return []

    viewed = {
        row.story_id
        for row in db.query(StoryView.story_id).filter(
            StoryView.viewer_id == user_id,
            StoryView.story_id.in_([story.id for story, _ in rows]),
        )
    }

    grouped: Dict[str, dict] = {}
    for story, author in rows:
        entry = grouped.setdefault(author.id, {
            "user": UserSummary.model_validate(author),
            "story_ids": [],
            "latest_story_at": story.created_at,
            "has_unviewed_stories": False,
        })
        entry["story_ids"].append(story.id)
        entry["latest_story_at"] = max(entry["latest_story_at"], story.created_at)
        if author.id != user_id and story.id not in viewed:
            entry["has_unviewed_stories"] = True

    entries = [StoryFeedEntry(**entry) for entry in grouped.values()]
    entries.sort(key=lambda e: e.latest_story_at, reverse=True)
    entries.sort(key=lambda e: not e.has_unviewed_stories)
    return entries
