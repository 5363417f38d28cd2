from typing import Dict, List, Optional
import uuid
import logging

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from linkup.core.security import get_password_hash
from linkup.core.validators import normalize_email
from linkup.modules.user_management.models.user import User
from linkup.modules.user_management.schemas.user import UserUpdate
from linkup.modules.posts.models.post import Post, SavedPost, PostReport
from linkup.modules.posts.comments.models.comment import Comment
from linkup.modules.posts.likes.models.like import Like
from linkup.modules.follows.models.follow import FollowRequest, ACCEPTED
from linkup.modules.stories.models.story import Story, StoryView, StoryLike
from linkup.modules.highlights.models.highlight import Highlight, HighlightStory
from linkup.modules.notifications.models.notification import Notification

logger = logging.getLogger(__name__)


def get_user(db: Session, user_id: str) -> Optional[User]:
    """Get user by ID"""
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    """Get user by username"""
    return db.query(User).filter(User.username == username).first()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Get user by email, ignoring case"""
    return db.query(User).filter(func.lower(User.email) == email.strip().lower()).first()


def get_user_by_login(db: Session, username_or_email: str) -> Optional[User]:
    """Resolve the login identifier, which may be either a username or an email"""
    if "@" in username_or_email:
        return get_user_by_email(db, username_or_email)
    return get_user_by_username(db, username_or_email)


def get_users(db: Session, skip: int = 0, limit: int = 100) -> List[User]:
    """Get list of users"""
    return db.query(User).order_by(User.created_at.desc()).offset(skip).limit(limit).all()


def count_users(db: Session) -> int:
    return db.query(func.count(User.id)).scalar() or 0


def is_username_taken(db: Session, username: str, exclude_user_id: Optional[str] = None) -> bool:
    query = db.query(User.id).filter(func.lower(User.username) == username.lower())
    if exclude_user_id:
        query = query.filter(User.id != exclude_user_id)
    return query.first() is not None


def is_email_taken(db: Session, email: str, exclude_user_id: Optional[str] = None) -> bool:
    """Check for an existing account, treating Gmail dot variants as the same address"""
    normalized = normalize_email(email)
    domain = normalized.split("@", 1)[-1]
    query = db.query(User).filter(func.lower(User.email).like(f"%@{domain}"))
    if exclude_user_id:
        query = query.filter(User.id != exclude_user_id)
    return any(normalize_email(user.email) == normalized for user in query.all())


def create_user(
    db: Session,
    *,
    username: str,
    email: str,
    password: str,
    profile_name: Optional[str] = None,
) -> User:
    """Create new user"""
    user = User(
        id=str(uuid.uuid4()),
        username=username,
        email=email.strip().lower(),
        hashed_password=get_password_hash(password),
        profile_name=profile_name or username,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Created user {user.id} ({user.username})")
    return user


def update_user(db: Session, user: User, user_in: UserUpdate) -> User:
    """Update user"""
    update_data = user_in.model_dump(exclude_unset=True)
    if update_data.get("email"):
        update_data["email"] = update_data["email"].strip().lower()

    for field, value in update_data.items():
        setattr(user, field, value)

    db.commit()
    db.refresh(user)
    return user


def set_password(db: Session, user: User, password: str) -> User:
    user.hashed_password = get_password_hash(password)
    # Existing sessions end with the password change
    user.refresh_token = None
    db.commit()
    db.refresh(user)
    return user


def get_user_stats(db: Session, user_id: str) -> Dict[str, int]:
    post_count = db.query(func.count(Post.id)).filter(Post.author_id == user_id).scalar() or 0
    follower_count = db.query(func.count(FollowRequest.id)).filter(
        FollowRequest.followee_id == user_id,
        FollowRequest.status == ACCEPTED,
    ).scalar() or 0
    following_count = db.query(func.count(FollowRequest.id)).filter(
        FollowRequest.follower_id == user_id,
        FollowRequest.status == ACCEPTED,
    ).scalar() or 0
    return {
        "post_count": post_count,
        "follower_count": follower_count,
        "following_count": following_count,
    }


def search_users(db: Session, q: str, exclude_user_id: str, limit: int = 20) -> List[User]:
    """Search for users whose username or profile name matches every term"""
    query = db.query(User)
    for term in q.lower().split():
        search_pattern = f"%{term}%"
        query = query.filter(
            or_(
                User.username.ilike(search_pattern),
                User.profile_name.ilike(search_pattern),
            )
        )

    return (
        query.filter(User.id != exclude_user_id, User.is_banned.is_(False))
        .order_by(User.username)
        .limit(limit)
        .all()
    )


def get_user_media_urls(db: Session, user: User) -> List[str]:
    """Every stored file owned by a user, collected before the account is deleted"""
    urls = [user.profile_picture, user.cover_picture]
    for post in db.query(Post).filter(Post.author_id == user.id):
        urls.extend([post.image_url, post.video_url])
    urls.extend(row.media_url for row in db.query(Story.media_url).filter(Story.author_id == user.id))
    urls.extend(row.cover_image for row in db.query(Highlight.cover_image).filter(Highlight.owner_id == user.id))
    return [url for url in urls if url]


def delete_user(db: Session, user: User) -> None:
    """
    Delete a user and every row that references them.
    Rows are removed explicitly so the cascade also holds on databases
    that do not enforce foreign keys.
    """
    user_id = user.id
    post_ids = [row.id for row in db.query(Post.id).filter(Post.author_id == user_id)]
    story_ids = [row.id for row in db.query(Story.id).filter(Story.author_id == user_id)]
    highlight_ids = [row.id for row in db.query(Highlight.id).filter(Highlight.owner_id == user_id)]

    if post_ids:
        for model in (Like, SavedPost, PostReport, Comment):
            db.query(model).filter(model.post_id.in_(post_ids)).delete(synchronize_session=False)
    db.query(Like).filter(Like.user_id == user_id).delete(synchronize_session=False)
    db.query(SavedPost).filter(SavedPost.user_id == user_id).delete(synchronize_session=False)
    db.query(PostReport).filter(PostReport.reporter_id == user_id).delete(synchronize_session=False)
    db.query(Comment).filter(Comment.author_id == user_id).delete(synchronize_session=False)
    db.query(Post).filter(Post.author_id == user_id).delete(synchronize_session=False)

    if highlight_ids:
        db.query(HighlightStory).filter(HighlightStory.highlight_id.in_(highlight_ids)).delete(synchronize_session=False)
    if story_ids:
        db.query(HighlightStory).filter(HighlightStory.story_id.in_(story_ids)).delete(synchronize_session=False)
        db.query(StoryView).filter(StoryView.story_id.in_(story_ids)).delete(synchronize_session=False)
        db.query(StoryLike).filter(StoryLike.story_id.in_(story_ids)).delete(synchronize_session=False)
    db.query(Highlight).filter(Highlight.owner_id == user_id).delete(synchronize_session=False)
    db.query(StoryView).filter(StoryView.viewer_id == user_id).delete(synchronize_session=False)
    db.query(StoryLike).filter(StoryLike.user_id == user_id).delete(synchronize_session=False)
    db.query(Story).filter(Story.author_id == user_id).delete(synchronize_session=False)

    db.query(FollowRequest).filter(
        or_(FollowRequest.follower_id == user_id, FollowRequest.followee_id == user_id)
    ).delete(synchronize_session=False)
    db.query(Notification).filter(
        or_(Notification.user_id == user_id, Notification.actor_id == user_id)
    ).delete(synchronize_session=False)

    db.delete(user)
    db.commit()
    logger.info(f"Deleted user {user_id} with {len(post_ids)} posts and {len(story_ids)} stories")
