"""
Notification events service.
This module handles the creation of notifications for various events in the application.

Every function is best-effort: it returns True if a notification was created and
False otherwise, and never raises. A failed notification must not fail the
request that triggered it.
"""
from typing import Optional
import logging

from sqlalchemy.orm import Session

from linkup.modules.notifications.models import notification as types
from linkup.modules.notifications.schemas.notification import NotificationCreate
from linkup.modules.notifications.services.notification import create_notification
from linkup.modules.user_management.services.user import get_user

# Set up logger
logger = logging.getLogger(__name__)


def _notify(
    db: Session,
    *,
    recipient_id: str,
    actor_id: Optional[str],
    notification_type: str,
    content: str,
    related_id: Optional[str] = None,
) -> bool:
    # Users are never notified about their own actions
    if actor_id is not None and actor_id == recipient_id:
        logger.debug(f"Skipping {notification_type} notification for self-action by {actor_id}")
        return False

    try:
        create_notification(
            db,
            NotificationCreate(
                user_id=recipient_id,
                actor_id=actor_id,
                type=notification_type,
                content=content,
                related_id=related_id,
            ),
        )
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating {notification_type} notification for user {recipient_id}: {e}")
        return False

    logger.info(f"Created {notification_type} notification for user {recipient_id} from {actor_id}")
    return True


def _actor_name(db: Session, actor_id: str) -> Optional[str]:
    actor = get_user(db, actor_id)
    if not actor:
        logger.warning(f"User {actor_id} not found when creating notification")
        return None
    return actor.username


def create_welcome_notification(db: Session, user_id: str, username: str) -> bool:
    return _notify(
        db,
        recipient_id=user_id,
        actor_id=None,
        notification_type=types.WELCOME,
        content=f"Welcome to LinkUp, {username}! Start by following people you know.",
    )


def create_follow_notification(db: Session, follower_id: str, followee_id: str, request_id: str) -> bool:
    """
    Notify a public account that it has a new follower.

    Args:
        db: Database session
        follower_id: ID of the user who followed
        followee_id: ID of the user being followed
        request_id: ID of the accepted follow request

    Returns:
        True if notification was created, False otherwise
    """
    name = _actor_name(db, follower_id)
    if name is None:
        return False
    return _notify(
        db,
        recipient_id=followee_id,
        actor_id=follower_id,
        notification_type=types.FOLLOW,
        content=f"{name} started following you",
        related_id=request_id,
    )


def create_follow_request_notification(db: Session, follower_id: str, followee_id: str, request_id: str) -> bool:
    """Notify a private account that someone asked to follow it"""
    name = _actor_name(db, follower_id)
    if name is None:
        return False
    return _notify(
        db,
        recipient_id=followee_id,
        actor_id=follower_id,
        notification_type=types.FOLLOW_REQUEST,
        content=f"{name} requested to follow you",
        related_id=request_id,
    )


def create_follow_accepted_notification(db: Session, accepter_id: str, requester_id: str, request_id: str) -> bool:
    name = _actor_name(db, accepter_id)
    if name is None:
        return False
    return _notify(
        db,
        recipient_id=requester_id,
        actor_id=accepter_id,
        notification_type=types.FOLLOW_ACCEPTED,
        content=f"{name} accepted your follow request",
        related_id=request_id,
    )


def create_post_like_notification(db: Session, post_id: str, author_id: str, liker_id: str) -> bool:
    """
    Create a notification when a post is liked.

    Args:
        db: Database session
        post_id: ID of the post that was liked
        author_id: ID of the post author
        liker_id: ID of the user who liked the post

    Returns:
        True if notification was created, False otherwise
    """
    if author_id == liker_id:
        return False
    name = _actor_name(db, liker_id)
    if name is None:
        return False
    return _notify(
        db,
        recipient_id=author_id,
        actor_id=liker_id,
        notification_type=types.LIKE,
        content=f"{name} liked your post",
        related_id=post_id,
    )


def create_post_comment_notification(db: Session, post_id: str, author_id: str, commenter_id: str) -> bool:
    if author_id == commenter_id:
        return False
    name = _actor_name(db, commenter_id)
    if name is None:
        return False
    return _notify(
        db,
        recipient_id=author_id,
        actor_id=commenter_id,
        notification_type=types.COMMENT,
        content=f"{name} commented on your post",
        related_id=post_id,
    )


def create_story_like_notification(db: Session, story_id: str, author_id: str, liker_id: str) -> bool:
    if author_id == liker_id:
        return False
    name = _actor_name(db, liker_id)
    if name is None:
        return False
    return _notify(
        db,
        recipient_id=author_id,
        actor_id=liker_id,
        notification_type=types.STORY_LIKE,
        content=f"{name} liked your story",
        related_id=story_id,
    )


def create_admin_warning_notification(db: Session, user_id: str, admin_id: str, reason: str) -> bool:
    return _notify(
        db,
        recipient_id=user_id,
        actor_id=admin_id,
        notification_type=types.ADMIN_WARNING,
        content=f"You have received a warning from the moderators: {reason}",
    )
