from typing import Optional
import math
import uuid

from sqlalchemy import func
from sqlalchemy.orm import Session

from linkup.modules.notifications.models.notification import Notification
from linkup.modules.notifications.schemas.notification import (
    Notification as NotificationSchema,
    NotificationCreate,
    NotificationPage,
    ReadStatus,
)
from linkup.modules.user_management.models.user import User
from linkup.modules.user_management.schemas.user import UserSummary


def get_notification(db: Session, notification_id: str) -> Optional[Notification]:
    """Get notification by ID"""
    return db.query(Notification).filter(Notification.id == notification_id).first()


def _count_unread(db: Session, user_id: str) -> int:
    return db.query(func.count(Notification.id)).filter(
        Notification.user_id == user_id,
        Notification.is_read.is_(False),
    ).scalar() or 0


def get_user_notifications(
    db: Session,
    user_id: str,
    page: int = 1,
    limit: int = 20,
    read_status: ReadStatus = ReadStatus.ALL,
) -> NotificationPage:
    """Get a page of notifications for a user, newest first, with actor details"""
    query = (
        db.query(Notification, User)
        .outerjoin(User, User.id == Notification.actor_id)
        .filter(Notification.user_id == user_id)
    )
    if read_status == ReadStatus.READ:
        query = query.filter(Notification.is_read.is_(True))
    elif read_status == ReadStatus.UNREAD:
        query = query.filter(Notification.is_read.is_(False))

    total_count = query.count()
    rows = (
        query.order_by(Notification.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    items = []
    for notification, actor in rows:
        item = NotificationSchema.model_validate(notification)
        if actor is not None:
            item.actor = UserSummary.model_validate(actor)
        items.append(item)

    return NotificationPage(
        items=items,
        total_count=total_count,
        unread_count=_count_unread(db, user_id),
        page=page,
        limit=limit,
        total_pages=math.ceil(total_count / limit) if total_count else 0,
    )


def create_notification(db: Session, notification_in: NotificationCreate) -> Notification:
    """Create a new notification"""
    notification = Notification(
        id=str(uuid.uuid4()),
        **notification_in.model_dump(),
    )

    db.add(notification)
    db.commit()
    db.refresh(notification)

    return notification


def mark_as_read(db: Session, notification: Notification) -> Notification:
    notification.is_read = True
    db.commit()
    db.refresh(notification)
    return notification


def mark_all_as_read(db: Session, user_id: str) -> int:
    """Mark all notifications as read for a user"""
    result = db.query(Notification).filter(
        Notification.user_id == user_id,
        Notification.is_read.is_(False),
    ).update({"is_read": True}, synchronize_session=False)

    db.commit()

    return result


def delete_notification(db: Session, notification: Notification) -> None:
    """Delete a notification"""
    db.delete(notification)
    db.commit()
