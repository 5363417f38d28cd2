from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from linkup.db.session import get_db
from linkup.deps import get_current_user
from linkup.modules.user_management.models.user import User
from linkup.modules.notifications.models.notification import Notification
from linkup.modules.notifications.schemas.notification import (
    Notification as NotificationSchema,
    NotificationPage,
    ReadStatus,
)
from linkup.modules.notifications.services.notification import (
    get_notification,
    get_user_notifications,
    mark_as_read,
    mark_all_as_read,
    delete_notification,
)

router = APIRouter()


def _get_own_notification(db: Session, notification_id: str, user: User) -> Notification:
    notification = get_notification(db, notification_id=notification_id)
    if not notification:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Notification not found"
        )

    if notification.user_id != user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not enough permissions"
        )
    return notification


@router.get("", response_model=NotificationPage)
def read_notifications(
    db: Session = Depends(get_db),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=50),
    read_status: ReadStatus = Query(ReadStatus.ALL),
    current_user: User = Depends(get_current_user),
) -> Any:
    """Get user's notifications with pagination and read filter"""
    return get_user_notifications(db, current_user.id, page, limit, read_status)


@router.put("/read", response_model=dict)
def mark_all_notifications_as_read(
    *,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    """Mark all of the user's notifications as read"""
    count = mark_all_as_read(db, current_user.id)

    return {
        "message": f"Marked {count} notifications as read",
        "count": count
    }


@router.put("/{notification_id}/read", response_model=NotificationSchema)
def mark_notification_as_read(
    *,
    db: Session = Depends(get_db),
    notification_id: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    """Mark a specific notification as read"""
    notification = _get_own_notification(db, notification_id, current_user)
    return mark_as_read(db, notification)


@router.delete("/{notification_id}", response_model=dict)
def delete_notification_by_id(
    *,
    db: Session = Depends(get_db),
    notification_id: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    """Delete a specific notification"""
    notification = _get_own_notification(db, notification_id, current_user)
    delete_notification(db, notification)
    return {"message": "Notification deleted"}
