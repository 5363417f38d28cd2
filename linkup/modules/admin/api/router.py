from typing import Any, List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
import logging

from linkup.db.session import get_db
from linkup.deps import get_current_admin
from linkup.modules.admin.schemas.admin import (
    AdminActionRequest,
    AdminActionResult,
    AdminActionType,
    AdminUser,
    AdminUserDetail,
    AdminUserPage,
    AuditLog as AuditLogSchema,
    ReportEntry,
)
from linkup.modules.admin.services import admin as admin_service
from linkup.modules.media.service import MediaService, get_media_service
from linkup.modules.notifications.services.notification_events import create_admin_warning_notification
from linkup.modules.posts.models.post import REPORT_DISMISSED, REPORT_RESOLVED
from linkup.modules.posts.schemas.post import Post as PostSchema
from linkup.modules.posts.services import post as post_service
from linkup.modules.user_management.models.user import User
from linkup.modules.user_management.schemas.user import UserSummary
from linkup.modules.user_management.services.user import count_users, get_user, get_user_stats, get_users

router = APIRouter()
logger = logging.getLogger(__name__)


def _get_target_user(db: Session, user_id: str, admin: User) -> User:
    user = get_user(db, user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    if user.id == admin.id or user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="This action cannot be applied to an administrator"
        )
    return user


def _get_target_post(db: Session, post_id: str):
    post = post_service.get_post(db, post_id=post_id)
    if not post:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found"
        )
    return post


@router.get("/reports", response_model=List[ReportEntry])
def read_pending_reports(
    *,
    db: Session = Depends(get_db),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    current_user: User = Depends(get_current_admin),
) -> Any:
    return [
        ReportEntry(
            id=report.id,
            reason=report.reason,
            status=report.status,
            created_at=report.created_at,
            post=PostSchema.model_validate(post),
            reporter=UserSummary.model_validate(reporter),
        )
        for report, post, reporter in admin_service.get_pending_reports(db, skip, limit)
    ]


@router.get("/users", response_model=AdminUserPage)
def read_users(
    *,
    db: Session = Depends(get_db),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_admin),
) -> Any:
    users = get_users(db, skip=(page - 1) * limit, limit=limit)
    return AdminUserPage(
        items=[AdminUser.model_validate(user) for user in users],
        total=count_users(db),
        page=page,
        limit=limit,
    )


@router.get("/users/{user_id}", response_model=AdminUserDetail)
def read_user(
    *,
    db: Session = Depends(get_db),
    user_id: str,
    current_user: User = Depends(get_current_admin),
) -> Any:
    user = get_user(db, user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    return AdminUserDetail(
        **AdminUser.model_validate(user).model_dump(),
        **get_user_stats(db, user.id),
        reports_received=admin_service.count_reports_against(db, user.id),
    )


@router.post("/actions", response_model=AdminActionResult)
def perform_action(
    *,
    db: Session = Depends(get_db),
    action_in: AdminActionRequest,
    current_user: User = Depends(get_current_admin),
    media_service: MediaService = Depends(get_media_service),
) -> Any:
    """
    Apply a moderation action. Each action is written to the audit log.
    """
    action = action_in.action_type

    if action == AdminActionType.DELETE_POST:
        post = _get_target_post(db, action_in.post_id)
        media_urls = [post.image_url, post.video_url]
        post_service.delete_post(db, post)
        for url in media_urls:
            media_service.delete_media(url)
        target_id, message = action_in.post_id, "Post deleted"

    elif action == AdminActionType.DISMISS_REPORT:
        _get_target_post(db, action_in.post_id)
        count = admin_service.set_report_status(db, action_in.post_id, REPORT_DISMISSED)
        target_id, message = action_in.post_id, f"Dismissed {count} reports"

    else:
        user = _get_target_user(db, action_in.user_id, current_user)
        if action == AdminActionType.WARN_USER:
            create_admin_warning_notification(db, user.id, current_user.id, action_in.reason)
            message = "User warned"
        elif action == AdminActionType.BAN_USER:
            admin_service.set_banned(db, user, True)
            message = "User banned"
        else:
            admin_service.set_banned(db, user, False)
            message = "User unbanned"
        if action_in.post_id:
            admin_service.set_report_status(db, action_in.post_id, REPORT_RESOLVED)
        target_id = user.id

    entry = admin_service.log_admin_action(db, current_user.id, action.value, target_id, action_in.reason)
    return AdminActionResult(message=message, audit_log=AuditLogSchema.model_validate(entry))
