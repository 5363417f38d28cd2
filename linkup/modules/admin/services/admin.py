from typing import List, Optional, Tuple
import uuid
import logging

from sqlalchemy import func
from sqlalchemy.orm import Session, aliased

from linkup.modules.admin.models.audit_log import AuditLog
from linkup.modules.posts.models.post import Post, PostReport, REPORT_PENDING
from linkup.modules.user_management.models.user import User

logger = logging.getLogger(__name__)

def log_admin_action(
    db: Session,
    admin_id: str,
    action: str,
    target_id: Optional[str],
    details: Optional[str] = None,
) -> AuditLog:
    """Record a moderation action. Every admin action goes through here."""
    entry = AuditLog(
        id=str(uuid.uuid4()),
        admin_id=admin_id,
        action=action,
        target_id=target_id,
        details=details,
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    logger.info(f"Admin {admin_id} performed {action} on {target_id}")
    return entry


def get_pending_reports(db: Session, skip: int = 0, limit: int = 50) -> List[Tuple[PostReport, Post, User]]:
    """Pending reports, oldest first, with the reported post and the reporter"""
    reporter = aliased(User)
    return (
        db.query(PostReport, Post, reporter)
        .join(Post, Post.id == PostReport.post_id)
        .join(reporter, reporter.id == PostReport.reporter_id)
        .filter(PostReport.status == REPORT_PENDING)
        .order_by(PostReport.created_at.asc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def set_report_status(db: Session, post_id: str, status: str) -> int:
    """Close every pending report of a post, returning how many were updated"""
    count = db.query(PostReport).filter(
        PostReport.post_id == post_id,
        PostReport.status == REPORT_PENDING,
    ).update({"status": status}, synchronize_session=False)
    db.commit()
    return count


def count_reports_against(db: Session, user_id: str) -> int:
    return (
        db.query(func.count(PostReport.id))
        .join(Post, Post.id == PostReport.post_id)
        .filter(Post.author_id == user_id)
        .scalar()
        or 0
    )


def set_banned(db: Session, user: User, banned: bool) -> User:
    user.is_banned = banned
    if banned:
        # Banned users lose their session
        user.refresh_token = None
    db.commit()
    db.refresh(user)
    return user
