from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sqlalchemy.orm import Session
import logging

from linkup.core.moderation import ModerationService, get_moderation_service
from linkup.db.session import get_db
from linkup.deps import get_current_user
from linkup.modules.notifications.services.notification_events import create_post_comment_notification
from linkup.modules.posts.api.router import GUIDELINES_MESSAGE, get_accessible_post
from linkup.modules.posts.comments.schemas.comment import (
    Comment as CommentSchema,
    CommentCreate,
    CommentPage,
)
from linkup.modules.posts.comments.services.comment import (
    create_comment,
    delete_comment,
    get_comment,
    get_comments_by_post,
)
from linkup.modules.user_management.models.user import User

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("", response_model=CommentSchema, status_code=status.HTTP_201_CREATED)
async def create_new_comment(
    *,
    db: Session = Depends(get_db),
    post_id: str = Path(..., description="The ID of the post to comment on"),
    comment_in: CommentCreate,
    current_user: User = Depends(get_current_user),
    moderation: ModerationService = Depends(get_moderation_service),
) -> Any:
    """Create new comment on a post"""
    post, _ = get_accessible_post(db, post_id, current_user)

    if not await moderation.is_safe(comment_in.content):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=GUIDELINES_MESSAGE,
        )

    comment = create_comment(db, comment_in, post.id, current_user)
    create_post_comment_notification(db, post.id, post.author_id, current_user.id)
    return comment


@router.get("", response_model=CommentPage)
def read_comments_by_post_id(
    *,
    db: Session = Depends(get_db),
    post_id: str = Path(..., description="The ID of the post to get comments for"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=50),
    current_user: User = Depends(get_current_user),
) -> Any:
    """Get comments of a post, newest first"""
    post, _ = get_accessible_post(db, post_id, current_user)
    skip = (page - 1) * limit
    items, total = get_comments_by_post(db, post.id, skip=skip, limit=limit)
    return CommentPage(items=items, total=total, page=page, has_more=total > skip + limit)


@router.delete("/{comment_id}")
def delete_comment_by_id(
    *,
    db: Session = Depends(get_db),
    post_id: str = Path(..., description="The ID of the post"),
    comment_id: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    """Delete a comment. Allowed for the comment author and the post author."""
    post, _ = get_accessible_post(db, post_id, current_user)

    comment = get_comment(db, comment_id=comment_id)
    if not comment or comment.post_id != post.id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Comment not found"
        )

    if current_user.id not in (comment.author_id, post.author_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not enough permissions"
        )

    delete_comment(db, comment)
    return {"message": "Comment deleted successfully"}
