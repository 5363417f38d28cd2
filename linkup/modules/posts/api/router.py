from typing import Any, Optional, Tuple
import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

from linkup.core.config import settings
from linkup.core.errors import bad_request_from
from linkup.core.moderation import ModerationService, get_moderation_service
from linkup.db.session import get_db
from linkup.deps import get_current_user
from linkup.modules.admin.models.audit_log import DELETE_POST
from linkup.modules.admin.services.admin import log_admin_action
from linkup.modules.follows.services.follow import can_view_content
from linkup.modules.media.service import IMAGE, POST_MEDIA_TYPES, MediaService, get_media_service
from linkup.modules.posts.models.post import Post
from linkup.modules.posts.schemas.post import (
    Post as PostSchema,
    PostCreate,
    PostDetail,
    PostReport as PostReportSchema,
    PostUpdate,
    ReportCreate,
    SaveToggleResult,
)
from linkup.modules.posts.services import post as post_service
from linkup.modules.user_management.models.user import User
from linkup.modules.user_management.services.user import get_user

router = APIRouter()
logger = logging.getLogger(__name__)

GUIDELINES_MESSAGE = "Content violates guidelines"


def get_accessible_post(db: Session, post_id: str, viewer: User) -> Tuple[Post, User]:
    """Return the post and its author, or raise 404/403 if the viewer cannot see it"""
    post = post_service.get_post(db, post_id=post_id)
    if not post:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found",
        )
    author = get_user(db, post.author_id)
    if not author or not can_view_content(db, viewer.id, author):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="This account is private",
        )
    return post, author


async def _check_guidelines(moderation: ModerationService, text: Optional[str]) -> None:
    if not await moderation.is_safe(text):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=GUIDELINES_MESSAGE,
        )


@router.post("", response_model=PostSchema, status_code=status.HTTP_201_CREATED)
async def create_new_post(
    *,
    db: Session = Depends(get_db),
    content: Optional[str] = Form(None),
    media: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    media_service: MediaService = Depends(get_media_service),
    moderation: ModerationService = Depends(get_moderation_service),
) -> Any:
    """
    Create new post with text, an image or video, or both.
    """
    try:
        post_in = PostCreate(content=content)
    except ValidationError as e:
        raise bad_request_from(e)

    has_media = media is not None and bool(media.filename)
    if not post_in.content and not has_media:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Post must have content or media",
        )

    await _check_guidelines(moderation, post_in.content)

    stored = await media_service.upload_optional(media, "post_media", POST_MEDIA_TYPES, settings.MAX_POST_MEDIA_SIZE)
    if stored is not None:
        if stored.kind == IMAGE:
            post_in.image_url = stored.url
        else:
            post_in.video_url = stored.url

    return post_service.create_post(db, post_in, current_user.id)


@router.get("/{post_id}", response_model=PostDetail)
def read_post_by_id(
    *,
    db: Session = Depends(get_db),
    post_id: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Get post by ID with its counts and latest comments.
    """
    post, author = get_accessible_post(db, post_id, current_user)
    return post_service.get_post_detail(db, post, author, current_user.id)


@router.put("/{post_id}", response_model=PostSchema)
async def update_post_by_id(
    *,
    db: Session = Depends(get_db),
    post_id: str,
    post_in: PostUpdate,
    current_user: User = Depends(get_current_user),
    moderation: ModerationService = Depends(get_moderation_service),
) -> Any:
    """
    Update the text of a post.
    """
    post = post_service.get_post(db, post_id=post_id)
    if not post:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found",
        )

    # Check if user is the author
    if post.author_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not enough permissions",
        )

    await _check_guidelines(moderation, post_in.content)
    return post_service.update_post(db, post, post_in)


@router.delete("/{post_id}")
def delete_post_by_id(
    *,
    db: Session = Depends(get_db),
    post_id: str,
    current_user: User = Depends(get_current_user),
    media_service: MediaService = Depends(get_media_service),
) -> Any:
    """
    Delete a post and all associated data (likes, saves, reports and comments).
    Authors can delete their own posts, admins can delete any post.
    """
    post = post_service.get_post(db, post_id=post_id)
    if not post:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found",
        )

    is_author = post.author_id == current_user.id
    if not is_author and not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not enough permissions",
        )

    media_urls = [post.image_url, post.video_url]
    author_id = post.author_id
    post_service.delete_post(db, post)
    for url in media_urls:
        media_service.delete_media(url)

    if not is_author:
        log_admin_action(db, current_user.id, DELETE_POST, post_id, f"Deleted post of user {author_id}")

    return {"message": "Post deleted successfully"}


@router.post("/{post_id}/save", response_model=SaveToggleResult)
def toggle_save_post(
    *,
    db: Session = Depends(get_db),
    post_id: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    post, _ = get_accessible_post(db, post_id, current_user)
    saved = post_service.toggle_save(db, post.id, current_user.id)
    return SaveToggleResult(action="saved" if saved else "unsaved")


@router.post("/{post_id}/report", response_model=PostReportSchema, status_code=status.HTTP_201_CREATED)
def report_post(
    *,
    db: Session = Depends(get_db),
    post_id: str,
    report_in: ReportCreate,
    current_user: User = Depends(get_current_user),
) -> Any:
    post, _ = get_accessible_post(db, post_id, current_user)

    if post.author_id == current_user.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot report your own post",
        )
    if post_service.get_report(db, post.id, current_user.id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You have already reported this post",
        )

    return post_service.create_report(db, post.id, current_user.id, report_in.reason.value)
