from typing import Any, List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from pydantic import ValidationError
from sqlalchemy.orm import Session
import logging

from linkup.core.config import settings
from linkup.core.errors import bad_request_from
from linkup.db.session import get_db
from linkup.deps import get_current_user
from linkup.modules.follows.services.follow import can_view_content
from linkup.modules.highlights.models.highlight import Highlight
from linkup.modules.highlights.schemas.highlight import (
    HighlightCreate,
    HighlightUpdate,
    HighlightWithStories,
    parse_story_ids,
)
from linkup.modules.highlights.services import highlight as highlight_service
from linkup.modules.media.service import PROFILE_IMAGE_TYPES, MediaService, get_media_service
from linkup.modules.stories.schemas.story import Story as StorySchema
from linkup.modules.user_management.models.user import User
from linkup.modules.user_management.services.user import get_user

router = APIRouter()
logger = logging.getLogger(__name__)


def _check_owner_visible(db: Session, owner_id: str, viewer: User) -> User:
    owner = get_user(db, owner_id)
    if not owner or owner.is_banned:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    if not can_view_content(db, viewer.id, owner):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="This account is private"
        )
    return owner


def _get_visible_highlight(db: Session, highlight_id: str, viewer: User) -> Highlight:
    highlight = highlight_service.get_highlight(db, highlight_id)
    if not highlight:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Highlight not found"
        )
    _check_owner_visible(db, highlight.owner_id, viewer)
    return highlight


def _get_own_highlight(db: Session, highlight_id: str, owner: User) -> Highlight:
    """Highlights of other users are reported as missing"""
    highlight = highlight_service.get_highlight(db, highlight_id)
    if not highlight or highlight.owner_id != owner.id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Highlight not found"
        )
    return highlight


def _check_story_ownership(db: Session, owner_id: str, story_ids: List[str]) -> None:
    if not highlight_service.owns_all_stories(db, owner_id, story_ids):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only add your own stories to a highlight"
        )


@router.post("", response_model=HighlightWithStories, status_code=status.HTTP_201_CREATED)
async def create_highlight(
    *,
    db: Session = Depends(get_db),
    title: str = Form(...),
    story_ids: List[str] = Form(...),
    cover_image: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    media_service: MediaService = Depends(get_media_service),
) -> Any:
    """
    Create a highlight from stories of the current user.
    story_ids may be repeated or given as a comma separated list.
    """
    try:
        highlight_in = HighlightCreate(title=title, story_ids=parse_story_ids(story_ids))
    except ValidationError as e:
        raise bad_request_from(e)

    _check_story_ownership(db, current_user.id, highlight_in.story_ids)

    cover = await media_service.upload_media(
        cover_image, "highlights", PROFILE_IMAGE_TYPES, settings.MAX_IMAGE_SIZE
    )
    highlight = highlight_service.create_highlight(
        db, current_user.id, highlight_in.title, cover.url, highlight_in.story_ids
    )
    return highlight_service.with_stories(db, highlight)


@router.get("/user/{user_id}", response_model=List[HighlightWithStories])
def get_user_highlights(
    *,
    db: Session = Depends(get_db),
    user_id: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    owner = _check_owner_visible(db, user_id, current_user)
    return [
        highlight_service.with_stories(db, highlight)
        for highlight in highlight_service.get_user_highlights(db, owner.id)
    ]


@router.get("/{highlight_id}", response_model=HighlightWithStories)
def read_highlight(
    *,
    db: Session = Depends(get_db),
    highlight_id: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    highlight = _get_visible_highlight(db, highlight_id, current_user)
    return highlight_service.with_stories(db, highlight)


@router.get("/{highlight_id}/stories", response_model=List[StorySchema])
def read_highlight_stories(
    *,
    db: Session = Depends(get_db),
    highlight_id: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    """Stories stay in a highlight after they expire"""
    highlight = _get_visible_highlight(db, highlight_id, current_user)
    return highlight_service.get_highlight_stories(db, highlight.id)


@router.put("/{highlight_id}", response_model=HighlightWithStories)
async def update_highlight(
    *,
    db: Session = Depends(get_db),
    highlight_id: str,
    title: Optional[str] = Form(None),
    story_ids: Optional[List[str]] = Form(None),
    cover_image: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    media_service: MediaService = Depends(get_media_service),
) -> Any:
    highlight = _get_own_highlight(db, highlight_id, current_user)

    try:
        highlight_in = HighlightUpdate(
            title=title,
            story_ids=parse_story_ids(story_ids) if story_ids is not None else None,
        )
    except ValidationError as e:
        raise bad_request_from(e)

    if highlight_in.story_ids is not None:
        _check_story_ownership(db, current_user.id, highlight_in.story_ids)

    cover = await media_service.upload_optional(
        cover_image, "highlights", PROFILE_IMAGE_TYPES, settings.MAX_IMAGE_SIZE
    )
    old_cover = highlight.cover_image
    highlight = highlight_service.update_highlight(
        db,
        highlight,
        title=highlight_in.title,
        story_ids=highlight_in.story_ids,
        cover_image=cover.url if cover else None,
    )
    if cover:
        media_service.delete_media(old_cover)

    return highlight_service.with_stories(db, highlight)


@router.delete("/{highlight_id}")
def delete_highlight(
    *,
    db: Session = Depends(get_db),
    highlight_id: str,
    current_user: User = Depends(get_current_user),
    media_service: MediaService = Depends(get_media_service),
) -> Any:
    highlight = _get_own_highlight(db, highlight_id, current_user)
    cover = highlight.cover_image
    highlight_service.delete_highlight(db, highlight)
    media_service.delete_media(cover)
    return {"message": "Highlight deleted successfully"}
