from typing import Any, List, Tuple

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.orm import Session
import logging

from linkup.core.config import settings
from linkup.db.session import get_db
from linkup.deps import get_current_user
from linkup.modules.follows.services.follow import can_view_content, is_following
from linkup.modules.media.service import STORY_MEDIA_TYPES, MediaService, get_media_service
from linkup.modules.notifications.services.notification_events import create_story_like_notification
from linkup.modules.stories.models.story import Story
from linkup.modules.stories.schemas.story import (
    Story as StorySchema,
    StoryActivity,
    StoryDetail,
    StoryFeedEntry,
    StoryLikeResult,
    UserStories,
)
from linkup.modules.stories.services import story as story_service
from linkup.modules.user_management.models.user import User
from linkup.modules.user_management.schemas.user import UserSummary
from linkup.modules.user_management.services.user import get_user

router = APIRouter()
logger = logging.getLogger(__name__)


def _get_story_or_404(db: Session, story_id: str) -> Story:
    story = story_service.get_story(db, story_id)
    if not story:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Story not found"
        )
    return story


def _get_visible_story(db: Session, story_id: str, viewer: User) -> Tuple[Story, User]:
    """A story the viewer may see. Expired stories are only visible to their author."""
    story = _get_story_or_404(db, story_id)
    author = get_user(db, story.author_id)
    is_owner = story.author_id == viewer.id
    if not author or (story.is_expired and not is_owner):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Story not found or expired"
        )
    if not can_view_content(db, viewer.id, author):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="This account is private"
        )
    return story, author


@router.post("", response_model=StorySchema, status_code=status.HTTP_201_CREATED)
async def create_story(
    *,
    db: Session = Depends(get_db),
    media: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    media_service: MediaService = Depends(get_media_service),
) -> Any:
    """
    Upload a story. Stories disappear from feeds 24 hours after posting.
    """
    stored = await media_service.upload_media(media, "stories", STORY_MEDIA_TYPES, settings.MAX_STORY_MEDIA_SIZE)
    return story_service.create_story(db, current_user.id, stored.url)


@router.get("/feed", response_model=List[StoryFeedEntry])
def get_story_feed(
    *,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    return story_service.get_story_feed(db, current_user.id)


@router.get("/user/{user_id}", response_model=UserStories)
def get_user_stories(
    *,
    db: Session = Depends(get_db),
    user_id: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    owner = get_user(db, user_id)
    if not owner or owner.is_banned:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    if not can_view_content(db, current_user.id, owner):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="This account is private"
        )
    stories = story_service.get_live_stories(db, owner.id)
    return UserStories(user_id=owner.id, story_ids=[story.id for story in stories])


@router.get("/{story_id}", response_model=StoryDetail)
def read_story(
    *,
    db: Session = Depends(get_db),
    story_id: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    story, author = _get_visible_story(db, story_id, current_user)
    story_service.record_view(db, story, current_user.id)
    return story_service.get_story_detail(db, story, author, current_user.id)


@router.get("/{story_id}/views", response_model=StoryActivity)
def read_story_views(
    *,
    db: Session = Depends(get_db),
    story_id: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    """Viewers and likers of a story, visible to its author only"""
    story = _get_story_or_404(db, story_id)
    if story.author_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the author can see story views"
        )

    viewers = story_service.get_story_viewers(db, story.id)
    likers = [UserSummary.model_validate(user) for user in story_service.get_story_likers(db, story.id)]
    return StoryActivity(
        view_count=len(viewers),
        like_count=len(likers),
        viewers=viewers,
        likers=likers,
    )


@router.post("/{story_id}/like", response_model=StoryLikeResult)
def toggle_story_like(
    *,
    db: Session = Depends(get_db),
    story_id: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    story = _get_story_or_404(db, story_id)
    if story.is_expired:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Story has expired"
        )
    if story.author_id != current_user.id and not is_following(db, current_user.id, story.author_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You must follow this user to like their story"
        )

    liked, like_count = story_service.toggle_story_like(db, story, current_user.id)
    if liked:
        create_story_like_notification(db, story.id, story.author_id, current_user.id)
    return StoryLikeResult(action="liked" if liked else "unliked", like_count=like_count)


@router.delete("/{story_id}")
def delete_story(
    *,
    db: Session = Depends(get_db),
    story_id: str,
    current_user: User = Depends(get_current_user),
    media_service: MediaService = Depends(get_media_service),
) -> Any:
    story = _get_story_or_404(db, story_id)
    if story.author_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not enough permissions"
        )

    media_url = story.media_url
    story_service.delete_story(db, story)
    media_service.delete_media(media_url)
    return {"message": "Story deleted successfully"}
