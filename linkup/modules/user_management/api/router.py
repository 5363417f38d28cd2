from typing import Any, List, Optional
import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

from linkup.core.config import settings
from linkup.core.errors import bad_request_from
from linkup.core.security import verify_password
from linkup.db.session import get_db
from linkup.deps import get_current_user
from linkup.modules.follows.models.follow import ACCEPTED
from linkup.modules.follows.services import follow as follow_service
from linkup.modules.media.service import PROFILE_IMAGE_TYPES, MediaService, get_media_service
from linkup.modules.notifications.services.notification_events import create_follow_accepted_notification
from linkup.modules.posts.schemas.post import PostPage
from linkup.modules.posts.services.post import get_saved_posts, get_user_posts
from linkup.modules.stories.schemas.story import Story as StorySchema
from linkup.modules.stories.services.story import get_all_user_stories
from linkup.modules.user_management.models.user import User
from linkup.modules.user_management.schemas.user import (
    ChangePasswordRequest,
    PrivacyUpdate,
    PrivacyUpdateResponse,
    PublicProfile,
    User as UserSchema,
    UserInDBBase,
    UserProfile,
    UserSummary,
    UserUpdate,
)
from linkup.modules.user_management.services import user as user_service

router = APIRouter()
logger = logging.getLogger(__name__)


def _validate_user(db: Session, user_id: str) -> User:
    """Validate user exists and return user object or raise HTTPException"""
    user = user_service.get_user(db, user_id=user_id)
    if not user or user.is_banned:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    return user


def _profile_name(first_name: Optional[str], last_name: Optional[str]) -> Optional[str]:
    parts = [part.strip() for part in (first_name, last_name) if part and part.strip()]
    return " ".join(parts) or None


@router.get("", response_model=UserProfile)
def read_own_profile(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    """Get the current user's profile with follower and post counts"""
    return UserProfile(
        **UserSchema.model_validate(current_user).model_dump(),
        **user_service.get_user_stats(db, current_user.id),
    )


@router.put("/edit", response_model=UserSchema)
async def edit_profile(
    *,
    db: Session = Depends(get_db),
    username: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    first_name: Optional[str] = Form(None),
    last_name: Optional[str] = Form(None),
    bio: Optional[str] = Form(None),
    job_title: Optional[str] = Form(None),
    address: Optional[str] = Form(None),
    date_of_birth: Optional[str] = Form(None),
    is_private: Optional[bool] = Form(None),
    profile_picture: Optional[UploadFile] = File(None),
    cover_picture: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    media_service: MediaService = Depends(get_media_service),
) -> Any:
    """
    Update profile fields and pictures. Only the fields sent are changed.
    """
    fields = {
        "username": username,
        "email": email,
        "profile_name": _profile_name(first_name, last_name),
        "bio": bio,
        "job_title": job_title,
        "address": address,
        "date_of_birth": date_of_birth or None,
        "is_private": is_private,
    }
    try:
        user_in = UserUpdate(**{key: value for key, value in fields.items() if value is not None})
    except ValidationError as e:
        raise bad_request_from(e)

    if user_in.username and user_service.is_username_taken(db, user_in.username, exclude_user_id=current_user.id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username already taken",
        )
    if user_in.email and user_service.is_email_taken(db, user_in.email, exclude_user_id=current_user.id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered",
        )

    replaced = []
    picture = await media_service.upload_optional(
        profile_picture, "profile_pictures", PROFILE_IMAGE_TYPES, settings.MAX_IMAGE_SIZE
    )
    if picture:
        replaced.append(current_user.profile_picture)
        user_in.profile_picture = picture.url
    cover = await media_service.upload_optional(
        cover_picture, "cover_pictures", PROFILE_IMAGE_TYPES, settings.MAX_IMAGE_SIZE
    )
    if cover:
        replaced.append(current_user.cover_picture)
        user_in.cover_picture = cover.url

    user = user_service.update_user(db, current_user, user_in)
    for url in replaced:
        media_service.delete_media(url)
    return user


@router.put("/change-password", response_model=dict)
def change_password(
    *,
    db: Session = Depends(get_db),
    password_in: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
) -> Any:
    if not verify_password(password_in.old_password, current_user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Current password is incorrect",
        )
    user_service.set_password(db, current_user, password_in.new_password)
    return {"message": "Password updated successfully"}


@router.put("/privacy", response_model=PrivacyUpdateResponse)
def update_privacy(
    *,
    db: Session = Depends(get_db),
    privacy_in: PrivacyUpdate,
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Switch between a public and a private account.
    Going public accepts every pending follow request.
    """
    accepted = []
    if current_user.is_private and not privacy_in.is_private:
        accepted = follow_service.accept_all_pending(db, current_user.id)
        for follow in accepted:
            create_follow_accepted_notification(db, current_user.id, follow.follower_id, follow.id)
        logger.info(f"User {current_user.id} went public, accepted {len(accepted)} follow requests")

    user = user_service.update_user(db, current_user, UserUpdate(is_private=privacy_in.is_private))
    return PrivacyUpdateResponse(is_private=user.is_private, accepted_requests=len(accepted))


@router.delete("", response_model=dict)
def delete_account(
    *,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    media_service: MediaService = Depends(get_media_service),
) -> Any:
    """Delete the current account and everything that references it"""
    media_urls = user_service.get_user_media_urls(db, current_user)
    user_service.delete_user(db, current_user)
    for url in media_urls:
        media_service.delete_media(url)
    return {"message": "Account deleted successfully"}


@router.get("/search", response_model=List[UserSummary])
def search_users(
    *,
    db: Session = Depends(get_db),
    q: str = Query(..., min_length=2, description="Search query for name or username"),
    current_user: User = Depends(get_current_user),
) -> Any:
    """Search for users by name or username"""
    return user_service.search_users(db, q, exclude_user_id=current_user.id)


@router.get("/posts/{user_id}", response_model=PostPage)
def read_user_posts(
    *,
    db: Session = Depends(get_db),
    user_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=50),
    current_user: User = Depends(get_current_user),
) -> Any:
    """Get posts created by a specific user"""
    owner = _validate_user(db, user_id)
    if not follow_service.can_view_content(db, current_user.id, owner):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="This account is private",
        )
    return get_user_posts(db, owner.id, current_user.id, page, limit)


@router.get("/saved-posts", response_model=PostPage)
def read_saved_posts(
    *,
    db: Session = Depends(get_db),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=50),
    current_user: User = Depends(get_current_user),
) -> Any:
    return get_saved_posts(db, current_user.id, page, limit)


@router.get("/stories", response_model=List[StorySchema])
def read_own_stories(
    *,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    """All stories of the current user, expired ones included, for building highlights"""
    return get_all_user_stories(db, current_user.id)


@router.get("/{username}", response_model=PublicProfile)
def read_profile_by_username(
    username: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    """Get a user's profile by username"""
    user = user_service.get_user_by_username(db, username=username)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    if user.is_banned:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="This account has been banned"
        )

    is_own_profile = user.id == current_user.id
    follow_status = (
        follow_service.NO_RELATION if is_own_profile
        else follow_service.get_follow_status(db, current_user.id, user.id)
    )
    return PublicProfile(
        **UserInDBBase.model_validate(user).model_dump(),
        **user_service.get_user_stats(db, user.id),
        is_own_profile=is_own_profile,
        is_following=follow_status == ACCEPTED,
        follow_status=follow_status,
    )
