from typing import Any

from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session

from linkup.db.session import get_db
from linkup.deps import get_current_user
from linkup.modules.notifications.services.notification_events import create_post_like_notification
from linkup.modules.posts.api.router import get_accessible_post
from linkup.modules.posts.likes.schemas.like import LikeToggleResult, PostLikes
from linkup.modules.posts.likes.services.like import get_post_likers, toggle_like
from linkup.modules.user_management.models.user import User
from linkup.modules.user_management.schemas.user import UserSummary

router = APIRouter()


@router.post("/like", response_model=LikeToggleResult)
def toggle_post_like(
    *,
    db: Session = Depends(get_db),
    post_id: str = Path(..., description="The ID of the post to like or unlike"),
    current_user: User = Depends(get_current_user),
) -> Any:
    """Like a post, or remove the like if it was already liked"""
    post, _ = get_accessible_post(db, post_id, current_user)

    liked, like_count = toggle_like(db, post.id, current_user.id)
    if liked:
        create_post_like_notification(db, post.id, post.author_id, current_user.id)

    return LikeToggleResult(action="liked" if liked else "unliked", like_count=like_count)


@router.get("/likes", response_model=PostLikes)
def read_post_likes(
    *,
    db: Session = Depends(get_db),
    post_id: str = Path(..., description="The ID of the post"),
    current_user: User = Depends(get_current_user),
) -> Any:
    post, _ = get_accessible_post(db, post_id, current_user)
    users = [UserSummary.model_validate(user) for user in get_post_likers(db, post.id)]
    return PostLikes(count=len(users), users=users)
