from typing import Any, List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
import logging

from linkup.db.session import get_db
from linkup.deps import get_current_user
from linkup.modules.follows.models.follow import FollowRequest, PENDING, ACCEPTED, REJECTED
from linkup.modules.follows.schemas.follow import (
    FollowList,
    FollowRequest as FollowRequestSchema,
    FollowResult,
    FollowUser,
    PendingFollowRequest,
)
from linkup.modules.follows.services import follow as follow_service
from linkup.modules.notifications.services.notification_events import (
    create_follow_accepted_notification,
    create_follow_notification,
    create_follow_request_notification,
)
from linkup.modules.user_management.models.user import User
from linkup.modules.user_management.schemas.user import UserSummary
from linkup.modules.user_management.services.user import get_user

router = APIRouter()
logger = logging.getLogger(__name__)

EXISTING_FOLLOW_MESSAGES = {
    PENDING: "Your follow request is still pending",
    ACCEPTED: "You are already following this user",
    REJECTED: "Your previous follow request was rejected",
}


def _check_user_exists(db: Session, user_id: str) -> User:
    """Validate user exists, raise HTTP 404 if not"""
    user = get_user(db, user_id=user_id)
    if not user or user.is_banned:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    return user


def _validate_incoming_request(db: Session, request_id: str, current_user_id: str) -> FollowRequest:
    """A pending request addressed to the current user, or 404"""
    follow = follow_service.get_follow_request_by_id(db, request_id)
    if not follow or follow.followee_id != current_user_id or follow.status != PENDING:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Follow request not found"
        )
    return follow


def _check_can_view(db: Session, viewer: User, owner: User) -> None:
    if not follow_service.can_view_content(db, viewer.id, owner):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="This account is private"
        )


@router.post("/follow/{user_id}", response_model=FollowResult, status_code=status.HTTP_201_CREATED)
def follow_user(
    *,
    db: Session = Depends(get_db),
    user_id: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    if user_id == current_user.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot follow yourself"
        )

    target = _check_user_exists(db, user_id)

    existing = follow_service.get_follow(db, current_user.id, target.id)
    if existing:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=EXISTING_FOLLOW_MESSAGES.get(existing.status, "Already following this user"),
        )

    follow = follow_service.create_follow(db, current_user.id, target)

    if follow.status == PENDING:
        create_follow_request_notification(db, current_user.id, target.id, follow.id)
        return FollowResult(message="Follow request sent", status=follow.status, request_id=follow.id)

    create_follow_notification(db, current_user.id, target.id, follow.id)
    return FollowResult(message="Successfully followed user", status=follow.status, request_id=follow.id)


@router.delete("/unfollow/{user_id}", response_model=FollowResult)
def unfollow_user(
    *,
    db: Session = Depends(get_db),
    user_id: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    """Unfollow a user or cancel a follow request"""
    follow = follow_service.get_follow(db, current_user.id, user_id)
    if not follow:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="You are not following this user"
        )

    follow_service.delete_follow(db, follow)
    return FollowResult(message="Unfollowed user", status=follow_service.NO_RELATION)


@router.delete("/remove-follower/{follower_id}", response_model=FollowResult)
def remove_follower(
    *,
    db: Session = Depends(get_db),
    follower_id: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    follow = follow_service.get_follow(db, follower_id, current_user.id)
    if not follow or follow.status != ACCEPTED:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="This user is not following you"
        )

    follow_service.delete_follow(db, follow)
    return FollowResult(message="Follower removed", status=follow_service.NO_RELATION)


@router.get("/follow-requests/pending", response_model=List[PendingFollowRequest])
def get_pending_follow_requests(
    *,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    return [
        PendingFollowRequest(
            id=follow.id,
            created_at=follow.created_at,
            follower=UserSummary.model_validate(follower),
        )
        for follow, follower in follow_service.get_pending_requests(db, current_user.id)
    ]


@router.put("/follow-requests/{request_id}/accept", response_model=FollowRequestSchema)
def accept_follow_request(
    *,
    db: Session = Depends(get_db),
    request_id: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    follow = _validate_incoming_request(db, request_id, current_user.id)
    follow = follow_service.accept_request(db, follow)
    create_follow_accepted_notification(db, current_user.id, follow.follower_id, follow.id)
    return follow


@router.delete("/follow-requests/{request_id}/reject", response_model=FollowRequestSchema)
def reject_follow_request(
    *,
    db: Session = Depends(get_db),
    request_id: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    follow = _validate_incoming_request(db, request_id, current_user.id)
    return follow_service.reject_request(db, follow)


@router.get("/followers/{user_id}", response_model=FollowList)
def get_followers(
    *,
    db: Session = Depends(get_db),
    user_id: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    owner = _check_user_exists(db, user_id)
    _check_can_view(db, current_user, owner)
    users = [FollowUser.model_validate(user) for user in follow_service.get_followers(db, owner.id)]
    return FollowList(count=len(users), users=users)


@router.get("/following/{user_id}", response_model=FollowList)
def get_following(
    *,
    db: Session = Depends(get_db),
    user_id: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    owner = _check_user_exists(db, user_id)
    _check_can_view(db, current_user, owner)
    users = [FollowUser.model_validate(user) for user in follow_service.get_following(db, owner.id)]
    return FollowList(count=len(users), users=users)


@router.get("/suggestions", response_model=FollowList)
def get_suggestions(
    *,
    db: Session = Depends(get_db),
    limit: int = Query(5, ge=1, le=50),
    current_user: User = Depends(get_current_user),
) -> Any:
    """Random users the current user is not following yet"""
    users = [FollowUser.model_validate(user) for user in follow_service.get_suggestions(db, current_user.id, limit)]
    return FollowList(count=len(users), users=users)
