from typing import List, Optional, Tuple
import random
import uuid
import logging

from sqlalchemy.orm import Session

from linkup.modules.follows.models.follow import FollowRequest, PENDING, ACCEPTED, REJECTED
from linkup.modules.user_management.models.user import User

logger = logging.getLogger(__name__)

NO_RELATION = "NONE"


def get_follow(db: Session, follower_id: str, followee_id: str) -> Optional[FollowRequest]:
    """Get the follow relation from one user to another, whatever its status"""
    return db.query(FollowRequest).filter(
        FollowRequest.follower_id == follower_id,
        FollowRequest.followee_id == followee_id,
    ).first()


def get_follow_request_by_id(db: Session, request_id: str) -> Optional[FollowRequest]:
    return db.query(FollowRequest).filter(FollowRequest.id == request_id).first()


def get_follow_status(db: Session, follower_id: str, followee_id: str) -> str:
    follow = get_follow(db, follower_id, followee_id)
    return follow.status if follow else NO_RELATION


def is_following(db: Session, follower_id: str, followee_id: str) -> bool:
    return get_follow_status(db, follower_id, followee_id) == ACCEPTED


def can_view_content(db: Session, viewer_id: str, owner: User) -> bool:
    """Owners, followers with an accepted request and anyone for public accounts"""
    if owner.id == viewer_id or not owner.is_private:
        return True
    return is_following(db, viewer_id, owner.id)


def create_follow(db: Session, follower_id: str, followee: User) -> FollowRequest:
    """Follow a user; private accounts get a pending request instead"""
    follow = FollowRequest(
        id=str(uuid.uuid4()),
        follower_id=follower_id,
        followee_id=followee.id,
        status=PENDING if followee.is_private else ACCEPTED,
    )
    db.add(follow)
    db.commit()
    db.refresh(follow)
    logger.info(f"User {follower_id} -> {followee.id} follow created with status {follow.status}")
    return follow


def delete_follow(db: Session, follow: FollowRequest) -> None:
    db.delete(follow)
    db.commit()


def set_follow_status(db: Session, follow: FollowRequest, status: str) -> FollowRequest:
    follow.status = status
    db.commit()
    db.refresh(follow)
    return follow


def accept_request(db: Session, follow: FollowRequest) -> FollowRequest:
    return set_follow_status(db, follow, ACCEPTED)


def reject_request(db: Session, follow: FollowRequest) -> FollowRequest:
    return set_follow_status(db, follow, REJECTED)


def accept_all_pending(db: Session, user_id: str) -> List[FollowRequest]:
    """Accept every pending request addressed to a user, e.g. when the account goes public"""
    pending = db.query(FollowRequest).filter(
        FollowRequest.followee_id == user_id,
        FollowRequest.status == PENDING,
    ).all()
    for follow in pending:
        follow.status = ACCEPTED
    db.commit()
    return pending


def get_pending_requests(db: Session, user_id: str) -> List[Tuple[FollowRequest, User]]:
    """Pending requests received by a user, with the requesting user"""
    return (
        db.query(FollowRequest, User)
        .join(User, User.id == FollowRequest.follower_id)
        .filter(FollowRequest.followee_id == user_id, FollowRequest.status == PENDING)
        .order_by(FollowRequest.created_at.desc())
        .all()
    )


def get_followers(db: Session, user_id: str, limit: int = 100) -> List[User]:
    return (
        db.query(User)
        .join(FollowRequest, FollowRequest.follower_id == User.id)
        .filter(FollowRequest.followee_id == user_id, FollowRequest.status == ACCEPTED)
        .order_by(FollowRequest.created_at.desc())
        .limit(limit)
        .all()
    )


def get_following(db: Session, user_id: str, limit: int = 100) -> List[User]:
    return (
        db.query(User)
        .join(FollowRequest, FollowRequest.followee_id == User.id)
        .filter(FollowRequest.follower_id == user_id, FollowRequest.status == ACCEPTED)
        .order_by(FollowRequest.created_at.desc())
        .limit(limit)
        .all()
    )


def get_following_ids(db: Session, user_id: str) -> List[str]:
    rows = db.query(FollowRequest.followee_id).filter(
        FollowRequest.follower_id == user_id,
        FollowRequest.status == ACCEPTED,
    ).all()
    return [row.followee_id for row in rows]


def get_suggestions(db: Session, user_id: str, limit: int = 5) -> List[User]:
    """Random users the current user does not follow yet"""
    excluded = set(get_following_ids(db, user_id))
    excluded.add(user_id)

    candidate_ids = [
        row.id
        for row in db.query(User.id).filter(User.is_banned.is_(False)).all()
        if row.id not in excluded
    ]
    if not candidate_ids:
        return []

    selected = random.sample(candidate_ids, min(limit, len(candidate_ids)))
    users = {user.id: user for user in db.query(User).filter(User.id.in_(selected)).all()}
    return [users[user_id] for user_id in selected if user_id in users]
