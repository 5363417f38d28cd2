from typing import List, Tuple
import uuid

from sqlalchemy import func
from sqlalchemy.orm import Session

from linkup.modules.posts.likes.models.like import Like
from linkup.modules.user_management.models.user import User


def get_like(db: Session, post_id: str, user_id: str):
    return db.query(Like).filter(Like.post_id == post_id, Like.user_id == user_id).first()


def count_likes(db: Session, post_id: str) -> int:
    return db.query(func.count(Like.id)).filter(Like.post_id == post_id).scalar() or 0


def toggle_like(db: Session, post_id: str, user_id: str) -> Tuple[bool, int]:
    """Like the post, or remove the like if it exists. Returns (liked, like_count)."""
    existing = get_like(db, post_id, user_id)
    if existing:
        db.delete(existing)
        liked = False
    else:
        db.add(Like(id=str(uuid.uuid4()), post_id=post_id, user_id=user_id))
        liked = True
    db.commit()
    return liked, count_likes(db, post_id)


def get_post_likers(db: Session, post_id: str, limit: int = 100) -> List[User]:
    return (
        db.query(User)
        .join(Like, Like.user_id == User.id)
        .filter(Like.post_id == post_id)
        .order_by(Like.created_at.desc())
        .limit(limit)
        .all()
    )
