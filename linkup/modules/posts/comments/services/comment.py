from typing import List, Optional, Tuple
import uuid

from sqlalchemy.orm import Session

from linkup.modules.posts.comments.models.comment import Comment
from linkup.modules.posts.comments.schemas.comment import Comment as CommentSchema, CommentCreate
from linkup.modules.user_management.models.user import User
from linkup.modules.user_management.schemas.user import UserSummary


def get_comment(db: Session, comment_id: str) -> Optional[Comment]:
    """Get comment by ID"""
    return db.query(Comment).filter(Comment.id == comment_id).first()


def _with_author(comment: Comment, author: Optional[User]) -> CommentSchema:
    item = CommentSchema.model_validate(comment)
    if author is not None:
        item.author = UserSummary.model_validate(author)
    return item


def get_comments_by_post(db: Session, post_id: str, skip: int = 0, limit: int = 20) -> Tuple[List[CommentSchema], int]:
    """Comments on a post, newest first, each with its author"""
    query = (
        db.query(Comment, User)
        .join(User, User.id == Comment.author_id)
        .filter(Comment.post_id == post_id)
    )
    total = query.count()
    rows = query.order_by(Comment.created_at.desc()).offset(skip).limit(limit).all()
    return [_with_author(comment, author) for comment, author in rows], total


def create_comment(db: Session, comment_in: CommentCreate, post_id: str, author: User) -> CommentSchema:
    """Create new comment"""
    comment = Comment(
        id=str(uuid.uuid4()),
        content=comment_in.content,
        post_id=post_id,
        author_id=author.id,
    )
    db.add(comment)
    db.commit()
    db.refresh(comment)
    return _with_author(comment, author)


def delete_comment(db: Session, comment: Comment) -> None:
    db.delete(comment)
    db.commit()
