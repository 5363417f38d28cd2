from typing import Dict, List, Optional, Set, Tuple
import uuid
import logging

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from linkup.modules.notifications.models.notification import COMMENT, LIKE, Notification
from linkup.modules.posts.models.post import Post, SavedPost, PostReport
from linkup.modules.posts.schemas.post import PostCreate, PostDetail, PostPage, PostUpdate, PostWithCounts
from linkup.modules.posts.comments.models.comment import Comment
from linkup.modules.posts.comments.services.comment import get_comments_by_post
from linkup.modules.posts.likes.models.like import Like
from linkup.modules.user_management.models.user import User
from linkup.modules.user_management.schemas.user import UserSummary

logger = logging.getLogger(__name__)


def get_post(db: Session, post_id: str) -> Optional[Post]:
    """Get post by ID"""
    return db.query(Post).filter(Post.id == post_id).first()


def posts_with_authors(db: Session) -> Query:
    """Base query yielding (Post, author) rows, newest first"""
    return (
        db.query(Post, User)
        .join(User, User.id == Post.author_id)
        .order_by(Post.created_at.desc())
    )


def _grouped_counts(db: Session, column, post_ids: List[str]) -> Dict[str, int]:
    rows = (
        db.query(column, func.count())
        .filter(column.in_(post_ids))
        .group_by(column)
        .all()
    )
    return {post_id: count for post_id, count in rows}


def _viewer_post_ids(db: Session, model, viewer_id: str, post_ids: List[str]) -> Set[str]:
    rows = db.query(model.post_id).filter(model.user_id == viewer_id, model.post_id.in_(post_ids)).all()
    return {row.post_id for row in rows}


def build_post_items(db: Session, rows: List[Tuple[Post, User]], viewer_id: str) -> List[PostWithCounts]:
    """Attach author, like/comment counts and the viewer's like/save state to posts"""
    if not rows:
        return []

    post_ids = [post.id for post, _ in rows]
    like_counts = _grouped_counts(db, Like.post_id, post_ids)
    comment_counts = _grouped_counts(db, Comment.post_id, post_ids)
    liked = _viewer_post_ids(db, Like, viewer_id, post_ids)
    saved = _viewer_post_ids(db, SavedPost, viewer_id, post_ids)

    return [
        PostWithCounts(
            id=post.id,
            author_id=post.author_id,
            content=post.content,
            image_url=post.image_url,
            video_url=post.video_url,
            created_at=post.created_at,
            updated_at=post.updated_at,
            author=UserSummary.model_validate(author),
            like_count=like_counts.get(post.id, 0),
            comment_count=comment_counts.get(post.id, 0),
            is_liked=post.id in liked,
            is_saved=post.id in saved,
        )
        for post, author in rows
    ]


def paginate_posts(db: Session, query: Query, viewer_id: str, page: int = 1, limit: int = 10) -> PostPage:
    skip = (page - 1) * limit
    total = query.count()
    rows = query.offset(skip).limit(limit).all()
    return PostPage(
        items=build_post_items(db, rows, viewer_id),
        total=total,
        page=page,
        has_more=total > skip + limit,
    )


def get_post_detail(db: Session, post: Post, author: User, viewer_id: str, comment_limit: int = 50) -> PostDetail:
    item = build_post_items(db, [(post, author)], viewer_id)[0]
    comments, _ = get_comments_by_post(db, post.id, limit=comment_limit)
    return PostDetail(**item.model_dump(), comments=comments)


def get_user_posts(db: Session, user_id: str, viewer_id: str, page: int = 1, limit: int = 10) -> PostPage:
    """Get posts by user ID"""
    query = posts_with_authors(db).filter(Post.author_id == user_id)
    return paginate_posts(db, query, viewer_id, page, limit)


def get_saved_posts(db: Session, user_id: str, page: int = 1, limit: int = 10) -> PostPage:
    query = (
        db.query(Post, User)
        .join(User, User.id == Post.author_id)
        .join(SavedPost, SavedPost.post_id == Post.id)
        .filter(SavedPost.user_id == user_id)
        .order_by(SavedPost.created_at.desc())
    )
    return paginate_posts(db, query, user_id, page, limit)


def create_post(db: Session, post_in: PostCreate, author_id: str) -> Post:
    """Create new post"""
    post = Post(
        id=str(uuid.uuid4()),
        author_id=author_id,
        **post_in.model_dump(),
    )
    db.add(post)
    db.commit()
    db.refresh(post)
    logger.info(f"Created post {post.id} for author {author_id}")
    return post


def update_post(db: Session, post: Post, post_in: PostUpdate) -> Post:
    """Update post"""
    for field, value in post_in.model_dump(exclude_unset=True).items():
        setattr(post, field, value)

    db.commit()
    db.refresh(post)
    return post


def delete_post(db: Session, post: Post) -> None:
    """
    Delete post and everything attached to it
    """
    logger.info(f"Deleting post with ID: {post.id}")
    for model in (Like, SavedPost, PostReport, Comment):
        db.query(model).filter(model.post_id == post.id).delete(synchronize_session=False)
    db.query(Notification).filter(
        Notification.type.in_((LIKE, COMMENT)),
        Notification.related_id == post.id,
    ).delete(synchronize_session=False)

    db.delete(post)
    db.commit()


def toggle_save(db: Session, post_id: str, user_id: str) -> bool:
    """Save the post, or unsave it if already saved. Returns True when saved."""
    existing = db.query(SavedPost).filter(SavedPost.post_id == post_id, SavedPost.user_id == user_id).first()
    if existing:
        db.delete(existing)
        db.commit()
        return False

    db.add(SavedPost(id=str(uuid.uuid4()), post_id=post_id, user_id=user_id))
    db.commit()
    return True


def get_report(db: Session, post_id: str, reporter_id: str) -> Optional[PostReport]:
    return db.query(PostReport).filter(
        PostReport.post_id == post_id,
        PostReport.reporter_id == reporter_id,
    ).first()


def create_report(db: Session, post_id: str, reporter_id: str, reason: str) -> PostReport:
    report = PostReport(
        id=str(uuid.uuid4()),
        post_id=post_id,
        reporter_id=reporter_id,
        reason=reason,
    )
    db.add(report)
    db.commit()
    db.refresh(report)
    logger.info(f"Post {post_id} reported by {reporter_id} for {reason}")
    return report
