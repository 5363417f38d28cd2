from typing import List

from sqlalchemy.orm import Query, Session

from linkup.modules.follows.services.follow import get_following_ids
from linkup.modules.posts.models.post import Post
from linkup.modules.posts.schemas.post import PostPage
from linkup.modules.posts.services.post import paginate_posts, posts_with_authors
from linkup.modules.user_management.models.user import User


def get_home_feed(db: Session, user_id: str, page: int = 1, limit: int = 10) -> PostPage:
    """Posts from accepted follows and the user's own posts, newest first"""
    author_ids = get_following_ids(db, user_id) + [user_id]
    query = _build_feed_query(db, author_ids)
    return paginate_posts(db, query, user_id, page, limit)


def _build_feed_query(db: Session, author_ids: List[str]) -> Query:
    # Banned authors drop out of everyone's feed
    return posts_with_authors(db).filter(
        Post.author_id.in_(author_ids),
        User.is_banned.is_(False),
    )
