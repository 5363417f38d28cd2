from typing import Any

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from linkup.db.session import get_db
from linkup.deps import get_current_user
from linkup.modules.home_feed.services.feed import get_home_feed
from linkup.modules.posts.schemas.post import PostPage
from linkup.modules.user_management.models.user import User

router = APIRouter()


@router.get("", response_model=PostPage)
def read_home_feed(
    *,
    db: Session = Depends(get_db),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=50),
    current_user: User = Depends(get_current_user),
) -> Any:
    """Get personalized home feed for the current user with pagination"""
    return get_home_feed(db, current_user.id, page, limit)
