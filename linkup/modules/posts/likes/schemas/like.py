from typing import List

from pydantic import BaseModel

from linkup.modules.user_management.schemas.user import UserSummary


class LikeToggleResult(BaseModel):
    action: str  # liked, unliked
    like_count: int


class PostLikes(BaseModel):
    count: int
    users: List[UserSummary]
