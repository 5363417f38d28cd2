from typing import List
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from linkup.modules.user_management.schemas.user import UserSummary


class StoryBase(BaseModel):
    media_url: str


class StoryInDBBase(StoryBase):
    id: str
    author_id: str
    expires_at: datetime
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class Story(StoryInDBBase):
    """Story model returned to client"""
    pass


class StoryDetail(StoryInDBBase):
    author: UserSummary
    view_count: int = 0
    like_count: int = 0
    has_liked: bool = False
    is_expired: bool = False


class StoryFeedEntry(BaseModel):
    user: UserSummary
    story_ids: List[str]
    latest_story_at: datetime
    has_unviewed_stories: bool


class UserStories(BaseModel):
    user_id: str
    story_ids: List[str]


class StoryViewer(BaseModel):
    user: UserSummary
    viewed_at: datetime


class StoryActivity(BaseModel):
    view_count: int
    like_count: int
    viewers: List[StoryViewer]
    likers: List[UserSummary]


class StoryLikeResult(BaseModel):
    action: str  # liked, unliked
    like_count: int
