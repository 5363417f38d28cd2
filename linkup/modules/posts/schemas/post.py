from enum import Enum
from typing import List, Optional
from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator

from linkup.modules.posts.comments.schemas.comment import Comment
from linkup.modules.user_management.schemas.user import UserSummary

MAX_POST_LENGTH = 2000


def _check_content(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip()
    if len(v) > MAX_POST_LENGTH:
        raise ValueError(f"Post content cannot exceed {MAX_POST_LENGTH} characters")
    return v or None


class PostBase(BaseModel):
    content: Optional[str] = None
    image_url: Optional[str] = None
    video_url: Optional[str] = None


class PostCreate(PostBase):
    @field_validator("content")
    @classmethod
    def check_content(cls, v: Optional[str]) -> Optional[str]:
        return _check_content(v)


class PostUpdate(BaseModel):
    content: str

    @field_validator("content")
    @classmethod
    def check_content(cls, v: str) -> str:
        v = _check_content(v)
        if not v:
            raise ValueError("Post content cannot be empty")
        return v


class PostInDBBase(PostBase):
    id: str
    author_id: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class Post(PostInDBBase):
    """Post model returned to client"""
    pass


class PostWithCounts(PostInDBBase):
    """Post with its author and engagement counts as seen by the viewer"""
    author: UserSummary
    like_count: int = 0
    comment_count: int = 0
    is_liked: bool = False
    is_saved: bool = False


class PostDetail(PostWithCounts):
    comments: List[Comment] = []


class PostPage(BaseModel):
    items: List[PostWithCounts]
    total: int
    page: int
    has_more: bool


class SaveToggleResult(BaseModel):
    action: str  # saved, unsaved


class ReportReason(str, Enum):
    SPAM = "SPAM"
    HARASSMENT = "HARASSMENT"
    INAPPROPRIATE = "INAPPROPRIATE"
    OTHER = "OTHER"


class ReportCreate(BaseModel):
    reason: ReportReason


class PostReport(BaseModel):
    id: str
    post_id: str
    reporter_id: str
    reason: str
    status: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
