from typing import List, Optional
from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator

from linkup.modules.user_management.schemas.user import UserSummary

MAX_COMMENT_LENGTH = 500


class CommentBase(BaseModel):
    content: str


class CommentCreate(CommentBase):
    @field_validator("content")
    @classmethod
    def check_content(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Comment cannot be empty")
        if len(v) > MAX_COMMENT_LENGTH:
            raise ValueError(f"Comment cannot exceed {MAX_COMMENT_LENGTH} characters")
        return v


class CommentInDBBase(CommentBase):
    id: str
    post_id: str
    author_id: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class Comment(CommentInDBBase):
    """Comment model returned to client"""
    author: Optional[UserSummary] = None


class CommentPage(BaseModel):
    items: List[Comment]
    total: int
    page: int
    has_more: bool
