from typing import List, Optional
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from linkup.modules.user_management.schemas.user import UserSummary


class FollowRequestBase(BaseModel):
    follower_id: str
    followee_id: str
    status: str


class FollowRequest(FollowRequestBase):
    """Follow relation returned to client"""
    id: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class PendingFollowRequest(BaseModel):
    id: str
    created_at: datetime
    follower: UserSummary


class FollowResult(BaseModel):
    message: str
    status: str
    request_id: Optional[str] = None


class FollowUser(UserSummary):
    bio: Optional[str] = None
    is_private: bool = False


class FollowList(BaseModel):
    count: int
    users: List[FollowUser]
