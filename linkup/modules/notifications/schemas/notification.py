from enum import Enum
from typing import List, Optional
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from linkup.modules.user_management.schemas.user import UserSummary


class ReadStatus(str, Enum):
    ALL = "ALL"
    READ = "READ"
    UNREAD = "UNREAD"


class NotificationBase(BaseModel):
    type: str
    content: str
    related_id: Optional[str] = None


class NotificationCreate(NotificationBase):
    user_id: str
    actor_id: Optional[str] = None  # ID of the user who triggered the notification


class NotificationInDBBase(NotificationBase):
    id: str
    user_id: str
    actor_id: Optional[str] = None
    is_read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class Notification(NotificationInDBBase):
    """Notification model returned to client"""
    actor: Optional[UserSummary] = None


class NotificationPage(BaseModel):
    items: List[Notification]
    total_count: int
    unread_count: int
    page: int
    limit: int
    total_pages: int
