from enum import Enum
from typing import List, Optional
from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from linkup.modules.admin.models.audit_log import (
    BAN_USER,
    DELETE_POST,
    DISMISS_REPORT,
    UNBAN_USER,
    WARN_USER,
)
from linkup.modules.posts.schemas.post import Post
from linkup.modules.user_management.schemas.user import User, UserSummary


class AdminActionType(str, Enum):
    DELETE_POST = DELETE_POST
    WARN_USER = WARN_USER
    BAN_USER = BAN_USER
    UNBAN_USER = UNBAN_USER
    DISMISS_REPORT = DISMISS_REPORT


POST_ACTIONS = (AdminActionType.DELETE_POST, AdminActionType.DISMISS_REPORT)


class AdminActionRequest(BaseModel):
    action_type: AdminActionType
    reason: str
    post_id: Optional[str] = None
    user_id: Optional[str] = None

    @field_validator("reason")
    @classmethod
    def check_reason(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Reason is required")
        if len(v) > 500:
            raise ValueError("Reason must be at most 500 characters")
        return v

    @model_validator(mode="after")
    def check_target(self):
        if self.action_type in POST_ACTIONS and not self.post_id:
            raise ValueError(f"post_id is required for {self.action_type.value}")
        if self.action_type not in POST_ACTIONS and not self.user_id:
            raise ValueError(f"user_id is required for {self.action_type.value}")
        return self


class AuditLog(BaseModel):
    id: str
    admin_id: Optional[str] = None
    action: str
    target_id: Optional[str] = None
    details: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AdminActionResult(BaseModel):
    message: str
    audit_log: AuditLog


class ReportEntry(BaseModel):
    id: str
    reason: str
    status: str
    created_at: datetime
    post: Post
    reporter: UserSummary


class AdminUser(User):
    is_banned: bool = False


class AdminUserDetail(AdminUser):
    post_count: int = 0
    follower_count: int = 0
    following_count: int = 0
    reports_received: int = 0


class AdminUserPage(BaseModel):
    items: List[AdminUser]
    total: int
    page: int
    limit: int
