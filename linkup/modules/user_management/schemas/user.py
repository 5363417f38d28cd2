from typing import Optional
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, field_validator

from linkup.core.validators import (
    EMAIL_MESSAGE,
    PASSWORD_MESSAGE,
    USERNAME_MESSAGE,
    validate_email,
    validate_password,
    validate_username,
)

MAX_BIO_LENGTH = 150


class UserSummary(BaseModel):
    """Minimal author/actor representation embedded in other payloads"""
    id: str
    username: str
    profile_name: Optional[str] = None
    profile_picture: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class UserBase(BaseModel):
    username: str
    profile_name: Optional[str] = None
    bio: Optional[str] = None
    profile_picture: Optional[str] = None
    cover_picture: Optional[str] = None
    job_title: Optional[str] = None
    address: Optional[str] = None
    date_of_birth: Optional[date] = None
    is_private: bool = False


class UserInDBBase(UserBase):
    id: str
    role: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class User(UserInDBBase):
    """User model returned to its owner"""
    email: str


class UserProfile(User):
    post_count: int = 0
    follower_count: int = 0
    following_count: int = 0


class PublicProfile(UserInDBBase):
    """Profile as seen by another user"""
    post_count: int = 0
    follower_count: int = 0
    following_count: int = 0
    is_own_profile: bool = False
    is_following: bool = False
    follow_status: str = "NONE"


class UserUpdate(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    profile_name: Optional[str] = None
    bio: Optional[str] = None
    profile_picture: Optional[str] = None
    cover_picture: Optional[str] = None
    job_title: Optional[str] = None
    address: Optional[str] = None
    date_of_birth: Optional[date] = None
    is_private: Optional[bool] = None

    @field_validator("username")
    @classmethod
    def check_username(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not validate_username(v):
            raise ValueError(USERNAME_MESSAGE)
        return v

    @field_validator("email")
    @classmethod
    def check_email(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip().lower()
        if not validate_email(v):
            raise ValueError(EMAIL_MESSAGE)
        return v

    @field_validator("bio")
    @classmethod
    def check_bio(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and len(v) > MAX_BIO_LENGTH:
            raise ValueError(f"Bio must be at most {MAX_BIO_LENGTH} characters")
        return v


class ChangePasswordRequest(BaseModel):
    old_password: str
    new_password: str

    @field_validator("new_password")
    @classmethod
    def check_password(cls, v: str) -> str:
        if not validate_password(v):
            raise ValueError(PASSWORD_MESSAGE)
        return v


class PrivacyUpdate(BaseModel):
    is_private: bool


class PrivacyUpdateResponse(BaseModel):
    is_private: bool
    accepted_requests: int = 0
